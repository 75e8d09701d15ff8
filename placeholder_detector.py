#!/usr/bin/env python3
"""
Template Placeholder Detector
Works out which delimiter style marks the ITEM and VALOR fields of a .docx
template by sniffing the raw word/document.xml.
"""

import io
import re
import zipfile
from dataclasses import dataclass
from enum import Enum
from typing import Dict

FIELD_NAMES = ('ITEM', 'VALOR')


class DelimiterStyle(Enum):
    """Supported placeholder delimiters as (start, end) pairs"""
    CURLY = ('{', '}')
    MUSTACHE = ('{{', '}}')
    DOUBLE_BRACKET = ('[[', ']]')
    GUILLEMET = ('«', '»')

    @property
    def start(self) -> str:
        return self.value[0]

    @property
    def end(self) -> str:
        return self.value[1]


_FIELDS = '(?:' + '|'.join(FIELD_NAMES) + ')'

# Curly is the fallback and only counts for has_placeholders()
STYLE_PATTERNS: Dict[DelimiterStyle, re.Pattern] = {
    DelimiterStyle.MUSTACHE: re.compile(r'\{\{\s*' + _FIELDS + r'\s*\}\}', re.IGNORECASE),
    DelimiterStyle.DOUBLE_BRACKET: re.compile(r'\[\[\s*' + _FIELDS + r'\s*\]\]', re.IGNORECASE),
    DelimiterStyle.GUILLEMET: re.compile(r'«\s*' + _FIELDS + r'\s*»', re.IGNORECASE),
    DelimiterStyle.CURLY: re.compile(r'\{' + _FIELDS + r'\}', re.IGNORECASE),
}

DETECTION_ORDER = (
    DelimiterStyle.MUSTACHE,
    DelimiterStyle.DOUBLE_BRACKET,
    DelimiterStyle.GUILLEMET,
)


@dataclass(frozen=True)
class TemplateOptions:
    style: DelimiterStyle = DelimiterStyle.CURLY
    paragraph_loop: bool = True
    linebreaks: bool = True

    @property
    def start(self) -> str:
        return self.style.start

    @property
    def end(self) -> str:
        return self.style.end


def detect_delimiters(document_xml: str) -> TemplateOptions:
    """
    Pick the delimiter style of a template body

    Mustache, double-bracket and guillemet are tested in that order; when
    none matches the bare curly style is assumed.

    Args:
        document_xml: Raw contents of word/document.xml

    Returns:
        TemplateOptions for the detected style
    """
    for style in DETECTION_ORDER:
        if STYLE_PATTERNS[style].search(document_xml or ''):
            return TemplateOptions(style=style)
    return TemplateOptions()


def has_placeholders(document_xml: str) -> bool:
    """True when ITEM or VALOR appears in any supported style"""
    return any(pattern.search(document_xml or '') for pattern in STYLE_PATTERNS.values())


def read_document_xml(docx_bytes: bytes) -> str:
    """Extract word/document.xml from a .docx archive ('' if missing)"""
    try:
        with zipfile.ZipFile(io.BytesIO(docx_bytes), 'r') as zip_ref:
            return zip_ref.read('word/document.xml').decode('utf-8')
    except (KeyError, zipfile.BadZipFile):
        return ''
