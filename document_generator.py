#!/usr/bin/env python3
"""
Price Tag Document Generator
Fills the ITEM and VALOR placeholders of a preset .docx template.

The template is handled as a zip archive: word/document.xml is rewritten in
place and every other member is copied through untouched.
"""

import io
import logging
import re
import zipfile
from pathlib import Path
from typing import Dict, List, Optional
from xml.sax.saxutils import escape

from errors import RenderError, TemplateNotFound
from placeholder_detector import TemplateOptions, detect_delimiters, has_placeholders

logger = logging.getLogger(__name__)

DOCX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'
PDF_MIMETYPE = 'application/pdf'

TEMPLATE_PRESETS = {
    'wellington': 'wellington.docx',
    'patricia': 'patricia.docx',
}

MODEL_LABELS = {
    'wellington': 'Wellington Silva',
    'patricia': 'Patrícia G. de Andrade',
}

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / 'modelo_placas'

TEXT_NODE = re.compile(r'(<w:t(?:\s[^>]*)?>)(.*?)(</w:t>)', re.DOTALL)
LINE_BREAK = '</w:t><w:br/><w:t xml:space="preserve">'

# Paragraph boundaries and text nodes in document order. Paragraphs nest
# (text boxes sit inside an anchoring paragraph), so ownership is tracked
# with a stack rather than by matching <w:p>...</w:p> pairs.
BODY_TOKEN = re.compile(
    r'(?P<empty><w:p(?:\s[^>]*)?/>)'
    r'|(?P<open><w:p(?:\s[^>]*)?>)'
    r'|(?P<close></w:p>)'
    r'|(?P<text><w:t(?:\s[^>]*)?>(?P<body>.*?)</w:t>)',
    re.DOTALL
)


def text_nodes_by_paragraph(xml_content: str) -> List[List[re.Match]]:
    """
    Group the <w:t> nodes of a document by their innermost paragraph

    Returns:
        One list of BODY_TOKEN matches per paragraph holding text, in order
    """
    groups: Dict[int, List[re.Match]] = {}
    stack: List[int] = []
    opened = 0

    for token in BODY_TOKEN.finditer(xml_content):
        if token.group('open'):
            opened += 1
            stack.append(opened)
        elif token.group('close'):
            if stack:
                stack.pop()
        elif token.group('text') and stack:
            groups.setdefault(stack[-1], []).append(token)

    return list(groups.values())


def paragraph_texts(xml_content: str) -> List[str]:
    """Joined raw text of every paragraph, runs merged"""
    return [''.join(node.group('body') for node in nodes) for nodes in text_nodes_by_paragraph(xml_content)]


def template_path_for_model(model: str, templates_dir: Optional[str] = None) -> Path:
    """
    Resolve a preset name to its .docx file

    Raises:
        TemplateNotFound: Unknown preset or missing file
    """
    filename = TEMPLATE_PRESETS.get(str(model or '').strip().lower())
    if not filename:
        raise TemplateNotFound(f"Modelo desconhecido: {model}")

    path = Path(templates_dir or DEFAULT_TEMPLATES_DIR) / filename
    if not path.exists():
        raise TemplateNotFound()
    return path


def attachment_filename(model: str, item, ext: str) -> str:
    """Download name for a generated tag, e.g. wellington-item-12.pdf"""
    return f"{model}-item-{item}.{ext}"


class DocxTemplateFiller:
    """
    Substitutes placeholder fields in a document body.

    Word often splits a typed placeholder across several runs
    ("{{IT" + "EM}}"), so each paragraph's text nodes are merged into the
    first one whenever a field only appears in the joined text.
    """

    def __init__(self, options: TemplateOptions):
        self.options = options
        self.field_pattern = re.compile(
            re.escape(options.start) + r'\s*([A-Za-z_][A-Za-z0-9_]*)\s*' + re.escape(options.end)
        )
        self.replacements_made: List[str] = []
        self.fields_not_found: List[str] = []

    def fill(self, xml_content: str, data: Dict[str, str]) -> str:
        """
        Replace every known field in the XML

        Args:
            xml_content: word/document.xml contents
            data: Field name -> value; names are matched case-insensitively

        Returns:
            Modified XML
        """
        self.replacements_made = []
        self.fields_not_found = []
        values = {key.upper(): str(value) for key, value in data.items()}

        xml_content = self._merge_split_fields(xml_content)

        # Delimiters and field names never need XML escaping, so fields are
        # matched on the raw node text and only the inserted values escaped
        def replace_text(match):
            open_tag, text, close_tag = match.groups()
            new_text = self.field_pattern.sub(
                lambda field: self._render_field(field, values),
                text
            )
            if new_text == text:
                return match.group(0)
            if 'xml:space=' not in open_tag:
                open_tag = '<w:t xml:space="preserve">'
            return f"{open_tag}{new_text}{close_tag}"

        return TEXT_NODE.sub(replace_text, xml_content)

    def _render_field(self, field, values: Dict[str, str]) -> str:
        name = field.group(1).upper()
        if name not in values:
            self.fields_not_found.append(name)
            return field.group(0)

        self.replacements_made.append(name)
        rendered = escape(values[name])
        if self.options.linebreaks:
            rendered = re.sub(r'\r?\n', LINE_BREAK, rendered)
        return rendered

    def _merge_split_fields(self, xml_content: str) -> str:
        edits = []
        for nodes in text_nodes_by_paragraph(xml_content):
            if len(nodes) < 2:
                continue

            texts = [node.group('body') for node in nodes]
            joined = ''.join(texts)
            whole = len(self.field_pattern.findall(joined))
            if whole == 0:
                continue

            per_node = sum(len(self.field_pattern.findall(text)) for text in texts)
            if per_node == whole:
                continue

            edits.append((nodes[0].span('text'), f'<w:t xml:space="preserve">{joined}</w:t>'))
            edits.extend((node.span('text'), '<w:t xml:space="preserve"></w:t>') for node in nodes[1:])

        # Apply back to front so earlier offsets stay valid
        for (start, end), replacement in sorted(edits, reverse=True):
            xml_content = xml_content[:start] + replacement + xml_content[end:]

        return xml_content


def render_docx(template_bytes: bytes, data: Dict[str, str]) -> bytes:
    """
    Fill a .docx archive held in memory

    Raises:
        RenderError: The archive is unreadable or holds no known placeholder
    """
    try:
        source = zipfile.ZipFile(io.BytesIO(template_bytes), 'r')
    except zipfile.BadZipFile:
        raise RenderError('Template DOCX inválido')

    with source:
        try:
            xml_content = source.read('word/document.xml').decode('utf-8')
        except KeyError:
            xml_content = ''

        # Detection runs on the merged paragraph text so placeholders split
        # across runs are still recognized
        text = '\n'.join(paragraph_texts(xml_content))
        if not has_placeholders(text):
            raise RenderError()

        options = detect_delimiters(text)
        filler = DocxTemplateFiller(options)
        filled = filler.fill(xml_content, data)

        if not filler.replacements_made:
            raise RenderError()

        output = io.BytesIO()
        with zipfile.ZipFile(output, 'w', zipfile.ZIP_DEFLATED) as output_zip:
            for member in source.infolist():
                if member.filename == 'word/document.xml':
                    output_zip.writestr(member, filled.encode('utf-8'))
                else:
                    output_zip.writestr(member, source.read(member.filename))

    logger.debug("Filled %s with %s style", ', '.join(filler.replacements_made), options.style.name)
    return output.getvalue()


def generate_docx(model: str, item, value: str, templates_dir: Optional[str] = None) -> bytes:
    """
    Generate one price tag document

    Args:
        model: Preset name (wellington or patricia)
        item: Item number
        value: Display value, e.g. "R$ 25,50"
        templates_dir: Directory holding the preset files

    Returns:
        bytes: The filled .docx archive
    """
    path = template_path_for_model(model, templates_dir)
    return render_docx(path.read_bytes(), {'ITEM': str(item), 'VALOR': str(value)})
