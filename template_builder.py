#!/usr/bin/env python3
"""
Preset Template Builder
Writes the default wellington/patricia price tag templates with python-docx
"""

from pathlib import Path
from typing import List

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from document_generator import DEFAULT_TEMPLATES_DIR, MODEL_LABELS, TEMPLATE_PRESETS


def build_template(path, model_label: str, start: str = '{{', end: str = '}}'):
    """
    Write one landscape price tag template

    Args:
        path: Output .docx path
        model_label: Name printed at the top of the tag
        start, end: Placeholder delimiters
    """
    document = Document()

    section = document.sections[0]
    section.orientation = WD_ORIENT.LANDSCAPE
    section.page_width, section.page_height = section.page_height, section.page_width

    header = document.add_paragraph()
    header.alignment = WD_ALIGN_PARAGRAPH.CENTER
    header_run = header.add_run(model_label)
    header_run.font.size = Pt(18)

    badge = document.add_paragraph()
    badge.alignment = WD_ALIGN_PARAGRAPH.CENTER
    badge_run = badge.add_run(f"ITEM {start}ITEM{end}")
    badge_run.bold = True
    badge_run.font.size = Pt(40)

    price = document.add_paragraph()
    price.alignment = WD_ALIGN_PARAGRAPH.CENTER
    price_run = price.add_run(f"{start}VALOR{end}")
    price_run.bold = True
    price_run.font.size = Pt(72)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    document.save(str(path))
    return path


def build_presets(templates_dir=None) -> List[Path]:
    """Write every preset template into templates_dir"""
    templates_dir = Path(templates_dir or DEFAULT_TEMPLATES_DIR)
    return [
        build_template(templates_dir / filename, MODEL_LABELS[model])
        for model, filename in TEMPLATE_PRESETS.items()
    ]
