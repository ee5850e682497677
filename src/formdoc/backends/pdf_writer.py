"""
PDF writer for document units.

Maps the abstract blocks of a DocumentUnit onto ReportLab (Platypus)
flowables and builds one PDF file per unit.
"""

import html
import logging
from pathlib import Path
from typing import Dict, List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, StyleSheet1, getSampleStyleSheet
from reportlab.lib.units import cm, mm
from reportlab.platypus import (
    Image,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from formdoc.document import (
    DocumentUnit,
    ImageBlock,
    PageBreakBlock,
    TableBlock,
    TextBlock,
)

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 20 * mm
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

# Column widths as fractions of the content width
TABLE_COLUMNS: Dict[str, List[float]] = {
    "question": [0.1, 0.9],
    "metadata": [0.25, 0.75],
    "valuelabels": [0.75, 0.25],
}


def build_styles() -> StyleSheet1:
    """Paragraph styles for every style name used by the renderer."""
    styles = getSampleStyleSheet()
    body = styles["BodyText"]
    styles.add(ParagraphStyle("module", parent=styles["Heading1"], spaceBefore=12))
    styles.add(ParagraphStyle("heading", parent=styles["Heading2"]))
    styles.add(ParagraphStyle("section", parent=styles["Heading3"], spaceBefore=10))
    styles.add(ParagraphStyle("section_detail", parent=body, leftIndent=12))
    styles.add(ParagraphStyle("cover", parent=body, fontSize=12, leading=16, alignment=1))
    styles.add(ParagraphStyle("note", parent=body, textColor=colors.darkblue))
    styles.add(ParagraphStyle("calculation", parent=body, fontName="Courier", fontSize=9))
    styles.add(ParagraphStyle("annotation", parent=body, fontSize=8, textColor=colors.grey))
    styles.add(ParagraphStyle("question", parent=body))
    styles.add(ParagraphStyle("choice_header", parent=body))
    styles.add(ParagraphStyle("body", parent=body))
    return styles


def _markup(block: TextBlock) -> str:
    """Escape text for ReportLab's XML markup and apply run emphasis."""
    parts = []
    for run in block.runs:
        text = html.escape(run.text).replace("\n", "<br/>")
        if run.bold:
            text = f"<b>{text}</b>"
        if run.italic:
            text = f"<i>{text}</i>"
        parts.append(text)
    return "".join(parts)


def _paragraph(block: TextBlock, styles: StyleSheet1) -> Paragraph:
    style_name = "Title" if block.style == "title" else block.style
    if style_name not in styles:
        style_name = "body"
    return Paragraph(_markup(block), styles[style_name])


def _table(block: TableBlock, styles: StyleSheet1) -> Table:
    data = [
        [
            _paragraph(cell, styles) if isinstance(cell, TextBlock)
            else _paragraph(TextBlock.plain(cell), styles)
            for cell in row
        ]
        for row in block.rows
    ]
    fractions = TABLE_COLUMNS.get(block.style)
    col_widths = [f * CONTENT_WIDTH for f in fractions] if fractions else None

    commands = [
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BOX", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
    if block.style != "question":
        commands.append(("INNERGRID", (0, 0), (-1, -1), 0.25, colors.lightgrey))
    if block.header:
        commands.append(("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey))
    if block.style == "metadata":
        commands.append(("BACKGROUND", (0, 0), (0, -1), colors.whitesmoke))
    for start, end in block.spans:
        commands.append(("SPAN", start, end))

    table = Table(data, colWidths=col_widths, repeatRows=1 if block.header else 0)
    table.setStyle(TableStyle(commands))
    return table


def build_story(unit: DocumentUnit, styles: Optional[StyleSheet1] = None) -> List:
    """Convert a unit's blocks into a list of flowables."""
    if styles is None:
        styles = build_styles()
    story: List = []
    for block in unit.blocks:
        if isinstance(block, TextBlock):
            story.append(_paragraph(block, styles))
        elif isinstance(block, TableBlock):
            story.append(_table(block, styles))
            story.append(Spacer(1, 4 * mm))
        elif isinstance(block, ImageBlock):
            story.append(Image(block.path, width=block.width_cm * cm,
                               height=block.width_cm * cm, kind="proportional"))
        elif isinstance(block, PageBreakBlock):
            story.append(PageBreak())
    return story


def _footer(canvas, doc, title_text: str):
    canvas.saveState()
    footer_text = f"{title_text}  -  Page {canvas.getPageNumber()}"
    canvas.setFont("Helvetica", 8)
    canvas.drawRightString(PAGE_WIDTH - MARGIN, 12 * mm, footer_text)
    canvas.restoreState()


def write_unit_pdf(unit: DocumentUnit, directory: str, title: str = "") -> Path:
    """
    Build one PDF file for a document unit.

    Args:
        unit: Numbered DocumentUnit
        directory: Target directory (created if missing)
        title: Text shown in the page footer

    Returns:
        Path of the written file
    """
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / unit.filename

    doc = SimpleDocTemplate(
        str(path),
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=title,
    )
    story = build_story(unit)
    doc.build(
        story,
        onFirstPage=lambda c, d: _footer(c, d, title),
        onLaterPages=lambda c, d: _footer(c, d, title),
    )
    logger.info(f"Wrote {path}")
    return path


__all__ = ["build_styles", "build_story", "write_unit_pdf"]
