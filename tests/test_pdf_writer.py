"""
Tests for the PDF backend (ReportLab writer and pypdf merge).
"""

import pytest
from pypdf import PdfReader
from reportlab.platypus import PageBreak, Paragraph, Table

from formdoc.backends.merge import merge_pdfs, merged_filename
from formdoc.backends.pdf_writer import _markup, build_story, write_unit_pdf
from formdoc.document import DocumentUnit, PageBreakBlock, Run, TableBlock, TextBlock
from formdoc.errors import MergeError


def sample_unit(number=0, label="title"):
    unit = DocumentUnit(number=number, label=label)
    unit.add(
        TextBlock.plain("Household Survey", style="title"),
        PageBreakBlock(),
        TextBlock.plain("Module A", style="module"),
        TableBlock(rows=[["1.", TextBlock(runs=[Run("Age < 18 & over", bold=True)])]]),
        TableBlock(rows=[["Label", "Value"], ["No", "0"]], header=True, style="valuelabels"),
    )
    return unit


class TestBuildStory:
    """Test block to flowable mapping."""

    def test_flowable_types(self):
        story = build_story(sample_unit())
        kinds = [type(f) for f in story]
        assert kinds[0] is Paragraph
        assert PageBreak in kinds
        assert kinds.count(Table) == 2

    def test_markup_escapes_text(self):
        block = TextBlock(runs=[Run("a < b", bold=True), Run(" & c", italic=True)])
        assert _markup(block) == "<b>a &lt; b</b><i> &amp; c</i>"

    def test_unknown_style_falls_back(self):
        story = build_story(DocumentUnit(blocks=[TextBlock.plain("x", style="nonexistent")]))
        assert story[0].style.name == "body"


class TestWriteUnit:
    """Test writing one unit to disk."""

    def test_writes_pdf(self, tmp_path):
        path = write_unit_pdf(sample_unit(), str(tmp_path / "out"), title="Household Survey")
        assert path == tmp_path / "out" / "part00_title.pdf"
        assert path.read_bytes().startswith(b"%PDF")

    def test_unnumbered_unit_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            write_unit_pdf(DocumentUnit(blocks=[TextBlock.plain("x")]), str(tmp_path))


class TestMerge:
    """Test concatenating part files."""

    def test_merged_filename(self):
        assert merged_filename("Household Survey 2024") == "Household_Survey_2024.pdf"
        assert merged_filename("///") == "document.pdf"

    def test_merge_and_delete_parts(self, tmp_path):
        parts = [
            write_unit_pdf(sample_unit(0, "title"), str(tmp_path)),
            write_unit_pdf(sample_unit(1, "A"), str(tmp_path)),
        ]
        merged = merge_pdfs(parts, "Household Survey", str(tmp_path))

        assert merged == tmp_path / "Household_Survey.pdf"
        assert not any(p.exists() for p in parts)
        reader = PdfReader(str(merged))
        assert len(reader.pages) == 4
        assert [item.title for item in reader.outline] == ["part00_title", "part01_A"]

    def test_unreadable_part_keeps_files(self, tmp_path):
        good = write_unit_pdf(sample_unit(0, "title"), str(tmp_path))
        bad = tmp_path / "part01_broken.pdf"
        bad.write_bytes(b"this is not a pdf")

        with pytest.raises(MergeError, match="Failed to merge"):
            merge_pdfs([good, bad], "Survey", str(tmp_path))
        assert good.exists()
        assert bad.exists()
