"""
Abstract document units.

A DocumentUnit is an ordered list of styled blocks that becomes exactly one
output file. Blocks carry style names, not fonts or sizes; the PDF backend
maps style names to concrete styles.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from formdoc.config import OUTPUT_EXTENSION


@dataclass
class Run:
    """A span of text with inline emphasis."""

    text: str
    bold: bool = False
    italic: bool = False


@dataclass
class TextBlock:
    """A paragraph made of one or more runs."""

    runs: List[Run]
    style: str = "body"

    @classmethod
    def plain(cls, text: str, style: str = "body") -> "TextBlock":
        return cls(runs=[Run(text)], style=style)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


Cell = Union[str, TextBlock]

# ((first_col, first_row), (last_col, last_row)), reportlab SPAN convention
Span = Tuple[Tuple[int, int], Tuple[int, int]]


@dataclass
class TableBlock:
    """
    A table of text cells.

    Properties:
        rows: Cells, row by row
        spans: Merged cell ranges
        header: True if the first row is a header row
        style: Table style name ("question", "metadata", "valuelabels")
    """

    rows: List[List[Cell]]
    spans: List[Span] = field(default_factory=list)
    header: bool = False
    style: str = "question"

    def plain_rows(self) -> List[List[str]]:
        return [
            [cell.text if isinstance(cell, TextBlock) else cell for cell in row]
            for row in self.rows
        ]


@dataclass
class ImageBlock:
    path: str
    width_cm: float = 12.0


@dataclass
class PageBreakBlock:
    pass


Block = Union[TextBlock, TableBlock, ImageBlock, PageBreakBlock]


def unit_filename(number: int, label: str, extension: str = OUTPUT_EXTENSION) -> str:
    """
    File name of an output unit.

    Examples:
        unit_filename(0, "title") -> "part00_title.pdf"
        unit_filename(12, "valuelabels") -> "part12_valuelabels.pdf"
    """
    return f"part{number:02d}_{label}.{extension}"


@dataclass
class DocumentUnit:
    """One output file's worth of blocks."""

    blocks: List[Block] = field(default_factory=list)
    number: Optional[int] = None
    label: Optional[str] = None

    def add(self, *blocks: Block) -> None:
        self.blocks.extend(blocks)

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    @property
    def filename(self) -> str:
        if self.number is None or self.label is None:
            raise ValueError("Document unit has not been numbered yet")
        return unit_filename(self.number, self.label)

    def texts(self) -> List[str]:
        """Plain text of every paragraph and table cell, in order."""
        result: List[str] = []
        for block in self.blocks:
            if isinstance(block, TextBlock):
                result.append(block.text)
            elif isinstance(block, TableBlock):
                for row in block.plain_rows():
                    result.extend(cell for cell in row if cell)
        return result


__all__ = [
    "Run",
    "TextBlock",
    "TableBlock",
    "ImageBlock",
    "PageBreakBlock",
    "DocumentUnit",
    "unit_filename",
]
