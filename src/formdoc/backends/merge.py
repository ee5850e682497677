"""
Concatenate part files into one PDF.

The merged file is named after the document title; the part files are
deleted only after the merged file has been written.
"""

import logging
from pathlib import Path
from typing import List, Sequence

from formdoc.errors import MergeError
from formdoc.paginator import slugify

try:
    from pypdf import PdfReader, PdfWriter
    from pypdf.errors import PyPdfError
    HAS_PYPDF = True
except ImportError:
    HAS_PYPDF = False

logger = logging.getLogger(__name__)


def merged_filename(title: str) -> str:
    return f"{slugify(title) or 'document'}.pdf"


def merge_pdfs(parts: Sequence[Path], title: str, directory: str) -> Path:
    """
    Merge part files in order, bookmark each part, delete the parts.

    Args:
        parts: Part files, in output order
        title: Document title (names the merged file)
        directory: Target directory

    Returns:
        Path of the merged file

    Raises:
        MergeError: If pypdf is unavailable or a part cannot be read/written;
            the part files are left untouched in that case
    """
    if not HAS_PYPDF:
        raise MergeError("pypdf is not installed; part files were left unmerged")

    target = Path(directory) / merged_filename(title)
    writer = PdfWriter()

    try:
        for part in parts:
            reader = PdfReader(str(part))
            first_page = len(writer.pages)
            for page in reader.pages:
                writer.add_page(page)
            if len(writer.pages) > first_page:
                writer.add_outline_item(Path(part).stem, first_page)
        with open(target, "wb") as f:
            writer.write(f)
    except (OSError, PyPdfError) as e:
        raise MergeError(f"Failed to merge part files into {target}: {e}")

    removed: List[Path] = []
    for part in parts:
        Path(part).unlink()
        removed.append(Path(part))
    logger.info(f"Merged {len(removed)} parts into {target}")
    return target


__all__ = ["HAS_PYPDF", "merge_pdfs", "merged_filename"]
