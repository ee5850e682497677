"""Backends that persist document units (PDF writing, PDF merging)."""

from .merge import HAS_PYPDF, merge_pdfs, merged_filename
from .pdf_writer import build_story, write_unit_pdf

__all__ = ["HAS_PYPDF", "merge_pdfs", "merged_filename", "build_story", "write_unit_pdf"]
