"""
Form Documentation Package (formdoc)

Turns a survey form workbook (a "survey" sheet of questions, groups and
repeats plus a "choices" sheet of option lists) into a paginated,
human-readable PDF codebook.

PIPELINE:
---------
    choices sheet ──> Choice Table Builder ─┐
                                            ├─> String Sanitizer ─> Paginator ─> PDF units
    survey sheet  ──> Survey Normalizer ────┘                          └──> Value-label appendix

The model objects (formdoc.model) know nothing about PDF rendering.
formdoc.renderer lays fields out as abstract document units; formdoc.backends
turns those units into PDF files and merges them.
"""

__version__ = "0.1.0"
