"""
String Sanitizer

Cleans every text column of the survey and choice tables so the values are
safe to place in rendered documents:
    - reserved characters ($ { }) are removed
    - double quotes are removed, except in the pre-quoted concatenation
      columns ("choices", "values")
    - surrounding whitespace is stripped
    - values are truncated to MAX_TEXT_LENGTH characters

Every step is a fixed point: sanitizing already-sanitized text changes nothing.
"""

import math
import re
import warnings
from typing import Any, Iterable, Optional

import pandas as pd

from formdoc.config import MAX_TEXT_LENGTH, QUOTED_COLUMNS, RESERVED_CHARACTERS
from formdoc.errors import FormDataWarning

_RESERVED_RE = re.compile("[" + re.escape(RESERVED_CHARACTERS) + "]")


def cell_to_text(value: Any) -> str:
    """
    Convert a spreadsheet cell to text.

    Empty cells (None, NaN) become "". Whole floats lose their decimal part,
    since Excel stores 1 as 1.0 in columns that also hold blanks.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    if pd.isna(value):
        return ""
    return str(value)


def text_columns(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Return a copy of df where the given columns hold plain strings."""
    out = df.copy()
    for column in columns:
        if column in out.columns:
            out[column] = out[column].map(cell_to_text).astype(object)
    return out


def sanitize_series(series: pd.Series, keep_quotes: bool = False,
                    max_length: int = MAX_TEXT_LENGTH) -> pd.Series:
    """
    Sanitize one text column.

    A single warning is issued per column when truncation happens; it
    reports the overflow of the longest value in that column.
    """
    cleaned = series.map(cell_to_text).astype(object).str.replace(_RESERVED_RE, "", regex=True)
    if not keep_quotes:
        cleaned = cleaned.str.replace('"', "", regex=False)
    cleaned = cleaned.str.strip()

    if cleaned.empty:
        return cleaned

    longest = int(cleaned.str.len().max())
    if longest > max_length:
        warnings.warn(
            f"Column '{series.name}' truncated to {max_length} characters "
            f"({longest - max_length} characters dropped from the longest value)",
            FormDataWarning,
        )
        cleaned = cleaned.str.slice(0, max_length).str.strip()

    return cleaned


def sanitize_frame(df: pd.DataFrame, columns: Optional[Iterable[str]] = None,
                   max_length: int = MAX_TEXT_LENGTH) -> pd.DataFrame:
    """
    Sanitize the text columns of a table.

    Args:
        df: Survey or choice table
        columns: Columns to clean (defaults to every text column)
        max_length: Maximum stored length

    Returns:
        Sanitized copy of df
    """
    out = df.copy()
    if columns is None:
        columns = [
            c for c in out.columns
            if out[c].dtype == object or pd.api.types.is_string_dtype(out[c].dtype)
        ]

    for column in columns:
        out[column] = sanitize_series(
            out[column],
            keep_quotes=column in QUOTED_COLUMNS,
            max_length=max_length,
        )
    return out


__all__ = ["cell_to_text", "text_columns", "sanitize_series", "sanitize_frame"]
