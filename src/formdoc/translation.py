"""
Label translation with default-language fallback.

A translated workbook carries "label::<code>" columns next to "label".
Selecting a language copies the translated text over the default label;
rows whose translation is blank keep the default and are reported.
"""

import warnings

import pandas as pd

from formdoc.config import translated_column
from formdoc.errors import FormDataWarning, SchemaError
from formdoc.sanitize import cell_to_text


def apply_translation(df: pd.DataFrame, language: str, key_column: str,
                      column: str = "label") -> pd.DataFrame:
    """
    Replace `column` with its translation for `language`.

    Args:
        df: Table holding both the default and the translated column
        language: Language code, e.g. "fr"
        key_column: Column naming the affected rows in the warning
            ("list_name" for choices, "name" for survey fields)
        column: Column to translate

    Returns:
        Copy of df with `column` translated

    Raises:
        SchemaError: If the translated column does not exist
    """
    source = translated_column(column, language)
    if source not in df.columns:
        raise SchemaError(f"Translation column '{source}' not found")

    out = df.copy()
    translated = out[source].map(cell_to_text).str.strip()
    default = out[column].map(cell_to_text)
    fallback = (translated == "") & (default.str.strip() != "")

    if fallback.any():
        affected = sorted({k for k in out.loc[fallback, key_column].map(cell_to_text) if k})
        warnings.warn(
            f"Missing '{language}' translation, default label used for: {', '.join(affected)}",
            FormDataWarning,
        )

    out[column] = translated.where(~fallback, default)
    return out


__all__ = ["apply_translation"]
