"""
Choice Table Builder (choices sheet → ChoiceList records).

Input: one row per option, in any order:
    list_name, value, label[, label::<code> ...]
    list_name keys are sanitized on read, so survey references match them.

Output (ChoiceTable):
    options: long table, one row per option, with a stable ordinal
        list_name, value, label, ordinal
    lists: wide table, one row per list_name
        list_name, choices, values, count

Ordering:
    Options are sorted by list_name, then by value (numeric values
    numerically, before text values), then by original row position.
    Building the same rows twice yields the same table.
"""

import re
import warnings
from dataclasses import dataclass
from typing import Dict, Optional

import pandas as pd

from formdoc.config import CHOICES_COLUMNS
from formdoc.errors import FormDataWarning, SchemaError
from formdoc.model import ChoiceList, ChoiceOption
from formdoc.sanitize import sanitize_frame, sanitize_series, text_columns
from formdoc.translation import apply_translation

_QUOTED_TOKEN_RE = re.compile(r'"([^"]*)"')

OPTION_COLUMNS = ["list_name", "value", "label", "ordinal"]
LIST_COLUMNS = ["list_name", "choices", "values", "count"]


def _quote_join(items) -> str:
    return " ".join(f'"{item}"' for item in items)


def count_quoted(text: str) -> int:
    """Count the quoted tokens of a concatenated choices/values string."""
    return len(_QUOTED_TOKEN_RE.findall(text or ""))


@dataclass
class ChoiceTable:
    """Long and wide views of the choices sheet, kept in sync."""

    options: pd.DataFrame
    lists: pd.DataFrame

    def sanitized(self) -> "ChoiceTable":
        return ChoiceTable(
            options=sanitize_frame(self.options, columns=["list_name", "value", "label"]),
            lists=sanitize_frame(self.lists, columns=["list_name", "choices", "values"]),
        )

    def to_choice_lists(self) -> Dict[str, ChoiceList]:
        """Build one ChoiceList per list_name, options in ordinal order."""
        result: Dict[str, ChoiceList] = {}
        for row in self.lists.to_dict("records"):
            result[row["list_name"]] = ChoiceList(
                list_name=row["list_name"],
                choices=row["choices"],
                values=row["values"],
            )
        for row in self.options.sort_values(["list_name", "ordinal"]).to_dict("records"):
            result[row["list_name"]].options.append(ChoiceOption(
                list_name=row["list_name"],
                value=row["value"],
                label=row["label"],
                ordinal=int(row["ordinal"]),
            ))
        return result


def _check_columns(raw: pd.DataFrame) -> pd.DataFrame:
    """Validate the choices sheet header, using "name" as value if needed."""
    df = raw.copy()
    df.columns = [str(c).strip() for c in df.columns]

    if "value" not in df.columns and "name" in df.columns:
        df = df.rename(columns={"name": "value"})

    missing = [c for c in CHOICES_COLUMNS if c not in df.columns]
    if missing:
        raise SchemaError(f"Choices sheet is missing required columns: {missing}")
    return df


def _sort_options(df: pd.DataFrame) -> pd.DataFrame:
    numeric = pd.to_numeric(df["value"], errors="coerce")
    keyed = df.assign(
        _text_key=numeric.isna().astype(int),
        _num_key=numeric.fillna(0.0),
        _row=range(len(df)),
    )
    keyed = keyed.sort_values(["list_name", "_text_key", "_num_key", "value", "_row"])
    return keyed.drop(columns=["_text_key", "_num_key", "_row"]).reset_index(drop=True)


def _summarize(options: pd.DataFrame) -> pd.DataFrame:
    if options.empty:
        return pd.DataFrame(columns=LIST_COLUMNS)

    grouped = options.groupby("list_name", sort=True)
    lists = pd.DataFrame({
        "choices": grouped["label"].agg(_quote_join),
        "values": grouped["value"].agg(_quote_join),
        "count": grouped.size(),
    }).reset_index()
    return lists[LIST_COLUMNS]


def _check_counts(lists: pd.DataFrame) -> None:
    for row in lists.to_dict("records"):
        list_name = row["list_name"]
        n_labels = count_quoted(row["choices"])
        n_values = count_quoted(row["values"])
        if n_labels != n_values:
            warnings.warn(
                f"Choice list '{list_name}' has {n_labels} labels but {n_values} values "
                f"(check for stray quote characters)",
                FormDataWarning,
            )


def _check_duplicate_values(options: pd.DataFrame) -> None:
    dupes = options[options.duplicated(["list_name", "value"], keep=False)]
    for list_name in sorted(dupes["list_name"].unique()):
        values = sorted(dupes.loc[dupes["list_name"] == list_name, "value"].unique())
        warnings.warn(
            f"Choice list '{list_name}' repeats values: {', '.join(values)}",
            FormDataWarning,
        )


def build_choice_table(raw: pd.DataFrame, translation: Optional[str] = None) -> ChoiceTable:
    """
    Reshape the choices sheet into per-list option arrays.

    Args:
        raw: Choices sheet as read from the workbook
        translation: Optional language code; "label::<code>" replaces "label"

    Returns:
        ChoiceTable with options and lists views

    Raises:
        SchemaError: If required columns (or the translation column) are missing
    """
    df = _check_columns(raw)
    df = text_columns(df, CHOICES_COLUMNS)
    df["list_name"] = sanitize_series(df["list_name"])
    df = df[df["list_name"] != ""]

    if translation:
        df = apply_translation(df, translation, key_column="list_name")

    options = _sort_options(df[["list_name", "value", "label"]])
    options["ordinal"] = options.groupby("list_name").cumcount() + 1
    options = options[OPTION_COLUMNS]

    _check_duplicate_values(options)
    lists = _summarize(options)
    _check_counts(lists)

    return ChoiceTable(options=options, lists=lists)


__all__ = ["ChoiceTable", "build_choice_table", "count_quoted"]
