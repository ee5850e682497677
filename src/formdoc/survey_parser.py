"""
Survey Parser (survey sheet → normalized SurveyForm).

Steps, in order:
    1. Drop fully blank rows (no type, no name, no label)
    2. Freeze display order: index = 1-based row position
    3. Keep recognized columns only; absent optional columns become blank
    4. Clean the type and name keys, then reject duplicate names among
       non-marker rows
    5. Derive the enclosing group of every row from begin/end markers
    6. Split "select_one <list>" / "select_multiple <list>" types
    7. Optionally translate labels
    8. Left-join choice lists by list_name; unknown lists are fatal
    9. Re-sort by index

Syntax Notes:
    - "begin_group", "end_group", "begin_repeat", "end_repeat" are accepted
    - an end row with a blank name closes the innermost open section
    - required/disabled accept yes/no, true/false, 1/0
"""

import re
import warnings
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from formdoc.choices import ChoiceTable
from formdoc.config import (
    SURVEY_COLUMN_ALIASES,
    SURVEY_COLUMNS,
    SURVEY_REQUIRED_COLUMNS,
    translated_column,
)
from formdoc.errors import (
    DuplicateNameError,
    FormDataWarning,
    NestingError,
    SchemaError,
    UnresolvedListError,
)
from formdoc.model import (
    BEGIN_TYPES,
    END_TYPES,
    MARKER_TYPES,
    SELECT_TYPES,
    SurveyField,
    SurveyForm,
)
from formdoc.sanitize import sanitize_series, text_columns
from formdoc.translation import apply_translation

_SELECT_RE = re.compile(r"^(select_one|select_multiple)\s+(\S+)$")
_MARKER_ALIAS_RE = re.compile(r"^(begin|end)_(group|repeat)$")

_TRUE_FLAGS = {"true", "yes", "y", "1", "true()"}
_FALSE_FLAGS = {"false", "no", "n", "0", "false()"}


def normalize_type(raw_type: str) -> str:
    """Collapse whitespace and accept underscore spellings of marker types."""
    collapsed = re.sub(r"\s+", " ", raw_type.strip())
    alias = _MARKER_ALIAS_RE.match(collapsed)
    if alias:
        return f"{alias.group(1)} {alias.group(2)}"
    return collapsed


def split_select_type(field_type: str) -> Tuple[str, str]:
    """
    Split a select type into (type, list_name).

    Examples:
        "select_one yn" -> ("select_one", "yn")
        "text" -> ("text", "")
    """
    match = _SELECT_RE.match(field_type)
    if match:
        return match.group(1), match.group(2)
    return field_type, ""


def parse_flag(value: str, default: bool, column: str = "", name: str = "") -> bool:
    """Interpret a yes/no cell; blank cells take the default."""
    text = value.strip().lower()
    if not text:
        return default
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    warnings.warn(
        f"Unrecognized {column} value '{value}' for field '{name}', using {default}",
        FormDataWarning,
    )
    return default


def _prepare_columns(raw: pd.DataFrame, translation: Optional[str]) -> pd.DataFrame:
    df = raw.copy()
    df.columns = [str(c).strip() for c in df.columns]
    df = df.rename(columns={k: v for k, v in SURVEY_COLUMN_ALIASES.items() if v not in df.columns})

    missing = [c for c in SURVEY_REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise SchemaError(f"Survey sheet is missing required columns: {missing}")

    keep = [c for c in SURVEY_COLUMNS if c in df.columns]
    if translation and translated_column("label", translation) in df.columns:
        keep.append(translated_column("label", translation))

    df = df[keep].copy()
    for column in SURVEY_COLUMNS:
        if column not in df.columns:
            df[column] = ""
    return text_columns(df, df.columns)


def _check_unique_names(df: pd.DataFrame) -> None:
    candidates = df[(df["name"] != "") & (~df["type"].isin(MARKER_TYPES))]
    dupes = candidates[candidates["name"].duplicated(keep=False)]
    if dupes.empty:
        return

    offenders: Dict[str, List[int]] = {}
    for row in dupes.to_dict("records"):
        offenders.setdefault(row["name"], []).append(int(row["index"]))
    raise DuplicateNameError(offenders)


def derive_groups(types: List[str], names: List[str]) -> Tuple[List[str], List[str]]:
    """
    Compute the enclosing group of each row from begin/end markers.

    Marker rows belong to the section that encloses them; rows between a
    begin and its end belong to that section. Anonymous end rows take the
    name of the section they close.

    Args:
        types: Normalized type of every row
        names: Name of every row ("" when blank)

    Returns:
        (groups, names) with names of anonymous end rows filled in

    Raises:
        NestingError: On unbalanced, mismatched or reentrant sections
    """
    stack: List[Tuple[str, str]] = []
    groups: List[str] = []
    resolved = list(names)

    for position, (field_type, name) in enumerate(zip(types, names)):
        row_number = position + 1

        if field_type in BEGIN_TYPES:
            if not name:
                raise NestingError(f"Row {row_number}: '{field_type}' has no name")
            if any(open_name == name for open_name, _ in stack):
                raise NestingError(f"Row {row_number}: section '{name}' is already open")
            groups.append(stack[-1][0] if stack else "")
            stack.append((name, field_type))

        elif field_type in END_TYPES:
            if not stack:
                raise NestingError(f"Row {row_number}: '{field_type}' without a matching begin")
            open_name, open_type = stack[-1]
            expected_end = open_type.replace("begin", "end")
            if field_type != expected_end:
                raise NestingError(
                    f"Row {row_number}: '{field_type}' closes '{open_type}' section '{open_name}'"
                )
            if name and name != open_name:
                raise NestingError(
                    f"Row {row_number}: '{field_type} {name}' does not match open section '{open_name}'"
                )
            stack.pop()
            resolved[position] = open_name
            groups.append(stack[-1][0] if stack else "")

        else:
            groups.append(stack[-1][0] if stack else "")

    if stack:
        unclosed = ", ".join(name for name, _ in stack)
        raise NestingError(f"Sections never closed: {unclosed}")

    return groups, resolved


def _object_column(values: Iterable[str], index: pd.Index) -> pd.Series:
    """Text column that keeps object dtype even when the sheet has no rows."""
    return pd.Series(list(values), index=index, dtype=object)


def _merge_choices(df: pd.DataFrame, choice_table: ChoiceTable) -> pd.DataFrame:
    lists = choice_table.lists.astype({"list_name": object})
    merged = df.merge(lists, on="list_name", how="left", validate="m:1")

    unresolved = merged[
        merged["type"].isin(SELECT_TYPES)
        & (merged["list_name"] != "")
        & merged["choices"].isna()
    ]
    if not unresolved.empty:
        raise UnresolvedListError(list(unresolved["list_name"]))

    merged["choices"] = merged["choices"].fillna("")
    merged["values"] = merged["values"].fillna("")
    merged["count"] = merged["count"].fillna(0).astype(int)
    return merged


def normalize_survey(raw: pd.DataFrame, choice_table: ChoiceTable,
                     translation: Optional[str] = None) -> pd.DataFrame:
    """
    Normalize the survey sheet and attach choice list data.

    Args:
        raw: Survey sheet as read from the workbook
        choice_table: Result of build_choice_table
        translation: Optional language code for labels

    Returns:
        DataFrame with one row per field, ordered by index, holding the
        recognized columns plus index, group, list_name, choices, values, count

    Raises:
        SchemaError, DuplicateNameError, NestingError, UnresolvedListError
    """
    df = _prepare_columns(raw, translation)

    blank = (df["type"].str.strip() == "") & (df["name"].str.strip() == "") & (df["label"].str.strip() == "")
    df = df[~blank].reset_index(drop=True)
    df.insert(0, "index", range(1, len(df) + 1))

    # Key columns are cleaned up front so uniqueness and the list join see final names
    df["type"] = sanitize_series(df["type"]).map(normalize_type)
    df["name"] = sanitize_series(df["name"])

    _check_unique_names(df)

    groups, names = derive_groups(list(df["type"]), list(df["name"]))
    df["group"] = _object_column(groups, df.index)
    df["name"] = _object_column(names, df.index)

    split = [split_select_type(field_type) for field_type in df["type"]]
    df["type"] = _object_column((field_type for field_type, _ in split), df.index)
    df["list_name"] = _object_column((list_name for _, list_name in split), df.index)

    if translation:
        df = apply_translation(df, translation, key_column="name")
        df = df.drop(columns=[translated_column("label", translation)])

    df["required"] = pd.Series(
        [parse_flag(v, True, "required", n) for v, n in zip(df["required"], df["name"])],
        index=df.index, dtype=bool,
    )
    df["disabled"] = pd.Series(
        [parse_flag(v, False, "disabled", n) for v, n in zip(df["disabled"], df["name"])],
        index=df.index, dtype=bool,
    )

    df = _merge_choices(df, choice_table)
    return df.sort_values("index", kind="mergesort").reset_index(drop=True)


def _optional(value: str) -> Optional[str]:
    return value if value else None


def build_form(survey: pd.DataFrame, choice_table: ChoiceTable, name: str = "Form") -> SurveyForm:
    """
    Convert normalized tables into a SurveyForm.

    Args:
        survey: Output of normalize_survey (already sanitized)
        choice_table: Sanitized ChoiceTable
        name: Form name

    Returns:
        SurveyForm with resolved choice references
    """
    choice_lists = choice_table.to_choice_lists()
    form = SurveyForm(name=name, choice_lists=choice_lists)

    for row in survey.to_dict("records"):
        list_name = _optional(row["list_name"])
        form.fields.append(SurveyField(
            index=int(row["index"]),
            type=row["type"],
            name=_optional(row["name"]),
            label=_optional(row["label"]),
            hint=_optional(row["hint"]),
            constraint=_optional(row["constraint"]),
            constraint_message=_optional(row["constraint_message"]),
            relevance=_optional(row["relevance"]),
            required=bool(row["required"]),
            disabled=bool(row["disabled"]),
            repeat_count=_optional(row["repeat_count"]),
            calculation=_optional(row["calculation"]),
            group=_optional(row["group"]),
            list_name=list_name,
            choices=choice_lists.get(list_name) if list_name else None,
        ))

    return form


__all__ = [
    "normalize_type",
    "split_select_type",
    "parse_flag",
    "derive_groups",
    "normalize_survey",
    "build_form",
]
