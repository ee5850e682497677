"""
Conversion Configuration

Defines sheet names, recognized columns, pagination constants and the
ConversionOptions object shared by the converter, the renderer and the CLI.
"""

import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Set

import yaml

from formdoc.errors import ConfigError

# ---------------------------------------------------------------------------
# SHEETS AND COLUMNS
# ---------------------------------------------------------------------------

SURVEY_SHEET = "survey"
CHOICES_SHEET = "choices"

SURVEY_COLUMNS = [
    "type",
    "name",
    "label",
    "hint",
    "constraint",
    "constraint_message",
    "relevance",
    "required",
    "disabled",
    "repeat_count",
    "calculation",
]
SURVEY_REQUIRED_COLUMNS = ["type", "name", "label"]

# Alternative spellings found in real workbooks
SURVEY_COLUMN_ALIASES: Dict[str, str] = {
    "relevant": "relevance",
}

CHOICES_COLUMNS = ["list_name", "value", "label"]

# Translated labels live in "label::<code>"
TRANSLATION_SEPARATOR = "::"

# ---------------------------------------------------------------------------
# SANITIZER
# ---------------------------------------------------------------------------

MAX_TEXT_LENGTH = 2045
RESERVED_CHARACTERS = "${}"

# Pre-quoted concatenations keep their double quotes
QUOTED_COLUMNS = ("choices", "values")

# ---------------------------------------------------------------------------
# PAGINATION
# ---------------------------------------------------------------------------

TABLE_BASELINE = 10
TABLE_CEILING = 500
FIELD_COST = 3
CHOICE_FIELD_COST = 1
DEFAULT_CHOICE_LENGTH = 10

TITLE_PAGE_LABEL = "title"
VALUE_LABELS_LABEL = "valuelabels"
OUTPUT_EXTENSION = "pdf"

# ---------------------------------------------------------------------------
# DISPLAY TEXT
# ---------------------------------------------------------------------------

NO_LABEL_TEXT = "THIS FIELD HAS NO TEXT"
NO_RELEVANCE_TEXT = "all"
NO_REPEAT_COUNT_TEXT = "not specified"
NO_CALCULATION_TEXT = "NO CALCULATION"


@dataclass
class ConversionOptions:
    """
    Options for one conversion run.

    Properties:
        save: Target directory for every output file (required)
        title: Document title, used on the cover and for the merged file (required)
        merge: Concatenate all parts into "<title>.pdf" and delete the parts
        skip_list: Survey row indexes to leave out of the document
        choice_length: Lists with at least this many options go to the appendix
        translation: Language code whose "label::<code>" columns replace labels
        loud: Log one line per processed field
    """

    save: str = ""
    title: str = ""
    date: Optional[str] = None
    version: Optional[str] = None
    authors: Optional[str] = None
    cover_image: Optional[str] = None
    merge: bool = False
    skip_list: Set[int] = field(default_factory=set)
    choice_length: int = DEFAULT_CHOICE_LENGTH
    translation: Optional[str] = None
    loud: bool = False

    def validate(self) -> None:
        """Raise ConfigError if the options cannot drive a conversion."""
        if not self.save:
            raise ConfigError("Option 'save' (target directory) is required")
        if not self.title:
            raise ConfigError("Option 'title' is required")
        if self.choice_length < 1:
            raise ConfigError(f"Option 'choice_length' must be positive, got {self.choice_length}")
        if self.cover_image and not Path(self.cover_image).exists():
            raise ConfigError(f"Cover image not found: {self.cover_image}")


def parse_skip_list(expr: Any) -> Set[int]:
    """
    Parse expressions like '3,5-7' into a set of 1-based row indexes.

    Lists of integers are accepted unchanged (YAML configs).
    """
    if expr is None or expr == "":
        return set()
    if isinstance(expr, (list, tuple, set)):
        return {int(i) for i in expr}

    result: Set[int] = set()
    for part in str(expr).split(","):
        part = part.strip()
        if not part:
            continue
        match = re.fullmatch(r"(\d+)\s*-\s*(\d+)", part)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
            if start > end:
                start, end = end, start
            result.update(range(start, end + 1))
        elif part.isdigit():
            result.add(int(part))
        else:
            raise ConfigError(f"Invalid skip list entry: '{part}'")
    return result


def options_from_dict(data: Dict[str, Any]) -> ConversionOptions:
    """Build ConversionOptions from a plain mapping, rejecting unknown keys."""
    known = {f.name for f in fields(ConversionOptions)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown options: {', '.join(unknown)}")

    values = dict(data)
    if "skip_list" in values:
        values["skip_list"] = parse_skip_list(values["skip_list"])
    if "choice_length" in values and values["choice_length"] is not None:
        try:
            values["choice_length"] = int(values["choice_length"])
        except (TypeError, ValueError):
            raise ConfigError(f"Option 'choice_length' must be an integer, got {values['choice_length']!r}")
    for key in ("date", "version", "authors"):
        if values.get(key) is not None:
            values[key] = str(values[key])
    return ConversionOptions(**values)


def load_options(path: Optional[str] = None, **overrides: Any) -> ConversionOptions:
    """
    Load options from a YAML file, then apply keyword overrides.

    Overrides whose value is None are ignored so CLI defaults do not mask
    values from the file.
    """
    data: Dict[str, Any] = {}
    if path:
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigError(f"Options file not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid options file {path}: {e}")
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Options file {path} must contain a mapping")
        data.update(loaded)

    data.update({k: v for k, v in overrides.items() if v is not None})
    return options_from_dict(data)


def translated_column(column: str, language: str) -> str:
    """Column holding the translation of `column`, e.g. label::fr."""
    return f"{column}{TRANSLATION_SEPARATOR}{language}"


__all__ = [
    "ConversionOptions",
    "parse_skip_list",
    "options_from_dict",
    "load_options",
    "translated_column",
]
