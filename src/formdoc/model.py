"""
Core Form Model Objects

Defines the normalized data structures produced by the parsers:
    - ChoiceOption (one value/label pair)
    - ChoiceList (an ordered option list, keyed by list_name)
    - SurveyField (one row of the survey sheet)
    - SurveyForm (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about PDF rendering or pagination
        - Use None for an absent optional attribute, never ""
        - Keep survey fields in index order
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


class FieldType:
    """Recognized values of SurveyField.type."""

    MODULE = "MODULE"
    BEGIN_GROUP = "begin group"
    END_GROUP = "end group"
    BEGIN_REPEAT = "begin repeat"
    END_REPEAT = "end repeat"
    NOTE = "note"
    TEXT = "text"
    INTEGER = "integer"
    SELECT_ONE = "select_one"
    SELECT_MULTIPLE = "select_multiple"
    CALCULATE = "calculate"
    CALCULATE_HERE = "calculate_here"


MARKER_TYPES = frozenset({
    FieldType.BEGIN_GROUP,
    FieldType.END_GROUP,
    FieldType.BEGIN_REPEAT,
    FieldType.END_REPEAT,
})
BEGIN_TYPES = frozenset({FieldType.BEGIN_GROUP, FieldType.BEGIN_REPEAT})
END_TYPES = frozenset({FieldType.END_GROUP, FieldType.END_REPEAT})
SELECT_TYPES = frozenset({FieldType.SELECT_ONE, FieldType.SELECT_MULTIPLE})
QUESTION_TYPES = frozenset({
    FieldType.TEXT,
    FieldType.INTEGER,
    FieldType.SELECT_ONE,
    FieldType.SELECT_MULTIPLE,
})
CALCULATE_TYPES = frozenset({FieldType.CALCULATE, FieldType.CALCULATE_HERE})


@dataclass
class ChoiceOption:
    """
    One selectable option of a choice list.

    Properties:
        list_name: Name of the owning list (e.g., "yn")
        value: Stored value (e.g., "1")
        label: Display label (e.g., "Yes")
        ordinal: 1-based position inside the list, ordered by value
    """

    list_name: str
    value: str
    label: str
    ordinal: int


@dataclass
class ChoiceList:
    """
    An ordered set of options sharing a list_name.

    Two representations are kept in sync:
        options: structured ChoiceOption records, in ordinal order
        choices / values: quoted, space-separated concatenations
            e.g. choices = '"Yes" "No"', values = '"1" "0"'
    """

    list_name: str
    options: List[ChoiceOption] = field(default_factory=list)
    choices: str = ""
    values: str = ""

    @property
    def count(self) -> int:
        return len(self.options)


@dataclass
class SurveyField:
    """
    One row of the survey sheet after normalization.

    Properties:
        index: 1-based display position, frozen when the sheet is read
        type: One of FieldType (or any other string, rendered as a no-op)
        name: Field name (unique among non-marker fields)
        group: Name of the nearest enclosing group or repeat
        list_name: Choice list reference, select types only
        choices: Resolved ChoiceList for select types
        required: Defaults to True; only an explicit False is displayed
    """

    index: int
    type: str
    name: Optional[str] = None
    label: Optional[str] = None
    hint: Optional[str] = None
    constraint: Optional[str] = None
    constraint_message: Optional[str] = None
    relevance: Optional[str] = None
    required: bool = True
    disabled: bool = False
    repeat_count: Optional[str] = None
    calculation: Optional[str] = None
    group: Optional[str] = None
    list_name: Optional[str] = None
    choices: Optional[ChoiceList] = None

    @property
    def heading(self) -> str:
        """Display heading: the label if present, else the name."""
        return self.label or self.name or ""

    @property
    def is_marker(self) -> bool:
        return self.type in MARKER_TYPES

    @property
    def is_question(self) -> bool:
        return self.type in QUESTION_TYPES


@dataclass
class SurveyForm:
    """
    Root container for a normalized form.

    INVARIANTS:
        - fields are sorted by index, indexes are 1..N
        - every select field with a list_name has choices set
        - choice_lists is keyed by list_name
    """

    name: str
    fields: List[SurveyField] = field(default_factory=list)
    choice_lists: Dict[str, ChoiceList] = field(default_factory=dict)

    def get_field(self, name: str) -> Optional[SurveyField]:
        """
        Retrieve the first non-marker field with the given name.

        Args:
            name: Field name

        Returns:
            SurveyField or None if not found
        """
        for survey_field in self.fields:
            if survey_field.name == name and not survey_field.is_marker:
                return survey_field
        return None

    def get_choice_list(self, list_name: str) -> Optional[ChoiceList]:
        return self.choice_lists.get(list_name)


__all__ = [
    "FieldType",
    "MARKER_TYPES",
    "BEGIN_TYPES",
    "END_TYPES",
    "SELECT_TYPES",
    "QUESTION_TYPES",
    "CALCULATE_TYPES",
    "ChoiceOption",
    "ChoiceList",
    "SurveyField",
    "SurveyForm",
]
