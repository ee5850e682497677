"""
Paginator — walks survey fields in index order and plans the document.

The paginator owns every counter of a conversion run and produces a lazy
sequence of actions; it never touches a document backend:

    RenderAction(field, question_number, heading)
        render one field into the current output unit
    FlushAction(number, label)
        close the current output unit as part<number>_<label>

Pagination rule (checked before each rendered field):
    table_count >= TABLE_CEILING, or the field is a MODULE
        -> flush, reset table_count to TABLE_BASELINE

ARCHITECTURAL RULE:
    State transitions live here and only here, so they can be tested by
    constructing PaginationState directly.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional, Union

from formdoc.config import (
    CHOICE_FIELD_COST,
    FIELD_COST,
    TABLE_BASELINE,
    TABLE_CEILING,
    TITLE_PAGE_LABEL,
)
from formdoc.errors import NestingError
from formdoc.model import BEGIN_TYPES, END_TYPES, SELECT_TYPES, FieldType, SurveyField


@dataclass
class SectionContext:
    """
    Headings of the currently open groups and repeats, keyed by name.

    A section must be opened before it can be closed; a name cannot be
    opened twice at the same time.
    """

    headings: Dict[str, str] = field(default_factory=dict)

    def open(self, name: str, heading: str) -> None:
        if name in self.headings:
            raise NestingError(f"Section '{name}' is already open")
        self.headings[name] = heading

    def close(self, name: str) -> str:
        try:
            return self.headings.pop(name)
        except KeyError:
            raise NestingError(f"Section '{name}' is closed but was never opened")

    def __contains__(self, name: str) -> bool:
        return name in self.headings

    def __len__(self) -> int:
        return len(self.headings)


@dataclass
class PaginationState:
    """
    Counters of one conversion run.

    question_count and doc_count only increase; table_count is reset each
    time a new output unit is opened.
    """

    table_count: int = TABLE_BASELINE
    question_count: int = 1
    doc_count: int = 0
    module_count: int = 0
    module_label: str = TITLE_PAGE_LABEL
    sections: SectionContext = field(default_factory=SectionContext)


@dataclass
class RenderAction:
    field: SurveyField
    question_number: Optional[int] = None
    heading: Optional[str] = None


@dataclass
class FlushAction:
    number: int
    label: str


Action = Union[RenderAction, FlushAction]


def slugify(text: str, max_len: int = 80) -> str:
    """Make text safe for use inside a file name."""
    text = str(text or "").strip()
    text = re.sub(r"[^\w\s\-\.]+", "", text, flags=re.UNICODE)
    text = re.sub(r"\s+", "_", text)
    return text[:max_len]


def module_label(survey_field: SurveyField, module_number: int) -> str:
    """File label for a module: its heading, or module<N> if that is empty."""
    return slugify(survey_field.heading) or f"module{module_number}"


def field_cost(survey_field: SurveyField) -> int:
    """Approximate table budget consumed by one rendered question."""
    if not survey_field.is_question:
        return 0
    cost = FIELD_COST
    if survey_field.type in SELECT_TYPES:
        cost += CHOICE_FIELD_COST
    return cost


def is_skipped(survey_field: SurveyField, skip_list: Iterable[int] = ()) -> bool:
    """Skip-list rows and disabled rows (except MODULE) are left out entirely."""
    if survey_field.index in skip_list:
        return True
    return survey_field.disabled and survey_field.type != FieldType.MODULE


def _flush(state: PaginationState) -> FlushAction:
    action = FlushAction(number=state.doc_count, label=state.module_label)
    state.doc_count += 1
    state.table_count = TABLE_BASELINE
    return action


def plan_document(fields: Iterable[SurveyField], skip_list: Iterable[int] = (),
                  state: Optional[PaginationState] = None) -> Iterator[Action]:
    """
    Produce the render/flush actions for a sequence of fields.

    Args:
        fields: Normalized fields, in index order
        skip_list: Indexes to leave out
        state: Optional pre-built state (fresh state if None)

    Yields:
        RenderAction and FlushAction objects; the last action is always a
        FlushAction for the remaining content

    Raises:
        NestingError: If an end marker has no open section
    """
    if state is None:
        state = PaginationState()
    skip = set(skip_list)

    for survey_field in fields:
        if is_skipped(survey_field, skip):
            continue

        is_module = survey_field.type == FieldType.MODULE
        if state.table_count >= TABLE_CEILING or is_module:
            yield _flush(state)

        if is_module:
            state.module_count += 1
            state.module_label = module_label(survey_field, state.module_count)
            yield RenderAction(survey_field)

        elif survey_field.type in BEGIN_TYPES:
            heading = survey_field.heading
            state.sections.open(survey_field.name, heading)
            yield RenderAction(survey_field, heading=heading)

        elif survey_field.type in END_TYPES:
            heading = state.sections.close(survey_field.name)
            yield RenderAction(survey_field, heading=heading)

        elif survey_field.is_question:
            yield RenderAction(survey_field, question_number=state.question_count)
            state.question_count += 1
            state.table_count += field_cost(survey_field)

        else:
            yield RenderAction(survey_field)

    yield _flush(state)


__all__ = [
    "SectionContext",
    "PaginationState",
    "RenderAction",
    "FlushAction",
    "slugify",
    "module_label",
    "field_cost",
    "is_skipped",
    "plan_document",
]
