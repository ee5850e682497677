"""
Document Renderer

Consumes the paginator's actions and builds DocumentUnit objects. Each
field type has its own render method; unknown types render nothing.

Question layout (text, integer, select_one, select_multiple):
    Part A  question number | label (or placeholder) (hint)
    Part B  select types only:
              fewer options than choice_length -> "label = value" rows
              otherwise -> "See value label '<list_name>'"
    Part C  metadata box: only attributes that differ from the default
    Constraint message, if any, as a full-width row below parts A and B
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from formdoc.config import (
    DEFAULT_CHOICE_LENGTH,
    NO_CALCULATION_TEXT,
    NO_LABEL_TEXT,
    NO_RELEVANCE_TEXT,
    NO_REPEAT_COUNT_TEXT,
    ConversionOptions,
)
from formdoc.document import (
    DocumentUnit,
    ImageBlock,
    PageBreakBlock,
    Run,
    TableBlock,
    TextBlock,
)
from formdoc.model import (
    BEGIN_TYPES,
    CALCULATE_TYPES,
    END_TYPES,
    QUESTION_TYPES,
    SELECT_TYPES,
    FieldType,
    SurveyField,
    SurveyForm,
)
from formdoc.paginator import Action, FlushAction, RenderAction

logger = logging.getLogger(__name__)


def _labelled(label: str, value: str, style: str) -> TextBlock:
    return TextBlock(runs=[Run(f"{label}: ", bold=True), Run(value)], style=style)


def build_cover_blocks(options: ConversionOptions) -> List:
    """Title page: title, version, date, authors and optional image."""
    blocks: List = [TextBlock.plain(options.title, style="title")]
    if options.version:
        blocks.append(_labelled("Version", options.version, "cover"))
    if options.date:
        blocks.append(_labelled("Date", options.date, "cover"))
    if options.authors:
        blocks.append(_labelled("Authors", options.authors, "cover"))
    if options.cover_image:
        blocks.append(ImageBlock(path=options.cover_image))
    blocks.append(PageBreakBlock())
    return blocks


def question_block(survey_field: SurveyField, number: int,
                   choice_length: int = DEFAULT_CHOICE_LENGTH) -> TableBlock:
    """Parts A and B of a question, plus the spanned constraint message row."""
    title_runs = [Run(survey_field.label or NO_LABEL_TEXT, bold=True)]
    if survey_field.hint:
        title_runs.append(Run(f" ({survey_field.hint})", italic=True))
    rows: List[List] = [[f"{number}.", TextBlock(runs=title_runs, style="question")]]

    choices = survey_field.choices
    if survey_field.type in SELECT_TYPES and choices is not None:
        if choices.count < choice_length:
            rows.append(["", _labelled("Value label", choices.list_name, "choice_header")])
            for option in choices.options:
                rows.append(["", f"{option.label} = {option.value}"])
        else:
            rows.append(["", f"See value label '{choices.list_name}'"])

    spans = []
    if survey_field.constraint_message:
        last = len(rows)
        rows.append([_labelled("Constraint message", survey_field.constraint_message, "annotation"), ""])
        spans.append(((0, last), (1, last)))

    return TableBlock(rows=rows, spans=spans, style="question")


def metadata_rows(survey_field: SurveyField) -> List[List[str]]:
    """Part C rows, for attributes that differ from their defaults."""
    rows = []
    if survey_field.name:
        rows.append(["Variable", survey_field.name])
    if survey_field.group:
        rows.append(["Group", survey_field.group])
    if survey_field.relevance:
        rows.append(["Relevance", survey_field.relevance])
    if survey_field.constraint:
        rows.append(["Constraint", survey_field.constraint])
    if not survey_field.required:
        rows.append(["Required", "no"])
    return rows


class DocumentRenderer:
    """
    Turns paginator actions into numbered DocumentUnits.

    The first unit opens with the cover page. Units are only built in
    memory; persisting them is the backend's job.
    """

    def __init__(self, options: ConversionOptions):
        self.options = options
        self.units: List[DocumentUnit] = []
        self.current = DocumentUnit()
        self.current.add(*build_cover_blocks(options))
        self._renderers: Dict[str, Callable[[RenderAction], None]] = {
            FieldType.MODULE: self.render_module,
            FieldType.NOTE: self.render_note,
        }
        for field_type in BEGIN_TYPES:
            self._renderers[field_type] = self.render_begin
        for field_type in END_TYPES:
            self._renderers[field_type] = self.render_end
        for field_type in QUESTION_TYPES:
            self._renderers[field_type] = self.render_question
        for field_type in CALCULATE_TYPES:
            self._renderers[field_type] = self.render_calculate

    def apply(self, action: Action) -> None:
        if isinstance(action, FlushAction):
            self.flush(action)
            return

        survey_field = action.field
        if self.options.loud:
            logger.info(f"[{survey_field.index}] {survey_field.type} {survey_field.name or ''}".rstrip())
        render = self._renderers.get(survey_field.type)
        if render is not None:
            render(action)

    def render(self, actions: Iterable[Action]) -> List[DocumentUnit]:
        for action in actions:
            self.apply(action)
        return self.units

    def flush(self, action: FlushAction) -> None:
        self.current.number = action.number
        self.current.label = action.label
        self.units.append(self.current)
        self.current = DocumentUnit()

    # ------------------------------------------------------------------
    # Per-type renderers
    # ------------------------------------------------------------------

    def render_module(self, action: RenderAction) -> None:
        self.current.add(TextBlock.plain(action.field.heading, style="module"))

    def render_begin(self, action: RenderAction) -> None:
        survey_field = action.field
        kind = "Repeat" if survey_field.type == FieldType.BEGIN_REPEAT else "Group"
        self.current.add(
            _labelled(f"Begin {kind}", f"{action.heading} - {survey_field.name}", "section"),
            _labelled("Relevance", survey_field.relevance or NO_RELEVANCE_TEXT, "section_detail"),
        )
        if survey_field.type == FieldType.BEGIN_REPEAT:
            self.current.add(_labelled(
                "Repeat count", survey_field.repeat_count or NO_REPEAT_COUNT_TEXT, "section_detail"
            ))

    def render_end(self, action: RenderAction) -> None:
        kind = "Repeat" if action.field.type == FieldType.END_REPEAT else "Group"
        self.current.add(_labelled(f"End {kind}", action.heading, "section"))

    def render_note(self, action: RenderAction) -> None:
        survey_field = action.field
        self.current.add(TextBlock.plain(survey_field.label or survey_field.name or "", style="note"))
        if survey_field.relevance:
            self.current.add(_labelled("Relevance", survey_field.relevance, "annotation"))

    def render_calculate(self, action: RenderAction) -> None:
        survey_field = action.field
        expression = survey_field.calculation or NO_CALCULATION_TEXT
        self.current.add(_labelled("Calculation", f"{survey_field.name or ''} = {expression}", "calculation"))
        if survey_field.label:
            self.current.add(TextBlock.plain(survey_field.label, style="annotation"))

    def render_question(self, action: RenderAction) -> None:
        survey_field = action.field
        self.current.add(question_block(survey_field, action.question_number, self.options.choice_length))

        rows = metadata_rows(survey_field)
        if rows:
            self.current.add(TableBlock(rows=rows, style="metadata"))


def build_value_label_unit(form: SurveyForm, choice_length: int = DEFAULT_CHOICE_LENGTH,
                           number: Optional[int] = None, label: Optional[str] = None) -> DocumentUnit:
    """
    Appendix with one table per choice list of at least choice_length options.

    Args:
        form: Normalized form
        choice_length: Inline rendering threshold
        number: Output unit number
        label: Output unit label

    Returns:
        DocumentUnit (empty if no list reaches the threshold)
    """
    unit = DocumentUnit(number=number, label=label)
    for list_name in sorted(form.choice_lists):
        choices = form.choice_lists[list_name]
        if choices.count < choice_length:
            continue
        rows: List[List] = [["Label", "Value"]]
        rows.extend([option.label, option.value] for option in choices.options)
        unit.add(
            TextBlock.plain(f"Value label: {list_name}", style="heading"),
            TableBlock(rows=rows, header=True, style="valuelabels"),
        )
    return unit


__all__ = [
    "DocumentRenderer",
    "build_cover_blocks",
    "build_value_label_unit",
    "metadata_rows",
    "question_block",
]
