"""
Conversion pipeline: workbook → normalized form → output units → files.

Every output unit is planned and built in memory before the first file is
written, so a fatal error leaves no partial output behind.
"""

import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from formdoc.backends.merge import merge_pdfs
from formdoc.backends.pdf_writer import write_unit_pdf
from formdoc.config import VALUE_LABELS_LABEL, ConversionOptions
from formdoc.document import DocumentUnit
from formdoc.errors import FormDataWarning, MergeError
from formdoc.model import SurveyForm
from formdoc.paginator import PaginationState, plan_document
from formdoc.renderer import DocumentRenderer, build_value_label_unit
from formdoc.workbook import parse_workbook

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """
    Outcome of one conversion run.

    Properties:
        form: Normalized form
        parts: Part files written (empty once merged and deleted)
        merged: Merged document, if merge was requested and succeeded
        warnings: Data-quality and merge diagnostics, in order
    """

    form: SurveyForm
    parts: List[Path] = field(default_factory=list)
    merged: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)


def _collect_warnings(func: Callable, messages: List[str], *args, **kwargs):
    """Call func, logging and recording every FormDataWarning it emits."""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        result = func(*args, **kwargs)

    for w in caught:
        if issubclass(w.category, FormDataWarning):
            message = str(w.message)
            logger.warning(message)
            messages.append(message)
        else:
            warnings.warn_explicit(w.message, w.category, w.filename, w.lineno)
    return result


def render_form(form: SurveyForm, options: ConversionOptions) -> List[DocumentUnit]:
    """
    Plan and build every output unit in memory.

    Returns:
        Main-pass units followed by the value-label appendix (if non-empty)

    Raises:
        NestingError: If an end marker has no open section
    """
    state = PaginationState()
    actions = list(plan_document(form.fields, skip_list=options.skip_list, state=state))

    renderer = DocumentRenderer(options)
    units = renderer.render(actions)
    logger.info(
        f"Planned {len(units)} units, {state.question_count - 1} questions, "
        f"{state.module_count} modules"
    )

    appendix = build_value_label_unit(
        form, options.choice_length, number=state.doc_count, label=VALUE_LABELS_LABEL
    )
    if appendix.is_empty:
        logger.info("No choice list reaches the value-label threshold; appendix skipped")
    else:
        units.append(appendix)
    return units


def write_units(units: List[DocumentUnit], options: ConversionOptions) -> List[Path]:
    return [write_unit_pdf(unit, options.save, title=options.title) for unit in units]


def convert_workbook(xlsx_path: str, options: ConversionOptions) -> ConversionResult:
    """
    Convert a form workbook into PDF output units.

    Args:
        xlsx_path: Path to the workbook
        options: Conversion options

    Returns:
        ConversionResult

    Raises:
        FormError: For fatal configuration, schema, reference and nesting
            problems; nothing is written in that case
    """
    options.validate()
    messages: List[str] = []

    form = _collect_warnings(parse_workbook, messages, xlsx_path, translation=options.translation)
    units = _collect_warnings(render_form, messages, form, options)

    result = ConversionResult(form=form, warnings=messages)
    result.parts = write_units(units, options)

    if options.merge:
        try:
            result.merged = merge_pdfs(result.parts, options.title, options.save)
            result.parts = []
        except MergeError as e:
            logger.error(str(e))
            result.warnings.append(str(e))

    return result


__all__ = ["ConversionResult", "render_form", "write_units", "convert_workbook"]
