"""
Form Analyzer — inventory and early diagnostics of a normalized form.

This module provides lightweight analysis of SurveyForm objects:
    - Field counts by type
    - Section nesting depth
    - Choice list usage (unused lists, lists sent to the appendix)
    - Questions without labels
    - Warning flags for documentation quality

IMPORTANT: It does NOT modify the form. It only produces read-only reports.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Set

from formdoc.config import DEFAULT_CHOICE_LENGTH
from formdoc.model import BEGIN_TYPES, END_TYPES, SELECT_TYPES, FieldType, SurveyForm


@dataclass
class FormReport:
    """Analysis report for a form."""

    form_name: str
    total_fields: int = 0
    type_counts: Dict[str, int] = field(default_factory=dict)
    total_questions: int = 0
    total_modules: int = 0
    disabled_fields: int = 0
    max_section_depth: int = 0

    # Choice lists
    total_choice_lists: int = 0
    referenced_lists: Set[str] = field(default_factory=set)
    unused_lists: Set[str] = field(default_factory=set)
    appendix_lists: List[str] = field(default_factory=list)

    # Coverage
    unlabelled_questions: List[str] = field(default_factory=list)
    questions_with_relevance: int = 0
    questions_with_constraint: int = 0

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_form(form: SurveyForm, choice_length: int = DEFAULT_CHOICE_LENGTH) -> FormReport:
    """
    Perform a read-only analysis of a SurveyForm.

    Args:
        form: Normalized form
        choice_length: Threshold above which lists go to the appendix

    Returns:
        FormReport with metrics and warnings
    """
    report = FormReport(form_name=form.name)
    report.total_fields = len(form.fields)
    report.type_counts = dict(Counter(f.type for f in form.fields))
    report.total_choice_lists = len(form.choice_lists)

    depth = 0
    for survey_field in form.fields:
        if survey_field.type in BEGIN_TYPES:
            depth += 1
            report.max_section_depth = max(report.max_section_depth, depth)
        elif survey_field.type in END_TYPES:
            depth -= 1

        if survey_field.type == FieldType.MODULE:
            report.total_modules += 1
        if survey_field.disabled:
            report.disabled_fields += 1

        if survey_field.is_question:
            report.total_questions += 1
            if not survey_field.label:
                report.unlabelled_questions.append(survey_field.name or f"row {survey_field.index}")
            if survey_field.relevance:
                report.questions_with_relevance += 1
            if survey_field.constraint:
                report.questions_with_constraint += 1

        if survey_field.type in SELECT_TYPES and survey_field.list_name:
            report.referenced_lists.add(survey_field.list_name)

    report.unused_lists = set(form.choice_lists) - report.referenced_lists
    report.appendix_lists = sorted(
        name for name, choices in form.choice_lists.items() if choices.count >= choice_length
    )

    # =========================================================================
    # WARNING FLAGS
    # =========================================================================

    if report.unlabelled_questions:
        report.add_warning(
            f"Questions without label: {', '.join(report.unlabelled_questions)}"
        )

    if report.unused_lists:
        report.add_warning(
            f"Unused choice lists: {', '.join(sorted(report.unused_lists))}"
        )

    if report.total_fields > 0 and report.total_modules == 0:
        report.add_warning("No MODULE markers: the whole form goes into one module")

    if report.total_fields > 0 and report.total_questions == 0:
        report.add_warning("Form has no questions")

    return report


def format_report(report: FormReport) -> List[str]:
    """Render a FormReport as plain text lines."""
    lines = [
        f"FORM ANALYSIS REPORT: {report.form_name}",
        f"  Fields:            {report.total_fields}",
        f"  Questions:         {report.total_questions}",
        f"  Modules:           {report.total_modules}",
        f"  Disabled fields:   {report.disabled_fields}",
        f"  Max section depth: {report.max_section_depth}",
        f"  Choice lists:      {report.total_choice_lists}",
        f"  Appendix lists:    {', '.join(report.appendix_lists) or 'none'}",
    ]
    for field_type, count in sorted(report.type_counts.items()):
        lines.append(f"    {field_type}: {count}")
    for i, warning in enumerate(report.warnings, 1):
        lines.append(f"  {i}. {warning}")
    return lines


__all__ = ["FormReport", "analyze_form", "format_report"]
