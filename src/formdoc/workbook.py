"""
Workbook I/O

Loads the "survey" and "choices" sheets of a form workbook and runs the
parsing stages that turn them into a SurveyForm.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple
from zipfile import BadZipFile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from formdoc.choices import build_choice_table
from formdoc.config import CHOICES_SHEET, SURVEY_SHEET
from formdoc.errors import SchemaError
from formdoc.model import SurveyForm
from formdoc.sanitize import sanitize_frame
from formdoc.survey_parser import build_form, normalize_survey

logger = logging.getLogger(__name__)


def load_workbook(xlsx_path: str) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Load the survey and choices sheets.

    Cells are read as Python objects so numeric codes keep their written
    form (no float promotion of whole columns).

    Args:
        xlsx_path: Path to the Excel file

    Returns:
        (survey, choices) raw DataFrames

    Raises:
        FileNotFoundError: If the workbook does not exist
        SchemaError: If the file is not an xlsx workbook or a sheet is missing
    """
    path = Path(xlsx_path)
    if not path.exists():
        raise FileNotFoundError(f"Workbook not found: {xlsx_path}")

    try:
        xls = pd.ExcelFile(path, engine="openpyxl")
    except (BadZipFile, InvalidFileException) as e:
        raise SchemaError(f"Not a valid xlsx workbook: {xlsx_path} ({e})")
    available = set(xls.sheet_names)
    missing = [s for s in (SURVEY_SHEET, CHOICES_SHEET) if s not in available]
    if missing:
        raise SchemaError(f"Workbook is missing sheets: {missing}")

    survey = pd.read_excel(xls, sheet_name=SURVEY_SHEET, dtype=object)
    choices = pd.read_excel(xls, sheet_name=CHOICES_SHEET, dtype=object)
    logger.info(f"Loaded sheet '{SURVEY_SHEET}' ({len(survey)} rows)")
    logger.info(f"Loaded sheet '{CHOICES_SHEET}' ({len(choices)} rows)")
    return survey, choices


def parse_tables(survey: pd.DataFrame, choices: pd.DataFrame, name: str = "Form",
                 translation: Optional[str] = None) -> SurveyForm:
    """
    Run choice building, survey normalization, merge and sanitizing.

    Args:
        survey: Raw survey sheet
        choices: Raw choices sheet
        name: Form name
        translation: Optional language code

    Returns:
        SurveyForm

    Raises:
        FormError subclasses for fatal schema and reference problems
    """
    choice_table = build_choice_table(choices, translation=translation).sanitized()
    normalized = normalize_survey(survey, choice_table, translation=translation)
    normalized = sanitize_frame(normalized)
    form = build_form(normalized, choice_table, name=name)
    logger.debug(f"Parsed {len(form.fields)} fields and {len(form.choice_lists)} choice lists")
    return form


def parse_workbook(xlsx_path: str, name: Optional[str] = None,
                   translation: Optional[str] = None) -> SurveyForm:
    """
    Parse a form workbook into a SurveyForm.

    Args:
        xlsx_path: Path to the workbook
        name: Optional form name (defaults to the file stem)
        translation: Optional language code

    Returns:
        SurveyForm
    """
    survey, choices = load_workbook(xlsx_path)
    if name is None:
        name = Path(xlsx_path).stem
    return parse_tables(survey, choices, name=name, translation=translation)


__all__ = ["load_workbook", "parse_tables", "parse_workbook"]
