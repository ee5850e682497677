"""
Example form for demos and tests.

Builds the raw survey and choices sheets of a small form:

    MODULE        A
    begin group   g1  "G1"
    text          q1  "Q1"
    end group     g1
    select_one yn q2  (no label)

with the choice list yn = {1: Yes, 0: No}.
"""
from pathlib import Path
from typing import Tuple

import pandas as pd


def build_example_frames() -> Tuple[pd.DataFrame, pd.DataFrame]:
    survey = pd.DataFrame(
        [
            {"type": "MODULE", "name": "module_a", "label": "A"},
            {"type": "begin group", "name": "g1", "label": "G1"},
            {"type": "text", "name": "q1", "label": "Q1"},
            {"type": "end group", "name": "g1", "label": None},
            {"type": "select_one yn", "name": "q2", "label": None},
        ],
        columns=["type", "name", "label"],
    )
    choices = pd.DataFrame(
        [
            {"list_name": "yn", "value": 1, "label": "Yes"},
            {"list_name": "yn", "value": 0, "label": "No"},
        ],
        columns=["list_name", "value", "label"],
    )
    return survey, choices


def write_workbook(path: str, survey: pd.DataFrame, choices: pd.DataFrame) -> Path:
    """Write survey and choices frames as a two-sheet workbook."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        survey.to_excel(writer, sheet_name="survey", index=False)
        choices.to_excel(writer, sheet_name="choices", index=False)
    return out


def write_example_workbook(path: str) -> Path:
    survey, choices = build_example_frames()
    return write_workbook(path, survey, choices)
