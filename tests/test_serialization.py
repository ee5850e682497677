"""
Tests for formdoc serialization helpers.
"""

import yaml

from formdoc.model import ChoiceList, ChoiceOption, FieldType, SurveyField, SurveyForm
from formdoc.serialization import (
    form_from_json,
    form_from_yaml,
    form_to_dict,
    form_to_json,
    form_to_yaml,
)


def make_form():
    yn = ChoiceList(
        list_name="yn",
        options=[
            ChoiceOption(list_name="yn", value="0", label="No", ordinal=1),
            ChoiceOption(list_name="yn", value="1", label="Yes", ordinal=2),
        ],
        choices='"No" "Yes"',
        values='"0" "1"',
    )
    form = SurveyForm(name="Example", choice_lists={"yn": yn})
    form.fields = [
        SurveyField(index=1, type=FieldType.MODULE, name="m", label="A"),
        SurveyField(index=2, type=FieldType.SELECT_ONE, name="q1", label="Äge?", list_name="yn",
                    choices=yn, required=False, group="g1"),
    ]
    return form


def test_json_roundtrip():
    """A form survives JSON serialization, including choice references."""
    form = make_form()
    restored = form_from_json(form_to_json(form))
    assert restored == form
    assert restored.get_field("q1").choices is restored.choice_lists["yn"]


def test_yaml_roundtrip():
    form = make_form()
    assert form_from_yaml(form_to_yaml(form)) == form


def test_yaml_is_readable():
    """Field order is kept and non-ASCII labels are written as-is."""
    text = form_to_yaml(make_form())
    assert "Äge?" in text
    data = yaml.safe_load(text)
    assert list(data) == ["name", "choice_lists", "fields"]
    assert data["fields"][1]["list_name"] == "yn"


def test_dict_references_lists_by_name():
    data = form_to_dict(make_form())
    assert "choices" not in data["fields"][1]
    assert data["choice_lists"][0]["options"][1] == {"value": "1", "label": "Yes", "ordinal": 2}
