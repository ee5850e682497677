"""
Serialization helpers for formdoc objects (SurveyForm, SurveyField, ChoiceList).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
Fields reference their choice list by list_name; references are resolved
again on load.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from formdoc.model import ChoiceList, ChoiceOption, SurveyField, SurveyForm

_FIELD_ATTRIBUTES = [
    "index",
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
    "group",
    "list_name",
]


def option_to_dict(o: ChoiceOption) -> Dict[str, Any]:
    return {"value": o.value, "label": o.label, "ordinal": o.ordinal}


def choice_list_to_dict(c: ChoiceList) -> Dict[str, Any]:
    return {
        "list_name": c.list_name,
        "choices": c.choices,
        "values": c.values,
        "options": [option_to_dict(o) for o in c.options],
    }


def choice_list_from_dict(d: Dict[str, Any]) -> ChoiceList:
    list_name = d["list_name"]
    return ChoiceList(
        list_name=list_name,
        choices=d.get("choices", ""),
        values=d.get("values", ""),
        options=[
            ChoiceOption(list_name=list_name, value=o["value"], label=o["label"], ordinal=o["ordinal"])
            for o in d.get("options", [])
        ],
    )


def field_to_dict(f: SurveyField) -> Dict[str, Any]:
    return {name: getattr(f, name) for name in _FIELD_ATTRIBUTES}


def field_from_dict(d: Dict[str, Any], choice_lists: Dict[str, ChoiceList]) -> SurveyField:
    values = {name: d[name] for name in _FIELD_ATTRIBUTES if name in d}
    survey_field = SurveyField(**values)
    if survey_field.list_name:
        survey_field.choices = choice_lists.get(survey_field.list_name)
    return survey_field


def form_to_dict(form: SurveyForm) -> Dict[str, Any]:
    return {
        "name": form.name,
        "choice_lists": [choice_list_to_dict(c) for c in form.choice_lists.values()],
        "fields": [field_to_dict(f) for f in form.fields],
    }


def form_from_dict(d: Dict[str, Any]) -> SurveyForm:
    choice_lists = {}
    for c in d.get("choice_lists", []):
        choice_list = choice_list_from_dict(c)
        choice_lists[choice_list.list_name] = choice_list
    form = SurveyForm(name=d.get("name", ""), choice_lists=choice_lists)
    form.fields = [field_from_dict(f, choice_lists) for f in d.get("fields", [])]
    return form


def form_to_json(form: SurveyForm) -> str:
    return json.dumps(form_to_dict(form), sort_keys=True)


def form_from_json(s: str) -> SurveyForm:
    return form_from_dict(json.loads(s))


def form_to_yaml(form: SurveyForm) -> str:
    return yaml.safe_dump(form_to_dict(form), sort_keys=False, allow_unicode=True)


def form_from_yaml(s: str) -> SurveyForm:
    return form_from_dict(yaml.safe_load(s))
