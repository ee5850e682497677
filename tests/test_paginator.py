"""
Tests for the Paginator.

These tests drive plan_document directly with model objects and check the
resulting actions and counters; no PDF backend is involved.
"""

import pytest

from formdoc.config import TABLE_BASELINE
from formdoc.errors import NestingError
from formdoc.model import ChoiceList, FieldType, SurveyField
from formdoc.paginator import (
    FlushAction,
    PaginationState,
    RenderAction,
    SectionContext,
    field_cost,
    is_skipped,
    module_label,
    plan_document,
    slugify,
)


def text_fields(n, start=1):
    return [SurveyField(index=i, type=FieldType.TEXT, name=f"q{i}") for i in range(start, start + n)]


def flushes(actions):
    return [a for a in actions if isinstance(a, FlushAction)]


def rendered(actions):
    return [a for a in actions if isinstance(a, RenderAction)]


class TestSectionContext:
    """Test open/close bookkeeping of groups and repeats."""

    def test_open_close(self):
        ctx = SectionContext()
        ctx.open("g1", "Group One")
        assert "g1" in ctx
        assert ctx.close("g1") == "Group One"
        assert len(ctx) == 0

    def test_nested_sections_coexist(self):
        ctx = SectionContext()
        ctx.open("g1", "G1")
        ctx.open("r1", "R1")
        assert len(ctx) == 2
        assert ctx.close("g1") == "G1"
        assert ctx.close("r1") == "R1"

    def test_close_unopened(self):
        with pytest.raises(NestingError, match="never opened"):
            SectionContext().close("g1")

    def test_reopen(self):
        ctx = SectionContext()
        ctx.open("g1", "G1")
        with pytest.raises(NestingError, match="already open"):
            ctx.open("g1", "G1")


class TestHelpers:
    """Test the small pagination helpers."""

    def test_slugify(self):
        assert slugify("Household Roster / Part 1") == "Household_Roster_Part_1"
        assert slugify(None) == ""

    def test_module_label(self):
        assert module_label(SurveyField(index=1, type=FieldType.MODULE, label="Module A"), 1) == "Module_A"
        assert module_label(SurveyField(index=1, type=FieldType.MODULE), 3) == "module3"

    def test_field_cost(self):
        assert field_cost(SurveyField(index=1, type=FieldType.TEXT)) == 3
        assert field_cost(SurveyField(index=1, type=FieldType.SELECT_ONE)) == 4
        assert field_cost(SurveyField(index=1, type=FieldType.NOTE)) == 0

    def test_is_skipped(self):
        assert is_skipped(SurveyField(index=3, type=FieldType.TEXT), {3})
        assert is_skipped(SurveyField(index=1, type=FieldType.TEXT, disabled=True))
        assert not is_skipped(SurveyField(index=1, type=FieldType.MODULE, disabled=True))
        assert is_skipped(SurveyField(index=2, type=FieldType.MODULE), {2})


class TestPlanDocument:
    """Test the action sequence and counters."""

    def test_empty_form(self):
        """An empty form still produces the title unit."""
        actions = list(plan_document([]))
        assert actions == [FlushAction(number=0, label="title")]

    def test_question_numbers(self):
        state = PaginationState()
        actions = list(plan_document(text_fields(3), state=state))
        assert [a.question_number for a in rendered(actions)] == [1, 2, 3]
        assert state.question_count == 4
        assert state.table_count == TABLE_BASELINE

    def test_disabled_field_not_rendered(self):
        fields = text_fields(3)
        fields[1].disabled = True
        actions = list(plan_document(fields))
        assert [a.field.name for a in rendered(actions)] == ["q1", "q3"]
        assert [a.question_number for a in rendered(actions)] == [1, 2]

    def test_disabled_module_rendered(self):
        module = SurveyField(index=1, type=FieldType.MODULE, label="A", disabled=True)
        actions = list(plan_document([module]))
        assert [a.field for a in rendered(actions)] == [module]

    def test_skip_list(self):
        actions = list(plan_document(text_fields(5), skip_list={2, 4}))
        assert [a.field.name for a in rendered(actions)] == ["q1", "q3", "q5"]

    def test_module_flushes_current_unit(self):
        fields = [
            SurveyField(index=1, type=FieldType.MODULE, name="m1", label="A"),
            SurveyField(index=2, type=FieldType.TEXT, name="q1"),
            SurveyField(index=3, type=FieldType.MODULE, name="m2", label="B"),
            SurveyField(index=4, type=FieldType.TEXT, name="q2"),
        ]
        state = PaginationState()
        actions = list(plan_document(fields, state=state))
        assert flushes(actions) == [
            FlushAction(0, "title"),
            FlushAction(1, "A"),
            FlushAction(2, "B"),
        ]
        assert state.module_count == 2
        assert state.doc_count == 3

    def test_table_ceiling_splits_units(self):
        """200 text questions cost 600 units: one forced split, then the final flush."""
        state = PaginationState()
        actions = list(plan_document(text_fields(200), state=state))
        assert len(flushes(actions)) == 2
        assert state.table_count == TABLE_BASELINE
        # the split happens before the question that would start at 10 + 3 * 164 = 502
        first_flush = actions.index(FlushAction(0, "title"))
        assert len(rendered(actions[:first_flush])) == 164

    def test_question_numbers_continue_across_units(self):
        actions = list(plan_document(text_fields(200)))
        assert [a.question_number for a in rendered(actions)] == list(range(1, 201))

    def test_sections(self):
        fields = [
            SurveyField(index=1, type=FieldType.BEGIN_GROUP, name="g1", label="G1"),
            SurveyField(index=2, type=FieldType.TEXT, name="q1", group="g1"),
            SurveyField(index=3, type=FieldType.END_GROUP, name="g1"),
        ]
        state = PaginationState()
        actions = rendered(list(plan_document(fields, state=state)))
        assert actions[0].heading == "G1"
        assert actions[2].heading == "G1"
        assert len(state.sections) == 0

    def test_end_without_begin(self):
        with pytest.raises(NestingError):
            list(plan_document([SurveyField(index=1, type=FieldType.END_GROUP, name="g1")]))

    def test_example_form_counters(self):
        fields = [
            SurveyField(index=1, type=FieldType.MODULE, name="m", label="A"),
            SurveyField(index=2, type=FieldType.BEGIN_GROUP, name="g1", label="G1"),
            SurveyField(index=3, type=FieldType.TEXT, name="q1", label="Q1", group="g1"),
            SurveyField(index=4, type=FieldType.END_GROUP, name="g1"),
            SurveyField(index=5, type=FieldType.SELECT_ONE, name="q2", list_name="yn",
                        choices=ChoiceList(list_name="yn")),
        ]
        state = PaginationState()
        actions = list(plan_document(fields, state=state))
        assert state.question_count == 3
        assert state.doc_count == 2
        assert flushes(actions) == [FlushAction(0, "title"), FlushAction(1, "A")]
