"""
Tests for the Form Analyzer.

Tests verify that the analyzer correctly:
    - Counts fields, questions and modules
    - Measures section depth
    - Finds unused choice lists and appendix lists
    - Flags documentation problems
"""

from formdoc.analyzer import analyze_form, format_report
from formdoc.model import ChoiceList, ChoiceOption, FieldType, SurveyField, SurveyForm


def make_list(list_name, n):
    return ChoiceList(
        list_name=list_name,
        options=[ChoiceOption(list_name=list_name, value=str(i), label=str(i), ordinal=i + 1) for i in range(n)],
    )


def sample_form():
    yn = make_list("yn", 2)
    form = SurveyForm(name="Sample", choice_lists={"yn": yn, "big": make_list("big", 12)})
    form.fields = [
        SurveyField(index=1, type=FieldType.MODULE, name="m", label="A"),
        SurveyField(index=2, type=FieldType.BEGIN_GROUP, name="g1", label="G1"),
        SurveyField(index=3, type=FieldType.BEGIN_REPEAT, name="r1", label="R1", group="g1"),
        SurveyField(index=4, type=FieldType.TEXT, name="q1", label="Q1", group="r1", relevance="x > 1"),
        SurveyField(index=5, type=FieldType.END_REPEAT, name="r1", group="g1"),
        SurveyField(index=6, type=FieldType.END_GROUP, name="g1"),
        SurveyField(index=7, type=FieldType.SELECT_ONE, name="q2", list_name="yn", choices=yn,
                    constraint=". != 0"),
        SurveyField(index=8, type=FieldType.NOTE, name="n1", label="Thanks", disabled=True),
    ]
    return form


def test_counts():
    """Field, question and module counts."""
    report = analyze_form(sample_form())
    assert report.total_fields == 8
    assert report.total_questions == 2
    assert report.total_modules == 1
    assert report.disabled_fields == 1
    assert report.type_counts[FieldType.TEXT] == 1
    assert report.questions_with_relevance == 1
    assert report.questions_with_constraint == 1


def test_section_depth():
    """Nested group and repeat give depth 2."""
    assert analyze_form(sample_form()).max_section_depth == 2


def test_choice_list_usage():
    """big is unused and long enough for the appendix."""
    report = analyze_form(sample_form(), choice_length=10)
    assert report.referenced_lists == {"yn"}
    assert report.unused_lists == {"big"}
    assert report.appendix_lists == ["big"]
    assert "Unused choice lists: big" in report.warnings


def test_unlabelled_questions():
    """Questions without a label are listed by name."""
    report = analyze_form(sample_form())
    assert report.unlabelled_questions == ["q2"]
    assert "Questions without label: q2" in report.warnings


def test_no_modules_warning():
    form = SurveyForm(name="Flat")
    form.fields = [SurveyField(index=1, type=FieldType.TEXT, name="q1", label="Q1")]
    report = analyze_form(form)
    assert any("No MODULE markers" in w for w in report.warnings)


def test_no_questions_warning():
    form = SurveyForm(name="Notes")
    form.fields = [SurveyField(index=1, type=FieldType.NOTE, name="n1", label="Hello")]
    assert "Form has no questions" in analyze_form(form).warnings


def test_empty_form():
    """An empty form has no warnings."""
    report = analyze_form(SurveyForm(name="Empty"))
    assert report.total_fields == 0
    assert report.warnings == []


def test_format_report():
    lines = format_report(analyze_form(sample_form()))
    assert lines[0] == "FORM ANALYSIS REPORT: Sample"
    assert any("Appendix lists:    big" in line for line in lines)
    assert any("Questions without label: q2" in line for line in lines)
