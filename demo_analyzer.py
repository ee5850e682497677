"""
Demo: Run the analyzer on the example form and output the report.
"""

import tempfile
from pathlib import Path

from formdoc.analyzer import analyze_form
from formdoc.examples import write_example_workbook
from formdoc.serialization import form_to_yaml
from formdoc.workbook import parse_workbook


def print_report(report):
    """Pretty-print a FormReport."""
    print()
    print("=" * 70)
    print(f"FORM ANALYSIS REPORT: {report.form_name}")
    print("=" * 70)
    print()

    print("📊 BASIC METRICS")
    print(f"  Total Fields:          {report.total_fields}")
    print(f"  Total Questions:       {report.total_questions}")
    print(f"  Total Modules:         {report.total_modules}")
    print(f"  Disabled Fields:       {report.disabled_fields}")
    print(f"  Max Section Depth:     {report.max_section_depth}")
    print()

    print("  Field Types:")
    for field_type, count in sorted(report.type_counts.items()):
        print(f"    {field_type}: {count}")
    print()

    print("📋 CHOICE LISTS")
    print(f"  Total Lists:           {report.total_choice_lists}")
    print(f"  Referenced:            {sorted(report.referenced_lists)}")
    print(f"  Unused:                {sorted(report.unused_lists) if report.unused_lists else 'None'}")
    print(f"  Appendix:              {report.appendix_lists if report.appendix_lists else 'None'}")
    print()

    print("✅ COVERAGE METRICS")
    print(f"  Questions with Relevance:  {report.questions_with_relevance}/{report.total_questions}")
    print(f"  Questions with Constraint: {report.questions_with_constraint}/{report.total_questions}")
    print()

    if report.warnings:
        print("⚠️  WARNINGS")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("✨ NO WARNINGS - Form looks clean!")
    print()


if __name__ == "__main__":
    workdir = Path(tempfile.mkdtemp(prefix="formdoc_"))
    xlsx = write_example_workbook(str(workdir / "example.xlsx"))
    form = parse_workbook(str(xlsx))

    report = analyze_form(form)
    print_report(report)

    print("=" * 70)
    print("NORMALIZED FORM (YAML)")
    print("=" * 70)
    print(form_to_yaml(form))
