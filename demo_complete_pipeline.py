#!/usr/bin/env python3
"""
Complete Pipeline Demo: Workbook → Form → Units → PDF

Shows the full workflow:
1. Write the example workbook
2. Parse it into a normalized form
3. Plan and render the output units
4. Write the PDF parts and merge them
"""

import sys
import tempfile
from pathlib import Path

from formdoc.backends import HAS_PYPDF, merge_pdfs
from formdoc.config import ConversionOptions
from formdoc.converter import render_form, write_units
from formdoc.examples import write_example_workbook
from formdoc.workbook import parse_workbook


def main():
    out_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(tempfile.mkdtemp(prefix="formdoc_"))

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Workbook → Form → Units → PDF")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Example workbook
    # =========================================================================
    print("\n1. WRITING EXAMPLE WORKBOOK...")
    xlsx = write_example_workbook(str(out_dir / "example.xlsx"))
    print(f"   ✓ Saved {xlsx}")

    # =========================================================================
    # STEP 2: Parse
    # =========================================================================
    print("\n2. PARSING WORKBOOK...")
    form = parse_workbook(str(xlsx))
    print(f"   ✓ Form: {form.name}")
    print(f"   ✓ Fields: {len(form.fields)}")
    print(f"   ✓ Choice lists: {', '.join(sorted(form.choice_lists))}")

    # =========================================================================
    # STEP 3: Plan units
    # =========================================================================
    print("\n3. RENDERING UNITS...")
    options = ConversionOptions(save=str(out_dir / "pdf"), title="Example Survey", choice_length=2)
    units = render_form(form, options)
    for unit in units:
        print(f"   ✓ {unit.filename}: {len(unit.blocks)} blocks")

    print("\n   Sample content of the first module:")
    for text in units[1].texts()[:12]:
        print(f"      {text}")

    # =========================================================================
    # STEP 4: Write and merge
    # =========================================================================
    print("\n4. WRITING PDF FILES...")
    parts = write_units(units, options)
    for part in parts:
        print(f"   ✓ Saved {part}")

    if HAS_PYPDF:
        merged = merge_pdfs(parts, options.title, options.save)
        print(f"   ✓ Merged into {merged}")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE!")
    print(f"Output directory: {out_dir}")
    print("=" * 80)


if __name__ == "__main__":
    main()
