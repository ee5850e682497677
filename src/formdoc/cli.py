#!/usr/bin/env python3
"""
formdoc CLI
Command-line interface for converting a form workbook into a PDF codebook.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from formdoc.analyzer import analyze_form, format_report
from formdoc.config import load_options, parse_skip_list
from formdoc.converter import convert_workbook
from formdoc.errors import FormError
from formdoc.serialization import form_to_yaml

logger = logging.getLogger("formdoc")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formdoc",
        description="Convert a survey form workbook into a paginated PDF codebook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  formdoc form.xlsx --save out --title "Household Survey"
  formdoc form.xlsx --save out --title "Household Survey" --merge --choice-length 15
  formdoc form.xlsx --config options.yaml --skip-list 3,5-7 --translation fr

Output Structure:
  save/
    part00_title.pdf        - cover page and anything before the first module
    part01_<module>.pdf     - one or more parts per module
    partNN_valuelabels.pdf  - value labels of long choice lists
  With --merge the parts are combined into "<title>.pdf" and removed.
        """,
    )
    parser.add_argument("input", help="Path to the form workbook (XLSX)")
    parser.add_argument("--save", "-o", help="Output directory")
    parser.add_argument("--title", "-t", help="Document title")
    parser.add_argument("--date", help="Date shown on the cover page")
    parser.add_argument("--version", dest="doc_version", help="Version shown on the cover page")
    parser.add_argument("--authors", help="Authors shown on the cover page")
    parser.add_argument("--cover-image", help="Image shown on the cover page")
    parser.add_argument("--merge", action="store_true", default=None,
                        help="Merge all parts into one PDF named after the title")
    parser.add_argument("--skip-list", help="Survey rows to leave out, e.g. 3,5-7")
    parser.add_argument("--choice-length", type=int,
                        help="Lists with at least this many options go to the appendix (default: 10)")
    parser.add_argument("--translation", help="Language code of the label::<code> columns to use")
    parser.add_argument("--loud", action="store_true", default=None,
                        help="Log one line per processed field")
    parser.add_argument("--config", "-c", help="YAML file with conversion options")
    parser.add_argument("--report", action="store_true", help="Log a form analysis report")
    parser.add_argument("--dump", help="Write the normalized form as YAML to this path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {input_path}")
        return 1
    if input_path.suffix.lower() not in (".xlsx", ".xlsm"):
        logger.error(f"Input file must be an Excel workbook (.xlsx): {input_path}")
        return 1

    start_time = datetime.now()
    try:
        options = load_options(
            args.config,
            save=args.save,
            title=args.title,
            date=args.date,
            version=args.doc_version,
            authors=args.authors,
            cover_image=args.cover_image,
            merge=args.merge,
            skip_list=parse_skip_list(args.skip_list) if args.skip_list else None,
            choice_length=args.choice_length,
            translation=args.translation,
            loud=args.loud,
        )

        logger.info("=" * 60)
        logger.info(f"Input:  {input_path}")
        logger.info(f"Output: {options.save}")
        logger.info("-" * 60)

        result = convert_workbook(str(input_path), options)

        if args.report:
            for line in format_report(analyze_form(result.form, options.choice_length)):
                logger.info(line)

        if args.dump:
            Path(args.dump).write_text(form_to_yaml(result.form), encoding="utf-8")
            logger.info(f"Wrote normalized form: {args.dump}")

    except FormError as e:
        logger.error(f"Conversion aborted: {e}")
        return 1
    except (OSError, ValueError) as e:
        logger.exception(f"Conversion failed: {e}")
        return 1

    duration = (datetime.now() - start_time).total_seconds()
    logger.info("-" * 60)
    logger.info(f"Completed in {duration:.1f} seconds")
    if result.merged:
        logger.info(f"Merged:   {result.merged}")
    else:
        logger.info(f"Parts:    {len(result.parts)}")
    logger.info(f"Warnings: {len(result.warnings)}")
    logger.info("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
