"""
Tests for the formdoc command-line interface.
"""

import yaml

from formdoc.cli import build_parser, main
from formdoc.examples import build_example_frames, write_example_workbook, write_workbook


def test_parser_defaults():
    """Unset flags stay None so a config file can supply them."""
    args = build_parser().parse_args(["form.xlsx"])
    assert args.merge is None
    assert args.loud is None
    assert args.choice_length is None
    assert args.report is False


def test_convert(tmp_path):
    xlsx = write_example_workbook(str(tmp_path / "example.xlsx"))
    out = tmp_path / "out"
    code = main([str(xlsx), "--save", str(out), "--title", "Example Survey", "--date", "2024-05-01"])
    assert code == 0
    assert sorted(p.name for p in out.iterdir()) == ["part00_title.pdf", "part01_A.pdf"]


def test_merge_with_config_file(tmp_path):
    xlsx = write_example_workbook(str(tmp_path / "example.xlsx"))
    config = tmp_path / "options.yaml"
    config.write_text(yaml.safe_dump({"save": str(tmp_path / "out"), "title": "From Config", "merge": True}))

    assert main([str(xlsx), "--config", str(config)]) == 0
    assert (tmp_path / "out" / "From_Config.pdf").exists()


def test_skip_list_and_dump(tmp_path):
    xlsx = write_example_workbook(str(tmp_path / "example.xlsx"))
    dump = tmp_path / "form.yaml"
    code = main([
        str(xlsx), "--save", str(tmp_path / "out"), "--title", "T",
        "--skip-list", "5", "--report", "--dump", str(dump), "--loud",
    ])
    assert code == 0
    data = yaml.safe_load(dump.read_text(encoding="utf-8"))
    assert [f["name"] for f in data["fields"]] == ["module_a", "g1", "q1", "g1", "q2"]


def test_missing_input(tmp_path):
    assert main([str(tmp_path / "missing.xlsx"), "--save", "out", "--title", "T"]) == 1


def test_wrong_extension(tmp_path):
    path = tmp_path / "form.csv"
    path.write_text("type,name,label\n")
    assert main([str(path), "--save", "out", "--title", "T"]) == 1


def test_missing_title(tmp_path):
    xlsx = write_example_workbook(str(tmp_path / "example.xlsx"))
    assert main([str(xlsx), "--save", str(tmp_path / "out")]) == 1


def test_bad_skip_list(tmp_path):
    xlsx = write_example_workbook(str(tmp_path / "example.xlsx"))
    assert main([str(xlsx), "--save", str(tmp_path / "out"), "--title", "T", "--skip-list", "x"]) == 1


def test_form_error_exit_code(tmp_path):
    survey, choices = build_example_frames()
    survey.loc[len(survey)] = ["text", "q2", "Again"]
    xlsx = write_workbook(str(tmp_path / "dupes.xlsx"), survey, choices)
    assert main([str(xlsx), "--save", str(tmp_path / "out"), "--title", "T"]) == 1
    assert not (tmp_path / "out").exists()


def test_invalid_workbook_exit_code(tmp_path):
    """A file that is not an xlsx archive is reported, not raised."""
    path = tmp_path / "bad.xlsx"
    path.write_bytes(b"not a zip archive")
    assert main([str(path), "--save", str(tmp_path / "out"), "--title", "T"]) == 1
    assert not (tmp_path / "out").exists()
