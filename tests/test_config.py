"""
Tests for conversion options and configuration loading.
"""

import pytest

from formdoc.config import (
    DEFAULT_CHOICE_LENGTH,
    ConversionOptions,
    load_options,
    options_from_dict,
    parse_skip_list,
    translated_column,
)
from formdoc.errors import ConfigError


class TestParseSkipList:
    """Test skip list expressions."""

    def test_single_values_and_ranges(self):
        assert parse_skip_list("3,5-7") == {3, 5, 6, 7}

    def test_whitespace_and_empty_parts(self):
        assert parse_skip_list(" 1 , 4 - 5 ,, ") == {1, 4, 5}

    def test_reversed_range(self):
        """A reversed range is normalized."""
        assert parse_skip_list("7-5") == {5, 6, 7}

    def test_empty(self):
        assert parse_skip_list("") == set()
        assert parse_skip_list(None) == set()

    def test_list_input(self):
        """YAML lists are accepted as-is."""
        assert parse_skip_list([2, 4]) == {2, 4}

    def test_invalid_entry(self):
        with pytest.raises(ConfigError, match="abc"):
            parse_skip_list("1,abc")


class TestConversionOptions:
    """Test option defaults and validation."""

    def test_defaults(self):
        options = ConversionOptions(save="out", title="T")
        assert options.merge is False
        assert options.skip_list == set()
        assert options.choice_length == DEFAULT_CHOICE_LENGTH
        assert options.translation is None
        options.validate()

    def test_save_required(self):
        with pytest.raises(ConfigError, match="save"):
            ConversionOptions(title="T").validate()

    def test_title_required(self):
        with pytest.raises(ConfigError, match="title"):
            ConversionOptions(save="out").validate()

    def test_choice_length_positive(self):
        with pytest.raises(ConfigError, match="choice_length"):
            ConversionOptions(save="out", title="T", choice_length=0).validate()

    def test_missing_cover_image(self, tmp_path):
        options = ConversionOptions(save="out", title="T", cover_image=str(tmp_path / "nope.png"))
        with pytest.raises(ConfigError, match="Cover image"):
            options.validate()


class TestLoadOptions:
    """Test YAML loading and overrides."""

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigError, match="colour"):
            options_from_dict({"title": "T", "colour": "red"})

    def test_from_dict_coerces_types(self):
        options = options_from_dict({"choice_length": "15", "version": 2, "skip_list": "1-2"})
        assert options.choice_length == 15
        assert options.version == "2"
        assert options.skip_list == {1, 2}

    def test_bad_choice_length(self):
        with pytest.raises(ConfigError):
            options_from_dict({"choice_length": "many"})

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "options.yaml"
        path.write_text("save: out\ntitle: Household Survey\nmerge: true\nskip_list: [3, 4]\n")
        options = load_options(str(path))
        assert options.title == "Household Survey"
        assert options.merge is True
        assert options.skip_list == {3, 4}

    def test_overrides_win_over_file(self, tmp_path):
        path = tmp_path / "options.yaml"
        path.write_text("save: out\ntitle: From File\n")
        options = load_options(str(path), title="From CLI", merge=None)
        assert options.title == "From CLI"
        assert options.merge is False

    def test_empty_file(self, tmp_path):
        path = tmp_path / "options.yaml"
        path.write_text("")
        assert load_options(str(path)).title == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_options(str(tmp_path / "missing.yaml"))

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "options.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_options(str(path))


def test_translated_column():
    assert translated_column("label", "fr") == "label::fr"
