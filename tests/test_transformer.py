"""Tests for DataTransformer."""

import json
import logging

import pytest

from surveydoc.rules import Rulebook, register_rulebook, unregister_rulebook
from surveydoc.transformer import DataTransformer


class TestEndToEndScenarios:
    """Transform scenarios from raw data to template data."""

    def test_title_passthrough(self, write_mapping, tmp_path):
        """{formData: {title: "X"}} with a title mapping gives {title: "X"}."""
        mapping = write_mapping({"title": "formData.title"})
        transformer = DataTransformer(mapping, tmp_path / "out.json")
        assert transformer.transform({"formData": {"title": "X"}}) == {"title": "X"}

    def test_system_type_choice(self, write_mapping, tmp_path):
        """A single-choice answer becomes a one-element list of flags."""
        mapping = write_mapping({"system_type": "formData.system_type"})
        transformer = DataTransformer(mapping, tmp_path / "out.json")
        result = transformer.transform({"formData": {"system_type": "Specialized"}})
        assert result == {
            "system_type": [{"specialized": True, "non-specialized": False, "out-of-scope": False}],
        }

    def test_empty_data_table_gets_sentinel_row(self, write_mapping, tmp_path):
        """An empty table yields exactly one sentinel row."""
        mapping = write_mapping({"data_table": "formData.data_table"})
        transformer = DataTransformer(mapping, tmp_path / "out.json")
        rows = transformer.transform({"formData": {"data_table": []}})["data_table"]

        assert len(rows) == 1
        row = rows[0]
        assert row["data_name"] == " "
        assert row["description"] == " "
        assert not any(row["system_role"][0].values())
        assert not any(row["data_source"][0].values())


class TestFallbackRules:
    """Placeholders without a dedicated rule."""

    def test_generic_rule_localizes_digits(self, write_mapping, tmp_path):
        """Unknown placeholders with a path are digit-localized."""
        mapping = write_mapping({"phone": "formData.phone", "note": "formData.note"})
        transformer = DataTransformer(mapping, tmp_path / "out.json")
        result = transformer.transform({"formData": {"phone": "021-12345", "note": "abc-123"}})
        assert result == {"note": "abc-123", "phone": "۰۲۱-۱۲۳۴۵"}

    def test_generic_rule_without_path_leaves_field_unset(self, write_mapping, tmp_path):
        """A placeholder with an empty path is left out."""
        mapping = write_mapping({"orphan": ""})
        transformer = DataTransformer(mapping, tmp_path / "out.json")
        assert transformer.transform({"formData": {}}) == {}

    def test_missing_value_is_empty_string(self, write_mapping, tmp_path):
        """A generic placeholder whose path is missing gets ''."""
        mapping = write_mapping({"nothing": "formData.nothing"})
        transformer = DataTransformer(mapping, tmp_path / "out.json")
        assert transformer.transform({}) == {"nothing": ""}

    def test_description_passthrough_and_localized(self, write_mapping, tmp_path):
        """*_description keeps the raw value, digit-localized, or ''."""
        mapping = write_mapping({
            "server_description": "formData.desc",
            "Other_DESCRIPTION": "formData.missing",
            "no_path_description": "",
        })
        transformer = DataTransformer(mapping, tmp_path / "out.json")
        result = transformer.transform({"formData": {"desc": "1402/01/15"}})
        assert result == {
            "Other_DESCRIPTION": "",
            "no_path_description": "",
            "server_description": "۱۴۰۲/۰۱/۱۵",
        }

    def test_description_text_unchanged(self, write_mapping, tmp_path):
        """Description text with letters is not localized."""
        mapping = write_mapping({"x_description": "formData.d"})
        transformer = DataTransformer(mapping, tmp_path / "out.json")
        assert transformer.transform({"formData": {"d": "Room 12"}}) == {"x_description": "Room 12"}

    @pytest.mark.parametrize("raw, expected", [
        (["a", "b"], ["a", "b"]),
        ([], []),
        ("", []),
        (None, []),
        ({}, []),
        ("single", ["single"]),
    ])
    def test_used_features_coerced_to_list(self, write_mapping, tmp_path, raw, expected):
        """*_used_features is always a list."""
        mapping = write_mapping({"pki_used_features": "formData.features"})
        transformer = DataTransformer(mapping, tmp_path / "out.json")
        assert transformer.transform({"formData": {"features": raw}}) == {"pki_used_features": expected}


class TestRuleDispatch:
    """Rulebook selection and rule failures."""

    def test_rulebook_by_name(self, write_mapping, tmp_path):
        """The rulebook decides which rules apply."""
        mapping = write_mapping({"process_flow": "formData.flow"})
        system = DataTransformer(mapping, tmp_path / "a.json")
        process = DataTransformer(mapping, tmp_path / "b.json", rulebook="process")

        assert system.transform({"formData": {"flow": "Yes"}}) == {"process_flow": "Yes"}
        assert process.transform({"formData": {"flow": "Yes"}}) == {
            "process_flow": [{"process_flow_no": False, "process_flow_yes": True}],
        }

    def test_unknown_rulebook(self, write_mapping):
        """An unknown rulebook name is rejected."""
        with pytest.raises(ValueError, match="Unknown rulebook"):
            DataTransformer(write_mapping({}), rulebook="nope")

    def test_failing_rule_only_drops_its_field(self, write_mapping, tmp_path, caplog):
        """A rule that raises is logged and recorded; other fields survive."""
        def broken(value, ctx):
            raise KeyError("option")

        book = Rulebook("broken-test", "test", {"bad": broken, "title": lambda v, ctx: v})
        register_rulebook(book)
        try:
            mapping = write_mapping({"bad": "formData.bad", "title": "formData.title"})
            transformer = DataTransformer(mapping, tmp_path / "out.json", rulebook="broken-test")
            with caplog.at_level(logging.ERROR, logger="surveydoc"):
                result = transformer.transform({"formData": {"title": "T", "bad": 1}})
        finally:
            unregister_rulebook("broken-test")

        assert result == {"title": "T"}
        assert "bad" in transformer.field_errors
        assert "bad" in caplog.text

    def test_rule_sees_other_mappings(self, write_mapping, tmp_path):
        """Rules can resolve other placeholders' paths through the context."""
        mapping = write_mapping({
            "system_title": "formData.system_title",
            "duplicate_systems": "formData.duplicates",
        })
        raw = {"formData": {
            "system_title": "Main",
            "duplicates": [{"systemName": {"formData": {"system_title": "Copy"}}, "reason": "same"}],
        }}
        result = DataTransformer(mapping, tmp_path / "out.json").transform(raw)
        assert result["duplicate_systems"][0]["duplicate_system"] == "Copy"
        assert result["duplicate_systems"][0]["duplicateSystems_reason"] == "same"


class TestMappingLoading:
    """Mapping file loading and caching."""

    def test_missing_mapping_file_returns_empty(self, tmp_path, caplog):
        """A missing mapping file gives {} and an error log."""
        transformer = DataTransformer(tmp_path / "missing.json", tmp_path / "out.json")
        with caplog.at_level(logging.ERROR, logger="surveydoc"):
            assert transformer.transform({"formData": {}}) == {}
        assert "could not be loaded" in caplog.text
        assert not (tmp_path / "out.json").exists()

    def test_mappings_cached_per_instance(self, write_mapping, tmp_path):
        """Mappings load once per instance; a fresh instance reloads."""
        mapping = write_mapping({"title": "formData.title"})
        transformer = DataTransformer(mapping, tmp_path / "out.json")
        assert transformer.load_mappings()

        mapping.write_text(json.dumps({"mappings": [{"placeholder": "other", "jsonPath": "formData.title"}]}))
        assert transformer.transform({"formData": {"title": "X"}}) == {"title": "X"}
        assert DataTransformer(mapping, tmp_path / "out.json").transform({"formData": {"title": "X"}}) == {"other": "X"}

    def test_find_json_path_before_loading(self, write_mapping):
        """Looking up a path before loading gives None."""
        transformer = DataTransformer(write_mapping({"title": "formData.title"}))
        assert transformer.find_json_path("title") is None
        transformer.load_mappings()
        assert transformer.find_json_path("title") == "formData.title"


class TestSideFile:
    """The transformed-data side file."""

    def test_sorted_indented_utf8(self, write_mapping, tmp_path):
        """The side file holds the sorted result with 2-space indent."""
        mapping = write_mapping({"b": "formData.b", "a": "formData.a"})
        out = tmp_path / "nested" / "dir" / "out.json"
        DataTransformer(mapping, out).transform({"formData": {"a": "سلام", "b": "x"}})

        text = out.read_text(encoding="utf-8")
        assert json.loads(text) == {"a": "سلام", "b": "x"}
        assert text.index('"a"') < text.index('"b"')
        assert '\n  "a": "سلام"' in text

    def test_default_output_path(self, write_mapping, tmp_path):
        """Without an output path the file goes next to the mapping directory."""
        mapping = write_mapping({"a": "formData.a"})
        transformer = DataTransformer(mapping)
        transformer.transform({"formData": {"a": "x"}})
        assert (tmp_path / "transformed_data_output.json").exists()

    def test_write_failure_is_logged_not_raised(self, write_mapping, tmp_path, caplog):
        """A side file that cannot be written does not fail the transform."""
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        mapping = write_mapping({"a": "formData.a"})
        transformer = DataTransformer(mapping, blocker / "out.json")
        with caplog.at_level(logging.ERROR, logger="surveydoc"):
            assert transformer.transform({"formData": {"a": "x"}}) == {"a": "x"}
        assert "Could not write" in caplog.text
