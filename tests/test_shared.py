"""Tests for shared models and text helpers."""

import pytest

from surveydoc.shared import (
    FontConfig,
    MappingFileError,
    MarkerLeakError,
    SurveyDocError,
    clean_xml_text,
    sanitize_for_xml_in_obj,
    sorted_by_key,
)


class TestFontConfig:
    """Tests for FontConfig."""

    def test_defaults(self):
        """Defaults are B Nazanin for Persian and Times New Roman otherwise."""
        config = FontConfig()
        assert config.font_for("persian") == "B Nazanin"
        assert config.font_for("english") == "Times New Roman"
        assert config.font_for("other") == "Times New Roman"

    def test_merged_returns_new_config(self):
        """merged applies non-empty overrides to a copy."""
        base = FontConfig()
        merged = base.merged(persian="Vazir", english=None)
        assert merged.persian == "Vazir"
        assert merged.english == "Times New Roman"
        assert base.persian == "B Nazanin"

    def test_merged_rejects_unknown_settings(self):
        """Unknown font settings are rejected."""
        with pytest.raises(ValueError, match="Unknown font setting"):
            FontConfig().merged(heading="X")

    def test_empty_language_font_falls_back_to_default(self):
        """An empty language font uses the default font."""
        assert FontConfig(persian="", default="Calibri").font_for("persian") == "Calibri"


class TestErrors:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        """All package errors derive from SurveyDocError."""
        assert issubclass(MappingFileError, SurveyDocError)
        assert issubclass(MarkerLeakError, SurveyDocError)


class TestXmlHelpers:
    """Tests for XML text sanitizing."""

    def test_normalize(self):
        """NBSP, CRLF and control characters are normalized."""
        assert clean_xml_text("a\u00a0b\r\nc\x07") == "a b\nc"

    def test_clean_drops_noncharacters_keeps_persian(self):
        """U+FFFE/U+FFFF are dropped; tabs and Persian text survive."""
        text = "سامانه" + chr(0xFFFE) + "\t" + chr(0xFFFF) + "x"
        assert clean_xml_text(text) == "سامانه\tx"

    def test_sanitize_tuples_become_lists(self):
        """Tuples are cleaned like lists."""
        assert sanitize_for_xml_in_obj(("a\x01",)) == ["a"]

    def test_sanitize_recursive(self):
        """Strings are sanitized inside lists and dicts; others pass through."""
        data = {"a": ["x\x00y", 1], "b": {"c": "z\r"}, "d": True}
        assert sanitize_for_xml_in_obj(data) == {"a": ["xy", 1], "b": {"c": "z\n"}, "d": True}

    def test_sorted_by_key(self):
        """Keys are sorted lexicographically."""
        assert list(sorted_by_key({"b": 1, "a": 2, "C": 3})) == ["C", "a", "b"]
