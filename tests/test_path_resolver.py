"""Tests for JSON path resolution."""

import pytest

from surveydoc.path_resolver import get_path, is_falsy, resolve, split_path


class TestSplitPath:
    """Tests for split_path."""

    def test_dots_and_indexes(self):
        """Dots and numeric brackets become separate segments."""
        assert split_path("a.b[0].c") == ["a", "b", "0", "c"]

    def test_quoted_brackets(self):
        """Quoted bracket keys keep hyphens and spaces."""
        assert split_path('a["x-y"]') == ["a", "x-y"]
        assert split_path("a['x y']") == ["a", "x y"]


class TestResolvePlainPaths:
    """Tests for resolve without the flatten segment."""

    def test_nested_value(self):
        """A nested key is returned as is."""
        data = {"formData": {"title": "X"}}
        assert resolve(data, "formData.title") == "X"

    def test_missing_path_is_empty_string(self):
        """A missing plain path resolves to ''."""
        assert resolve({"a": {}}, "a.b.c") == ""

    def test_empty_path_is_empty_string(self):
        """None and '' resolve to ''."""
        assert resolve({"a": 1}, None) == ""
        assert resolve({"a": 1}, "") == ""

    def test_list_index(self):
        """Integer segments index into lists."""
        data = {"owners": [{"name": "A"}, {"name": "B"}]}
        assert resolve(data, "owners[1].name") == "B"

    def test_index_out_of_range_is_empty_string(self):
        """An out-of-range index resolves to ''."""
        assert resolve({"owners": []}, "owners[3].name") == ""

    def test_hyphenated_key(self):
        """Bracket syntax reaches keys that are not identifiers."""
        data = {"item": {"risk-impact": "High"}}
        assert resolve(data, 'item["risk-impact"]') == "High"

    def test_does_not_raise_on_scalars(self):
        """Walking into a scalar yields '' rather than raising."""
        assert resolve({"a": 5}, "a.b") == ""


class TestResolveFlatten:
    """Tests for resolve with the [] flatten segment."""

    def test_flatten_collects_field(self):
        """a.b[].c collects c from every element."""
        data = {"a": {"b": [{"c": 1}, {"c": 2}]}}
        assert resolve(data, "a.b[].c") == [1, 2]

    def test_flatten_missing_field_is_filtered(self):
        """Missing fields resolve to '' and are filtered out."""
        data = {"a": {"b": [{"c": 1}, {"c": 2}]}}
        assert resolve(data, "a.b[].missing") == []

    def test_flatten_missing_base_is_empty_list(self):
        """A missing base path with [] resolves to []."""
        assert resolve({}, "nothing[].c") == []

    def test_flatten_non_list_base_is_empty_list(self):
        """A base that is not a list resolves to []."""
        assert resolve({"a": {"b": "text"}}, "a.b[].c") == []

    def test_flatten_without_remainder_returns_elements(self):
        """A trailing [] returns the truthy elements themselves."""
        data = {"urls": ["x", "", None, "y"]}
        assert resolve(data, "urls[]") == ["x", "y"]

    def test_nested_flatten(self):
        """A second [] in the remainder flattens one level per segment."""
        data = {"groups": [{"members": [{"n": "a"}, {"n": "b"}]}, {"members": [{"n": "c"}]}]}
        assert resolve(data, "groups[].members[].n") == ["a", "b", "c"]

    def test_flatten_drops_zero_and_false(self):
        """0 and False count as empty entries."""
        data = {"rows": [{"v": 0}, {"v": False}, {"v": 3}]}
        assert resolve(data, "rows[].v") == [3]


class TestGetPath:
    """Tests for get_path and is_falsy."""

    def test_caller_default(self):
        """get_path returns the caller default for a missing path."""
        assert get_path({}, "a.b", default=None) is None

    def test_explicit_none_is_returned(self):
        """An explicit None at the end of the path is returned."""
        assert get_path({"a": None}, "a", default="x") is None

    @pytest.mark.parametrize("value", [None, False, "", 0, 0.0, float("nan")])
    def test_falsy_values(self, value):
        """Scalars that read as empty."""
        assert is_falsy(value)

    @pytest.mark.parametrize("value", [[], {}, " ", 1, True, "0"])
    def test_truthy_values(self, value):
        """Containers, even empty ones, are never falsy."""
        assert not is_falsy(value)
