"""
Tests for the JSON path subset used by exec actions.
"""

import pytest

from scaffoldkit.core.engine.jsonpath import extract
from scaffoldkit.core.errors import HandlerError

DOC = {
    "id": 42,
    "name": "demo",
    "items": [{"id": 1, "tags": ["a"]}, {"id": 2, "tags": ["b", "c"]}],
    "meta": {"build-tool": "maven", "java": {"version": "17"}},
}


class TestExtract:
    def test_root(self):
        assert extract(DOC, "$") == DOC

    def test_member_keeps_type(self):
        value = extract(DOC, "$.id")
        assert value == 42
        assert isinstance(value, int)

    def test_nested(self):
        assert extract(DOC, "$.meta.java.version") == "17"

    def test_without_dollar(self):
        assert extract(DOC, "meta.java.version") == "17"

    def test_bracket_key(self):
        assert extract(DOC, "$['meta']['build-tool']") == "maven"

    def test_dashed_dot_key(self):
        assert extract(DOC, "$.meta.build-tool") == "maven"

    def test_index(self):
        assert extract(DOC, "$.items[1].id") == 2

    def test_negative_index(self):
        assert extract(DOC, "$.items[-1].id") == 2

    def test_wildcard(self):
        assert extract(DOC, "$.items[*].id") == [1, 2]

    def test_dot_wildcard(self):
        assert extract(DOC, "$.meta.java.*") == ["17"]

    def test_wildcard_flattens_one_level(self):
        assert extract(DOC, "$.items[*].tags[*]") == ["a", "b", "c"]

    def test_top_level_list(self):
        assert extract([{"name": "x"}], "$[0].name") == "x"


class TestErrors:
    def test_no_match(self):
        with pytest.raises(HandlerError, match="matched nothing"):
            extract(DOC, "$.missing")

    def test_index_out_of_range(self):
        with pytest.raises(HandlerError, match="matched nothing"):
            extract(DOC, "$.items[5]")

    def test_malformed(self):
        with pytest.raises(HandlerError, match="Invalid JSON path"):
            extract(DOC, "$.items[")

    def test_details(self):
        with pytest.raises(HandlerError) as exc:
            extract(DOC, "$.nope")
        assert exc.value.details["json_path"] == "$.nope"
