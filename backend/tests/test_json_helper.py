"""Tests for the JSON column helpers."""

import pytest

from prompthub.utils.json_helper import (
    DEFAULT_JSON_PAYLOAD,
    is_valid_array,
    is_valid_object,
    parse_json_list,
    safe_json_parse,
    safe_json_stringify,
)


class TestSafeJsonParse:
    def test_valid_list(self):
        assert safe_json_parse('["ChatGPT", "Claude"]', []) == ["ChatGPT", "Claude"]

    def test_valid_object(self):
        assert safe_json_parse('{"a": 1}', {}) == {"a": 1}

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_blank_returns_fallback(self, raw):
        fallback = ["fallback"]
        assert safe_json_parse(raw, fallback) is fallback

    @pytest.mark.parametrize("raw", ["not json", "[1, 2", "{'single': 'quotes'}"])
    def test_malformed_returns_fallback(self, raw):
        assert safe_json_parse(raw, []) == []

    def test_non_string_returns_fallback(self):
        assert safe_json_parse(42, "x") == "x"

    def test_korean_text(self):
        assert safe_json_parse('["구체적으로 작성하세요"]', []) == ["구체적으로 작성하세요"]


class TestSafeJsonStringify:
    def test_list(self):
        assert safe_json_stringify(["a", "b"]) == '["a", "b"]'

    def test_keeps_unicode(self):
        assert safe_json_stringify(["팁"]) == '["팁"]'

    def test_unserializable_returns_default(self):
        assert safe_json_stringify({"s": {1, 2}}) == DEFAULT_JSON_PAYLOAD

    def test_unserializable_custom_fallback(self):
        assert safe_json_stringify(object(), fallback="[]") == "[]"


class TestShapes:
    def test_is_valid_array(self):
        assert is_valid_array([1]) is True
        assert is_valid_array({"a": 1}) is False
        assert is_valid_array("[]") is False

    def test_is_valid_object(self):
        assert is_valid_object({"a": 1}) is True
        assert is_valid_object([]) is False
        assert is_valid_object(None) is False

    def test_parse_json_list_coerces_non_list(self):
        assert parse_json_list('{"a": 1}') == []
        assert parse_json_list("garbage") == []
        assert parse_json_list('["x"]') == ["x"]
