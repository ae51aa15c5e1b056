"""
Unit tests for the element model, scan request validation and scan result.
"""
import json

import pytest

from activetext.errors import ScanRequestError
from activetext.models.element import (
    Element,
    ElementKind,
    ElementSpan,
    KindName,
    TextPayload,
    UrlPayload,
)
from activetext.models.scan_request import ScanRequest, validate_request
from activetext.models.scan_result import ScanResult
from activetext.scanning.patterns import MENTION_PATTERN


# ===========================================================================
# ElementKind
# ===========================================================================


class TestElementKind:

    def test_parse_builtin_names(self):
        assert ElementKind.parse("mention") is ElementKind.MENTION
        assert ElementKind.parse(" URL ") is ElementKind.URL

    def test_parse_passes_kinds_through(self, ticket_kind):
        assert ElementKind.parse(ticket_kind) is ticket_kind

    def test_parse_unknown_name(self):
        with pytest.raises(ValueError):
            ElementKind.parse("phone")

    def test_parse_rejects_bare_custom(self):
        with pytest.raises(ValueError):
            ElementKind.parse("custom")

    def test_custom_kinds_are_distinct_by_tag(self):
        a = ElementKind.custom("a", r"\d+")
        b = ElementKind.custom("b", r"\d+")
        assert a != b
        assert len({a, b, ElementKind.custom("a", r"\d+")}) == 2

    def test_custom_kind_identity_is_the_tag(self):
        first = ElementKind.custom("t", "a+")
        second = ElementKind.custom("t", "b+")
        assert first == second
        assert {first: "handler"}[second] == "handler"

    def test_custom_pattern_defaults_to_tag(self):
        kind = ElementKind.custom(r"are\b")
        assert kind.pattern == r"are\b"

    def test_custom_needs_tag(self):
        with pytest.raises(ValueError):
            ElementKind(KindName.CUSTOM)

    def test_builtin_takes_no_tag(self):
        with pytest.raises(ValueError):
            ElementKind(KindName.MENTION, tag="x")

    def test_builtin_pattern(self):
        assert ElementKind.MENTION.pattern == MENTION_PATTERN

    def test_label(self, ticket_kind):
        assert ElementKind.HASHTAG.label == "hashtag"
        assert ticket_kind.label == "custom:ticket"


# ===========================================================================
# Element / ElementSpan
# ===========================================================================


class TestElement:

    def test_text_element_value(self):
        element = Element.with_text(ElementKind.MENTION, "bob")
        assert element.payload == TextPayload("bob")
        assert element.value == "bob"

    def test_url_element_value_is_original(self):
        element = Element.url(original="https://x.io", display="x.io")
        assert element.kind == ElementKind.URL
        assert element.payload == UrlPayload("https://x.io", "x.io")
        assert element.value == "https://x.io"

    def test_frozen_immutable(self):
        element = Element.with_text(ElementKind.MENTION, "bob")
        with pytest.raises((AttributeError, TypeError)):
            element.kind = ElementKind.HASHTAG  # type: ignore[misc]

    def test_to_dict(self):
        assert Element.url("https://x.io", "x.io").to_dict() == {
            "kind": "url",
            "original": "https://x.io",
            "display": "x.io",
        }


class TestElementSpan:

    def _span(self, location=5, length=10):
        return ElementSpan(location, length, Element.with_text(ElementKind.MENTION, "x"))

    def test_contains_is_inclusive_at_both_ends(self):
        span = self._span()
        assert span.contains(5)
        assert span.contains(15)
        assert not span.contains(4)
        assert not span.contains(16)

    def test_end(self):
        assert self._span().end == 15

    def test_kind_comes_from_element(self):
        assert self._span().kind == ElementKind.MENTION

    def test_overlaps(self):
        assert self._span(0, 5).overlaps(self._span(4, 5))
        assert not self._span(0, 5).overlaps(self._span(5, 5))

    def test_to_dict(self):
        assert self._span().to_dict() == {
            "range": {"location": 5, "length": 10},
            "element": {"kind": "mention", "text": "x"},
        }


# ===========================================================================
# ScanRequest
# ===========================================================================


class TestScanRequest:

    def test_kind_names_resolved_and_deduplicated(self):
        request = validate_request({"text": "x", "enabled_kinds": ["url", "mention", "url"]})
        assert request.kinds == [ElementKind.URL, ElementKind.MENTION]

    def test_custom_kinds_accepted(self, ticket_kind):
        request = validate_request({"text": "x", "enabled_kinds": [ticket_kind]})
        assert request.kinds == [ticket_kind]

    def test_none_text_becomes_empty(self):
        assert validate_request({"text": None}).text == ""

    def test_non_string_text_rejected(self):
        with pytest.raises(ScanRequestError) as exc_info:
            validate_request({"text": 42})
        assert exc_info.value.validation_errors[0]["field"] == "text"

    def test_non_positive_url_max_length_rejected(self):
        with pytest.raises(ScanRequestError):
            validate_request({"text": "x", "url_max_length": 0})

    def test_unknown_kind_rejected(self):
        with pytest.raises(ScanRequestError):
            validate_request({"text": "x", "enabled_kinds": ["phone"]})

    def test_text_over_limit_rejected(self):
        with pytest.raises(ScanRequestError):
            validate_request({"text": "abcdef", "max_text_length": 5})

    def test_request_is_frozen(self):
        request = ScanRequest(text="x")
        with pytest.raises(Exception):
            request.text = "y"  # type: ignore[misc]


# ===========================================================================
# ScanResult
# ===========================================================================


class TestScanResult:

    def test_empty_result(self):
        result = ScanResult("")
        assert result.spans_by_kind == {}
        assert list(result.all_spans()) == []
        assert result.ok
        assert not result.text_changed

    def test_text_changed(self):
        result = ScanResult("short...", source_text="short-and-long")
        assert result.text_changed

    def test_errors_make_result_not_ok(self, ticket_kind):
        result = ScanResult("x")
        result.add_error("pattern_matcher", ticket_kind, "bad")
        assert not result.ok
        assert result.errors == [
            {"component": "pattern_matcher", "kind": "custom:ticket", "message": "bad"}
        ]

    def test_to_json_is_valid(self):
        result = ScanResult("hi @bob")
        result.set_spans(
            ElementKind.MENTION,
            [ElementSpan(2, 5, Element.with_text(ElementKind.MENTION, "bob"))],
        )
        parsed = json.loads(result.to_json())
        assert parsed["spans"]["mention"][0]["element"]["text"] == "bob"
        assert parsed["meta"]["span_count"] == 1
