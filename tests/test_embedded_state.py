from __future__ import annotations

import pytest

from chord_finder.errors import UnrecognizedStructure
from chord_finder.extract.embedded import decode_embedded_state, dig, find_embedded_state


def test_decode_entity_escaped_json():
    assert decode_embedded_state("{&quot;a&quot;:1}") == {"a": 1}


def test_decode_keeps_unicode_and_nested_entities():
    raw = "{&quot;name&quot;:&quot;Кино &amp;amp; Co&quot;}"
    assert decode_embedded_state(raw) == {"name": "Кино &amp; Co"}


def test_decode_invalid_raises():
    with pytest.raises(UnrecognizedStructure):
        decode_embedded_state("{&quot;a&quot;:")


def test_decode_deeply_nested_raises():
    with pytest.raises(UnrecognizedStructure):
        decode_embedded_state("[" * 100_000 + "]" * 100_000)


class TestFindEmbeddedState:
    def test_attribute_after_marker(self):
        doc = '<div class="js-store" data-content="{&quot;a&quot;:[1,2]}"></div>'
        assert find_embedded_state(doc) == {"a": [1, 2]}

    def test_attribute_before_marker(self):
        doc = '<div data-content="{&quot;b&quot;:true}" class="js-store"></div>'
        assert find_embedded_state(doc) == {"b": True}

    def test_no_marker(self):
        assert find_embedded_state("<div data-content='{}'></div>") is None

    def test_marker_without_attribute(self):
        assert find_embedded_state('<div class="js-store"></div>') is None

    def test_attribute_of_a_later_element_is_ignored(self):
        doc = '<div class="js-store"></div><div data-content="{&quot;ad&quot;:1}"></div>'
        assert find_embedded_state(doc) is None

    def test_attribute_name_must_match_exactly(self):
        doc = '<div class="js-store" xdata-content="[1]" data-content="[2]"></div>'
        assert find_embedded_state(doc) == [2]

    def test_malformed_blob_raises(self):
        doc = '<div class="js-store" data-content="not json"></div>'
        with pytest.raises(UnrecognizedStructure):
            find_embedded_state(doc)

    def test_custom_marker_and_attribute(self):
        doc = '<script id="state" data-json="[1]"></script>'
        assert find_embedded_state(doc, marker='id="state"', attr="data-json") == [1]


def test_dig():
    data = {"a": {"b": {"c": 3}}, "l": [1]}
    assert dig(data, "a", "b", "c") == 3
    assert dig(data, "a", "x", "c") is None
    assert dig(data, "l", "0") is None
