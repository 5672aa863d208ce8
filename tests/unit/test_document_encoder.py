"""
Unit tests for the document encoder.
"""

import json

import pytest

from es_importer.batch.writers import encode_document


@pytest.mark.unit
class TestEncodeDocument:
    """Tests for encode_document"""

    def test_typed_values_in_header_order(self):
        doc = encode_document([("id", "1"), ("name", "Alice"), ("active", "true")])
        assert doc == '{"id":1,"name":"Alice","active":true}'

    def test_empty_value_is_null(self):
        doc = encode_document([("id", "2"), ("name", "Bob"), ("active", "")])
        assert doc == '{"id":2,"name":"Bob","active":null}'

    def test_order_is_not_alphabetical(self):
        doc = encode_document([("z", "1"), ("a", "2")])
        assert doc == '{"z":1,"a":2}'

    def test_keys_are_escaped(self):
        doc = encode_document([('we"ird\tkey', "x")])
        assert doc == '{"we\\"ird\\tkey":"x"}'
        assert json.loads(doc) == {'we"ird\tkey': "x"}

    def test_duplicate_keys_are_emitted_twice(self):
        """Test that duplicate header names are not deduplicated"""
        doc = encode_document([("x", "1"), ("x", "2")])

        assert doc == '{"x":1,"x":2}'
        # Consumers keep the last value
        assert json.loads(doc) == {"x": 2}

    def test_no_fields_is_empty_object(self):
        assert encode_document([]) == "{}"

    def test_encoding_is_deterministic(self):
        fields = [("id", "7"), ("price", "1.25"), ("note", 'multi\nline "quoted"')]
        assert encode_document(fields) == encode_document(list(fields))
        assert encode_document(fields).encode("utf-8") == encode_document(fields).encode("utf-8")
