"""
Uphaar Backend: Body Decoding and Validation Helpers
====================================================

What we test:
    ✅ decode_body: JSON, text, empty, and the non-JSON constants NaN/Infinity
    ✅ encode_json refuses non-finite numbers
    ✅ parse_body reports the failing field
    ✅ Item schemas reject non-finite prices
"""

import math

import pytest
from pydantic import ValidationError

from uphaar.exceptions import BadRequestError
from uphaar.http.types import HttpRequest, decode_body, encode_json
from uphaar.routes.common import parse_body
from uphaar.schemas.item import ItemCreate, ItemUpdate

ITEM = {
    "title": "Study table",
    "description": "Teak, one drawer",
    "category": "furniture",
    "condition": "good",
    "location": "Chennai",
}


def _request(body):
    return HttpRequest(method="POST", path="/items", body=body)


class TestDecodeBody:
    @pytest.mark.parametrize("raw", [None, b"", "   "])
    def test_empty_is_none(self, raw):
        assert decode_body(raw) is None

    def test_json_object(self):
        assert decode_body(b'{"price": 12.5}') == {"price": 12.5}

    def test_text_passes_through(self):
        assert decode_body("title=lamp") == "title=lamp"

    @pytest.mark.parametrize("constant", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_constants_are_not_json(self, constant):
        raw = '{"price": %s}' % constant
        assert decode_body(raw) == raw


class TestEncodeJson:
    def test_plain_body(self):
        assert encode_json({"ok": True}) == '{"ok": true}'

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_numbers_raise(self, value):
        with pytest.raises(ValueError):
            encode_json({"price": value})


class TestParseBody:
    def test_valid_body(self):
        payload = parse_body(ItemCreate, _request(ITEM))
        assert payload.title == "Study table"
        assert payload.is_free is True

    def test_failing_field_is_reported(self):
        with pytest.raises(BadRequestError) as exc:
            parse_body(ItemCreate, _request({**ITEM, "price": -1}))
        assert exc.value.field == "price"
        assert exc.value.context["field"] == "price"
        assert exc.value.message.startswith("Invalid price:")

    def test_custom_message_keeps_the_field(self):
        with pytest.raises(BadRequestError) as exc:
            parse_body(ItemCreate, _request({}), message="Missing item fields")
        assert exc.value.message == "Missing item fields"
        assert exc.value.field == "title"

    def test_non_object_body(self):
        with pytest.raises(BadRequestError) as exc:
            parse_body(ItemCreate, _request(["title"]))
        assert exc.value.message == "Request body must be a JSON object"
        assert exc.value.field is None


class TestNonFinitePrices:
    @pytest.mark.parametrize("value", [math.inf, math.nan])
    def test_create_rejects(self, value):
        with pytest.raises(ValidationError):
            ItemCreate.model_validate({**ITEM, "isFree": False, "price": value})

    def test_update_rejects(self):
        with pytest.raises(ValidationError):
            ItemUpdate.model_validate({"price": math.inf})
