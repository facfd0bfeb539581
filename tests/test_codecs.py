"""Tests for codecs and payloads."""

from dataclasses import dataclass
from typing import Optional

import pytest
from pydantic import BaseModel
from reqchain import (
    CodecRegistry,
    EncodingError,
    FormCodec,
    JsonCodec,
    MimeType,
    RequestPayload,
    Response,
    ResponseParser,
    Status,
    TextCodec,
    UnexpectedResponse,
)


class User(BaseModel):
    id: int
    name: str


class Profile(BaseModel):
    name: str
    bio: Optional[str] = None


@dataclass
class Point:
    x: int
    y: int


class TestJsonCodec:
    """Tests for JsonCodec."""

    def test_round_trip_plain_values(self):
        """Test round trip of plain JSON values."""
        codec = JsonCodec()
        value = {"name": "x", "tags": ["a", "b"], "count": 3, "ok": True, "none": None}
        assert codec.decode(codec.encode(value)) == value

    def test_round_trip_model(self):
        """Test round trip of a pydantic model."""
        codec = JsonCodec()
        user = User(id=1, name="ada")
        assert codec.decode(codec.encode(user), User) == user

    def test_round_trip_dataclass_list(self):
        """Test validation into a generic container of dataclasses."""
        codec = JsonCodec()
        points = [Point(1, 2), Point(3, 4)]
        assert codec.decode(codec.encode(points), list[Point]) == points

    def test_exclude_none(self):
        """Test exclude_none drops null model fields."""
        assert JsonCodec(exclude_none=True).encode(Profile(name="ada")) == b'{"name":"ada"}'

    def test_invalid_body(self):
        """Test that invalid JSON raises."""
        with pytest.raises(ValueError):
            JsonCodec().decode(b"not json")


class TestTextAndFormCodecs:
    """Tests for TextCodec and FormCodec."""

    def test_text_round_trip(self):
        codec = TextCodec()
        assert codec.decode(codec.encode("héllo")) == "héllo"

    def test_text_rejects_non_str(self):
        with pytest.raises(TypeError):
            TextCodec().encode(42)

    def test_form_round_trip(self):
        """Test form round trip with characters needing escapes."""
        codec = FormCodec()
        value = {"q": "a b&c", "page": "2"}
        assert codec.encode(value) == b"q=a+b%26c&page=2"
        assert codec.decode(codec.encode(value)) == value

    def test_form_repeated_keys(self):
        """Test sequence values survive a round trip as repeated keys."""
        codec = FormCodec()
        value = {"tag": ["a", "b"], "page": "1"}
        assert codec.encode(value) == b"tag=a&tag=b&page=1"
        assert codec.decode(codec.encode(value)) == value

    def test_form_empty_body(self):
        assert FormCodec().decode(b"") == {}

    def test_form_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            FormCodec().encode(["a"])


class TestCodecRegistry:
    """Tests for CodecRegistry."""

    def test_default_codecs(self):
        """Test built-in codecs are registered."""
        registry = CodecRegistry.default()
        assert MimeType.JSON in registry
        assert MimeType.TEXT in registry
        assert MimeType.FORM in registry
        assert MimeType.OCTET_STREAM not in registry

    def test_lookup_ignores_parameters(self):
        """Test lookup by a MIME string carrying parameters."""
        registry = CodecRegistry.default()
        assert isinstance(registry.get("application/json; charset=utf-8"), JsonCodec)

    def test_missing_codec(self):
        with pytest.raises(LookupError):
            CodecRegistry().get(MimeType.JSON)

    def test_register_is_fluent(self):
        """Test registering a custom MIME type."""
        vendor = MimeType("application/vnd.api+json")
        registry = CodecRegistry().register(vendor, JsonCodec())
        assert registry.decode(registry.encode([1, 2], vendor), vendor) == [1, 2]


class TestRequestPayload:
    """Tests for RequestPayload."""

    def test_empty(self):
        payload = RequestPayload.empty()
        assert payload.mime_type is None
        assert payload.body is None

    def test_json(self):
        payload = RequestPayload.json({"a": 1})
        assert payload.mime_type == MimeType.JSON
        assert payload.body == b'{"a":1}'

    def test_encoding_failure(self):
        """Test that codec failures become EncodingError."""
        with pytest.raises(EncodingError) as exc_info:
            RequestPayload.encoded(object())
        assert exc_info.value.cause is not None

    def test_unknown_mime_type(self):
        """Test that a missing codec is an encoding failure."""
        with pytest.raises(EncodingError):
            RequestPayload.encoded("x", MimeType.OCTET_STREAM)


class TestResponseParser:
    """Tests for ResponseParser."""

    def test_json_parser(self):
        parser = ResponseParser.json(User)
        assert parser.mime_type == MimeType.JSON
        assert parser.parse(Response(200, body=b'{"id": 1, "name": "ada"}')) == User(id=1, name="ada")

    def test_unexpected_status(self):
        """Test that an unaccepted status raises UnexpectedResponse."""
        parser = ResponseParser.json(expecting=Status.CREATED)
        with pytest.raises(UnexpectedResponse) as exc_info:
            parser.parse(Response(200, body=b"{}"))
        assert exc_info.value.status_code == 200

    def test_ignored_status_returns_none(self):
        """Test that ignored statuses skip decoding."""
        parser = ResponseParser.json(ignoring=Status.code(202))
        assert parser.parse(Response(202, body=b"")) is None

    def test_void_and_passthrough(self):
        """Test parsers that do not decode."""
        response = Response(204)
        assert ResponseParser.void().mime_type is None
        assert ResponseParser.void().parse(response) is None
        assert ResponseParser.passthrough().parse(response) is response

    def test_text_parser(self):
        parser = ResponseParser.text()
        assert parser.mime_type == MimeType.TEXT
        assert parser.parse(Response(200, body=b"plain")) == "plain"
