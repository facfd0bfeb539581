"""Codecs converting application values to and from wire bytes."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional, Protocol, Union
from urllib.parse import parse_qs, urlencode

from pydantic import TypeAdapter
from pydantic_core import to_json

from .models.http import MimeType

logger = logging.getLogger(__name__)


class Codec(Protocol):
    """
    Protocol for payload codecs.

    A codec is a pair of pure functions and holds no per-call state, so one
    instance can serve any number of concurrent calls.
    """

    def encode(self, value: Any) -> bytes:
        """
        Serialize a value.

        Args:
            value: Application value

        Returns:
            Encoded bytes

        Raises:
            Exception if the value cannot be represented
        """
        ...

    def decode(self, body: bytes, as_type: Any = None) -> Any:
        """
        Deserialize a body.

        Args:
            body: Raw bytes
            as_type: Optional target type to validate into

        Returns:
            Decoded value

        Raises:
            Exception if the body cannot be decoded
        """
        ...


class JsonCodec:
    """
    JSON codec backed by pydantic.

    Pydantic models, dataclasses and plain containers are all serializable.
    When ``as_type`` is given the body is validated into that type, otherwise
    plain JSON values (dict, list, str, ...) are returned.
    """

    def __init__(self, by_alias: bool = True, exclude_none: bool = False) -> None:
        self._by_alias = by_alias
        self._exclude_none = exclude_none

    def encode(self, value: Any) -> bytes:
        return to_json(value, by_alias=self._by_alias, exclude_none=self._exclude_none)

    def decode(self, body: bytes, as_type: Any = None) -> Any:
        if as_type is None:
            return json.loads(body)
        return _type_adapter(as_type).validate_json(body)


class TextCodec:
    """Plain text codec."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def encode(self, value: Any) -> bytes:
        if not isinstance(value, str):
            raise TypeError(f"Text payload must be str, got {type(value).__name__}")
        return value.encode(self._encoding)

    def decode(self, body: bytes, as_type: Any = None) -> Any:
        text = body.decode(self._encoding)
        if as_type is None or as_type is str:
            return text
        return _type_adapter(as_type).validate_python(text)


class FormCodec:
    """
    ``application/x-www-form-urlencoded`` codec for flat mappings.

    Sequence values are written as repeated keys; a key repeated in the body
    decodes to a list of its values, a single occurrence to a plain string.
    """

    def encode(self, value: Any) -> bytes:
        if not isinstance(value, Mapping):
            raise TypeError(f"Form payload must be a mapping, got {type(value).__name__}")
        return urlencode(value, doseq=True).encode("ascii")

    def decode(self, body: bytes, as_type: Any = None) -> Any:
        parsed = parse_qs(body.decode("ascii"), keep_blank_values=True, strict_parsing=bool(body))
        data = {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}
        if as_type is None:
            return data
        return _type_adapter(as_type).validate_python(data)


_adapters: dict[Any, TypeAdapter[Any]] = {}


def _type_adapter(as_type: Any) -> TypeAdapter[Any]:
    """Cached TypeAdapter lookup; unhashable types get a fresh adapter."""
    try:
        adapter = _adapters.get(as_type)
    except TypeError:
        return TypeAdapter(as_type)
    if adapter is None:
        adapter = TypeAdapter(as_type)
        _adapters[as_type] = adapter
    return adapter


class CodecRegistry:
    """
    Codecs keyed by MIME type.

    The client owns one registry (``CodecRegistry.default()`` unless told
    otherwise) and passes it to every call through the ``Context``; it can be
    overridden per call.

    Example:
        codecs = CodecRegistry.default()
        codecs.register(MimeType("application/vnd.api+json"), JsonCodec())

        body = codecs.encode({"name": "x"}, MimeType.JSON)
        value = codecs.decode(body, MimeType.JSON)
    """

    def __init__(self, codecs: Optional[Mapping[Union[MimeType, str], Codec]] = None) -> None:
        self._codecs: dict[MimeType, Codec] = {}
        for mime_type, codec in (codecs or {}).items():
            self.register(mime_type, codec)

    @classmethod
    def default(cls) -> CodecRegistry:
        """A fresh registry with the built-in JSON, text and form codecs."""
        return cls(
            {
                MimeType.JSON: JsonCodec(),
                MimeType.TEXT: TextCodec(),
                MimeType.FORM: FormCodec(),
            }
        )

    def register(self, mime_type: Union[MimeType, str], codec: Codec) -> CodecRegistry:
        """
        Register (or replace) the codec for a MIME type (fluent API).

        Args:
            mime_type: MIME type the codec handles
            codec: Codec instance

        Returns:
            Self for chaining
        """
        self._codecs[_as_mime_type(mime_type)] = codec
        return self

    def get(self, mime_type: Union[MimeType, str]) -> Codec:
        """
        Look up the codec for a MIME type.

        Raises:
            LookupError: If no codec is registered for the type
        """
        key = _as_mime_type(mime_type)
        try:
            return self._codecs[key]
        except KeyError:
            raise LookupError(f"No codec registered for {key.essence}") from None

    def __contains__(self, mime_type: object) -> bool:
        if not isinstance(mime_type, (MimeType, str)):
            return False
        return _as_mime_type(mime_type) in self._codecs

    def encode(self, value: Any, mime_type: Union[MimeType, str]) -> bytes:
        return self.get(mime_type).encode(value)

    def decode(self, body: bytes, mime_type: Union[MimeType, str], as_type: Any = None) -> Any:
        return self.get(mime_type).decode(body, as_type)


def _as_mime_type(mime_type: Union[MimeType, str]) -> MimeType:
    return mime_type if isinstance(mime_type, MimeType) else MimeType(mime_type)
