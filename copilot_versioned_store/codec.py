# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Codecs that turn values into stored payloads and back."""

import json
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError, from_json, to_json

from .versioned_store import DecodeError, EncodeError


class Codec(ABC):
    """Abstract base class for value codecs."""

    @abstractmethod
    def encode(self, value: Any) -> bytes:
        """Encode a value into bytes.

        Raises:
            EncodeError: If the value cannot be encoded
        """
        pass

    @abstractmethod
    def decode(self, data: bytes, target: Any = None) -> Any:
        """Decode bytes produced by encode().

        Args:
            data: Encoded payload
            target: Optional type the payload must decode into

        Raises:
            DecodeError: If the payload cannot be decoded into target
        """
        pass


class JsonCodec(Codec):
    """Codec backed by the standard json module.

    Decoded values are plain JSON types (dict, list, str, int, float, bool,
    None). When target is a class the decoded value must be an instance of it.
    """

    def encode(self, value: Any) -> bytes:
        try:
            return json.dumps(value, separators=(",", ":"), sort_keys=True).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"Failed to encode value as JSON: {exc}") from exc

    def decode(self, data: bytes, target: Any = None) -> Any:
        try:
            value = json.loads(data)
        except ValueError as exc:
            raise DecodeError(f"Failed to decode JSON payload: {exc}") from exc

        if isinstance(target, type) and not isinstance(value, target):
            raise DecodeError(
                f"Decoded {type(value).__name__} cannot be stored into {target.__name__}"
            )
        return value


@lru_cache(maxsize=128)
def _type_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


class PydanticCodec(Codec):
    """Codec that serializes with pydantic.

    Handles BaseModel instances, dataclasses and plain values. Decoding into
    a target validates the payload against that type, so target may be any
    annotation pydantic understands (a model, ``list[int]``, ``dict[str, Foo]``).
    """

    def encode(self, value: Any) -> bytes:
        try:
            return to_json(value)
        except (PydanticSerializationError, TypeError, ValueError) as exc:
            raise EncodeError(f"Failed to encode value: {exc}") from exc

    def decode(self, data: bytes, target: Any = None) -> Any:
        try:
            if target is None:
                return from_json(data)
            return _type_adapter(target).validate_json(data)
        except ValueError as exc:
            raise DecodeError(f"Failed to decode payload: {exc}") from exc
