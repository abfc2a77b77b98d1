"""
Typed accessors over a decoded JSON document, used by generated parsers.

Documents are decoded with ``json.loads(..., parse_float=Decimal)`` so that
no number loses precision before it reaches its target type. Every accessor
takes the JSON path of the value for error reporting.
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from .errors import DeserializationError
from .timestamps import TimestampFormat, parse_timestamp

E = TypeVar("E", bound=Enum)

_NON_FINITE = {"NaN": float("nan"), "Infinity": float("inf"), "-Infinity": float("-inf")}


def parse_document(body: bytes | str | None) -> Any:
    """Decode a body. An empty body decodes as an empty object."""
    if not body:
        return {}
    try:
        return json.loads(body, parse_float=Decimal)
    except ValueError as err:
        raise DeserializationError(f"Invalid JSON: {err}", "$") from err


def expect_object(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DeserializationError.unexpected_type("object", value, path)
    return value


def expect_array(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise DeserializationError.unexpected_type("array", value, path)
    return value


def expect_string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise DeserializationError.unexpected_type("string", value, path)
    return value


def expect_bool(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise DeserializationError.unexpected_type("boolean", value, path)
    return value


def expect_int(value: Any, path: str, bits: int | None = None) -> int:
    """
    Read an integer, checking it fits a signed ``bits``-wide integer.

    Args:
        value: The decoded JSON value
        path: JSON path for error messages
        bits: Width of the target integer, or None for unbounded integers

    Returns:
        The integer value
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise DeserializationError.unexpected_type("integer", value, path)
    if bits is not None:
        bound = 1 << (bits - 1)
        if not -bound <= value < bound:
            raise DeserializationError(f"Integer {value} does not fit in {bits} bits", path)
    return value


def expect_float(value: Any, path: str) -> float:
    if isinstance(value, str) and value in _NON_FINITE:
        return _NON_FINITE[value]
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise DeserializationError.unexpected_type("number", value, path)
    return float(value)


def expect_decimal(value: Any, path: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise DeserializationError.unexpected_type("number", value, path)
    try:
        return Decimal(value)
    except InvalidOperation as err:
        raise DeserializationError(f"Invalid decimal {value}", path) from err


def expect_blob(value: Any, path: str) -> bytes:
    text = expect_string(value, path)
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as err:
        raise DeserializationError(f"Invalid base64 blob: {err}", path) from err


def expect_timestamp(value: Any, path: str, fmt: TimestampFormat | str) -> datetime:
    return parse_timestamp(value, fmt, path)


def expect_enum(enum_type: type[E], value: Any, path: str) -> E:
    text = expect_string(value, path)
    try:
        return enum_type(text)
    except ValueError as err:
        raise DeserializationError(f"{text!r} is not a valid {enum_type.__name__}", path) from err


def expect_document(value: Any) -> Any:
    """Convert a decoded JSON value into a document (decimals become floats)."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, list):
        return [expect_document(item) for item in value]
    if isinstance(value, dict):
        return {key: expect_document(item) for key, item in value.items()}
    return value


def union_variant(value: Any, union: str, path: str) -> tuple[str, Any]:
    """
    Return the single ``(tag, value)`` pair of a union object.

    Null members and the ``__type`` discriminator are ignored.
    """
    data = expect_object(value, path)
    variants = [(tag, item) for tag, item in data.items() if item is not None and tag != "__type"]
    if len(variants) != 1:
        raise DeserializationError(f"Union {union} must have exactly one variant set, found {len(variants)}", path)
    return variants[0]
