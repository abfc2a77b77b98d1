"""
Runtime support imported by generated modules.
"""

from __future__ import annotations

from .enums import is_unknown_variant, unknown_enum_variant
from .errors import BuildError, DeserializationError, ModeledError, RuntimeCodegenError, SerializationError
from .json_reader import (
    expect_array,
    expect_blob,
    expect_bool,
    expect_decimal,
    expect_document,
    expect_enum,
    expect_float,
    expect_int,
    expect_object,
    expect_string,
    expect_timestamp,
    parse_document,
    union_variant,
)
from .json_writer import JsonArrayWriter, JsonObjectWriter, JsonValueWriter, encode_blob, to_bytes
from .timestamps import TimestampFormat, format_timestamp, parse_timestamp
from .types import Document, Number, Operation, Service, build

__all__ = [
    "BuildError",
    "DeserializationError",
    "Document",
    "JsonArrayWriter",
    "JsonObjectWriter",
    "JsonValueWriter",
    "ModeledError",
    "Number",
    "Operation",
    "RuntimeCodegenError",
    "SerializationError",
    "Service",
    "TimestampFormat",
    "build",
    "encode_blob",
    "expect_array",
    "expect_blob",
    "expect_bool",
    "expect_decimal",
    "expect_document",
    "expect_enum",
    "expect_float",
    "expect_int",
    "expect_object",
    "expect_string",
    "expect_timestamp",
    "format_timestamp",
    "is_unknown_variant",
    "parse_document",
    "parse_timestamp",
    "to_bytes",
    "union_variant",
    "unknown_enum_variant",
]
