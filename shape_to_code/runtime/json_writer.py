"""
Streaming JSON writer used by generated serializers.

All writers append to a shared ``list[str]`` buffer. Object and array
writers handle separators; value writers write exactly one value.
"""

from __future__ import annotations

import base64
import json
from datetime import datetime
from decimal import Decimal
from typing import Any

from .errors import SerializationError
from .timestamps import TimestampFormat, format_timestamp
from .types import Number, float_to_json


def escape_string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def encode_blob(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


class JsonValueWriter:
    """Writes a single JSON value."""

    def __init__(self, out: list[str]):
        self._out = out

    def null(self) -> None:
        self._out.append("null")

    def boolean(self, value: bool) -> None:
        self._out.append("true" if value else "false")

    def string(self, value: str) -> None:
        self._out.append(escape_string(value))

    def number(self, value: Number) -> None:
        self._out.append(value.to_json())

    def date_time(self, value: datetime, fmt: TimestampFormat | str) -> None:
        encoded = format_timestamp(value, fmt)
        if TimestampFormat(fmt) is TimestampFormat.EPOCH_SECONDS:
            self._out.append(encoded)
        else:
            self.string(encoded)

    def document(self, value: Any) -> None:
        if value is None:
            self.null()
        elif isinstance(value, bool):
            self.boolean(value)
        elif isinstance(value, int):
            self._out.append(str(value))
        elif isinstance(value, float):
            self._out.append(float_to_json(value))
        elif isinstance(value, Decimal):
            self.number(Number.decimal(value))
        elif isinstance(value, str):
            self.string(value)
        elif isinstance(value, (list, tuple)):
            array = self.start_array()
            for item in value:
                array.value().document(item)
            array.finish()
        elif isinstance(value, dict):
            obj = self.start_object()
            for key, item in value.items():
                obj.key(str(key)).document(item)
            obj.finish()
        else:
            raise SerializationError(f"{type(value).__name__} is not a valid document value")

    def start_array(self) -> JsonArrayWriter:
        return JsonArrayWriter(self._out)

    def start_object(self) -> JsonObjectWriter:
        return JsonObjectWriter(self._out)


class JsonObjectWriter:
    """Writes the members of a JSON object. Opens the object on creation."""

    def __init__(self, out: list[str]):
        self._out = out
        self._started = False
        out.append("{")

    def key(self, key: str) -> JsonValueWriter:
        if self._started:
            self._out.append(",")
        self._started = True
        self._out.append(escape_string(key))
        self._out.append(":")
        return JsonValueWriter(self._out)

    def finish(self) -> None:
        self._out.append("}")


class JsonArrayWriter:
    """Writes the elements of a JSON array. Opens the array on creation."""

    def __init__(self, out: list[str]):
        self._out = out
        self._started = False
        out.append("[")

    def value(self) -> JsonValueWriter:
        if self._started:
            self._out.append(",")
        self._started = True
        return JsonValueWriter(self._out)

    def finish(self) -> None:
        self._out.append("]")


def to_bytes(out: list[str]) -> bytes:
    return "".join(out).encode("utf-8")
