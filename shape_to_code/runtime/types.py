"""
Value types shared by generated modules.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from .errors import BuildError, DeserializationError, SerializationError

# Any JSON value: None, bool, int, float, str, list or dict of documents
Document = Any


class NumberKind(str, Enum):
    """Numeric representation used on the wire."""

    NEG_INT = "neg_int"
    BIG_INT = "big_int"
    FLOAT = "float"
    DECIMAL = "decimal"


@dataclass(frozen=True)
class Number:
    """A number tagged with the representation it must be written in.

    Signed integers of every width go through ``neg_int`` so that 64-bit
    values are never narrowed. Floats are written with their shortest
    round-tripping representation; non-finite floats become the strings
    ``"NaN"``, ``"Infinity"`` and ``"-Infinity"``.
    """

    kind: NumberKind
    value: int | float | Decimal

    @classmethod
    def neg_int(cls, value: int) -> Number:
        return cls(NumberKind.NEG_INT, int(value))

    @classmethod
    def big_int(cls, value: int) -> Number:
        return cls(NumberKind.BIG_INT, int(value))

    @classmethod
    def floating(cls, value: float) -> Number:
        return cls(NumberKind.FLOAT, float(value))

    @classmethod
    def decimal(cls, value: Decimal) -> Number:
        return cls(NumberKind.DECIMAL, Decimal(value))

    def to_json(self) -> str:
        if self.kind in (NumberKind.NEG_INT, NumberKind.BIG_INT):
            return str(self.value)
        if self.kind is NumberKind.FLOAT:
            return float_to_json(self.value)
        if not self.value.is_finite():
            raise SerializationError(f"Cannot write non-finite decimal {self.value}")
        return str(self.value)


def float_to_json(value: float) -> str:
    if math.isnan(value):
        return '"NaN"'
    if math.isinf(value):
        return '"Infinity"' if value > 0 else '"-Infinity"'
    return repr(value)


def build(builder: Any, path: str = "$") -> Any:
    """Finish a builder, reporting a missing required field as a parse failure."""
    try:
        return builder.build()
    except BuildError as err:
        raise DeserializationError(str(err), path) from err


@dataclass(frozen=True)
class Operation:
    """Describes one operation of a generated service.

    The ``serialize_*`` callables turn a value into a body. The
    ``deserialize_*`` callables take a body and a builder, populate the
    builder and return it. A callable is ``None`` when the operation has
    nothing to encode in that direction.
    """

    name: str
    input: type
    output: type
    errors: Mapping[str, type] = field(default_factory=dict)
    serialize_input: Callable[[Any], bytes] | None = None
    deserialize_input: Callable[[bytes, Any], Any] | None = None
    serialize_output: Callable[[Any], bytes] | None = None
    deserialize_output: Callable[[bytes, Any], Any] | None = None
    error_serializers: Mapping[type, Callable[[Any], bytes]] = field(default_factory=dict)
    error_deserializers: Mapping[str, Callable[[bytes, Any], Any]] = field(default_factory=dict)

    def serialize_request(self, value: Any) -> bytes:
        if self.serialize_input is None:
            return b""
        return self.serialize_input(value)

    def parse_request(self, body: bytes, builder: Any = None) -> Any:
        """
        Parse a request body into the operation input.

        Args:
            body: The request body
            builder: Input builder already holding the members bound outside
                the body (labels, query, headers); a fresh builder by default
        """
        if builder is None:
            builder = self.input.builder()
        if self.deserialize_input is not None:
            builder = self.deserialize_input(body, builder)
        return build(builder)

    def serialize_response(self, value: Any) -> bytes:
        if self.serialize_output is None:
            return b""
        return self.serialize_output(value)

    def parse_response(self, body: bytes, builder: Any = None) -> Any:
        if builder is None:
            builder = self.output.builder()
        if self.deserialize_output is not None:
            builder = self.deserialize_output(body, builder)
        return build(builder)

    def serialize_error(self, error: Exception) -> bytes:
        serializer = self.error_serializers.get(type(error))
        if serializer is None:
            raise SerializationError(f"{type(error).__name__} is not an error of operation {self.name}")
        return serializer(error)

    def parse_error(self, code: str, body: bytes) -> Exception:
        """Parse a modeled error from its error code (the error shape name)."""
        error_type = self.errors.get(code)
        if error_type is None:
            raise DeserializationError(f"Unknown error code {code!r} for operation {self.name}")
        builder = error_type.builder()
        parser = self.error_deserializers.get(code)
        if parser is not None:
            builder = parser(body, builder)
        return build(builder)


@dataclass(frozen=True)
class Service:
    """Describes a generated service and its operations."""

    name: str
    version: str | None
    protocol: str
    operations: Mapping[str, Operation] = field(default_factory=dict)

    def operation(self, name: str) -> Operation:
        try:
            return self.operations[name]
        except KeyError:
            raise KeyError(f"Service {self.name} has no operation {name!r}") from None
