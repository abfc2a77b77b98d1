"""
Shape graph node definitions.

A shape is a typed node of the service description. The set of shape kinds
is closed (``ShapeType``) and every shape is the same frozen dataclass,
distinguished by its ``type`` tag. Shapes are never mutated: transforms
build new shapes with ``dataclasses.replace``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any

from ..errors import InvalidModelError, ShapeNotFoundError
from . import traits
from .traits import TraitHolder

PRELUDE_NAMESPACE = "smithy.api"


@total_ordering
@dataclass(frozen=True)
class ShapeId:
    """Absolute shape identifier: ``namespace#Name`` or ``namespace#Name$member``."""

    namespace: str
    name: str
    member: str | None = None

    @staticmethod
    def from_string(value: str) -> ShapeId:
        """Parse an absolute shape id."""
        if "#" not in value:
            raise InvalidModelError(f"Shape id is not absolute: {value!r}")
        namespace, rest = value.split("#", 1)
        if "$" in rest:
            name, member = rest.split("$", 1)
            return ShapeId(namespace, name, member)
        return ShapeId(namespace, rest)

    def with_member(self, member: str) -> ShapeId:
        return ShapeId(self.namespace, self.name, member)

    def without_member(self) -> ShapeId:
        return ShapeId(self.namespace, self.name)

    def _sort_key(self) -> tuple[str, str, str]:
        return (self.namespace, self.name, self.member or "")

    def __lt__(self, other: ShapeId) -> bool:
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        base = f"{self.namespace}#{self.name}"
        return f"{base}${self.member}" if self.member is not None else base


class ShapeType(str, Enum):
    """Kind of shape in the graph."""

    BLOB = "blob"
    BOOLEAN = "boolean"
    STRING = "string"
    ENUM = "enum"
    INT_ENUM = "intEnum"
    BYTE = "byte"
    SHORT = "short"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BIG_INTEGER = "bigInteger"
    BIG_DECIMAL = "bigDecimal"
    TIMESTAMP = "timestamp"
    DOCUMENT = "document"
    LIST = "list"
    SET = "set"
    MAP = "map"
    STRUCTURE = "structure"
    UNION = "union"
    MEMBER = "member"
    OPERATION = "operation"
    RESOURCE = "resource"
    SERVICE = "service"


SIMPLE_TYPES = frozenset(
    {
        ShapeType.BLOB,
        ShapeType.BOOLEAN,
        ShapeType.STRING,
        ShapeType.BYTE,
        ShapeType.SHORT,
        ShapeType.INTEGER,
        ShapeType.LONG,
        ShapeType.FLOAT,
        ShapeType.DOUBLE,
        ShapeType.BIG_INTEGER,
        ShapeType.BIG_DECIMAL,
        ShapeType.TIMESTAMP,
        ShapeType.DOCUMENT,
    }
)
INTEGER_TYPES = frozenset({ShapeType.BYTE, ShapeType.SHORT, ShapeType.INTEGER, ShapeType.LONG, ShapeType.INT_ENUM})
FLOAT_TYPES = frozenset({ShapeType.FLOAT, ShapeType.DOUBLE})
NUMBER_TYPES = INTEGER_TYPES | FLOAT_TYPES | {ShapeType.BIG_INTEGER, ShapeType.BIG_DECIMAL}
COLLECTION_TYPES = frozenset({ShapeType.LIST, ShapeType.SET})
AGGREGATE_TYPES = frozenset({ShapeType.LIST, ShapeType.SET, ShapeType.MAP, ShapeType.STRUCTURE, ShapeType.UNION})


@dataclass(frozen=True)
class Member(TraitHolder):
    """A named edge from an aggregate shape to its target shape."""

    name: str
    target: ShapeId
    container: ShapeId
    traits: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def id(self) -> ShapeId:
        return self.container.with_member(self.name)

    @property
    def is_required(self) -> bool:
        return self.has_trait(traits.REQUIRED)

    def __str__(self) -> str:
        return str(self.id)


@dataclass(frozen=True)
class Shape(TraitHolder):
    """A node of the shape graph."""

    id: ShapeId
    type: ShapeType
    members: tuple[Member, ...] = ()
    traits: Mapping[str, Any] = field(default_factory=dict, compare=False)
    mixins: tuple[ShapeId, ...] = ()

    # Operation properties
    input: ShapeId | None = None
    output: ShapeId | None = None
    errors: tuple[ShapeId, ...] = ()

    # Service and resource properties
    version: str | None = None
    operations: tuple[ShapeId, ...] = ()
    resources: tuple[ShapeId, ...] = ()

    @property
    def name(self) -> str:
        return self.id.name

    def get_member(self, name: str) -> Member | None:
        for member in self.members:
            if member.name == name:
                return member
        return None

    def expect_member(self, name: str) -> Member:
        member = self.get_member(name)
        if member is None:
            raise ShapeNotFoundError(f"Shape {self.id} has no member {name!r}", self.id.with_member(name))
        return member

    @property
    def member(self) -> Member:
        """The element member of a list or set."""
        return self.expect_member("member")

    @property
    def key(self) -> Member:
        """The key member of a map."""
        return self.expect_member("key")

    @property
    def value(self) -> Member:
        """The value member of a map."""
        return self.expect_member("value")

    @property
    def is_error(self) -> bool:
        return self.has_trait(traits.ERROR)

    def __str__(self) -> str:
        return str(self.id)


class Model:
    """An immutable collection of shapes keyed by shape id."""

    def __init__(self, shapes: Iterable[Shape], metadata: Mapping[str, Any] | None = None):
        self._shapes: dict[ShapeId, Shape] = {}
        for shape in shapes:
            self._shapes[shape.id] = shape
        self.metadata: Mapping[str, Any] = dict(metadata or {})

    def __contains__(self, shape_id: object) -> bool:
        return shape_id in self._shapes

    def __iter__(self) -> Iterator[Shape]:
        return iter(self._shapes.values())

    def __len__(self) -> int:
        return len(self._shapes)

    def get_shape(self, shape_id: ShapeId) -> Shape | None:
        return self._shapes.get(shape_id)

    def expect_shape(self, shape_id: ShapeId, *types: ShapeType) -> Shape:
        """Look up a shape, optionally asserting its kind."""
        shape = self._shapes.get(shape_id)
        if shape is None:
            raise ShapeNotFoundError(f"Shape {shape_id} was not found in the model", shape_id)
        if types and shape.type not in types:
            expected = ", ".join(t.value for t in types)
            raise InvalidModelError(f"Shape {shape_id} is a {shape.type.value}, expected one of: {expected}", shape_id)
        return shape

    def shapes_of_type(self, *types: ShapeType) -> list[Shape]:
        return [shape for shape in self._shapes.values() if shape.type in types]

    def replace(self, updated: Iterable[Shape] = (), removed: Iterable[ShapeId] = ()) -> Model:
        """Return a new model with shapes added/replaced and others removed."""
        shapes = dict(self._shapes)
        for shape_id in removed:
            shapes.pop(shape_id, None)
        for shape in updated:
            shapes[shape.id] = shape
        return Model(shapes.values(), self.metadata)
