"""
Symbol resolution: maps shapes and members to Python type descriptors.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from ...utils import escape_identifier, snake_to_pascal_case, to_enum_member_name, to_snake_case
from ..errors import UnsupportedShapeError
from ..model import traits
from ..model.shapes import COLLECTION_TYPES, FLOAT_TYPES, INTEGER_TYPES, Member, Model, Shape, ShapeId, ShapeType

# Names generated modules import or define themselves
RESERVED_CLASS_NAMES = frozenset(
    {
        "Any",
        "BuildError",
        "Decimal",
        "Document",
        "Enum",
        "ModeledError",
        "annotations",
        "dataclass",
        "datetime",
        "field",
        "unknown_enum_variant",
    }
)
RESERVED_MEMBER_NAMES = frozenset({"builder", "build", "dataclass", "field"})
RESERVED_ENUM_MEMBER_NAMES = frozenset({"from_str", "as_str", "is_unknown", "name", "value"})

# Default values that are indistinguishable on the wire from an absent member
_ZERO_VALUE_TYPES = INTEGER_TYPES | FLOAT_TYPES | {ShapeType.BOOLEAN, ShapeType.STRING, ShapeType.LIST, ShapeType.SET, ShapeType.MAP}

MODEL_MODULE = "model"
ERROR_MODULE = "error"
INPUT_MODULE = "input"
OUTPUT_MODULE = "output"


class NumericClass(str, Enum):
    """How a numeric shape is represented on the wire."""

    SIGNED_INT = "signed_int"
    BIG_INT = "big_int"
    FLOAT = "float"
    DECIMAL = "decimal"


_INTEGER_BITS = {
    ShapeType.BYTE: 8,
    ShapeType.SHORT: 16,
    ShapeType.INTEGER: 32,
    ShapeType.LONG: 64,
    ShapeType.INT_ENUM: 32,
}


@dataclass(frozen=True)
class Symbol:
    """A Python type reference for a shape or member.

    Attributes:
        name: Class or builtin name
        shape_type: Kind of the shape the symbol was resolved from
        namespace: Generated sibling module defining the class, if any
        import_from: Absolute module to import ``name`` from, if any
        type_args: Element symbols of ``list``/``dict``
        is_optional: Whether the value may be ``None``
        requires_boxing: Whether the reference breaks a recursive cycle
        numeric_class: Numeric wire class of number shapes
        bits: Width of fixed-size integers
    """

    name: str
    shape_type: ShapeType
    namespace: str | None = None
    import_from: str | None = None
    type_args: tuple[Symbol, ...] = ()
    is_optional: bool = False
    requires_boxing: bool = False
    numeric_class: NumericClass | None = None
    bits: int | None = None


class SymbolProvider:
    """Resolves shapes and members to symbols, memoized per shape/member id."""

    def __init__(self, model: Model, runtime_module: str, renders_unknown_variants: bool = True):
        self.model = model
        self.runtime_module = runtime_module
        self.renders_unknown_variants = renders_unknown_variants
        self._shape_symbols: dict[ShapeId, Symbol] = {}
        self._member_symbols: dict[ShapeId, Symbol] = {}

    def to_symbol(self, shape: Shape | Member) -> Symbol:
        if isinstance(shape, Member):
            return self.member_symbol(shape)
        return self.shape_symbol(shape)

    def shape_symbol(self, shape: Shape) -> Symbol:
        symbol = self._shape_symbols.get(shape.id)
        if symbol is None:
            symbol = self._resolve(shape)
            self._shape_symbols[shape.id] = symbol
        return symbol

    def member_symbol(self, member: Member) -> Symbol:
        symbol = self._member_symbols.get(member.id)
        if symbol is None:
            target = self.shape_symbol(self.model.expect_shape(member.target))
            symbol = replace(
                target,
                is_optional=self.is_optional(member),
                requires_boxing=member.has_trait(traits.BOX),
            )
            self._member_symbols[member.id] = symbol
        return symbol

    def _resolve(self, shape: Shape) -> Symbol:
        t = shape.type
        if t == ShapeType.STRING:
            return Symbol("str", t)
        if t == ShapeType.BOOLEAN:
            return Symbol("bool", t)
        if t in _INTEGER_BITS:
            return Symbol("int", t, numeric_class=NumericClass.SIGNED_INT, bits=_INTEGER_BITS[t])
        if t == ShapeType.BIG_INTEGER:
            return Symbol("int", t, numeric_class=NumericClass.BIG_INT)
        if t in (ShapeType.FLOAT, ShapeType.DOUBLE):
            return Symbol("float", t, numeric_class=NumericClass.FLOAT)
        if t == ShapeType.BIG_DECIMAL:
            return Symbol("Decimal", t, import_from="decimal", numeric_class=NumericClass.DECIMAL)
        if t == ShapeType.BLOB:
            return Symbol("bytes", t)
        if t == ShapeType.TIMESTAMP:
            return Symbol("datetime", t, import_from="datetime")
        if t == ShapeType.DOCUMENT:
            return Symbol("Document", t, import_from=self.runtime_module)
        if t in COLLECTION_TYPES:
            return Symbol("list", t, type_args=(self.member_symbol(shape.member),))
        if t == ShapeType.MAP:
            return Symbol("dict", t, type_args=(self.member_symbol(shape.key), self.member_symbol(shape.value)))
        if t in (ShapeType.STRUCTURE, ShapeType.UNION, ShapeType.ENUM):
            return Symbol(self.class_name(shape), t, namespace=self.namespace(shape))
        raise UnsupportedShapeError(f"No symbol mapping for {t.value} shape {shape.id}", shape.id)

    def namespace(self, shape: Shape) -> str:
        """Generated module a declaration belongs to."""
        if shape.is_error:
            return ERROR_MODULE
        if shape.has_trait(traits.SYNTHETIC_INPUT):
            return INPUT_MODULE
        if shape.has_trait(traits.SYNTHETIC_OUTPUT):
            return OUTPUT_MODULE
        return MODEL_MODULE

    def class_name(self, shape: Shape) -> str:
        return escape_identifier(shape.name, RESERVED_CLASS_NAMES)

    def builder_name(self, shape: Shape) -> str:
        return f"{self.class_name(shape)}Builder"

    def member_name(self, member: Member) -> str:
        return escape_identifier(to_snake_case(member.name), RESERVED_MEMBER_NAMES)

    def enum_member_name(self, member: Member) -> str:
        name = member.name
        if not name.isidentifier() or name.startswith("_"):
            name = to_enum_member_name(str(member.get_trait(traits.ENUM_VALUE, name)))
        return escape_identifier(name, RESERVED_ENUM_MEMBER_NAMES)

    def variant_name(self, union: Shape, member: Member) -> str:
        return f"{self.class_name(union)}{snake_to_pascal_case(member.name)}"

    def unknown_variant_name(self, union: Shape) -> str:
        name = f"{self.class_name(union)}Unknown"
        if any(self.variant_name(union, member) == name for member in union.members):
            name += "Variant"
        return name

    def function_suffix(self, shape: Shape) -> str:
        """Suffix shared by every generated function working on ``shape``."""
        return f"{self.namespace(shape)}_{to_snake_case(shape.name)}"

    def is_optional(self, member: Member) -> bool:
        """
        Whether a member's value may be absent.

        Collection and map elements are optional only in sparse shapes; union
        variants and enum members never are; structure members are optional
        unless required or defaulted.
        """
        container = self.model.expect_shape(member.container)
        if container.type in COLLECTION_TYPES or container.type == ShapeType.MAP:
            return member.name != "key" and container.has_trait(traits.SPARSE)
        if container.type != ShapeType.STRUCTURE:
            return False
        target = self.model.expect_shape(member.target)
        if member.is_required or target.has_trait(traits.REQUIRED):
            return False
        return not self.has_default(member)

    def has_default(self, member: Member) -> bool:
        return self.default_value(member) is not None

    def default_value(self, member: Member) -> Any:
        """The member's default (member trait first, then the target's), or None."""
        if member.has_trait(traits.DEFAULT):
            return member.get_trait(traits.DEFAULT)
        return self.model.expect_shape(member.target).get_trait(traits.DEFAULT)

    def is_zero_default(self, member: Member) -> bool:
        """Whether a member defaults to the zero value of its type (0, False, "", [], {})."""
        target = self.model.expect_shape(member.target)
        if target.type not in _ZERO_VALUE_TYPES:
            return False
        default = self.default_value(member)
        if default is None:
            return False
        if target.type == ShapeType.BOOLEAN:
            return default is False
        if target.type in INTEGER_TYPES | FLOAT_TYPES:
            return not isinstance(default, bool) and default == 0
        return default in ("", [], {})
