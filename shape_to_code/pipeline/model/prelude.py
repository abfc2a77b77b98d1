"""
Prelude shapes that every model implicitly contains.
"""

from __future__ import annotations

from . import traits
from .shapes import PRELUDE_NAMESPACE, Shape, ShapeId, ShapeType

UNIT_TYPE_TRAIT = "smithy.api#unitType"
UNIT = ShapeId(PRELUDE_NAMESPACE, "Unit")

_SIMPLE_PRELUDE = {
    "String": ShapeType.STRING,
    "Blob": ShapeType.BLOB,
    "BigInteger": ShapeType.BIG_INTEGER,
    "BigDecimal": ShapeType.BIG_DECIMAL,
    "Timestamp": ShapeType.TIMESTAMP,
    "Document": ShapeType.DOCUMENT,
    "Boolean": ShapeType.BOOLEAN,
    "Byte": ShapeType.BYTE,
    "Short": ShapeType.SHORT,
    "Integer": ShapeType.INTEGER,
    "Long": ShapeType.LONG,
    "Float": ShapeType.FLOAT,
    "Double": ShapeType.DOUBLE,
}

_PRIMITIVE_PRELUDE = {
    "PrimitiveBoolean": (ShapeType.BOOLEAN, False),
    "PrimitiveByte": (ShapeType.BYTE, 0),
    "PrimitiveShort": (ShapeType.SHORT, 0),
    "PrimitiveInteger": (ShapeType.INTEGER, 0),
    "PrimitiveLong": (ShapeType.LONG, 0),
    "PrimitiveFloat": (ShapeType.FLOAT, 0),
    "PrimitiveDouble": (ShapeType.DOUBLE, 0),
}


def prelude_shapes() -> list[Shape]:
    """Build the list of prelude shapes."""
    shapes = [Shape(id=ShapeId(PRELUDE_NAMESPACE, name), type=shape_type) for name, shape_type in _SIMPLE_PRELUDE.items()]
    for name, (shape_type, default) in _PRIMITIVE_PRELUDE.items():
        shapes.append(
            Shape(
                id=ShapeId(PRELUDE_NAMESPACE, name),
                type=shape_type,
                traits={traits.DEFAULT: default},
            )
        )
    shapes.append(Shape(id=UNIT, type=ShapeType.STRUCTURE, traits={UNIT_TYPE_TRAIT: {}}))
    return shapes


def is_unit(shape_id: ShapeId | None) -> bool:
    return shape_id is None or shape_id == UNIT
