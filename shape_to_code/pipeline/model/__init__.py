"""
Shape graph module.

Contains the shape/member/trait data model, the prelude, the JSON AST
loader and the closure walker.
"""

from __future__ import annotations

from .loader import load_model, load_model_file
from .prelude import UNIT, is_unit
from .shapes import (
    AGGREGATE_TYPES,
    COLLECTION_TYPES,
    FLOAT_TYPES,
    INTEGER_TYPES,
    NUMBER_TYPES,
    SIMPLE_TYPES,
    Member,
    Model,
    Shape,
    ShapeId,
    ShapeType,
)
from .walker import Walker

__all__ = [
    "AGGREGATE_TYPES",
    "COLLECTION_TYPES",
    "FLOAT_TYPES",
    "INTEGER_TYPES",
    "NUMBER_TYPES",
    "SIMPLE_TYPES",
    "Member",
    "Model",
    "Shape",
    "ShapeId",
    "ShapeType",
    "UNIT",
    "Walker",
    "is_unit",
    "load_model",
    "load_model_file",
]
