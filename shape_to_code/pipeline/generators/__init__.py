"""
Declaration and service generators.
"""

from __future__ import annotations

from .enums import EnumGenerator
from .service import ServiceGenerator
from .structure import StructureGenerator, default_expression
from .templates import TemplateRenderer
from .union import UnionGenerator
from .visitor import CodegenVisitor

__all__ = [
    "CodegenVisitor",
    "EnumGenerator",
    "ServiceGenerator",
    "StructureGenerator",
    "TemplateRenderer",
    "UnionGenerator",
    "default_expression",
]
