"""
Structure declarations and their builders.
"""

from __future__ import annotations

import base64
import json
from dataclasses import replace
from typing import Any

from ...utils import docstring_text
from ..assembler import CodeWriter, RuntimeType
from ..context import CodegenContext
from ..errors import InvalidModelError
from ..model import traits
from ..model.shapes import FLOAT_TYPES, INTEGER_TYPES, Member, Shape, ShapeType


def default_expression(context: CodegenContext, writer: CodeWriter, member: Member, value: Any) -> tuple[str, bool]:
    """
    Render a member default as a Python expression.

    Returns:
        The expression and whether it must be built by a ``default_factory``
    """
    target = context.model.expect_shape(member.target)
    t = target.type
    if t == ShapeType.BOOLEAN:
        return ("True" if value else "False"), False
    if t in INTEGER_TYPES or t == ShapeType.BIG_INTEGER:
        return str(int(value)), False
    if t in FLOAT_TYPES:
        return repr(float(value)), False
    if t == ShapeType.BIG_DECIMAL:
        return f'{writer.use(RuntimeType("decimal", "Decimal"))}("{value}")', False
    if t == ShapeType.STRING:
        return json.dumps(value), False
    if t == ShapeType.BLOB:
        return repr(base64.b64decode(value)), False
    if t == ShapeType.ENUM:
        enum_type = writer.type_of(context.symbols.shape_symbol(target))
        return f"{enum_type}({json.dumps(value)})", True
    if t == ShapeType.TIMESTAMP:
        parse = writer.use(RuntimeType(context.runtime_module, "parse_timestamp"))
        fmt = traits.EPOCH_SECONDS if isinstance(value, (int, float)) else traits.DATE_TIME
        return f"{parse}({json.dumps(value)}, {json.dumps(fmt)})", True
    if t == ShapeType.DOCUMENT:
        return repr(value), isinstance(value, (list, dict))
    if t in (ShapeType.LIST, ShapeType.SET):
        return "[]", True
    if t == ShapeType.MAP:
        return "{}", True
    raise InvalidModelError(f"Member {member.id} cannot have a default value", member.id)


class StructureGenerator:
    """Renders a structure dataclass plus its builder into the shape's module."""

    def __init__(self, context: CodegenContext, shape: Shape):
        self.context = context
        self.shape = shape

    def render(self) -> None:
        self.context.crate.with_module(self.context.symbols.namespace(self.shape), self._render)

    def _field(self, writer: CodeWriter, member: Member) -> dict[str, Any]:
        symbols = self.context.symbols
        symbol = symbols.member_symbol(member)
        annotation = writer.type_of(symbol)
        builder_annotation = writer.type_of(replace(symbol, is_optional=True))
        if symbol.requires_boxing:
            annotation = f'"{annotation}"'
            builder_annotation = f'"{builder_annotation}"'

        name = symbols.member_name(member)
        default = symbols.default_value(member)
        build_expression = f"self._{name}"
        if symbol.is_optional:
            declaration = f"{name}: {annotation} = None"
        elif default is not None:
            expression, factory = default_expression(self.context, writer, member, default)
            if factory:
                field = writer.use(RuntimeType("dataclasses", "field"))
                declaration = f"{name}: {annotation} = {field}(default_factory=lambda: {expression})"
            else:
                declaration = f"{name}: {annotation} = {expression}"
            build_expression = f"self._{name} if self._{name} is not None else {expression}"
        else:
            declaration = f"{name}: {annotation}"

        return {
            "name": name,
            "declaration": declaration,
            "builder_annotation": builder_annotation,
            "build_expression": build_expression,
            "required": not symbol.is_optional and default is None,
            "doc": docstring_text(member.get_trait(traits.DOCUMENTATION)),
        }

    def _render(self, writer: CodeWriter) -> None:
        runtime = self.context.runtime_module
        symbols = self.context.symbols
        fields = [self._field(writer, member) for member in self.shape.members]
        base = writer.use(RuntimeType(runtime, "ModeledError")) if self.shape.is_error else None
        writer.write_lines(
            self.context.templates.render(
                "structure",
                name=symbols.class_name(self.shape),
                builder_name=symbols.builder_name(self.shape),
                base=base,
                doc=docstring_text(self.shape.get_trait(traits.DOCUMENTATION)),
                fields=fields,
                dataclass=writer.use(RuntimeType("dataclasses", "dataclass")),
                build_error=writer.use(RuntimeType(runtime, "BuildError")),
            )
        )
