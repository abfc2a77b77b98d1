"""
Enum declarations.
"""

from __future__ import annotations

import json

from ...utils import docstring_text
from ..assembler import CodeWriter, RuntimeType
from ..context import CodegenContext
from ..model import traits
from ..model.shapes import Shape


class EnumGenerator:
    """Renders a ``str`` enum with wire conversions.

    Enums are open when the codegen target renders unknown variants: an
    unrecognized wire value becomes a value-preserving unknown member
    instead of an error.
    """

    def __init__(self, context: CodegenContext, shape: Shape):
        self.context = context
        self.shape = shape

    def render(self) -> None:
        self.context.crate.with_module(self.context.symbols.namespace(self.shape), self._render)

    def _render(self, writer: CodeWriter) -> None:
        runtime = self.context.runtime_module
        symbols = self.context.symbols
        members = [
            {"name": symbols.enum_member_name(member), "value": json.dumps(member.get_trait(traits.ENUM_VALUE, member.name))}
            for member in self.shape.members
        ]
        is_open = self.context.renders_unknown_variants
        writer.write_lines(
            self.context.templates.render(
                "enum",
                name=symbols.class_name(self.shape),
                doc=docstring_text(self.shape.get_trait(traits.DOCUMENTATION)),
                members=members,
                open=is_open,
                enum=writer.use(RuntimeType("enum", "Enum")),
                is_unknown_variant=writer.use(RuntimeType(runtime, "is_unknown_variant")),
                unknown_enum_variant=writer.use(RuntimeType(runtime, "unknown_enum_variant")) if is_open else None,
            )
        )
