"""
Union declarations: one dataclass per variant and a type alias.
"""

from __future__ import annotations

from ...utils import docstring_text
from ..assembler import CodeWriter, RuntimeType
from ..context import CodegenContext
from ..errors import InvalidModelError
from ..model import traits
from ..model.prelude import is_unit
from ..model.shapes import Shape


class UnionGenerator:
    """Renders a union as a tagged set of variant dataclasses.

    A variant targeting the unit shape carries no value. When the codegen
    target renders unknown variants, an extra ``<Union>Unknown`` variant
    holds the tag of a variant this code does not know about.
    """

    def __init__(self, context: CodegenContext, shape: Shape, render_unknown_variant: bool | None = None):
        self.context = context
        self.shape = shape
        if render_unknown_variant is None:
            render_unknown_variant = context.renders_unknown_variants
        self.render_unknown_variant = render_unknown_variant

    def render(self) -> None:
        self.context.crate.with_module(self.context.symbols.namespace(self.shape), self._render)

    def _render(self, writer: CodeWriter) -> None:
        symbols = self.context.symbols
        name = symbols.class_name(self.shape)
        variants = []
        for member in self.shape.members:
            field = None
            if not is_unit(member.target):
                annotation = writer.type_of(symbols.member_symbol(member))
                if member.has_trait(traits.BOX):
                    annotation = f'"{annotation}"'
                field = f"value: {annotation}"
            doc = docstring_text(member.get_trait(traits.DOCUMENTATION)) or f"The ``{member.name}`` variant of ``{name}``."
            variants.append({"name": symbols.variant_name(self.shape, member), "field": field, "doc": doc})

        if self.render_unknown_variant:
            variants.append(
                {
                    "name": symbols.unknown_variant_name(self.shape),
                    "field": "tag: str",
                    "doc": f"A variant of ``{name}`` added to the service after this code was generated.",
                }
            )
        if not variants:
            raise InvalidModelError(f"Union {self.shape.id} has no variants", self.shape.id)

        doc = docstring_text(self.shape.get_trait(traits.DOCUMENTATION))
        writer.write_lines(
            self.context.templates.render(
                "union",
                name=name,
                variants=variants,
                doc_lines=doc.splitlines(),
                dataclass=writer.use(RuntimeType("dataclasses", "dataclass")),
            )
        )
