"""
Shape visitor: dispatches every shape of the service closure to its generator.
"""

from __future__ import annotations

import logging

from ..context import CodegenContext
from ..model import Walker, is_unit
from ..model.shapes import Shape, ShapeType
from ..protocols import Protocol
from .enums import EnumGenerator
from .service import ServiceGenerator
from .structure import StructureGenerator
from .union import UnionGenerator

logger = logging.getLogger(__name__)


class CodegenVisitor:
    """Walks the service closure and renders each shape once.

    Shapes named in ``config.order_shapes`` are visited first, in that
    order; the rest follow in shape id order. The service itself is
    visited last so that operations see every declaration.
    """

    def __init__(self, context: CodegenContext, protocol: Protocol):
        self.context = context
        self.protocol = protocol

    def shapes(self) -> list[Shape]:
        closure = Walker(self.context.model).walk_shapes(self.context.service)
        order = {name: index for index, name in enumerate(self.context.config.order_shapes)}
        first = sorted((s for s in closure if s.name in order), key=lambda s: (order[s.name], s.id))
        rest = [s for s in closure if s.name not in order]
        return first + rest

    def execute(self) -> None:
        service = None
        for shape in self.shapes():
            if shape.type == ShapeType.SERVICE:
                service = shape
                continue
            self.visit(shape)
        if service is not None:
            self.visit(service)

    def visit(self, shape: Shape) -> None:
        t = shape.type
        if t == ShapeType.STRUCTURE and not is_unit(shape.id):
            logger.info("Generating a structure %s", shape.name)
            StructureGenerator(self.context, shape).render()
        elif t == ShapeType.ENUM:
            logger.info("Generating an enum %s", shape.name)
            EnumGenerator(self.context, shape).render()
        elif t == ShapeType.UNION:
            logger.info("Generating a union %s", shape.name)
            UnionGenerator(self.context, shape).render()
        elif t == ShapeType.SERVICE:
            logger.info("Generating a service %s", shape.name)
            ServiceGenerator(self.context, shape, self.protocol).render()
