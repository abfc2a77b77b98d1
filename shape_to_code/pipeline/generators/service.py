"""
Service-level generation: operation descriptors, the service descriptor and
the package ``__init__``.
"""

from __future__ import annotations

import json
import logging

from ...utils import docstring_text, to_snake_case
from ..assembler import CodeWriter, RuntimeType
from ..context import CodegenContext
from ..model import Walker, traits
from ..model.shapes import Shape, ShapeType
from ..protocols import JsonParserGenerator, JsonSerializerGenerator, Protocol
from ..symbols.provider import ERROR_MODULE, INPUT_MODULE, MODEL_MODULE, OUTPUT_MODULE

logger = logging.getLogger(__name__)

OPERATION_MODULE = "operation"
SERVICE_MODULE = "service"
INIT_MODULE = "__init__"

# Modules re-exported by the package, when they have content
PUBLIC_MODULES = (ERROR_MODULE, INPUT_MODULE, MODEL_MODULE, OUTPUT_MODULE)


class ServiceGenerator:
    """Drives the protocol generators for every operation of a service.

    Must run after every shape of the service closure has been rendered,
    since the package ``__init__`` only re-exports modules with content.
    """

    def __init__(self, context: CodegenContext, shape: Shape, protocol: Protocol):
        self.context = context
        self.shape = shape
        self.protocol = protocol
        self.serializer = JsonSerializerGenerator(context, protocol)
        self.parser = JsonParserGenerator(context, protocol)

    def render(self) -> None:
        operations = Walker(self.context.model).operations_of(self.shape)
        references = []
        for operation in operations:
            logger.info("Generating operation %s", operation.name)
            references.append((operation.name, self.render_operation(operation)))

        self.context.crate.with_module(SERVICE_MODULE, lambda writer: self._render_service(writer, references))
        self.context.crate.with_module(INIT_MODULE, self._render_init)

    def render_operation(self, operation: Shape) -> RuntimeType:
        """Render the serializers, parsers and descriptor of one operation; return the descriptor."""
        callables = [
            ("serialize_input", self.serializer.operation_input_serializer(operation)),
            ("deserialize_input", self.parser.operation_input_parser(operation)),
            ("serialize_output", self.serializer.operation_output_serializer(operation)),
            ("deserialize_output", self.parser.operation_output_parser(operation)),
        ]
        errors = [
            (
                error,
                self.serializer.error_serializer(error),
                self.parser.error_parser(error),
            )
            for error in (self.context.model.expect_shape(e, ShapeType.STRUCTURE) for e in operation.errors)
        ]
        constant = to_snake_case(operation.name).upper()

        def render(writer: CodeWriter) -> None:
            symbols = self.context.symbols
            writer.write_lines(
                self.context.templates.render(
                    "operation",
                    constant=constant,
                    operation_type=writer.use(RuntimeType(self.context.runtime_module, "Operation")),
                    name=operation.name,
                    input=writer.type_of(symbols.shape_symbol(self.context.model.expect_shape(operation.input))),
                    output=writer.type_of(symbols.shape_symbol(self.context.model.expect_shape(operation.output))),
                    errors=[
                        {
                            "code": error.name,
                            "type": writer.type_of(symbols.shape_symbol(error)),
                            "serializer": writer.use(serializer),
                            "deserializer": writer.use(parser),
                        }
                        for error, serializer, parser in errors
                    ],
                    callables=[(key, writer.use(value)) for key, value in callables if value is not None],
                )
            )

        self.context.crate.with_module(OPERATION_MODULE, render)
        return RuntimeType.generated(OPERATION_MODULE, constant)

    def _render_service(self, writer: CodeWriter, references: list[tuple[str, RuntimeType]]) -> None:
        logger.info("Generating service %s", self.shape.name)
        version = self.shape.version
        writer.write_lines(
            self.context.templates.render(
                "service",
                doc_lines=docstring_text(self.shape.get_trait(traits.DOCUMENTATION)).splitlines(),
                service_type=writer.use(RuntimeType(self.context.runtime_module, "Service")),
                name=self.shape.name,
                version=json.dumps(version) if version is not None else "None",
                protocol=self.protocol.trait_id,
                operations=[{"name": name, "reference": writer.use(reference)} for name, reference in references],
            )
        )

    def _render_init(self, writer: CodeWriter) -> None:
        crate = self.context.crate
        modules = [name for name in PUBLIC_MODULES if not crate.module(name).is_empty]
        writer.write_lines(self.context.templates.render("init", modules=modules))
