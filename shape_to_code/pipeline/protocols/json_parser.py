"""
JSON parser generator.

Mirror of the serializer generator. Generated parsers work on the tree
returned by ``runtime.parse_document`` and raise ``DeserializationError``
with the JSON path of the offending value:

* ``json_deser.deser_structure_*``, ``deser_union_*``, ``deser_list_*`` and
  ``deser_map_*(node, path)``, emitted once per shape;
* ``operation_deser.deser_operation_<op>_input/output(body, builder)`` and
  ``operation_deser.deser_error_<name>(body, builder)``, which populate and
  return the builder of the top-level structure.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from ...utils import to_snake_case
from ..assembler import CodeWriter, RuntimeType
from ..context import CodegenContext
from ..errors import UnsupportedShapeError
from ..model import traits
from ..model.prelude import is_unit
from ..model.shapes import COLLECTION_TYPES, Member, Shape, ShapeType
from ..symbols import NumericClass
from .bindings import HttpLocation
from .contexts import ValueContext, path_expression
from .json_serializer import timestamp_format_member
from .protocol import Protocol

logger = logging.getLogger(__name__)

JSON_DESER_MODULE = "json_deser"
OPERATION_DESER_MODULE = "operation_deser"


class JsonParserGenerator:
    """Generates JSON parsers for one protocol and one generation run."""

    def __init__(self, context: CodegenContext, protocol: Protocol):
        self.context = context
        self.protocol = protocol
        self.model = context.model
        self.symbols = context.symbols

    def _runtime(self, writer: CodeWriter, name: str) -> str:
        return writer.use(RuntimeType(self.context.runtime_module, name))

    def _class(self, writer: CodeWriter, shape: Shape) -> str:
        return writer.use(RuntimeType.generated(self.symbols.namespace(shape), self.symbols.class_name(shape)))

    # Values

    def parse_expression(self, writer: CodeWriter, context: ValueContext) -> str:
        """Return an expression converting a decoded JSON value to the member's Python type."""
        target = self.model.expect_shape(context.member.target)
        v = context.value_expression
        p = context.path_expression
        t = target.type
        symbol = self.symbols.shape_symbol(target)
        if t == ShapeType.STRING:
            return f"{self._runtime(writer, 'expect_string')}({v}, {p})"
        if t == ShapeType.ENUM:
            return f"{self._runtime(writer, 'expect_enum')}({self._class(writer, target)}, {v}, {p})"
        if t == ShapeType.BOOLEAN:
            return f"{self._runtime(writer, 'expect_bool')}({v}, {p})"
        if symbol.numeric_class is NumericClass.SIGNED_INT:
            return f"{self._runtime(writer, 'expect_int')}({v}, {p}, {symbol.bits})"
        if symbol.numeric_class is NumericClass.BIG_INT:
            return f"{self._runtime(writer, 'expect_int')}({v}, {p})"
        if symbol.numeric_class is NumericClass.FLOAT:
            return f"{self._runtime(writer, 'expect_float')}({v}, {p})"
        if symbol.numeric_class is NumericClass.DECIMAL:
            return f"{self._runtime(writer, 'expect_decimal')}({v}, {p})"
        if t == ShapeType.BLOB:
            return f"{self._runtime(writer, 'expect_blob')}({v}, {p})"
        if t == ShapeType.TIMESTAMP:
            fmt = self.protocol.resolver.timestamp_format(
                context.member, HttpLocation.DOCUMENT, self.context.config.default_timestamp_format
            )
            timestamp_format = self._runtime(writer, "TimestampFormat")
            return f"{self._runtime(writer, 'expect_timestamp')}({v}, {p}, {timestamp_format}.{timestamp_format_member(fmt)})"
        if t == ShapeType.DOCUMENT:
            return f"{self._runtime(writer, 'expect_document')}({v})"
        if t in COLLECTION_TYPES:
            parser = self.list_parser(target)
        elif t == ShapeType.MAP:
            parser = self.map_parser(target)
        elif t == ShapeType.STRUCTURE:
            parser = self.structure_parser(target)
        elif t == ShapeType.UNION:
            parser = self.union_parser(target)
        else:
            raise UnsupportedShapeError(f"Cannot parse {t.value} shape {target.id} from JSON", target.id)
        return f"{writer.use(parser)}({v}, {p})"

    # Aggregates

    def structure_parser(self, shape: Shape) -> RuntimeType:
        name = f"deser_structure_{self.symbols.function_suffix(shape)}"

        def render(writer: CodeWriter) -> None:
            return_type = writer.type_of(self.symbols.shape_symbol(shape))
            with writer.block(f"def {name}(node: {writer.use(RuntimeType('typing', 'Any'))}, path: str) -> {return_type}:"):
                writer.write(f"data = {self._runtime(writer, 'expect_object')}(node, path)")
                writer.write(f"builder = {self._class(writer, shape)}.builder()")
                self.parse_members(writer, shape.members)
                writer.write(f"return {self._runtime(writer, 'build')}(builder, path)")

        return self.context.crate.inline_function(JSON_DESER_MODULE, name, render)

    def union_parser(self, shape: Shape) -> RuntimeType:
        name = f"deser_union_{self.symbols.function_suffix(shape)}"

        def render(writer: CodeWriter) -> None:
            return_type = writer.type_of(self.symbols.shape_symbol(shape))
            namespace = self.symbols.namespace(shape)
            with writer.block(f"def {name}(node: {writer.use(RuntimeType('typing', 'Any'))}, path: str) -> {return_type}:"):
                writer.write(
                    f"tag, item = {self._runtime(writer, 'union_variant')}(node, {json.dumps(shape.name)}, path)"
                )
                for member in shape.members:
                    json_name = self.protocol.json_name(member)
                    variant = writer.use(RuntimeType.generated(namespace, self.symbols.variant_name(shape, member)))
                    with writer.block(f"if tag == {json.dumps(json_name)}:"):
                        if is_unit(member.target):
                            writer.write(f"return {variant}()")
                        else:
                            value = self.parse_expression(
                                writer, ValueContext("item", path_expression("path", f".{json_name}"), member)
                            )
                            writer.write(f"return {variant}(value={value})")
                if self.context.renders_unknown_variants:
                    unknown = writer.use(RuntimeType.generated(namespace, self.symbols.unknown_variant_name(shape)))
                    writer.write(f"return {unknown}(tag=tag)")
                else:
                    error = self._runtime(writer, "DeserializationError")
                    message = f'f"Unknown variant {{tag!r}} of union {shape.name}"'
                    writer.write(f"raise {error}({message}, path)")

        return self.context.crate.inline_function(JSON_DESER_MODULE, name, render)

    def list_parser(self, shape: Shape) -> RuntimeType:
        name = f"deser_list_{self.symbols.function_suffix(shape)}"

        def render(writer: CodeWriter) -> None:
            return_type = writer.type_of(self.symbols.shape_symbol(shape))
            sparse = shape.has_trait(traits.SPARSE)
            with writer.block(f"def {name}(node: {writer.use(RuntimeType('typing', 'Any'))}, path: str) -> {return_type}:"):
                writer.write(f"items: {return_type} = []")
                with writer.block(f"for index, item in enumerate({self._runtime(writer, 'expect_array')}(node, path)):"):
                    with writer.block("if item is None:"):
                        if sparse:
                            writer.write("items.append(None)")
                        writer.write("continue")
                    value = self.parse_expression(writer, ValueContext("item", 'f"{path}[{index}]"', shape.member))
                    writer.write(f"items.append({value})")
                writer.write("return items")

        return self.context.crate.inline_function(JSON_DESER_MODULE, name, render)

    def map_parser(self, shape: Shape) -> RuntimeType:
        name = f"deser_map_{self.symbols.function_suffix(shape)}"

        def render(writer: CodeWriter) -> None:
            return_type = writer.type_of(self.symbols.shape_symbol(shape))
            sparse = shape.has_trait(traits.SPARSE)
            key_shape = self.model.expect_shape(shape.key.target)
            if key_shape.type == ShapeType.ENUM:
                key = f"{self._runtime(writer, 'expect_enum')}({self._class(writer, key_shape)}, key, path)"
            else:
                key = "key"
            with writer.block(f"def {name}(node: {writer.use(RuntimeType('typing', 'Any'))}, path: str) -> {return_type}:"):
                writer.write(f"items: {return_type} = {{}}")
                with writer.block(f"for key, item in {self._runtime(writer, 'expect_object')}(node, path).items():"):
                    with writer.block("if item is None:"):
                        if sparse:
                            writer.write(f"items[{key}] = None")
                        writer.write("continue")
                    value = self.parse_expression(writer, ValueContext("item", 'f"{path}.{key}"', shape.value))
                    writer.write(f"items[{key}] = {value}")
                writer.write("return items")

        return self.context.crate.inline_function(JSON_DESER_MODULE, name, render)

    def parse_members(self, writer: CodeWriter, members: Sequence[Member]) -> None:
        """Set each member present in ``data`` on ``builder``; null members count as absent."""
        for member in members:
            json_name = self.protocol.json_name(member)
            writer.write(f"item = data.get({json.dumps(json_name)})")
            with writer.block("if item is not None:"):
                value = self.parse_expression(writer, ValueContext("item", path_expression("path", f".{json_name}"), member))
                writer.write(f"builder = builder.{self.symbols.member_name(member)}({value})")

    # Payloads

    def _parse_payload_member(self, writer: CodeWriter, member: Member) -> None:
        target = self.model.expect_shape(member.target)
        setter = f"builder.{self.symbols.member_name(member)}"
        t = target.type
        if t in (ShapeType.STRUCTURE, ShapeType.UNION, ShapeType.DOCUMENT):
            document = f"{self._runtime(writer, 'parse_document')}(body)"
            value = self.parse_expression(writer, ValueContext(document, '"$"', member))
        elif t == ShapeType.BLOB:
            value = "bytes(body)"
        elif t == ShapeType.STRING:
            value = 'body.decode("utf-8")'
        elif t == ShapeType.ENUM:
            value = f'{self._class(writer, target)}.from_str(body.decode("utf-8"))'
        else:
            raise UnsupportedShapeError(f"Cannot bind {t.value} shape {target.id} to a payload", member.id)
        with writer.block("if body:"):
            writer.write(f"builder = {setter}({value})")

    # Operations

    def _top_level(self, writer: CodeWriter, name: str, shape: Shape, members: Sequence[Member], payload: Member | None) -> None:
        builder_type = writer.use(RuntimeType.generated(self.symbols.namespace(shape), self.symbols.builder_name(shape)))
        with writer.block(f"def {name}(body: bytes, builder: {builder_type}) -> {builder_type}:"):
            if payload is not None:
                self._parse_payload_member(writer, payload)
            elif members:
                writer.write('path = "$"')
                writer.write(
                    f"data = {self._runtime(writer, 'expect_object')}({self._runtime(writer, 'parse_document')}(body), path)"
                )
                self.parse_members(writer, members)
            writer.write("return builder")

    def _payload(self, members: Sequence[Member]) -> Member | None:
        for member in members:
            if not self.protocol.resolver.is_streaming(member):
                return member
        return None

    def operation_input_parser(self, operation: Shape) -> RuntimeType | None:
        """Parser of the request body, or None when the request has no document members and no payload."""
        resolver = self.protocol.resolver
        shape = self.model.expect_shape(operation.input, ShapeType.STRUCTURE)
        members = resolver.request_members(operation, HttpLocation.DOCUMENT)
        payload = self._payload(resolver.request_members(operation, HttpLocation.PAYLOAD))
        if not members and payload is None:
            return None
        name = f"deser_operation_{to_snake_case(operation.name)}_input"
        return self.context.crate.inline_function(
            OPERATION_DESER_MODULE, name, lambda writer: self._top_level(writer, name, shape, members, payload)
        )

    def operation_output_parser(self, operation: Shape) -> RuntimeType | None:
        """Parser of the response body, or None when the operation declared no output."""
        resolver = self.protocol.resolver
        shape = self.model.expect_shape(operation.output, ShapeType.STRUCTURE)
        if shape.get_trait(traits.SYNTHETIC_OUTPUT, {}).get("originalId") is None:
            return None
        members = resolver.response_members(operation, HttpLocation.DOCUMENT)
        payload = self._payload(resolver.response_members(operation, HttpLocation.PAYLOAD))
        name = f"deser_operation_{to_snake_case(operation.name)}_output"
        return self.context.crate.inline_function(
            OPERATION_DESER_MODULE, name, lambda writer: self._top_level(writer, name, shape, members, payload)
        )

    def error_parser(self, error: Shape) -> RuntimeType:
        members = self.protocol.resolver.error_members(error.id, HttpLocation.DOCUMENT)
        name = f"deser_error_{to_snake_case(error.name)}"
        return self.context.crate.inline_function(
            OPERATION_DESER_MODULE, name, lambda writer: self._top_level(writer, name, error, members, None)
        )
