"""
JSON serializer generator.

Renders the functions that write generated values through the runtime
``JsonObjectWriter``/``JsonArrayWriter``/``JsonValueWriter`` classes:

* ``json_ser.serialize_structure_<ns>_<name>(obj, value)`` and
  ``json_ser.serialize_union_<ns>_<name>(obj, value)``, emitted once per
  shape however many call sites reference them;
* ``json_ser.serialize_payload_*`` for structure and union payloads;
* ``operation_ser.serialize_operation_<op>_input/output(value) -> bytes`` and
  ``operation_ser.serialize_error_<name>(value) -> bytes``.
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
from .contexts import MemberContext, StructContext
from .customizations import JsonSection, JsonSectionKind
from .protocol import Protocol

logger = logging.getLogger(__name__)

JSON_SER_MODULE = "json_ser"
OPERATION_SER_MODULE = "operation_ser"

_NUMBER_CONSTRUCTORS = {
    NumericClass.SIGNED_INT: "neg_int",
    NumericClass.BIG_INT: "big_int",
    NumericClass.FLOAT: "floating",
    NumericClass.DECIMAL: "decimal",
}


def timestamp_format_member(fmt: str) -> str:
    """Name of the ``TimestampFormat`` member for a format (``date-time`` -> ``DATE_TIME``)."""
    return fmt.upper().replace("-", "_")


class JsonSerializerGenerator:
    """Generates JSON serializers for one protocol and one generation run."""

    def __init__(self, context: CodegenContext, protocol: Protocol):
        self.context = context
        self.protocol = protocol
        self.model = context.model
        self.symbols = context.symbols

    def _runtime(self, writer: CodeWriter, name: str) -> str:
        return writer.use(RuntimeType(self.context.runtime_module, name))

    # Structures and unions

    def structure_serializer(self, shape: Shape) -> RuntimeType:
        """Return the memoized serializer writing the members of ``shape`` into an object writer."""
        name = f"serialize_structure_{self.symbols.function_suffix(shape)}"

        def render(writer: CodeWriter) -> None:
            object_writer = self._runtime(writer, "JsonObjectWriter")
            value_type = writer.type_of(self.symbols.shape_symbol(shape))
            with writer.block(f"def {name}(obj: {object_writer}, value: {value_type}) -> None:"):
                self.serialize_members(writer, StructContext("obj", "value", shape), shape.members)

        return self.context.crate.inline_function(JSON_SER_MODULE, name, render)

    def union_serializer(self, shape: Shape) -> RuntimeType:
        """Return the memoized serializer writing the set variant of ``shape`` into an object writer."""
        name = f"serialize_union_{self.symbols.function_suffix(shape)}"

        def render(writer: CodeWriter) -> None:
            object_writer = self._runtime(writer, "JsonObjectWriter")
            value_type = writer.type_of(self.symbols.shape_symbol(shape))
            serialization_error = self._runtime(writer, "SerializationError")
            with writer.block(f"def {name}(obj: {object_writer}, value: {value_type}) -> None:"):
                keyword = "if"
                for member in shape.members:
                    variant = writer.use(
                        RuntimeType.generated(self.symbols.namespace(shape), self.symbols.variant_name(shape, member))
                    )
                    with writer.block(f"{keyword} isinstance(value, {variant}):"):
                        json_name = self.protocol.json_name(member)
                        if is_unit(member.target):
                            writer.write(f"obj.key({json.dumps(json_name)}).start_object().finish()")
                        else:
                            self.serialize_member(writer, MemberContext.union_member("obj", json_name, "value.value", member))
                    keyword = "elif"
                unknown = f"raise {serialization_error}.unknown_variant({json.dumps(shape.name)})"
                if keyword == "if":
                    writer.write(unknown)
                else:
                    with writer.block("else:"):
                        writer.write(unknown)

        return self.context.crate.inline_function(JSON_SER_MODULE, name, render)

    def serialize_members(self, writer: CodeWriter, context: StructContext, members: Sequence[Member]) -> None:
        """Write the given members of a structure; any subset of the structure members may be passed."""
        for member in members:
            value = f"{context.local_name}.{self.symbols.member_name(member)}"
            self.serialize_member(
                writer, MemberContext.struct_member(context.object_name, self.protocol.json_name(member), value, member)
            )

    # Members and values

    def serialize_member(self, writer: CodeWriter, context: MemberContext) -> None:
        symbol = self.symbols.member_symbol(context.member)
        if symbol.is_optional:
            with writer.block(f"if {context.value_expression} is not None:"):
                self.serialize_value(writer, context)
            if context.write_nulls:
                with writer.block("else:"):
                    writer.write(f"{context.writer_expression}.null()")
        elif (
            context.in_structure
            and self.context.config.elide_zero_values
            and not context.member.is_required
            and self.symbols.is_zero_default(context.member)
        ):
            with writer.block(f"if {context.value_expression}:"):
                self.serialize_value(writer, context)
        else:
            self.serialize_value(writer, context)

    def serialize_value(self, writer: CodeWriter, context: MemberContext) -> None:
        """Write a present value through the writer expression of ``context``."""
        target = self.model.expect_shape(context.member.target)
        w = context.writer_expression
        v = context.value_expression
        t = target.type
        if t == ShapeType.STRING:
            writer.write(f"{w}.string({v})")
        elif t == ShapeType.ENUM:
            writer.write(f"{w}.string({v}.as_str())")
        elif t == ShapeType.BOOLEAN:
            writer.write(f"{w}.boolean({v})")
        elif self.symbols.shape_symbol(target).numeric_class is not None:
            number = self._runtime(writer, "Number")
            constructor = _NUMBER_CONSTRUCTORS[self.symbols.shape_symbol(target).numeric_class]
            writer.write(f"{w}.number({number}.{constructor}({v}))")
        elif t == ShapeType.BLOB:
            writer.write(f"{w}.string({self._runtime(writer, 'encode_blob')}({v}))")
        elif t == ShapeType.TIMESTAMP:
            fmt = self.protocol.resolver.timestamp_format(
                context.member, HttpLocation.DOCUMENT, self.context.config.default_timestamp_format
            )
            timestamp_format = self._runtime(writer, "TimestampFormat")
            writer.write(f"{w}.date_time({v}, {timestamp_format}.{timestamp_format_member(fmt)})")
        elif t == ShapeType.DOCUMENT:
            writer.write(f"{w}.document({v})")
        elif t in COLLECTION_TYPES:
            array = writer.safe_name("array")
            item = writer.safe_name("item")
            writer.write(f"{array} = {w}.start_array()")
            with writer.block(f"for {item} in {v}:"):
                self.serialize_member(writer, MemberContext.collection_member(array, item, target.member))
            writer.write(f"{array}.finish()")
        elif t == ShapeType.MAP:
            obj = writer.safe_name("object")
            key = writer.safe_name("key")
            item = writer.safe_name("value")
            key_shape = self.model.expect_shape(target.key.target)
            key_expression = f"{key}.as_str()" if key_shape.type == ShapeType.ENUM else key
            writer.write(f"{obj} = {w}.start_object()")
            with writer.block(f"for {key}, {item} in {v}.items():"):
                self.serialize_member(writer, MemberContext.map_member(obj, key_expression, item, target.value))
            writer.write(f"{obj}.finish()")
        elif t in (ShapeType.STRUCTURE, ShapeType.UNION):
            serializer = self.structure_serializer(target) if t == ShapeType.STRUCTURE else self.union_serializer(target)
            obj = writer.safe_name("object")
            writer.write(f"{obj} = {w}.start_object()")
            writer.write(f"{writer.use(serializer)}({obj}, {v})")
            writer.write(f"{obj}.finish()")
        else:
            raise UnsupportedShapeError(f"Cannot serialize {t.value} shape {target.id} as JSON", target.id)

    # Payloads

    def payload_serializer(self, shape: Shape) -> RuntimeType:
        """Serializer of a structure or union bound to the whole body; an unset payload is ``{}``."""
        kind = "structure" if shape.type == ShapeType.STRUCTURE else "union"
        name = f"serialize_payload_{kind}_{self.symbols.function_suffix(shape)}"

        def render(writer: CodeWriter) -> None:
            serializer = self.structure_serializer(shape) if kind == "structure" else self.union_serializer(shape)
            value_type = writer.type_of(self.symbols.shape_symbol(shape))
            with writer.block(f"def {name}(value: {value_type} | None) -> bytes:"):
                with writer.block("if value is None:"):
                    writer.write('return b"{}"')
                writer.write("out: list[str] = []")
                writer.write(f"obj = {self._runtime(writer, 'JsonObjectWriter')}(out)")
                writer.write(f"{writer.use(serializer)}(obj, value)")
                writer.write("obj.finish()")
                writer.write(f"return {self._runtime(writer, 'to_bytes')}(out)")

        return self.context.crate.inline_function(JSON_SER_MODULE, name, render)

    def _serialize_payload_member(self, writer: CodeWriter, member: Member) -> None:
        target = self.model.expect_shape(member.target)
        value = f"value.{self.symbols.member_name(member)}"
        t = target.type
        if t in (ShapeType.STRUCTURE, ShapeType.UNION):
            writer.write(f"return {writer.use(self.payload_serializer(target))}({value})")
        elif t == ShapeType.DOCUMENT:
            writer.write("out: list[str] = []")
            writer.write(f"{self._runtime(writer, 'JsonValueWriter')}(out).document({value})")
            writer.write(f"return {self._runtime(writer, 'to_bytes')}(out)")
        elif t == ShapeType.BLOB:
            writer.write(f'return {value} or b""')
        elif t == ShapeType.STRING:
            writer.write(f'return ({value} or "").encode("utf-8")')
        elif t == ShapeType.ENUM:
            writer.write(f'return {value}.as_str().encode("utf-8") if {value} is not None else b""')
        else:
            raise UnsupportedShapeError(f"Cannot bind {t.value} shape {target.id} to a payload", member.id)

    # Operations

    def _top_level(
        self,
        writer: CodeWriter,
        name: str,
        shape: Shape,
        members: Sequence[Member],
        payload: Member | None,
        kind: JsonSectionKind,
    ) -> None:
        value_type = writer.type_of(self.symbols.shape_symbol(shape))
        with writer.block(f"def {name}(value: {value_type}) -> bytes:"):
            if payload is not None:
                self._serialize_payload_member(writer, payload)
                return
            writer.write("out: list[str] = []")
            writer.write(f"obj = {self._runtime(writer, 'JsonObjectWriter')}(out)")
            self.serialize_members(writer, StructContext("obj", "value", shape), members)
            section = JsonSection(kind, shape, "obj")
            for customization in self.protocol.customizations:
                code = customization(section)
                if code:
                    writer.write_lines(code)
            writer.write("obj.finish()")
            writer.write(f"return {self._runtime(writer, 'to_bytes')}(out)")

    def _payload(self, members: Sequence[Member]) -> Member | None:
        """The non-streaming payload member, if any."""
        for member in members:
            if not self.protocol.resolver.is_streaming(member):
                return member
        return None

    def operation_input_serializer(self, operation: Shape) -> RuntimeType | None:
        """Serializer of the request body, or None when the request has no document members and no payload."""
        resolver = self.protocol.resolver
        shape = self.model.expect_shape(operation.input, ShapeType.STRUCTURE)
        members = resolver.request_members(operation, HttpLocation.DOCUMENT)
        payload = self._payload(resolver.request_members(operation, HttpLocation.PAYLOAD))
        if not members and payload is None:
            return None
        name = f"serialize_operation_{to_snake_case(operation.name)}_input"
        return self.context.crate.inline_function(
            OPERATION_SER_MODULE,
            name,
            lambda writer: self._top_level(writer, name, shape, members, payload, JsonSectionKind.INPUT_STRUCT),
        )

    def operation_output_serializer(self, operation: Shape) -> RuntimeType | None:
        """Serializer of the response body, or None when the operation declared no output."""
        resolver = self.protocol.resolver
        shape = self.model.expect_shape(operation.output, ShapeType.STRUCTURE)
        if shape.get_trait(traits.SYNTHETIC_OUTPUT, {}).get("originalId") is None:
            return None
        members = resolver.response_members(operation, HttpLocation.DOCUMENT)
        payload = self._payload(resolver.response_members(operation, HttpLocation.PAYLOAD))
        name = f"serialize_operation_{to_snake_case(operation.name)}_output"
        return self.context.crate.inline_function(
            OPERATION_SER_MODULE,
            name,
            lambda writer: self._top_level(writer, name, shape, members, payload, JsonSectionKind.OUTPUT_STRUCT),
        )

    def error_serializer(self, error: Shape) -> RuntimeType:
        """Serializer of an error body, shared by every operation raising the error."""
        resolver = self.protocol.resolver
        members = resolver.error_members(error.id, HttpLocation.DOCUMENT)
        name = f"serialize_error_{to_snake_case(error.name)}"
        return self.context.crate.inline_function(
            OPERATION_SER_MODULE,
            name,
            lambda writer: self._top_level(writer, name, error, members, None, JsonSectionKind.SERVER_ERROR),
        )
