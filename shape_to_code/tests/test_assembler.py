"""
Tests for the module assembler: the code writer, generated modules, the
crate and the atomic writer.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from shape_to_code.pipeline.assembler import AtomicWriter, CodegenCrate, CodeWriter, GeneratedModule, RuntimeType, validate_python
from shape_to_code.pipeline.errors import GeneratedCodeError, OutputExistsError
from shape_to_code.pipeline.model import ShapeType
from shape_to_code.pipeline.symbols import Symbol


class TestCodeWriter:
    def test_blocks_and_indentation(self):
        writer = CodeWriter(GeneratedModule("m"))
        with writer.block("def f(x):"):
            with writer.block("if x:"):
                writer.write("return 1")
            writer.write("return 2")
        assert writer.render() == "def f(x):\n    if x:\n        return 1\n    return 2"

    def test_empty_block_gets_pass(self):
        writer = CodeWriter(GeneratedModule("m"))
        with writer.block("class Empty:"):
            pass
        assert writer.render() == "class Empty:\n    pass"

    def test_safe_names_are_unique_per_prefix(self):
        writer = CodeWriter(GeneratedModule("m"))
        assert [writer.safe_name("item"), writer.safe_name("item"), writer.safe_name("key")] == [
            "item_1",
            "item_2",
            "key_1",
        ]

    def test_write_lines_keeps_blank_lines(self):
        writer = CodeWriter(GeneratedModule("m"))
        with writer.block("class A:"):
            writer.write_lines("x = 1\n\ny = 2")
        assert writer.render() == "class A:\n    x = 1\n\n    y = 2"


class TestGeneratedModule:
    def test_references(self):
        module = GeneratedModule("json_ser")
        assert module.reference(RuntimeType("shape_to_code.runtime", "Number")) == "Number"
        assert module.reference(RuntimeType.generated("model", "Person")) == "model.Person"
        assert module.reference(RuntimeType.generated("json_ser", "serialize_x")) == "serialize_x"

    def test_type_reference(self):
        module = GeneratedModule("model")
        element = Symbol("Person", ShapeType.STRUCTURE, namespace="model", is_optional=True)
        symbol = Symbol("list", ShapeType.LIST, type_args=(element,), is_optional=True)
        assert module.type_reference(symbol) == "list[Person | None] | None"

        when = Symbol("datetime", ShapeType.TIMESTAMP, import_from="datetime")
        assert module.type_reference(when) == "datetime"
        assert "from datetime import datetime" in module.render()

    def test_import_grouping(self):
        module = GeneratedModule("operation", "Operation descriptors.")
        module.reference(RuntimeType("shape_to_code.runtime", "Operation"))
        module.reference(RuntimeType("dataclasses", "field"))
        module.reference(RuntimeType("dataclasses", "dataclass"))
        module.reference(RuntimeType.generated("output", "X"))
        module.reference(RuntimeType.generated("input", "Y"))
        module.add_fragment("X = 1")

        source = module.render("# header")
        assert source == (
            "# header\n"
            "\n"
            '"""Operation descriptors."""\n'
            "\n"
            "from __future__ import annotations\n"
            "\n"
            "from dataclasses import dataclass, field\n"
            "\n"
            "from shape_to_code.runtime import Operation\n"
            "\n"
            "from . import input, output\n"
            "\n"
            "\n"
            "X = 1\n"
        )

    def test_reserved_slots_keep_their_position(self):
        module = GeneratedModule("m")
        slot = module.reserve()
        module.add_fragment("b = 2")
        assert not module.is_empty
        module.fill(slot, "a = 1")
        assert module.render().endswith("a = 1\n\n\nb = 2\n")

    def test_empty_module(self):
        module = GeneratedModule("m")
        module.reserve()
        assert module.is_empty


class TestCodegenCrate:
    def test_inline_function_is_rendered_once(self):
        crate = CodegenCrate("pkg")
        calls = []

        def render(writer):
            calls.append(1)
            # Asking for the function while rendering it returns the reference
            reference = crate.inline_function("json_ser", "f", render)
            with writer.block("def f():"):
                writer.write(f"return {writer.use(reference)}")

        first = crate.inline_function("json_ser", "f", render)
        second = crate.inline_function("json_ser", "f", render)

        assert first == second == RuntimeType(".json_ser", "f")
        assert len(calls) == 1
        assert crate.has_function("json_ser", "f")
        assert crate.finalize()["pkg/json_ser.py"].count("def f():") == 1

    def test_finalize_orders_and_skips_empty_modules(self):
        crate = CodegenCrate("pkg")
        crate.with_module("service", lambda writer: writer.write("SERVICE = None"))
        crate.with_module("model", lambda writer: writer.write("X = 1"))
        crate.module("error")

        files = crate.finalize("# generated")
        assert list(files) == ["pkg/model.py", "pkg/service.py"]
        assert files["pkg/model.py"].startswith("# generated\n")


class TestAtomicWriter:
    def test_validate_python(self):
        validate_python("x = 1\n")
        with pytest.raises(GeneratedCodeError):
            validate_python("def broken(:\n")

    def test_write_creates_parents(self, tmp_path):
        path = tmp_path / "pkg" / "model.py"
        AtomicWriter().write(path, "x = 1\n")
        assert path.read_text() == "x = 1\n"

    def test_invalid_content_leaves_nothing_behind(self, tmp_path):
        path = tmp_path / "model.py"
        path.write_text("old = 1\n")
        with pytest.raises(GeneratedCodeError):
            AtomicWriter().write(path, "def broken(:\n")
        assert path.read_text() == "old = 1\n"
        assert [p.name for p in tmp_path.iterdir()] == ["model.py"]

    def test_write_if_not_exists(self, tmp_path):
        path = tmp_path / "model.py"
        writer = AtomicWriter()
        writer.write_if_not_exists(path, "x = 1\n")
        with pytest.raises(OutputExistsError):
            writer.write_if_not_exists(path, "x = 2\n")
        assert Path(path).read_text() == "x = 1\n"

    def test_custom_validator(self, tmp_path):
        def reject(content: str) -> None:
            raise GeneratedCodeError("rejected")

        with pytest.raises(GeneratedCodeError):
            AtomicWriter(validate=reject).write(tmp_path / "a.py", "x = 1\n")
        AtomicWriter(validate=reject).write(tmp_path / "b.py", "x = 1\n", validate=False)
        assert (tmp_path / "b.py").exists()
