"""
Collects generated fragments into the modules of the output package.
"""

from __future__ import annotations

from collections.abc import Callable

from .writer import CodeWriter, RuntimeType

# Public modules in the order they are written
MODULE_ORDER = (
    "model",
    "input",
    "output",
    "error",
    "json_ser",
    "json_deser",
    "operation_ser",
    "operation_deser",
    "operation",
    "service",
    "__init__",
)

MODULE_DOCS = {
    "model": "Data types shared by the operations of the service.",
    "input": "Operation input types.",
    "output": "Operation output types.",
    "error": "Modeled error types.",
    "json_ser": "JSON serializers for structures and unions.",
    "json_deser": "JSON parsers for structures, unions, lists and maps.",
    "operation_ser": "Operation input, output and error serializers.",
    "operation_deser": "Operation input, output and error parsers.",
    "operation": "Operation descriptors.",
    "service": "Service descriptor.",
}

_STDLIB_MODULES = frozenset({"dataclasses", "datetime", "decimal", "enum", "typing"})


class GeneratedModule:
    """One generated Python module: imports plus an ordered list of fragments."""

    def __init__(self, name: str, docstring: str | None = None):
        self.name = name
        self.docstring = docstring
        self._fragments: list[str | None] = []
        self._imports: dict[str, set[str]] = {}
        self._siblings: set[str] = set()

    @property
    def is_empty(self) -> bool:
        return not any(self._fragments)

    def add_import(self, module: str, name: str) -> None:
        self._imports.setdefault(module, set()).add(name)

    def reference(self, runtime_type: RuntimeType) -> str:
        if not runtime_type.is_sibling:
            self.add_import(runtime_type.module, runtime_type.name)
            return runtime_type.name
        if runtime_type.sibling == self.name:
            return runtime_type.name
        self._siblings.add(runtime_type.sibling)
        return f"{runtime_type.sibling}.{runtime_type.name}"

    def type_reference(self, symbol) -> str:
        """Render a symbol as a type annotation, importing what it needs."""
        if symbol.type_args:
            args = ", ".join(self.type_reference(arg) for arg in symbol.type_args)
            base = f"{symbol.name}[{args}]"
        elif symbol.namespace is not None:
            base = self.reference(RuntimeType.generated(symbol.namespace, symbol.name))
        elif symbol.import_from is not None:
            base = self.reference(RuntimeType(symbol.import_from, symbol.name))
        else:
            base = symbol.name
        return f"{base} | None" if symbol.is_optional else base

    def reserve(self) -> int:
        """Reserve the position of a fragment that is rendered later."""
        self._fragments.append(None)
        return len(self._fragments) - 1

    def fill(self, slot: int, code: str) -> None:
        self._fragments[slot] = code

    def add_fragment(self, code: str) -> None:
        self._fragments.append(code)

    def _render_imports(self) -> list[str]:
        stdlib = sorted(module for module in self._imports if module.split(".")[0] in _STDLIB_MODULES)
        others = sorted(module for module in self._imports if module not in stdlib)
        groups = []
        for modules in (stdlib, others):
            if modules:
                groups.append([f"from {module} import {', '.join(sorted(self._imports[module]))}" for module in modules])
        if self._siblings:
            groups.append([f"from . import {', '.join(sorted(self._siblings))}"])
        lines: list[str] = []
        for group in groups:
            lines.extend(group)
            lines.append("")
        return lines

    def render(self, header: str | None = None) -> str:
        lines: list[str] = []
        if header:
            lines.extend([header, ""])
        if self.docstring:
            lines.extend([f'"""{self.docstring}"""', ""])
        lines.extend(["from __future__ import annotations", ""])
        lines.extend(self._render_imports())
        body = "\n\n\n".join(fragment for fragment in self._fragments if fragment)
        return "\n".join(lines) + "\n\n" + body + "\n"


class CodegenCrate:
    """The output package: named modules and memoized inline functions."""

    def __init__(self, package_name: str):
        self.package_name = package_name
        self._modules: dict[str, GeneratedModule] = {}
        self._functions: dict[tuple[str, str], RuntimeType] = {}

    def module(self, name: str) -> GeneratedModule:
        if name not in self._modules:
            self._modules[name] = GeneratedModule(name, MODULE_DOCS.get(name))
        return self._modules[name]

    def with_module(self, name: str, render: Callable[[CodeWriter], None]) -> None:
        """Render a fragment with a fresh writer and append it to a module."""
        writer = CodeWriter(self.module(name))
        render(writer)
        self.module(name).add_fragment(writer.render())

    def inline_function(self, module: str, name: str, render: Callable[[CodeWriter], None]) -> RuntimeType:
        """
        Emit a function at most once per ``(module, name)``.

        The slot is reserved before ``render`` runs, so a renderer that asks
        for its own function (a recursive shape) gets the reference back
        instead of rendering it again.

        Args:
            module: Generated module the function lives in
            name: Function name
            render: Callback writing the full ``def`` into a CodeWriter

        Returns:
            RuntimeType referring to the function
        """
        key = (module, name)
        if key in self._functions:
            return self._functions[key]
        runtime_type = RuntimeType.generated(module, name)
        self._functions[key] = runtime_type
        generated = self.module(module)
        slot = generated.reserve()
        writer = CodeWriter(generated)
        render(writer)
        generated.fill(slot, writer.render())
        return runtime_type

    def has_function(self, module: str, name: str) -> bool:
        return (module, name) in self._functions

    def finalize(self, header: str | None = None) -> dict[str, str]:
        """
        Render every non-empty module.

        Returns:
            Mapping of path relative to the output directory to source
        """
        files: dict[str, str] = {}
        names = [name for name in MODULE_ORDER if name in self._modules]
        names.extend(sorted(name for name in self._modules if name not in MODULE_ORDER))
        for name in names:
            module = self._modules[name]
            if module.is_empty:
                continue
            files[f"{self.package_name}/{name}.py"] = module.render(header)
        return files
