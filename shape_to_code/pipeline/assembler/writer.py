"""
Line-oriented Python source writer.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..symbols import Symbol
    from .crate import GeneratedModule


@dataclass(frozen=True)
class RuntimeType:
    """A name importable by generated code.

    ``module`` is either an absolute module path (``shape_to_code.runtime``,
    ``decimal``) or the name of a generated sibling module prefixed with a
    dot (``.json_ser``).
    """

    module: str
    name: str

    @property
    def is_sibling(self) -> bool:
        return self.module.startswith(".")

    @property
    def sibling(self) -> str:
        return self.module[1:]

    @staticmethod
    def generated(module: str, name: str) -> RuntimeType:
        return RuntimeType(f".{module}", name)


class CodeWriter:
    """Accumulates indented lines of Python for one fragment of a module."""

    INDENT = "    "

    def __init__(self, module: GeneratedModule):
        self.module = module
        self.lines: list[str] = []
        self._level = 0
        self._names: dict[str, int] = {}

    def write(self, line: str = "") -> CodeWriter:
        self.lines.append(f"{self.INDENT * self._level}{line}" if line else "")
        return self

    def write_lines(self, text: str) -> CodeWriter:
        for line in text.splitlines():
            self.write(line)
        return self

    @contextmanager
    def block(self, header: str) -> Iterator[CodeWriter]:
        """Write ``header`` and indent the body; an empty body becomes ``pass``."""
        self.write(header)
        self._level += 1
        start = len(self.lines)
        try:
            yield self
        finally:
            if len(self.lines) == start:
                self.write("pass")
            self._level -= 1

    def safe_name(self, prefix: str = "var") -> str:
        """Return a local variable name unique within this writer."""
        count = self._names.get(prefix, 0) + 1
        self._names[prefix] = count
        return f"{prefix}_{count}"

    def use(self, runtime_type: RuntimeType) -> str:
        """Import a runtime type into the module and return how to refer to it."""
        return self.module.reference(runtime_type)

    def type_of(self, symbol: Symbol) -> str:
        return self.module.type_reference(symbol)

    def render(self) -> str:
        return "\n".join(self.lines)
