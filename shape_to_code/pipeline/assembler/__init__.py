"""
Module assembler: turns generated fragments into files.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter, validate_python
from .crate import MODULE_ORDER, CodegenCrate, GeneratedModule
from .writer import CodeWriter, RuntimeType

__all__ = [
    "AtomicWriter",
    "CodeWriter",
    "CodegenCrate",
    "GeneratedModule",
    "MODULE_ORDER",
    "RuntimeType",
    "validate_python",
]
