"""
State shared by the generators of one run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .assembler import CodegenCrate
from .config import CodeGeneratorConfig
from .model import Model, Shape
from .symbols import SymbolProvider

if TYPE_CHECKING:
    from .generators.templates import TemplateRenderer


@dataclass
class CodegenContext:
    """Everything a generator needs; one instance per generation run.

    Attributes:
        model: The normalized model
        service: The service being generated
        symbols: Symbol resolver (memoized for this run only)
        crate: Output modules and memoized functions
        config: Generation options
        templates: Declaration templates
    """

    model: Model
    service: Shape
    symbols: SymbolProvider
    crate: CodegenCrate
    config: CodeGeneratorConfig
    templates: TemplateRenderer

    @property
    def runtime_module(self) -> str:
        return self.config.runtime_module

    @property
    def renders_unknown_variants(self) -> bool:
        return self.config.target.renders_unknown_variants
