"""
Pipeline - shape model to Python code generator.

This module provides a multi-phase architecture for generating a Python
package from a service model:

1. Phase 1 (Model): Load the JSON AST into an immutable shape graph
2. Phase 2 (Transform): Normalize the graph for code generation
3. Phase 3 (Symbols): Map shapes and members to Python types
4. Phase 4 (Visit): Render declarations, serializers and parsers
5. Phase 5 (Assemble): Collect fragments into modules
6. Phase 6 (Formatter): Optional post-processing (e.g., ruff for Python)
"""

from __future__ import annotations

from .assembler import AtomicWriter
from .config import CodegenTarget, CodeGeneratorConfig, FormatterConfig, OutputConfig, OutputMode
from .errors import (
    CodegenError,
    GeneratedCodeError,
    InvalidModelError,
    OutputExistsError,
    ShapeNotFoundError,
    UnsupportedProtocolError,
    UnsupportedShapeError,
)
from .generator import PipelineGenerator
from .model import Model, load_model, load_model_file
from .protocols import JsonCustomization, JsonSection, JsonSectionKind

__all__ = [
    "AtomicWriter",
    "CodeGeneratorConfig",
    "CodegenError",
    "CodegenTarget",
    "FormatterConfig",
    "GeneratedCodeError",
    "InvalidModelError",
    "JsonCustomization",
    "JsonSection",
    "JsonSectionKind",
    "Model",
    "OutputConfig",
    "OutputExistsError",
    "OutputMode",
    "PipelineGenerator",
    "ShapeNotFoundError",
    "UnsupportedProtocolError",
    "UnsupportedShapeError",
    "load_model",
    "load_model_file",
]
