"""Shape to Code Generator

A Python package for generating typed data classes, builders and JSON
protocol serializers from service shape models, with a transform pipeline,
optional formatting and atomic output.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    CodegenError,
    CodegenTarget,
    CodeGeneratorConfig,
    FormatterConfig,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
    load_model,
    load_model_file,
)

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "CodegenError",
    "CodegenTarget",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
    "load_model",
    "load_model_file",
]
