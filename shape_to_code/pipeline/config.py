"""
Options of a generation run.

Options are plain dataclasses so that a run can be described by a JSON
file passed to the CLI with ``--config``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum

from .model import traits


class OutputMode(str, Enum):
    """What ``PipelineGenerator.write`` does when a module file already exists."""

    ERROR_IF_EXISTS = "error"  # refuse, nothing is written
    FORCE = "force"  # replace the existing modules


class CodegenTarget(str, Enum):
    """Who consumes the generated code.

    Clients must tolerate values added to the service later, so their
    unions carry an unknown variant and their enums stay open. Servers
    reject what they do not know.
    """

    CLIENT = "client"
    SERVER = "server"

    @property
    def renders_unknown_variants(self) -> bool:
        return self is CodegenTarget.CLIENT


@dataclass
class OutputConfig:
    """How generated modules reach the disk.

    Attributes:
        mode: Behavior when a module file already exists
        validate_before_write: Parse every module with ``ast`` before writing any
        atomic_write: Write through a temporary file renamed into place
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Options passed to ruff or black when formatting generated modules."""

    enabled: bool = False

    line_length: int = 120

    # ruff/black target ("py312", "py313", ...)
    target_version: str = "py312"

    # Prefer double quotes
    string_normalization: bool = True

    magic_trailing_comma: bool = True


@dataclass
class CodeGeneratorConfig:
    """Options of one generation run."""

    # Absolute id of the service to generate (empty = the only service in the model)
    service: str = ""

    # Protocol trait id to use (empty = first supported protocol trait of the service)
    protocol: str = ""

    # Consumer of the generated code
    target: CodegenTarget = CodegenTarget.CLIENT

    # Start every module with a "# Generated by" line
    add_generation_comment: bool = True

    # Skip non-required members whose value equals their zero default
    elide_zero_values: bool = True

    # Timestamp format used for document members without a timestampFormat trait
    default_timestamp_format: str = traits.EPOCH_SECONDS

    # Module the generated code imports its runtime from
    runtime_module: str = "shape_to_code.runtime"

    # Shape names to emit first, in this order (empty = shape id order)
    order_shapes: list[str] = field(default_factory=list)

    # Post-processing of the rendered modules
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Writing of the package
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a JSON config document; unknown keys are ignored."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                config.output = OutputConfig(**{**v, "mode": OutputMode(v.get("mode", OutputMode.ERROR_IF_EXISTS))})
            elif k == "target":
                config.target = CodegenTarget(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a JSON config document."""
        d = asdict(self)
        d["target"] = self.target.value
        d["output"]["mode"] = self.output.mode.value
        return d
