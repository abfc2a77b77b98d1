"""
Pipeline orchestrator.

Runs the transform pipeline, the shape visitor and the protocol generators
for one service and assembles the generated package:

1. Transform: normalize the model (mixins, service errors, recursion,
   synthetic operation inputs/outputs, event streams)
2. Protocol: select the wire protocol of the service
3. Visit: render declarations, serializers, parsers and descriptors
4. Assemble: render modules, optionally format them
5. Write: validate and write the package atomically (``write`` only)
"""

from __future__ import annotations

import keyword
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .. import __version__
from ..cli_utils import reconstruct_command_line
from .assembler import AtomicWriter, CodegenCrate, validate_python
from .config import CodeGeneratorConfig, OutputMode
from .context import CodegenContext
from .errors import GeneratedCodeError, InvalidModelError, OutputExistsError
from .formatters import format_code
from .generators import CodegenVisitor, TemplateRenderer
from .model import Model, Shape, ShapeId, ShapeType, load_model
from .protocols import JsonCustomization, resolve_protocol
from .symbols import SymbolProvider
from .transformers import baseline_transform

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """Generates a Python package for one service of a model."""

    def __init__(
        self,
        name: str,
        model: Model | dict[str, Any],
        config: CodeGeneratorConfig | None = None,
        customizations: Sequence[JsonCustomization] | None = None,
    ):
        """
        Initialize the generator.

        Args:
            name: Name of the generated package (a Python identifier)
            model: Loaded model, or a JSON AST document
            config: Generation options
            customizations: Extra JSON serializer customizations, in invocation order
        """
        if not name.isidentifier() or keyword.iskeyword(name):
            raise ValueError(f"Package name {name!r} is not a valid Python identifier")
        self.name = name
        self.model = model if isinstance(model, Model) else load_model(model)
        self.config = config or CodeGeneratorConfig()
        self.customizations = list(customizations or [])

    def select_service(self) -> Shape:
        """The configured service, or the only service of the model."""
        if self.config.service:
            return self.model.expect_shape(ShapeId.from_string(self.config.service), ShapeType.SERVICE)
        services = self.model.shapes_of_type(ShapeType.SERVICE)
        if len(services) != 1:
            names = ", ".join(sorted(str(s.id) for s in services)) or "none"
            raise InvalidModelError(f"Expected exactly one service in the model, found {names}; set the service option")
        return services[0]

    def _generation_comment(self) -> str | None:
        if not self.config.add_generation_comment:
            return None
        try:
            from ..shape_to_code import shape_to_code as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            command_line = "shape_to_code"
        return f"# Generated by shape_to_code v{__version__} : {command_line}"

    def generate(self) -> dict[str, str]:
        """
        Generate the package sources.

        Returns:
            Mapping of path relative to the output directory to module source

        Raises:
            CodegenError: If the model cannot be generated
        """
        service = self.select_service()
        model = baseline_transform(self.model, service.id)
        service = model.expect_shape(service.id, ShapeType.SERVICE)
        protocol = resolve_protocol(model, service, self.config.protocol, self.customizations)
        logger.info("Generating %s for service %s with protocol %s", self.name, service.id, protocol.trait_id)

        context = CodegenContext(
            model=model,
            service=service,
            symbols=SymbolProvider(model, self.config.runtime_module, self.config.target.renders_unknown_variants),
            crate=CodegenCrate(self.name),
            config=self.config,
            templates=TemplateRenderer(),
        )
        CodegenVisitor(context, protocol).execute()

        files = context.crate.finalize(self._generation_comment())
        return {path: format_code(source, self.config.formatter, path) for path, source in files.items()}

    def write(self, output_dir: str | Path) -> list[Path]:
        """
        Generate the package and write it under ``output_dir``.

        Nothing is written unless every module validates and, outside force
        mode, none of the target files exists.

        Returns:
            The written paths

        Raises:
            GeneratedCodeError: If a generated module is not valid Python
            OutputExistsError: If a target file exists and force mode is off
        """
        output = self.config.output
        files = {Path(output_dir) / path: source for path, source in self.generate().items()}

        if output.validate_before_write:
            for path, source in files.items():
                try:
                    validate_python(source)
                except GeneratedCodeError as e:
                    raise GeneratedCodeError(f"{path}: {e}") from e

        if output.mode == OutputMode.ERROR_IF_EXISTS:
            existing = [str(path) for path in files if path.exists()]
            if existing:
                raise OutputExistsError(
                    f"Output files already exist: {', '.join(existing)}. Use force mode to overwrite."
                )

        writer = AtomicWriter()
        for path, source in files.items():
            if output.atomic_write:
                writer.write(path, source, validate=False)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(source, encoding="utf-8")
            logger.info("Wrote %s", path)
        return list(files)
