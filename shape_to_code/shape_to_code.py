import json
import logging
from pathlib import Path

import click

from .pipeline import CodegenError, CodegenTarget, CodeGeneratorConfig, OutputMode, PipelineGenerator, load_model_file


@click.command()
@click.option("--name", "-n", default=None, type=str, help="Name of the generated package (default: the model file stem)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--service", "-s", default=None, type=str, help="Absolute id of the service to generate")
@click.option("--protocol", "-p", default=None, type=str, help="Protocol trait id overriding the service's protocol")
@click.option("--target", "-t", default=None, type=click.Choice([t.value for t in CodegenTarget]))
@click.option("--force", is_flag=True, default=False, help="Overwrite existing generated files")
@click.option("--format", "format_code", is_flag=True, default=False, help="Format the generated code with ruff or black")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def shape_to_code(name, config, service, protocol, target, force, format_code, verbose, path, output):
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            config = json.load(f)
            config = CodeGeneratorConfig.from_dict(config)
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    if service:
        config.service = service
    if protocol:
        config.protocol = protocol
    if target:
        config.target = CodegenTarget(target)
    if force:
        config.output.mode = OutputMode.FORCE
    if format_code:
        config.formatter.enabled = True

    if name is None:
        name = Path(path).stem.replace("-", "_").replace(".", "_")

    try:
        codegen = PipelineGenerator(name, load_model_file(path), config)
        written = codegen.write(output)
    except (CodegenError, FileExistsError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Generated {len(written)} modules in {Path(output) / name}")
