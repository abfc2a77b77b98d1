"""
Rebuilds the shape_to_code command line for the header of generated modules.
"""

from pathlib import Path

import click

COMMAND_NAME = "shape_to_code"


def _display_value(value) -> str:
    # Existing paths are shown by name only
    if isinstance(value, (str, Path)) and Path(str(value)).exists():
        return Path(str(value)).name
    return str(value)


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Rebuild the invoking command line from the active click context.

    Positional arguments come first, then the options whose value differs
    from their default. Flags are shown without a value.

    Args:
        click_command: The command whose parameters are introspected

    Returns:
        The command line, or just the command name outside the CLI
    """
    try:
        params = click.get_current_context().params
    except RuntimeError:
        return COMMAND_NAME

    arguments: list[str] = []
    options: list[str] = []
    for param in click_command.params:
        value = params.get(param.name)
        if not value:
            continue
        if isinstance(param, click.Argument):
            arguments.append(_display_value(value))
        elif isinstance(param, click.Option) and value != param.default:
            flag = param.opts[0] if param.opts else f"--{param.name}"
            if param.is_flag:
                options.append(flag)
            else:
                options.extend([flag, _display_value(value)])

    return " ".join([COMMAND_NAME, *arguments, *options])
