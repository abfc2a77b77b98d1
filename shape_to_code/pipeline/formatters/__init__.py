"""
Post-processing formatters for generated code.
"""

from __future__ import annotations

import logging

from ..config import FormatterConfig
from .base import Formatter, FormatterError
from .black_formatter import BlackFormatter
from .ruff_formatter import RuffFormatter

logger = logging.getLogger(__name__)


def default_formatters() -> list[Formatter]:
    """Formatters in order of preference."""
    return [RuffFormatter(), BlackFormatter()]


def format_code(code: str, config: FormatterConfig, label: str = "<generated>", formatters: list[Formatter] | None = None) -> str:
    """
    Format code with the first available formatter.

    A missing or failing formatter is not fatal: a warning is logged and
    the unformatted code is returned.
    """
    if not config.enabled:
        return code
    for formatter in formatters if formatters is not None else default_formatters():
        if not formatter.is_available():
            continue
        try:
            return formatter.format(code, config)
        except FormatterError as e:
            logger.warning("Formatter %s failed on %s, keeping unformatted code: %s", formatter.name, label, e)
            return code
    logger.warning("No formatter available for %s, keeping unformatted code", label)
    return code


__all__ = [
    "BlackFormatter",
    "Formatter",
    "FormatterError",
    "RuffFormatter",
    "format_code",
]
