"""
Ruff formatter for generated Python code.
"""

from __future__ import annotations

import subprocess

from ..config import FormatterConfig
from .base import Formatter, FormatterError


class RuffFormatter(Formatter):
    """Formatter running ``ruff format`` over stdin."""

    name = "ruff"

    def __init__(self):
        self._available: bool | None = None

    def is_available(self) -> bool:
        """Check if ruff is installed."""
        if self._available is None:
            try:
                result = subprocess.run(["ruff", "--version"], capture_output=True, text=True, timeout=5)
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        cmd = ["ruff", "format", "--stdin-filename", "generated.py"]
        if config.line_length:
            cmd.extend(["--line-length", str(config.line_length)])
        if config.target_version:
            cmd.extend(["--target-version", config.target_version])
        if not config.string_normalization:
            cmd.extend(["--config", "format.quote-style='preserve'"])
        if not config.magic_trailing_comma:
            cmd.extend(["--config", "format.skip-magic-trailing-comma=true"])

        try:
            result = subprocess.run(cmd, input=code, capture_output=True, text=True, timeout=30)
        except subprocess.SubprocessError as e:
            raise FormatterError(f"ruff did not complete: {e}") from e
        if result.returncode != 0:
            raise FormatterError(result.stderr.strip() or f"ruff exited with status {result.returncode}")
        return result.stdout
