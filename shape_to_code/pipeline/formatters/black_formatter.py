"""
Black formatter for generated Python code.
"""

from __future__ import annotations

from ..config import FormatterConfig
from .base import Formatter, FormatterError


class BlackFormatter(Formatter):
    """Formatter using the black package in-process."""

    name = "black"

    def __init__(self):
        self._black = None
        self._available: bool | None = None

    def is_available(self) -> bool:
        """Check if black is installed."""
        if self._available is None:
            try:
                import black

                self._black = black
                self._available = True
            except ImportError:
                self._available = False
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        if not self.is_available():
            raise FormatterError("black is not installed")
        black = self._black

        target_versions = set()
        version = getattr(black.TargetVersion, config.target_version.upper(), None) if config.target_version else None
        if version is not None:
            target_versions.add(version)

        mode = black.Mode(
            target_versions=target_versions,
            line_length=config.line_length,
            string_normalization=config.string_normalization,
            magic_trailing_comma=config.magic_trailing_comma,
        )
        try:
            return black.format_str(code, mode=mode)
        except black.InvalidInput as e:
            raise FormatterError(f"black rejected the code: {e}") from e
