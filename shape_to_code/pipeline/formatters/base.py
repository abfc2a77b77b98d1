"""
Base class for code formatters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import FormatterConfig


class FormatterError(Exception):
    """Raised when a formatter rejects or fails on the generated code."""

    pass


class Formatter(ABC):
    """Abstract base class for code formatters."""

    # Name used in log messages
    name: str = ""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format the given code.

        Args:
            code: The source code to format
            config: Formatter configuration

        Returns:
            Formatted code

        Raises:
            FormatterError: If the formatter fails on the code
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the formatter can be used (tool or package installed)."""
