"""
Atomic file writer for generated modules.

Ensures that a generated package is never left half-written on disk.
"""

from __future__ import annotations

import ast
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..errors import GeneratedCodeError, OutputExistsError


def validate_python(content: str) -> None:
    """Check that generated source parses.

    Raises:
        GeneratedCodeError: If the source is not valid Python
    """
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise GeneratedCodeError(f"Generated Python code is not valid: {e}") from e


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(self, validate: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate: Optional validation function, ``validate_python`` by default
        """
        self._validate = validate or validate_python

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            GeneratedCodeError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate(content)

            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    def write_if_not_exists(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content only if the file doesn't exist.

        Raises:
            OutputExistsError: If the file already exists
            GeneratedCodeError: If validation fails
        """
        if path.exists():
            raise OutputExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")
        self.write(path, content, validate)
