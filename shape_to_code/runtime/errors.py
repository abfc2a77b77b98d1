"""
Errors raised by generated code.

These are recoverable value errors: they are raised to the caller of a
generated serializer, parser or builder and never abort the process.
"""

from __future__ import annotations


class RuntimeCodegenError(Exception):
    """Base class for errors raised by generated code."""

    pass


class SerializationError(RuntimeCodegenError):
    """Raised when a value cannot be written to the wire."""

    def __init__(self, message: str, union: str | None = None):
        super().__init__(message)
        self.union = union

    @classmethod
    def unknown_variant(cls, union: str) -> SerializationError:
        """The value is the unknown variant of a union, which has no wire form."""
        return cls(f"Cannot serialize the unknown variant of union {union}", union=union)


class DeserializationError(RuntimeCodegenError):
    """Raised when a wire document does not match the expected shape.

    Attributes:
        path: JSON path of the offending value (``$`` is the document root)
    """

    def __init__(self, message: str, path: str | None = None):
        super().__init__(f"{message} (at {path})" if path else message)
        self.path = path

    @classmethod
    def unexpected_type(cls, expected: str, value: object, path: str) -> DeserializationError:
        return cls(f"Expected {expected}, got {type(value).__name__}", path)


class BuildError(RuntimeCodegenError):
    """Raised by a builder when it cannot produce a value."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    @classmethod
    def missing_field(cls, field: str, details: str) -> BuildError:
        """A required field was never set on the builder."""
        return cls(field, f"Missing required field {field!r}: {details}")


class ModeledError(Exception):
    """Base class of the generated error structures."""

    def __str__(self) -> str:
        message = getattr(self, "message", None)
        if message:
            return f"{type(self).__name__}: {message}"
        return type(self).__name__
