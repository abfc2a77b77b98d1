"""
Fatal errors raised while generating code.

Every error carries the identifier of the offending shape (when there is
one) so the invoking collaborator can report it. Generation never continues
after one of these is raised.
"""

from __future__ import annotations


class CodegenError(Exception):
    """Base class for fatal code generation errors."""

    def __init__(self, message: str, shape_id: object | None = None):
        super().__init__(message)
        self.shape_id = shape_id


class ShapeNotFoundError(CodegenError):
    """Raised when a shape id is not present in the model."""

    pass


class InvalidModelError(CodegenError):
    """Raised when the shape graph is structurally invalid.

    This can happen when:
    - A member, mixin, operation input/output or error targets a missing shape
    - A shape of the wrong kind is used where an aggregate is expected
    - A recursive cycle cannot be broken
    """

    pass


class UnsupportedShapeError(CodegenError):
    """Raised when a shape kind has no symbol or serializer mapping."""

    pass


class UnsupportedProtocolError(CodegenError):
    """Raised when the service does not declare a supported wire protocol."""

    pass


class GeneratedCodeError(CodegenError):
    """Raised when a generated module is not valid Python."""

    pass


class OutputExistsError(FileExistsError):
    """Raised when the output package already exists and force mode is off."""

    pass
