"""
Dangling reference check run before any other transform.
"""

from __future__ import annotations

from ..errors import InvalidModelError
from ..model.shapes import Model, Shape, ShapeId


def _references(shape: Shape) -> list[tuple[str, ShapeId]]:
    refs = [(f"member {member.id}", member.target) for member in shape.members]
    refs.extend(("mixin", mixin) for mixin in shape.mixins)
    if shape.input is not None:
        refs.append(("input", shape.input))
    if shape.output is not None:
        refs.append(("output", shape.output))
    refs.extend(("error", error) for error in shape.errors)
    refs.extend(("operation", operation) for operation in shape.operations)
    refs.extend(("resource", resource) for resource in shape.resources)
    return refs


def check_references(model: Model) -> Model:
    """
    Verify that every reference in the model points at an existing shape.

    Raises:
        InvalidModelError: Naming the first dangling reference found
    """
    for shape in sorted(model, key=lambda s: s.id):
        for kind, target in _references(shape):
            if target not in model:
                raise InvalidModelError(f"{shape.id} references unknown shape {target} ({kind})", shape.id)
    return model
