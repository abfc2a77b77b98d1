"""
Shape graph traversal.
"""

from __future__ import annotations

from collections.abc import Iterator

from .shapes import Model, Shape, ShapeId, ShapeType


class Walker:
    """Computes the closure of shapes reachable from a root shape."""

    def __init__(self, model: Model):
        self.model = model

    def walk_shapes(self, root: Shape) -> list[Shape]:
        """
        Return every shape reachable from ``root`` (root included).

        The result is sorted by shape id so that traversal order, and
        therefore emission order, never depends on dict ordering.
        """
        seen: dict[ShapeId, Shape] = {}
        stack = [root.id]
        while stack:
            shape_id = stack.pop()
            if shape_id in seen:
                continue
            shape = self.model.expect_shape(shape_id)
            seen[shape_id] = shape
            stack.extend(self.neighbors(shape))
        return sorted(seen.values(), key=lambda s: s.id)

    def neighbors(self, shape: Shape) -> Iterator[ShapeId]:
        """Yield the ids directly referenced by a shape."""
        for member in shape.members:
            yield member.target
        if shape.type == ShapeType.OPERATION:
            if shape.input is not None:
                yield shape.input
            if shape.output is not None:
                yield shape.output
        yield from shape.errors
        yield from shape.operations
        yield from shape.resources

    def operations_of(self, service: Shape) -> list[Shape]:
        """Return the operations bound to a service, directly or through resources."""
        return [shape for shape in self.walk_shapes(service) if shape.type == ShapeType.OPERATION]
