"""
Recursive shape boxing.

A cycle of structure/union member edges that never passes through a list,
set or map (and never through an already boxed member) gets the synthetic
box trait on one of its members. The boxed member is the one with the
smallest member id in the cycle, and the process repeats until no such
cycle is left.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..model import traits
from ..model.shapes import Member, Model, Shape, ShapeType
from ..model.traits import merge_traits

logger = logging.getLogger(__name__)

_CONTAINER_TYPES = (ShapeType.STRUCTURE, ShapeType.UNION)


class RecursiveShapeBoxer:
    """Breaks unindirected reference cycles by boxing one member per cycle."""

    def __init__(self, model: Model):
        self.model = model

    def transform(self) -> Model:
        model = self.model
        while True:
            cycle = self.find_cycle(model)
            if cycle is None:
                return model
            member = min(cycle, key=lambda m: m.id)
            logger.debug("Boxing %s to break a recursive reference", member.id)
            model = model.replace(updated=[self._box(model.expect_shape(member.container), member)])

    def _box(self, container: Shape, boxed: Member) -> Shape:
        members = tuple(
            Member(m.name, m.target, m.container, merge_traits(m.traits, {traits.BOX: {}})) if m.name == boxed.name else m
            for m in container.members
        )
        return replace(container, members=members)

    def _edges(self, model: Model, shape: Shape) -> list[Member]:
        edges = []
        for member in sorted(shape.members, key=lambda m: m.name):
            if member.has_trait(traits.BOX):
                continue
            target = model.get_shape(member.target)
            if target is not None and target.type in _CONTAINER_TYPES:
                edges.append(member)
        return edges

    def find_cycle(self, model: Model) -> list[Member] | None:
        """Return the member edges of the first cycle found, or None."""
        done: set = set()
        for root in sorted(model.shapes_of_type(*_CONTAINER_TYPES), key=lambda s: s.id):
            if root.id in done:
                continue
            cycle = self._search(model, root, [], [], done)
            if cycle is not None:
                return cycle
        return None

    def _search(self, model: Model, shape: Shape, path: list, edges: list[Member], done: set) -> list[Member] | None:
        if shape.id in path:
            return edges[path.index(shape.id) :]
        if shape.id in done:
            return None
        path.append(shape.id)
        for member in self._edges(model, shape):
            edges.append(member)
            cycle = self._search(model, model.expect_shape(member.target), path, edges, done)
            if cycle is not None:
                return cycle
            edges.pop()
        path.pop()
        done.add(shape.id)
        return None


def box_recursive_shapes(model: Model) -> Model:
    return RecursiveShapeBoxer(model).transform()
