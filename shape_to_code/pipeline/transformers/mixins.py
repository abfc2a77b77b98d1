"""
Mixin flattening.

Every shape that lists mixins receives the (transitively flattened) mixin
members ahead of its own members. A local member with the same name as a
mixin member overrides its target and adds to its traits. Mixin shapes are
removed from the result.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..errors import InvalidModelError
from ..model import traits
from ..model.shapes import Member, Model, Shape, ShapeId
from ..model.traits import merge_traits

logger = logging.getLogger(__name__)


class MixinFlattener:
    """Flattens mixins of a model into the shapes that use them."""

    def __init__(self, model: Model):
        self.model = model
        self._flattened: dict[ShapeId, Shape] = {}
        self._in_progress: set[ShapeId] = set()

    def transform(self) -> Model:
        mixin_ids = {shape.id for shape in self.model if shape.has_trait(traits.MIXIN)}
        if not mixin_ids and not any(shape.mixins for shape in self.model):
            return self.model

        updated = [self.flatten(shape) for shape in self.model if shape.mixins and shape.id not in mixin_ids]
        result = self.model.replace(updated=updated, removed=mixin_ids)

        for shape in result:
            for member in shape.members:
                if member.target in mixin_ids:
                    raise InvalidModelError(f"Member {member.id} targets mixin {member.target}", member.id)

        logger.debug("Flattened %d shapes, removed %d mixins", len(updated), len(mixin_ids))
        return result

    def flatten(self, shape: Shape) -> Shape:
        if shape.id in self._flattened:
            return self._flattened[shape.id]
        if shape.id in self._in_progress:
            raise InvalidModelError(f"Mixin cycle detected through {shape.id}", shape.id)
        self._in_progress.add(shape.id)

        members: dict[str, Member] = {}
        inherited_traits: dict = {}
        inherited_errors: list[ShapeId] = []
        for mixin_id in shape.mixins:
            mixin = self.flatten(self.model.expect_shape(mixin_id))
            if not mixin.has_trait(traits.MIXIN):
                raise InvalidModelError(f"{shape.id} uses {mixin_id} as a mixin but it is not marked @mixin", shape.id)
            for member in mixin.members:
                members[member.name] = Member(member.name, member.target, shape.id, member.traits)
            mixin_traits = {key: value for key, value in mixin.traits.items() if key != traits.MIXIN}
            inherited_traits = merge_traits(inherited_traits, mixin_traits)
            inherited_errors.extend(error for error in mixin.errors if error not in inherited_errors)

        for member in shape.members:
            inherited = members.get(member.name)
            member_traits = merge_traits(inherited.traits, member.traits) if inherited else member.traits
            members[member.name] = Member(member.name, member.target, shape.id, member_traits)

        errors = tuple(inherited_errors) + tuple(error for error in shape.errors if error not in inherited_errors)
        flattened = replace(
            shape,
            members=tuple(members.values()),
            traits=merge_traits(inherited_traits, shape.traits),
            mixins=(),
            errors=errors,
        )
        self._in_progress.discard(shape.id)
        self._flattened[shape.id] = flattened
        return flattened


def flatten_mixins(model: Model) -> Model:
    return MixinFlattener(model).transform()
