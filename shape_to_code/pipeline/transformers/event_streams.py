"""
Event stream normalization.

A synthetic input/output member targeting a ``@streaming`` union is
retargeted to a dedicated synthetic union that only holds the event
members. The union's error members are recorded on the synthetic union's
``eventStreamUnion`` trait instead of being event variants.
"""

from __future__ import annotations

from dataclasses import replace

from ...utils import snake_to_pascal_case
from ..model import traits
from ..model.shapes import Member, Model, Shape, ShapeId, ShapeType

_SYNTHETIC_TRAITS = {"Input": traits.SYNTHETIC_INPUT, "Output": traits.SYNTHETIC_OUTPUT}


def is_event_stream(model: Model, member: Member) -> bool:
    target = model.get_shape(member.target)
    return target is not None and target.type == ShapeType.UNION and target.has_trait(traits.STREAMING)


def _synthetic_union(model: Model, container: Shape, member: Member, direction: str) -> Shape:
    original = model.expect_shape(member.target)
    operation_id = ShapeId.from_string(container.expect_trait(_SYNTHETIC_TRAITS[direction])["operation"])
    shape_id = ShapeId(
        operation_id.namespace + traits.SYNTHETIC_NAMESPACE_SUFFIX,
        f"{operation_id.name}{direction}{snake_to_pascal_case(member.name)}",
    )
    events = []
    errors = []
    for union_member in original.members:
        if model.expect_shape(union_member.target).is_error:
            errors.append(union_member.name)
        else:
            events.append(Member(union_member.name, union_member.target, shape_id, union_member.traits))

    union_traits = dict(original.traits)
    union_traits[traits.SYNTHETIC_EVENT_STREAM_UNION] = {"originalId": str(original.id), "errorMembers": errors}
    return Shape(id=shape_id, type=ShapeType.UNION, members=tuple(events), traits=union_traits)


def normalize_event_streams(model: Model) -> Model:
    updated: list[Shape] = []
    for direction, trait_id in _SYNTHETIC_TRAITS.items():
        for container in sorted(model.shapes_of_type(ShapeType.STRUCTURE), key=lambda s: s.id):
            if not container.has_trait(trait_id):
                continue
            members = []
            changed = False
            for member in container.members:
                if is_event_stream(model, member):
                    union = _synthetic_union(model, container, member, direction)
                    updated.append(union)
                    member = Member(member.name, union.id, member.container, member.traits)
                    changed = True
                members.append(member)
            if changed:
                updated.append(replace(container, members=tuple(members)))
    return model.replace(updated=updated)
