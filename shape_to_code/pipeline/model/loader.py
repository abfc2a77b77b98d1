"""
Loader for the JSON AST form of a service description.

This is not an IDL parser: it adapts an already-parsed JSON AST document
(``{"smithy": "2.0", "shapes": {...}}``) into the in-memory ``Model``.
"""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any

from ...utils import to_enum_member_name
from ..errors import InvalidModelError
from . import traits
from .prelude import UNIT, prelude_shapes
from .shapes import Member, Model, Shape, ShapeId, ShapeType
from .traits import merge_traits

_RESOURCE_LIFECYCLE = ("create", "put", "read", "update", "delete", "list")


def load_model_file(path: str | Path) -> Model:
    """Load a JSON AST file from disk."""
    with open(path, encoding="utf-8") as f:
        return load_model(json.load(f))


def load_model(document: dict[str, Any]) -> Model:
    """
    Build a model from a JSON AST document.

    Args:
        document: The decoded JSON AST

    Returns:
        Model containing the document shapes plus the prelude
    """
    shapes: dict[ShapeId, Shape] = {shape.id: shape for shape in prelude_shapes()}
    applies: list[tuple[ShapeId, dict[str, Any]]] = []

    for raw_id, body in document.get("shapes", {}).items():
        shape_id = ShapeId.from_string(raw_id)
        if body.get("type") == "apply":
            applies.append((shape_id, body.get("traits", {})))
            continue
        shapes[shape_id] = _load_shape(shape_id, body)

    for target_id, applied in applies:
        _apply_traits(shapes, target_id, applied)

    return Model(shapes.values(), document.get("metadata"))


def _target(ref: dict[str, Any] | None) -> ShapeId | None:
    if ref is None:
        return None
    return ShapeId.from_string(ref["target"])


def _targets(refs: list[dict[str, Any]] | None) -> tuple[ShapeId, ...]:
    return tuple(ShapeId.from_string(ref["target"]) for ref in refs or [])


def _load_member(container: ShapeId, name: str, body: dict[str, Any]) -> Member:
    if "target" not in body:
        raise InvalidModelError(f"Member {container}${name} has no target", container.with_member(name))
    return Member(
        name=name,
        target=ShapeId.from_string(body["target"]),
        container=container,
        traits=dict(body.get("traits", {})),
    )


def _load_shape(shape_id: ShapeId, body: dict[str, Any]) -> Shape:
    raw_type = body.get("type")
    try:
        shape_type = ShapeType(raw_type)
    except ValueError as err:
        raise InvalidModelError(f"Unknown shape type {raw_type!r} for {shape_id}", shape_id) from err

    shape_traits = dict(body.get("traits", {}))
    members: list[Member] = []

    if shape_type in (ShapeType.LIST, ShapeType.SET):
        members.append(_load_member(shape_id, "member", body.get("member", {})))
    elif shape_type == ShapeType.MAP:
        members.append(_load_member(shape_id, "key", body.get("key", {})))
        members.append(_load_member(shape_id, "value", body.get("value", {})))
    else:
        for name, member_body in body.get("members", {}).items():
            members.append(_load_member(shape_id, name, member_body))

    if shape_type == ShapeType.STRING and traits.ENUM in shape_traits:
        # Smithy 1.0 style enums are strings carrying the enum trait
        shape_type = ShapeType.ENUM
        members = _enum_trait_members(shape_id, shape_traits.pop(traits.ENUM))
    elif shape_type == ShapeType.ENUM:
        members = [_with_enum_value(member) for member in members]

    operations = _targets(body.get("operations"))
    if shape_type == ShapeType.RESOURCE:
        lifecycle = tuple(_target(body[key]) for key in _RESOURCE_LIFECYCLE if key in body)
        operations = lifecycle + operations + _targets(body.get("collectionOperations"))

    return Shape(
        id=shape_id,
        type=shape_type,
        members=tuple(members),
        traits=shape_traits,
        mixins=_targets(body.get("mixins")),
        input=_target(body.get("input")),
        output=_target(body.get("output")),
        errors=_targets(body.get("errors")),
        version=body.get("version"),
        operations=operations,
        resources=_targets(body.get("resources")),
    )


def _enum_trait_members(shape_id: ShapeId, definitions: list[dict[str, Any]]) -> list[Member]:
    members = []
    for definition in definitions:
        value = definition["value"]
        name = definition.get("name") or to_enum_member_name(value)
        member_traits: dict[str, Any] = {traits.ENUM_VALUE: value}
        if "documentation" in definition:
            member_traits[traits.DOCUMENTATION] = definition["documentation"]
        members.append(Member(name=name, target=UNIT, container=shape_id, traits=member_traits))
    return members


def _with_enum_value(member: Member) -> Member:
    if member.has_trait(traits.ENUM_VALUE):
        return member
    return Member(
        name=member.name,
        target=member.target,
        container=member.container,
        traits=merge_traits(member.traits, {traits.ENUM_VALUE: member.name}),
    )


def _apply_traits(shapes: dict[ShapeId, Shape], target_id: ShapeId, applied: dict[str, Any]) -> None:
    shape = shapes.get(target_id.without_member())
    if shape is None:
        raise InvalidModelError(f"Cannot apply traits to unknown shape {target_id}", target_id)

    if target_id.member is None:
        shapes[shape.id] = replace(shape, traits=merge_traits(shape.traits, applied))
        return

    members = []
    for member in shape.members:
        if member.name == target_id.member:
            member = Member(member.name, member.target, member.container, merge_traits(member.traits, applied))
        members.append(member)
    if shape.get_member(target_id.member) is None:
        raise InvalidModelError(f"Cannot apply traits to unknown member {target_id}", target_id)
    shapes[shape.id] = replace(shape, members=tuple(members))

