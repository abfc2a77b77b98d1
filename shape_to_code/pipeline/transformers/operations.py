"""
Operation normalization.

Every operation receives its own synthetic input and output structures so
that later stages can tell "declared empty" from "absent" and can attach
operation-specific bindings without touching shared shapes.
"""

from __future__ import annotations

from dataclasses import replace

from ..errors import InvalidModelError
from ..model import traits
from ..model.prelude import is_unit
from ..model.shapes import Member, Model, Shape, ShapeId, ShapeType


def synthetic_id(operation: Shape, suffix: str) -> ShapeId:
    return ShapeId(operation.id.namespace + traits.SYNTHETIC_NAMESPACE_SUFFIX, f"{operation.name}{suffix}")


def _synthetic_structure(model: Model, operation: Shape, original: ShapeId | None, suffix: str, trait_id: str) -> Shape:
    shape_id = synthetic_id(operation, suffix)
    marker = {"operation": str(operation.id), "originalId": None if is_unit(original) else str(original)}
    if is_unit(original):
        return Shape(id=shape_id, type=ShapeType.STRUCTURE, traits={trait_id: marker})

    source = model.expect_shape(original, ShapeType.STRUCTURE)
    members = tuple(Member(m.name, m.target, shape_id, m.traits) for m in source.members)
    shape_traits = {key: value for key, value in source.traits.items() if key not in (traits.INPUT, traits.OUTPUT)}
    shape_traits[trait_id] = marker
    return Shape(id=shape_id, type=ShapeType.STRUCTURE, members=members, traits=shape_traits)


def normalize_operations(model: Model) -> Model:
    """
    Give every operation a synthetic ``<Op>Input`` and ``<Op>Output``.

    The synthetic shapes live in ``<namespace>.synthetic`` and carry the
    ``syntheticInput``/``syntheticOutput`` trait recording the operation id
    and the original shape id (``None`` when the operation declared none).
    """
    updated: list[Shape] = []
    for operation in sorted(model.shapes_of_type(ShapeType.OPERATION), key=lambda s: s.id):
        synthetic_input = _synthetic_structure(model, operation, operation.input, "Input", traits.SYNTHETIC_INPUT)
        synthetic_output = _synthetic_structure(model, operation, operation.output, "Output", traits.SYNTHETIC_OUTPUT)
        for shape in (synthetic_input, synthetic_output):
            if shape.id in model:
                raise InvalidModelError(f"Synthetic shape {shape.id} conflicts with an existing shape", shape.id)
        updated.extend([synthetic_input, synthetic_output])
        updated.append(replace(operation, input=synthetic_input.id, output=synthetic_output.id))
    return model.replace(updated=updated)
