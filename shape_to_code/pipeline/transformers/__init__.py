"""
Model transforms applied once before code generation.

The order matters: each stage relies on the previous stage's result.
"""

from __future__ import annotations

import logging

from ..model.shapes import Model, ShapeId, ShapeType
from .event_streams import normalize_event_streams
from .mixins import flatten_mixins
from .operations import normalize_operations
from .recursive_shapes import box_recursive_shapes
from .references import check_references
from .service_errors import copy_service_errors_to_operations

logger = logging.getLogger(__name__)


def baseline_transform(model: Model, service_id: ShapeId) -> Model:
    """
    Normalize a model for code generation.

    Args:
        model: The loaded model
        service_id: The service being generated

    Returns:
        A new model: mixins flattened, service errors copied onto
        operations, recursive members boxed, synthetic operation
        inputs/outputs and event stream unions added
    """
    model.expect_shape(service_id, ShapeType.SERVICE)
    model = check_references(model)
    model = flatten_mixins(model)
    model = copy_service_errors_to_operations(model, service_id)
    model = box_recursive_shapes(model)
    model = normalize_operations(model)
    model = normalize_event_streams(model)
    logger.debug("Model normalized for %s: %d shapes", service_id, len(model))
    return model


__all__ = [
    "baseline_transform",
    "box_recursive_shapes",
    "check_references",
    "copy_service_errors_to_operations",
    "flatten_mixins",
    "normalize_event_streams",
    "normalize_operations",
]
