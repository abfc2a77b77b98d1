"""
Copy service-level errors onto every operation of the service.
"""

from __future__ import annotations

from dataclasses import replace

from ..model.shapes import Model, ShapeId, ShapeType
from ..model.walker import Walker


def copy_service_errors_to_operations(model: Model, service_id: ShapeId) -> Model:
    """
    Append the service's errors to each operation in its closure.

    Errors an operation already declares are left where they are, so the
    transform is idempotent.
    """
    service = model.expect_shape(service_id, ShapeType.SERVICE)
    if not service.errors:
        return model

    updated = []
    for operation in Walker(model).operations_of(service):
        missing = tuple(error for error in service.errors if error not in operation.errors)
        if missing:
            updated.append(replace(operation, errors=operation.errors + missing))
    return model.replace(updated=updated)
