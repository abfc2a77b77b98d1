"""
Extension points of the JSON serializer.

A customization is a plain callable taking a ``JsonSection`` and returning
Python source to insert (or ``None`` to insert nothing). Customizations run
in registration order, after every declared member has been written and
before the object writer is finished.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..model.shapes import Shape


class JsonSectionKind(str, Enum):
    INPUT_STRUCT = "input_struct"
    OUTPUT_STRUCT = "output_struct"
    SERVER_ERROR = "server_error"


@dataclass(frozen=True)
class JsonSection:
    """Where a customization is invoked.

    Attributes:
        kind: The top-level structure being written
        shape: The structure shape
        object_name: Name of the ``JsonObjectWriter`` variable in scope
    """

    kind: JsonSectionKind
    shape: Shape
    object_name: str


JsonCustomization = Callable[[JsonSection], "str | None"]


def error_type_customization(section: JsonSection) -> str | None:
    """Write the ``__type`` discriminator into server error bodies."""
    if section.kind is not JsonSectionKind.SERVER_ERROR:
        return None
    return f"{section.object_name}.key(\"__type\").string({json.dumps(section.shape.name)})"
