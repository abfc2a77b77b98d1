"""
Support for open enums.
"""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound=Enum)


def unknown_enum_variant(cls: type[E], value: object) -> E | None:
    """
    Build a value-preserving pseudo-member for an unrecognized wire value.

    Used as ``_missing_`` by open ``str`` enums: ``Color("teal")`` returns a
    ``Color`` whose ``value`` is ``"teal"`` and whose ``is_unknown()`` is true.
    """
    if not isinstance(value, str):
        return None
    member = str.__new__(cls, value)
    member._name_ = "UNKNOWN"
    member._value_ = value
    return member


def is_unknown_variant(member: Enum) -> bool:
    return member._value_ not in type(member)._value2member_map_
