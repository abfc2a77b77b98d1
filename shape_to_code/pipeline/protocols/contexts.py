"""
Contexts threaded through the serializer and parser generators.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from ..model.shapes import Member, Shape


@dataclass(frozen=True)
class MemberContext:
    """A member value about to be written.

    Attributes:
        writer_expression: Expression evaluating to the ``JsonValueWriter``
        value_expression: Expression evaluating to the value
        member: The member being written
        write_nulls: Write ``null`` for an absent value instead of skipping it
        in_structure: Whether the member belongs to a structure (elision applies)
    """

    writer_expression: str
    value_expression: str
    member: Member
    write_nulls: bool = False
    in_structure: bool = False

    @classmethod
    def struct_member(cls, object_name: str, json_name: str, value_expression: str, member: Member) -> MemberContext:
        return cls(f"{object_name}.key({json.dumps(json_name)})", value_expression, member, in_structure=True)

    @classmethod
    def union_member(cls, object_name: str, json_name: str, value_expression: str, member: Member) -> MemberContext:
        return cls(f"{object_name}.key({json.dumps(json_name)})", value_expression, member)

    @classmethod
    def collection_member(cls, array_name: str, value_expression: str, member: Member) -> MemberContext:
        return cls(f"{array_name}.value()", value_expression, member, write_nulls=True)

    @classmethod
    def map_member(cls, object_name: str, key_expression: str, value_expression: str, member: Member) -> MemberContext:
        return cls(f"{object_name}.key({key_expression})", value_expression, member, write_nulls=True)


@dataclass(frozen=True)
class StructContext:
    """A structure whose members are written into an object writer.

    Attributes:
        object_name: Name of the ``JsonObjectWriter`` variable
        local_name: Name of the variable holding the structure value
        shape: The structure shape
    """

    object_name: str
    local_name: str
    shape: Shape


@dataclass(frozen=True)
class ValueContext:
    """A decoded JSON value about to be converted.

    Attributes:
        value_expression: Expression evaluating to the decoded JSON value
        path_expression: Expression evaluating to the JSON path of the value
        member: The member the value belongs to
    """

    value_expression: str
    path_expression: str
    member: Member


def path_expression(path_name: str, suffix: str) -> str:
    """Render an f-string appending ``suffix`` to the path held in ``path_name``."""
    literal = json.dumps(suffix)[1:-1].replace("{", "{{").replace("}", "}}")
    return f'f"{{{path_name}}}{literal}"'
