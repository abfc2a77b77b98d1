"""
HTTP binding resolution: where each operation member goes on the wire.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from ..model import traits
from ..model.shapes import Member, Model, Shape, ShapeId, ShapeType


class HttpLocation(str, Enum):
    """Location of a member in an HTTP message."""

    DOCUMENT = "document"
    PAYLOAD = "payload"
    HEADER = "header"
    PREFIX_HEADERS = "prefix_headers"
    QUERY = "query"
    QUERY_PARAMS = "query_params"
    LABEL = "label"
    RESPONSE_CODE = "response_code"


# Default timestamp format for members bound outside the body
_LOCATION_TIMESTAMP_FORMATS = {
    HttpLocation.HEADER: traits.HTTP_DATE,
    HttpLocation.PREFIX_HEADERS: traits.HTTP_DATE,
    HttpLocation.QUERY: traits.DATE_TIME,
    HttpLocation.QUERY_PARAMS: traits.DATE_TIME,
    HttpLocation.LABEL: traits.DATE_TIME,
}


@dataclass(frozen=True)
class HttpBinding:
    """A member and the location it is bound to.

    Attributes:
        member: The bound member
        location: Where the member goes
        location_name: Header name, query key or label name, if any
    """

    member: Member
    location: HttpLocation
    location_name: str | None = None


class HttpBindingResolver(ABC):
    """Resolves member locations for a protocol."""

    def __init__(self, model: Model):
        self.model = model

    @abstractmethod
    def binding(self, member: Member, is_response: bool) -> HttpBinding:
        """Resolve the location of one input, output or error member."""

    def is_streaming(self, member: Member) -> bool:
        target = self.model.expect_shape(member.target)
        return target.has_trait(traits.STREAMING) and target.type in (ShapeType.BLOB, ShapeType.UNION)

    def request_bindings(self, operation: Shape) -> list[HttpBinding]:
        shape = self.model.expect_shape(operation.input, ShapeType.STRUCTURE)
        return [self.binding(member, is_response=False) for member in shape.members]

    def response_bindings(self, operation: Shape) -> list[HttpBinding]:
        shape = self.model.expect_shape(operation.output, ShapeType.STRUCTURE)
        return [self.binding(member, is_response=True) for member in shape.members]

    def error_response_bindings(self, error_id: ShapeId) -> list[HttpBinding]:
        shape = self.model.expect_shape(error_id, ShapeType.STRUCTURE)
        return [self.binding(member, is_response=True) for member in shape.members]

    def request_members(self, operation: Shape, location: HttpLocation) -> list[Member]:
        return [b.member for b in self.request_bindings(operation) if b.location == location]

    def response_members(self, operation: Shape, location: HttpLocation) -> list[Member]:
        return [b.member for b in self.response_bindings(operation) if b.location == location]

    def error_members(self, error_id: ShapeId, location: HttpLocation) -> list[Member]:
        return [b.member for b in self.error_response_bindings(error_id) if b.location == location]

    def timestamp_format(self, member: Member, location: HttpLocation, default: str) -> str:
        """
        Resolve the timestamp format of a member.

        The member's own ``timestampFormat`` wins, then the target shape's,
        then the location default (``http-date`` for headers, ``date-time``
        for query strings and labels), then ``default``.
        """
        if member.has_trait(traits.TIMESTAMP_FORMAT):
            return member.get_trait(traits.TIMESTAMP_FORMAT)
        target = self.model.expect_shape(member.target)
        if target.has_trait(traits.TIMESTAMP_FORMAT):
            return target.get_trait(traits.TIMESTAMP_FORMAT)
        return _LOCATION_TIMESTAMP_FORMATS.get(location, default)


class HttpTraitBindingResolver(HttpBindingResolver):
    """Binds members according to the ``smithy.api#http*`` traits."""

    def binding(self, member: Member, is_response: bool) -> HttpBinding:
        if member.has_trait(traits.HTTP_HEADER):
            return HttpBinding(member, HttpLocation.HEADER, member.get_trait(traits.HTTP_HEADER))
        if member.has_trait(traits.HTTP_PREFIX_HEADERS):
            return HttpBinding(member, HttpLocation.PREFIX_HEADERS, member.get_trait(traits.HTTP_PREFIX_HEADERS))
        if member.has_trait(traits.HTTP_PAYLOAD) or self.is_streaming(member):
            return HttpBinding(member, HttpLocation.PAYLOAD)
        if is_response and member.has_trait(traits.HTTP_RESPONSE_CODE):
            return HttpBinding(member, HttpLocation.RESPONSE_CODE)
        if not is_response:
            if member.has_trait(traits.HTTP_QUERY):
                return HttpBinding(member, HttpLocation.QUERY, member.get_trait(traits.HTTP_QUERY))
            if member.has_trait(traits.HTTP_QUERY_PARAMS):
                return HttpBinding(member, HttpLocation.QUERY_PARAMS)
            if member.has_trait(traits.HTTP_LABEL):
                return HttpBinding(member, HttpLocation.LABEL, member.name)
        return HttpBinding(member, HttpLocation.DOCUMENT)


class AwsJsonBindingResolver(HttpBindingResolver):
    """Every member goes in the JSON document, except streaming payloads."""

    def binding(self, member: Member, is_response: bool) -> HttpBinding:
        if self.is_streaming(member):
            return HttpBinding(member, HttpLocation.PAYLOAD)
        return HttpBinding(member, HttpLocation.DOCUMENT)
