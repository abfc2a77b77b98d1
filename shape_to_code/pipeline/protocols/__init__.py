"""
Wire protocol support.

Contains HTTP binding resolution, protocol selection, serializer
customizations and the JSON serializer/parser generators.
"""

from __future__ import annotations

from .bindings import AwsJsonBindingResolver, HttpBinding, HttpBindingResolver, HttpLocation, HttpTraitBindingResolver
from .customizations import JsonCustomization, JsonSection, JsonSectionKind, error_type_customization
from .json_parser import JsonParserGenerator
from .json_serializer import JsonSerializerGenerator
from .protocol import SUPPORTED_PROTOCOLS, Protocol, create_protocol, resolve_protocol

__all__ = [
    "AwsJsonBindingResolver",
    "HttpBinding",
    "HttpBindingResolver",
    "HttpLocation",
    "HttpTraitBindingResolver",
    "JsonCustomization",
    "JsonParserGenerator",
    "JsonSection",
    "JsonSectionKind",
    "JsonSerializerGenerator",
    "Protocol",
    "SUPPORTED_PROTOCOLS",
    "create_protocol",
    "error_type_customization",
    "resolve_protocol",
]
