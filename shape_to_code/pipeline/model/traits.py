"""
Trait identifiers and trait queries.

Traits are plain metadata: a mapping from trait id to a JSON-like payload.
They are queried by predicate and never modelled as classes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import InvalidModelError

# Prelude traits
REQUIRED = "smithy.api#required"
DEFAULT = "smithy.api#default"
ERROR = "smithy.api#error"
ENUM = "smithy.api#enum"
ENUM_VALUE = "smithy.api#enumValue"
JSON_NAME = "smithy.api#jsonName"
SPARSE = "smithy.api#sparse"
STREAMING = "smithy.api#streaming"
MIXIN = "smithy.api#mixin"
TIMESTAMP_FORMAT = "smithy.api#timestampFormat"
DOCUMENTATION = "smithy.api#documentation"
INPUT = "smithy.api#input"
OUTPUT = "smithy.api#output"

# HTTP binding traits
HTTP = "smithy.api#http"
HTTP_ERROR = "smithy.api#httpError"
HTTP_HEADER = "smithy.api#httpHeader"
HTTP_PREFIX_HEADERS = "smithy.api#httpPrefixHeaders"
HTTP_QUERY = "smithy.api#httpQuery"
HTTP_QUERY_PARAMS = "smithy.api#httpQueryParams"
HTTP_LABEL = "smithy.api#httpLabel"
HTTP_PAYLOAD = "smithy.api#httpPayload"
HTTP_RESPONSE_CODE = "smithy.api#httpResponseCode"

# Protocol traits
REST_JSON_1 = "aws.protocols#restJson1"
AWS_JSON_1_0 = "aws.protocols#awsJson1_0"
AWS_JSON_1_1 = "aws.protocols#awsJson1_1"

# Synthetic traits added by the transform pipeline
BOX = "smithy.synthetic#box"
SYNTHETIC_INPUT = "smithy.synthetic#syntheticInput"
SYNTHETIC_OUTPUT = "smithy.synthetic#syntheticOutput"
SYNTHETIC_EVENT_STREAM_UNION = "smithy.synthetic#eventStreamUnion"

SYNTHETIC_NAMESPACE_SUFFIX = ".synthetic"

# Timestamp formats
EPOCH_SECONDS = "epoch-seconds"
DATE_TIME = "date-time"
HTTP_DATE = "http-date"
TIMESTAMP_FORMATS = (EPOCH_SECONDS, DATE_TIME, HTTP_DATE)


class TraitHolder:
    """Mixin giving trait predicates to anything with a ``traits`` mapping."""

    traits: Mapping[str, Any]

    def has_trait(self, trait_id: str) -> bool:
        return trait_id in self.traits

    def get_trait(self, trait_id: str, default: Any = None) -> Any:
        return self.traits.get(trait_id, default)

    def expect_trait(self, trait_id: str) -> Any:
        if trait_id not in self.traits:
            raise InvalidModelError(f"Expected trait {trait_id} on {self}", getattr(self, "id", None))
        return self.traits[trait_id]


def merge_traits(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge two trait maps, the second one winning on conflicts."""
    merged = dict(base)
    merged.update(override)
    return merged
