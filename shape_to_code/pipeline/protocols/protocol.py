"""
Protocol selection.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..errors import UnsupportedProtocolError
from ..model import traits
from ..model.shapes import Member, Model, Shape
from .bindings import AwsJsonBindingResolver, HttpBindingResolver, HttpTraitBindingResolver
from .customizations import JsonCustomization, error_type_customization

logger = logging.getLogger(__name__)

# Supported protocol traits, in order of preference
SUPPORTED_PROTOCOLS = (traits.REST_JSON_1, traits.AWS_JSON_1_0, traits.AWS_JSON_1_1)


class Protocol:
    """A JSON protocol: member bindings, JSON key naming and customizations.

    Attributes:
        trait_id: The protocol trait id
        resolver: HTTP binding resolver of the protocol
        use_json_name: Whether the ``jsonName`` trait renames JSON keys
        customizations: Serializer customizations, in invocation order
    """

    def __init__(
        self,
        trait_id: str,
        resolver: HttpBindingResolver,
        use_json_name: bool = False,
        customizations: Sequence[JsonCustomization] = (),
    ):
        self.trait_id = trait_id
        self.resolver = resolver
        self.use_json_name = use_json_name
        self.customizations = list(customizations)

    def json_name(self, member: Member) -> str:
        if self.use_json_name and member.has_trait(traits.JSON_NAME):
            return member.get_trait(traits.JSON_NAME)
        return member.name

    def __repr__(self) -> str:
        return f"Protocol({self.trait_id})"


def create_protocol(model: Model, trait_id: str, customizations: Sequence[JsonCustomization] = ()) -> Protocol:
    if trait_id == traits.REST_JSON_1:
        return Protocol(trait_id, HttpTraitBindingResolver(model), use_json_name=True, customizations=customizations)
    if trait_id in (traits.AWS_JSON_1_0, traits.AWS_JSON_1_1):
        return Protocol(
            trait_id,
            AwsJsonBindingResolver(model),
            customizations=[error_type_customization, *customizations],
        )
    raise UnsupportedProtocolError(f"Unsupported protocol {trait_id}")


def resolve_protocol(
    model: Model,
    service: Shape,
    override: str = "",
    customizations: Sequence[JsonCustomization] = (),
) -> Protocol:
    """
    Select the protocol to generate for a service.

    Args:
        model: The normalized model
        service: The service shape
        override: Protocol trait id forced by configuration, if any
        customizations: Extra serializer customizations

    Returns:
        The configured protocol override, else the first supported protocol
        trait applied to the service
    """
    if override:
        return create_protocol(model, override, customizations)
    for trait_id in SUPPORTED_PROTOCOLS:
        if service.has_trait(trait_id):
            logger.debug("Using protocol %s for %s", trait_id, service.id)
            return create_protocol(model, trait_id, customizations)
    raise UnsupportedProtocolError(
        f"Service {service.id} has none of the supported protocol traits: {', '.join(SUPPORTED_PROTOCOLS)}",
        service.id,
    )
