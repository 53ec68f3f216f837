"""
EdgeMapper Config Marshaler Module

Serializes protocol-common, protocol-specific and visitor configuration
blocks into opaque JSON payloads for the protocol drivers.
"""

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from edgemapper.models.dmi import Device, DevicePropertyVisitor
from edgemapper.models.schemas import Protocol, ProtocolKind, ProtocolSelection
from edgemapper.modules.protocol_resolver import (
    VISITOR_CONFIG_FIELDS,
    ProtocolResolver,
    protocol_name,
)
from edgemapper.utils.exceptions import SerializationError

NULL_PAYLOAD = b"null"


def marshal_config(block: BaseModel | None, section: str, device: str | None = None) -> bytes:
    """
    Encode a wire config block as JSON bytes.
    An absent block encodes as ``null``.
    """
    if block is None:
        return NULL_PAYLOAD
    try:
        return block.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
    except PydanticSerializationError as e:
        raise SerializationError(section, str(e), device=device) from e


class ConfigMarshaler:
    """Builds the Protocol record of a device and the opaque visitor payloads."""

    def __init__(self, resolver: ProtocolResolver | None = None):
        self.resolver = resolver or ProtocolResolver()

    def build_protocol(
        self, device: Device, selection: ProtocolSelection | None = None
    ) -> Protocol:
        if selection is None:
            selection = self.resolver.resolve(device)

        common = device.spec.protocol.common if device.spec and device.spec.protocol else None
        common_config = marshal_config(common, "protocol common config", device.name)
        protocol_config = marshal_config(
            selection.config, f"{selection.kind.value} protocol config", device.name
        )

        return Protocol(
            name=protocol_name(selection.kind, device.name),
            protocol=selection.kind,
            protocol_configs=protocol_config,
            protocol_common_config=common_config,
        )

    def marshal_visitor_config(
        self, visitor: DevicePropertyVisitor, kind: ProtocolKind, device: str | None = None
    ) -> bytes:
        block = getattr(visitor, VISITOR_CONFIG_FIELDS[kind])
        return marshal_config(
            block, f"{kind.value} visitor config of '{visitor.property_name}'", device
        )
