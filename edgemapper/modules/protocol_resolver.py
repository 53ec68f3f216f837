"""
EdgeMapper Protocol Resolver Module

Determines which single protocol variant a device declares and turns the
wire-level protocol block into a tagged ProtocolSelection.
"""

import structlog

from edgemapper.models.dmi import Device
from edgemapper.models.schemas import (
    BluetoothSelection,
    CustomizedSelection,
    ModbusSelection,
    OpcuaSelection,
    ProtocolKind,
    ProtocolSelection,
)
from edgemapper.utils.exceptions import AmbiguousProtocolError, UnresolvedProtocolError

logger = structlog.get_logger(__name__)


# Resolution priority: (kind, ProtocolConfig attribute, selection type)
PROTOCOL_PRIORITY = (
    (ProtocolKind.MODBUS, "modbus", ModbusSelection),
    (ProtocolKind.OPCUA, "opcua", OpcuaSelection),
    (ProtocolKind.BLUETOOTH, "bluetooth", BluetoothSelection),
    (ProtocolKind.CUSTOMIZED, "customized_protocol", CustomizedSelection),
)

# Attribute holding the kind-specific config on a DevicePropertyVisitor
VISITOR_CONFIG_FIELDS: dict[ProtocolKind, str] = {
    kind: attr for kind, attr, _ in PROTOCOL_PRIORITY
}


def protocol_name(kind: ProtocolKind, device_name: str) -> str:
    """Composite protocol identifier of a device."""
    return f"{kind.value}-{device_name}"


class ProtocolResolver:
    """
    Resolves the protocol kind of a device.

    When more than one protocol block is populated the first one in
    PROTOCOL_PRIORITY is selected and a warning is logged, unless
    ``strict`` is set, in which case AmbiguousProtocolError is raised.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def resolve(self, device: Device) -> ProtocolSelection:
        protocol = device.spec.protocol if device.spec else None
        if protocol is None:
            raise UnresolvedProtocolError(device.name)

        populated = [
            (kind, selection_cls, getattr(protocol, attr))
            for kind, attr, selection_cls in PROTOCOL_PRIORITY
            if getattr(protocol, attr) is not None
        ]
        if not populated:
            raise UnresolvedProtocolError(device.name)

        if len(populated) > 1:
            kinds = [kind.value for kind, _, _ in populated]
            if self.strict:
                raise AmbiguousProtocolError(device.name, kinds)
            logger.warning(
                "Multiple protocols declared, using first by priority",
                device=device.name,
                protocols=kinds,
                selected=kinds[0],
            )

        kind, selection_cls, config = populated[0]
        logger.debug("Protocol resolved", device=device.name, protocol=kind.value)
        return selection_cls(config=config)

    def resolve_kind(self, device: Device) -> ProtocolKind:
        """Resolve only the protocol kind of a device."""
        return self.resolve(device).kind
