"""
EdgeMapper Pydantic Models

Protocol-agnostic internal representation produced by the translation engine
and consumed by protocol drivers and twin reporting.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from edgemapper.models.dmi import (
    ProtocolConfigBluetooth,
    ProtocolConfigCustomized,
    ProtocolConfigModbus,
    ProtocolConfigOpcUA,
)


# ============================================================================
# Enums
# ============================================================================

class ProtocolKind(str, Enum):
    """Supported device protocols, in resolution priority order."""
    MODBUS = "modbus"
    OPCUA = "opcua"
    BLUETOOTH = "bluetooth"
    CUSTOMIZED = "customized-protocol"


class DataType(str, Enum):
    """Property data types. UNSPECIFIED marks a property without a type descriptor."""
    UNSPECIFIED = ""
    STRING = "string"
    BYTES = "bytes"
    BOOLEAN = "boolean"
    INT = "int"
    DOUBLE = "double"
    FLOAT = "float"


# ============================================================================
# Protocol Selection
# ============================================================================

class ModbusSelection(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal[ProtocolKind.MODBUS] = ProtocolKind.MODBUS
    config: ProtocolConfigModbus


class OpcuaSelection(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal[ProtocolKind.OPCUA] = ProtocolKind.OPCUA
    config: ProtocolConfigOpcUA


class BluetoothSelection(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal[ProtocolKind.BLUETOOTH] = ProtocolKind.BLUETOOTH
    config: ProtocolConfigBluetooth


class CustomizedSelection(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal[ProtocolKind.CUSTOMIZED] = ProtocolKind.CUSTOMIZED
    config: ProtocolConfigCustomized


ProtocolSelection = Annotated[
    Union[ModbusSelection, OpcuaSelection, BluetoothSelection, CustomizedSelection],
    Field(discriminator="kind"),
]


# ============================================================================
# Device Model Schema
# ============================================================================

class Property(BaseModel):
    """
    A single typed property of a device model.
    Bounds are integers; double/float bounds are truncated on translation.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Property name")
    description: str = Field("", description="Free-text description")
    data_type: DataType = Field(DataType.UNSPECIFIED, description="Data type tag")
    access_mode: str = Field("", description="Access mode, e.g. ReadWrite")
    default_value: str = Field("", description="Default value rendered as text")
    minimum: int = Field(0, description="Lower bound (numeric types only)")
    maximum: int = Field(0, description="Upper bound (numeric types only)")
    unit: str = Field("", description="Unit (numeric types only)")


class DeviceModel(BaseModel):
    """Translated device model. Immutable once built."""
    model_config = ConfigDict(frozen=True)

    name: str = Field("", description="Model name")
    properties: Tuple[Property, ...] = Field(default=(), description="Ordered properties")


# ============================================================================
# Device Instance
# ============================================================================

class Protocol(BaseModel):
    """Resolved protocol of a device with its opaque config payloads."""
    name: str = Field(..., description="Composite '<kind>-<device>' identifier")
    protocol: ProtocolKind = Field(..., description="Protocol kind")
    protocol_configs: bytes = Field(b"null", description="Kind-specific config JSON")
    protocol_common_config: bytes = Field(b"null", description="Common config JSON")


class PropertyVisitor(BaseModel):
    """How a driver reads or writes one named property."""
    model_config = ConfigDict(protected_namespaces=())

    name: str = Field(..., description="Visitor name")
    property_name: str = Field(..., description="Target property name")
    model_name: str = Field("", description="Owning device model")
    collect_cycle: int = Field(0, description="Collect cycle")
    report_cycle: int = Field(0, description="Report cycle")
    protocol: ProtocolKind = Field(..., description="Protocol kind")
    visitor_config: bytes = Field(b"null", description="Kind-specific visitor config JSON")
    matched_property: Optional[Property] = Field(None, description="Copy of the matched schema property")


class TwinMetadata(BaseModel):
    timestamp: str = ""
    type: str = ""


class TwinValue(BaseModel):
    value: str = ""
    metadata: TwinMetadata = Field(default_factory=TwinMetadata)


class Twin(BaseModel):
    """Desired/reported state pair for one property."""
    property_name: str = Field(..., description="Property name")
    desired: TwinValue = Field(default_factory=TwinValue)
    reported: TwinValue = Field(default_factory=TwinValue)
    visitor: Optional[PropertyVisitor] = Field(None, description="Copy of the matched visitor")


class DataMetadata(BaseModel):
    timestamp: int = 0
    type: str = ""


class DataProperty(BaseModel):
    """Data-bearing property reported outside the twin channel."""
    property_name: str = Field(..., description="Property name")
    metadata: DataMetadata = Field(default_factory=DataMetadata)
    visitor: Optional[PropertyVisitor] = Field(None, description="Copy of the matched visitor")


class DeviceInstance(BaseModel):
    """Fully assembled, protocol-agnostic device."""
    id: str = Field(..., description="Device identifier")
    name: str = Field(..., description="Device name")
    protocol_name: str = Field(..., description="Composite protocol name")
    model: str = Field("", description="Device model reference")
    twins: List[Twin] = Field(default_factory=list)
    data_properties: List[DataProperty] = Field(default_factory=list)
    property_visitors: List[PropertyVisitor] = Field(default_factory=list)
