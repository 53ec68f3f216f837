"""
EdgeMapper Device Management Interface (DMI) Wire Models

Pydantic models for the device and device-model descriptors delivered by the
device-management service. Keys follow the camelCase wire format; snake_case
field names are accepted as well.
"""

import base64
import binascii
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for all inbound descriptors."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _decode_base64(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise ValueError(f"invalid base64: {e}") from None
    return value


# Raw bytes carried as standard (RFC 4648 section 4) base64 text in JSON
Base64Bytes = Annotated[
    bytes,
    BeforeValidator(_decode_base64),
    PlainSerializer(lambda b: base64.b64encode(b).decode("ascii"), return_type=str, when_used="json"),
]


class CustomizedValue(WireModel):
    """Free-form values; `data` is None when the mapping was not sent at all."""
    data: Optional[Dict[str, Any]] = None


# ============================================================================
# Protocol Configs
# ============================================================================

class ProtocolConfigModbus(WireModel):
    slave_id: int = Field(0, alias="slaveID")


class ProtocolConfigOpcUA(WireModel):
    url: str = ""
    user_name: str = ""
    password: str = ""
    security_policy: str = ""
    security_mode: str = ""
    certificate: str = ""
    private_key: str = ""
    timeout: int = 0


class ProtocolConfigBluetooth(WireModel):
    mac_address: str = ""


class ProtocolConfigCustomized(WireModel):
    protocol_name: str = ""
    config_data: Optional[CustomizedValue] = None


class ProtocolConfigCOM(WireModel):
    serial_port: str = ""
    baud_rate: int = 0
    data_bits: int = 0
    parity: str = ""
    stop_bits: int = 0


class ProtocolConfigTCP(WireModel):
    ip: str = Field("", alias="IP")
    port: int = 0


class ProtocolConfigCommon(WireModel):
    com: Optional[ProtocolConfigCOM] = None
    tcp: Optional[ProtocolConfigTCP] = None
    comm_type: str = ""
    reconn_timeout: int = 0
    reconn_retry_times: int = 0
    collect_timeout: int = 0
    collect_retry_times: int = 0
    collect_type: str = ""
    customized_values: Optional[CustomizedValue] = None


class ProtocolConfig(WireModel):
    """
    Protocol selection of a device.
    At most one of modbus/opcua/bluetooth/customized_protocol is expected.
    """
    modbus: Optional[ProtocolConfigModbus] = None
    opcua: Optional[ProtocolConfigOpcUA] = None
    bluetooth: Optional[ProtocolConfigBluetooth] = None
    customized_protocol: Optional[ProtocolConfigCustomized] = None
    common: Optional[ProtocolConfigCommon] = None


# ============================================================================
# Visitor Configs
# ============================================================================

class VisitorConfigModbus(WireModel):
    register_: str = Field("", alias="register")
    offset: int = 0
    limit: int = 0
    scale: float = 0.0
    is_swap: bool = False
    is_register_swap: bool = False


class VisitorConfigOPCUA(WireModel):
    node_id: str = Field("", alias="nodeID")
    browse_name: str = ""


class BluetoothOperations(WireModel):
    operation_type: str = ""
    operation_value: float = 0.0


class BluetoothReadConverter(WireModel):
    start_index: int = 0
    end_index: int = 0
    shift_left: int = 0
    shift_right: int = 0
    order_of_operations: List[BluetoothOperations] = Field(default_factory=list)


class VisitorConfigBluetooth(WireModel):
    characteristic_uuid: str = Field("", alias="characteristicUUID")
    data_write: Dict[str, Base64Bytes] = Field(default_factory=dict)
    data_converter: Optional[BluetoothReadConverter] = None


class VisitorConfigCustomized(WireModel):
    protocol_name: str = ""
    config_data: Optional[CustomizedValue] = None


class DevicePropertyVisitor(WireModel):
    property_name: str = ""
    report_cycle: int = 0
    collect_cycle: int = 0
    customized_values: Optional[CustomizedValue] = None
    modbus: Optional[VisitorConfigModbus] = None
    opcua: Optional[VisitorConfigOPCUA] = None
    bluetooth: Optional[VisitorConfigBluetooth] = None
    customized_protocol: Optional[VisitorConfigCustomized] = None


# ============================================================================
# Device
# ============================================================================

class TwinProperty(WireModel):
    value: str = ""
    metadata: Dict[str, str] = Field(default_factory=dict)


class Twin(WireModel):
    property_name: str = ""
    desired: Optional[TwinProperty] = None
    reported: Optional[TwinProperty] = None


class DeviceSpec(WireModel):
    device_model_reference: str = ""
    protocol: Optional[ProtocolConfig] = None
    property_visitors: List[DevicePropertyVisitor] = Field(default_factory=list)


class DeviceStatus(WireModel):
    twins: List[Twin] = Field(default_factory=list)


class Device(WireModel):
    name: str = ""
    spec: Optional[DeviceSpec] = None
    status: Optional[DeviceStatus] = None


# ============================================================================
# Device Model
# ============================================================================

class PropertyTypeInt64(WireModel):
    access_mode: str = ""
    default_value: int = 0
    minimum: int = 0
    maximum: int = 0
    unit: str = ""


class PropertyTypeString(WireModel):
    access_mode: str = ""
    default_value: str = ""


class PropertyTypeDouble(WireModel):
    access_mode: str = ""
    default_value: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0
    unit: str = ""


class PropertyTypeFloat(WireModel):
    access_mode: str = ""
    default_value: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0
    unit: str = ""


class PropertyTypeBoolean(WireModel):
    access_mode: str = ""
    default_value: bool = False


class PropertyTypeBytes(WireModel):
    access_mode: str = ""


class PropertyType(WireModel):
    """Type descriptor of a model property; exactly one member is expected."""
    int_: Optional[PropertyTypeInt64] = Field(None, alias="int")
    string_: Optional[PropertyTypeString] = Field(None, alias="string")
    double: Optional[PropertyTypeDouble] = None
    float_: Optional[PropertyTypeFloat] = Field(None, alias="float")
    boolean: Optional[PropertyTypeBoolean] = None
    bytes_: Optional[PropertyTypeBytes] = Field(None, alias="bytes")


class DeviceProperty(WireModel):
    name: str = ""
    description: str = ""
    type: Optional[PropertyType] = None


class DeviceModelSpec(WireModel):
    properties: List[DeviceProperty] = Field(default_factory=list)


class DeviceModel(WireModel):
    name: str = ""
    spec: Optional[DeviceModelSpec] = None


class DeviceProfile(WireModel):
    """Device profile document used by the configmap init mode."""
    device_models: List[DeviceModel] = Field(default_factory=list)
    devices: List[Device] = Field(default_factory=list)
