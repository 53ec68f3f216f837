"""
EdgeMapper - Device Descriptor Translation for Edge Protocol Mappers

Normalizes device and device-model descriptors from a device-management
service into a protocol-agnostic representation for protocol drivers and
twin reporting.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from edgemapper.models.schemas import (
    DeviceInstance,
    DeviceModel,
    ProtocolKind,
)

__all__ = [
    "__version__",
    "DeviceInstance",
    "DeviceModel",
    "ProtocolKind",
]
