"""
EdgeMapper Core Modules

This package contains the translation engine:
- protocol_resolver: protocol variant resolution
- config_marshaler: opaque protocol/visitor config payloads
- model_translator: device model to property schema
- device_builders: twins, data properties and property visitors
- instance_assembler: name-keyed join into a DeviceInstance
- profile_loader: device profile documents
"""

from edgemapper.modules.config_marshaler import ConfigMarshaler, marshal_config
from edgemapper.modules.device_builders import (
    build_data_properties,
    build_property_visitors,
    build_twins,
)
from edgemapper.modules.instance_assembler import (
    InstanceAssembler,
    assemble_device,
    attach_properties,
    attach_visitors,
)
from edgemapper.modules.model_translator import ModelTranslator, translate_property
from edgemapper.modules.profile_loader import ProfileResult, assemble_profile, load_profile
from edgemapper.modules.protocol_resolver import ProtocolResolver, protocol_name

__all__ = [
    # Protocol Resolver
    "ProtocolResolver",
    "protocol_name",
    # Config Marshaler
    "ConfigMarshaler",
    "marshal_config",
    # Model Translator
    "ModelTranslator",
    "translate_property",
    # Device Builders
    "build_data_properties",
    "build_property_visitors",
    "build_twins",
    # Instance Assembler
    "InstanceAssembler",
    "assemble_device",
    "attach_properties",
    "attach_visitors",
    # Profile Loader
    "ProfileResult",
    "assemble_profile",
    "load_profile",
]
