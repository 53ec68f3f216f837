"""
EdgeMapper Device Builders Module

Converts the sub-lists of a wire device (twins, data-bearing property
visitors, all property visitors) into internal records.
"""

import re
from typing import Any

import structlog

from edgemapper.models import dmi
from edgemapper.models.schemas import (
    DataMetadata,
    DataProperty,
    PropertyVisitor,
    ProtocolSelection,
    Twin,
    TwinMetadata,
    TwinValue,
)
from edgemapper.modules.config_marshaler import ConfigMarshaler

logger = structlog.get_logger(__name__)

TIMESTAMP_PATTERN = re.compile(r"[+-]?[0-9]{1,19}")
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


# ============================================================================
# Twins
# ============================================================================

def _twin_value(prop: dmi.TwinProperty | None) -> TwinValue:
    if prop is None:
        return TwinValue()
    return TwinValue(
        value=prop.value,
        metadata=TwinMetadata(
            timestamp=prop.metadata.get("timestamp", ""),
            type=prop.metadata.get("type", ""),
        ),
    )


def build_twins(device: dmi.Device) -> list[Twin]:
    """One Twin per wire twin, in input order."""
    if device.status is None:
        return []
    return [
        Twin(
            property_name=twin.property_name,
            desired=_twin_value(twin.desired),
            reported=_twin_value(twin.reported),
        )
        for twin in device.status.twins
    ]


# ============================================================================
# Data Properties
# ============================================================================

def customized_text(value: Any) -> str:
    """
    Text of a customized value. Accepts plain values, raw bytes, or
    Any-style wrappers of the form {"value": ...}.
    """
    if isinstance(value, dict):
        value = value.get("value")
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def parse_timestamp(value: Any) -> int:
    """
    Parse a signed base-10 int64 timestamp. Absent, malformed or out of range
    text yields 0; no whitespace, digit separators or non-ASCII digits.
    """
    text = customized_text(value)
    if not TIMESTAMP_PATTERN.fullmatch(text):
        return 0
    timestamp = int(text)
    if not INT64_MIN <= timestamp <= INT64_MAX:
        return 0
    return timestamp


def build_data_properties(device: dmi.Device) -> list[DataProperty]:
    """
    One DataProperty per visitor carrying a customized data mapping.
    Visitors without one are skipped.
    """
    if device.spec is None:
        return []

    properties = []
    for visitor in device.spec.property_visitors:
        values = visitor.customized_values
        if values is None or values.data is None:
            continue
        properties.append(
            DataProperty(
                property_name=visitor.property_name,
                metadata=DataMetadata(
                    timestamp=parse_timestamp(values.data.get("timestamp")),
                    type=customized_text(values.data.get("type")),
                ),
            )
        )
    return properties


# ============================================================================
# Property Visitors
# ============================================================================

def build_property_visitors(
    device: dmi.Device,
    marshaler: ConfigMarshaler | None = None,
    selection: ProtocolSelection | None = None,
) -> list[PropertyVisitor]:
    """
    Build the visitors of a device using its resolved protocol kind.

    Raises UnresolvedProtocolError or SerializationError; no partial list
    is ever returned.
    """
    if device.spec is None or not device.spec.property_visitors:
        return []

    marshaler = marshaler or ConfigMarshaler()
    if selection is None:
        selection = marshaler.resolver.resolve(device)
    kind = selection.kind

    visitors = []
    for visitor in device.spec.property_visitors:
        visitors.append(
            PropertyVisitor(
                name=visitor.property_name,
                property_name=visitor.property_name,
                model_name=device.spec.device_model_reference,
                collect_cycle=visitor.collect_cycle,
                report_cycle=visitor.report_cycle,
                protocol=kind,
                visitor_config=marshaler.marshal_visitor_config(visitor, kind, device.name),
            )
        )

    logger.debug("Property visitors built", device=device.name, count=len(visitors))
    return visitors
