"""
EdgeMapper Model Translator Module

Converts a wire device model into the internal property schema.
"""

import math
from typing import Any

import structlog

from edgemapper.models import dmi
from edgemapper.models.schemas import DataType, DeviceModel, Property

logger = structlog.get_logger(__name__)


# ============================================================================
# Type Descriptor Mapping
# ============================================================================

# Checked in order; the first populated descriptor wins.
TYPE_DESCRIPTORS: tuple[tuple[str, DataType], ...] = (
    ("string_", DataType.STRING),
    ("bytes_", DataType.BYTES),
    ("boolean", DataType.BOOLEAN),
    ("int_", DataType.INT),
    ("double", DataType.DOUBLE),
    ("float_", DataType.FLOAT),
)

NUMERIC_TYPES = frozenset({DataType.INT, DataType.DOUBLE, DataType.FLOAT})


def render_default(value: Any) -> str:
    """Render a typed default value as text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def truncate_bound(value: float | int) -> int:
    """Truncate a bound toward zero. Non-finite bounds become 0."""
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return int(value)


def translate_property(prop: dmi.DeviceProperty) -> Property:
    """Translate one model property; a missing type descriptor yields an untyped property."""
    fields: dict[str, Any] = {"name": prop.name, "description": prop.description}

    if prop.type is not None:
        for attr, data_type in TYPE_DESCRIPTORS:
            descriptor = getattr(prop.type, attr)
            if descriptor is None:
                continue
            fields["data_type"] = data_type
            fields["access_mode"] = descriptor.access_mode
            fields["default_value"] = render_default(getattr(descriptor, "default_value", None))
            if data_type in NUMERIC_TYPES:
                fields["minimum"] = truncate_bound(descriptor.minimum)
                fields["maximum"] = truncate_bound(descriptor.maximum)
                fields["unit"] = descriptor.unit
            break

    if "data_type" not in fields:
        logger.debug("Property has no type descriptor", property=prop.name)

    return Property(**fields)


class ModelTranslator:
    """Translates DMI device models into internal DeviceModel schemas."""

    def translate(self, model: dmi.DeviceModel | None) -> DeviceModel:
        if model is None:
            return DeviceModel()
        if model.spec is None or not model.spec.properties:
            return DeviceModel(name=model.name)

        properties = tuple(translate_property(p) for p in model.spec.properties)
        logger.debug("Device model translated", model=model.name, properties=len(properties))
        return DeviceModel(name=model.name, properties=properties)
