"""
EdgeMapper Instance Assembler Module

Assembles a DeviceInstance from a wire device and an optional translated
device model, joining property visitors, twins and data properties by
property name.
"""

import structlog

from edgemapper.models import dmi
from edgemapper.models.schemas import (
    DataProperty,
    DeviceInstance,
    DeviceModel,
    Property,
    PropertyVisitor,
    Twin,
)
from edgemapper.modules.config_marshaler import ConfigMarshaler
from edgemapper.modules.device_builders import (
    build_data_properties,
    build_property_visitors,
    build_twins,
)
from edgemapper.modules.model_translator import ModelTranslator
from edgemapper.modules.protocol_resolver import ProtocolResolver, protocol_name
from edgemapper.utils.exceptions import EdgeMapperError
from edgemapper.utils.logging import LogContext
from edgemapper.utils.metrics import EdgeMapperMetrics, get_metrics

logger = structlog.get_logger(__name__)


def attach_properties(
    visitors: list[PropertyVisitor], model: DeviceModel
) -> tuple[list[PropertyVisitor], dict[str, PropertyVisitor]]:
    """
    Attach a copy of the matching schema property to each visitor.

    Returns the enriched visitors and an index of matched visitors keyed by
    property name. Unmatched visitors are not indexed. For duplicate property
    names the last visitor wins the index.
    """
    schema: dict[str, Property] = {}
    for prop in model.properties:
        schema.setdefault(prop.name, prop)

    enriched = []
    index: dict[str, PropertyVisitor] = {}
    for visitor in visitors:
        matched = schema.get(visitor.property_name)
        if matched is None:
            logger.debug("Visitor has no matching property", property=visitor.property_name)
            enriched.append(visitor)
            continue

        visitor = visitor.model_copy(update={"matched_property": matched.model_copy(deep=True)})
        if matched.name in index:
            logger.warning(
                "Duplicate visitor for property, keeping the last one",
                property=matched.name,
            )
        index[matched.name] = visitor
        enriched.append(visitor)

    return enriched, index


def attach_visitors(
    entries: list[Twin] | list[DataProperty], index: dict[str, PropertyVisitor]
) -> list:
    """Attach a snapshot copy of the indexed visitor to each entry by property name."""
    attached = []
    for entry in entries:
        visitor = index.get(entry.property_name)
        if visitor is not None:
            entry = entry.model_copy(update={"visitor": visitor.model_copy(deep=True)})
        attached.append(entry)
    return attached


class InstanceAssembler:
    """
    Builds DeviceInstance records from DMI descriptors.

    Assembly is a pure synchronous transform: the same inputs always yield
    equal instances and no state is kept between calls.
    """

    def __init__(
        self,
        resolver: ProtocolResolver | None = None,
        marshaler: ConfigMarshaler | None = None,
        translator: ModelTranslator | None = None,
        metrics: EdgeMapperMetrics | None = None,
    ):
        self.resolver = resolver or ProtocolResolver()
        self.marshaler = marshaler or ConfigMarshaler(self.resolver)
        self.translator = translator or ModelTranslator()
        self.metrics = metrics or get_metrics()

    def translate_model(self, model: dmi.DeviceModel | None) -> DeviceModel:
        schema = self.translator.translate(model)
        self.metrics.record_model_translated()
        return schema

    def assemble(self, device: dmi.Device, model: DeviceModel | None = None) -> DeviceInstance:
        """
        Assemble a device against an optional translated model.

        Raises:
            UnresolvedProtocolError: the device declares no protocol
            AmbiguousProtocolError: several protocols in strict mode
            SerializationError: a config block could not be encoded
        """
        with LogContext(device_id=device.name, model_name=model.name if model else None):
            try:
                with self.metrics.time_assembly():
                    instance = self._assemble(device, model)
            except EdgeMapperError as e:
                self.metrics.record_failure(e.code)
                logger.error("Device assembly failed", error=e.code, exc_info=e)
                raise

        return instance

    def _assemble(self, device: dmi.Device, model: DeviceModel | None) -> DeviceInstance:
        selection = self.resolver.resolve(device)

        twins = build_twins(device)
        data_properties = build_data_properties(device)
        visitors = build_property_visitors(device, self.marshaler, selection)

        if model is not None:
            visitors, index = attach_properties(visitors, model)
            twins = attach_visitors(twins, index)
            data_properties = attach_visitors(data_properties, index)

        logger.info(
            "Device assembled",
            protocol=selection.kind.value,
            twins=len(twins),
            data_properties=len(data_properties),
            visitors=len(visitors),
        )
        self.metrics.record_assembly(selection.kind.value)
        return DeviceInstance(
            id=device.name,
            name=device.name,
            protocol_name=protocol_name(selection.kind, device.name),
            model=device.spec.device_model_reference if device.spec else "",
            twins=twins,
            data_properties=data_properties,
            property_visitors=visitors,
        )


def assemble_device(
    device: dmi.Device,
    model: dmi.DeviceModel | None = None,
    strict: bool = False,
) -> DeviceInstance:
    """Translate the wire model (if any) and assemble the device."""
    assembler = InstanceAssembler(resolver=ProtocolResolver(strict=strict))
    schema = assembler.translate_model(model) if model is not None else None
    return assembler.assemble(device, schema)
