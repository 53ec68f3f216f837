"""
Unit tests for the Device Builders module.
"""

import json

import pytest

from edgemapper.models import dmi
from edgemapper.models.schemas import ProtocolKind
from edgemapper.modules.device_builders import (
    build_data_properties,
    build_property_visitors,
    build_twins,
    customized_text,
    parse_timestamp,
)
from edgemapper.utils.exceptions import SerializationError, UnresolvedProtocolError


class TestBuildTwins:
    """Tests for twin conversion."""

    def test_order_and_values(self, device):
        twins = build_twins(device)
        assert [t.property_name for t in twins] == ["temp", "humidity"]

        temp = twins[0]
        assert temp.desired.value == "20"
        assert temp.desired.metadata.timestamp == "1700000001"
        assert temp.desired.metadata.type == "int"
        assert temp.reported.value == "21"
        assert temp.reported.metadata.timestamp == "1700000002"
        assert temp.visitor is None

    def test_missing_metadata_and_side(self, device):
        humidity = build_twins(device)[1]
        assert humidity.desired.value == "40"
        assert humidity.desired.metadata.timestamp == ""
        assert humidity.desired.metadata.type == ""
        assert humidity.reported.value == ""

    def test_no_status(self):
        assert build_twins(dmi.Device(name="d")) == []

    def test_empty_twins(self):
        assert build_twins(dmi.Device.model_validate({"name": "d", "status": {"twins": []}})) == []


class TestCustomizedValues:
    def test_plain_values(self):
        assert customized_text("int") == "int"
        assert customized_text(42) == "42"
        assert customized_text(None) == ""

    def test_any_wrapper(self):
        assert customized_text({"typeUrl": "x", "value": b"1700000000"}) == "1700000000"

    def test_parse_timestamp(self):
        assert parse_timestamp("1700000000") == 1700000000
        assert parse_timestamp(b"12") == 12
        assert parse_timestamp({"value": "7"}) == 7

    def test_parse_timestamp_malformed(self):
        assert parse_timestamp("yesterday") == 0
        assert parse_timestamp(None) == 0
        assert parse_timestamp("") == 0

    def test_parse_timestamp_signed(self):
        assert parse_timestamp("-12") == -12
        assert parse_timestamp("+12") == 12

    @pytest.mark.parametrize("text", ["1_000", "١٢", " 12 ", "12\n", "0x1f", "1e3", "+", "12.0"])
    def test_parse_timestamp_strict_digits(self, text):
        assert parse_timestamp(text) == 0

    def test_parse_timestamp_int64_range(self):
        assert parse_timestamp("9223372036854775807") == 2**63 - 1
        assert parse_timestamp("-9223372036854775808") == -(2**63)
        assert parse_timestamp("9223372036854775808") == 0
        assert parse_timestamp("1" * 40) == 0


class TestBuildDataProperties:
    """Tests for data property filtering."""

    def test_only_visitors_with_data(self, device):
        properties = build_data_properties(device)
        assert len(properties) == 1
        assert properties[0].property_name == "temp"
        assert properties[0].metadata.timestamp == 1700000000
        assert properties[0].metadata.type == "int"
        assert properties[0].visitor is None

    def test_customized_values_without_data_are_skipped(self, device_payload):
        device_payload["spec"]["propertyVisitors"][1]["customizedValues"] = {}
        properties = build_data_properties(dmi.Device.model_validate(device_payload))
        assert [p.property_name for p in properties] == ["temp"]

    def test_empty_data_mapping_is_kept(self, device_payload):
        device_payload["spec"]["propertyVisitors"][1]["customizedValues"] = {"data": {}}
        properties = build_data_properties(dmi.Device.model_validate(device_payload))
        assert [p.property_name for p in properties] == ["temp", "switch"]
        assert properties[1].metadata.timestamp == 0
        assert properties[1].metadata.type == ""

    def test_malformed_timestamp(self, device_payload):
        device_payload["spec"]["propertyVisitors"][0]["customizedValues"]["data"]["timestamp"] = "soon"
        properties = build_data_properties(dmi.Device.model_validate(device_payload))
        assert properties[0].metadata.timestamp == 0

    def test_no_spec(self):
        assert build_data_properties(dmi.Device(name="d")) == []


class TestBuildPropertyVisitors:
    """Tests for property visitor conversion."""

    def test_visitors(self, device):
        visitors = build_property_visitors(device)
        assert [v.property_name for v in visitors] == ["temp", "switch"]

        temp = visitors[0]
        assert temp.name == "temp"
        assert temp.model_name == "thermometer"
        assert temp.collect_cycle == 10000
        assert temp.report_cycle == 10000
        assert temp.protocol == ProtocolKind.MODBUS
        assert temp.matched_property is None
        config = json.loads(temp.visitor_config)
        assert config["register"] == "HoldingRegister"
        assert config["scale"] == 0.1

    def test_no_visitors(self, make_device):
        assert build_property_visitors(make_device(modbus={})) == []

    def test_unresolved_protocol(self, device_payload):
        device_payload["spec"]["protocol"] = {}
        with pytest.raises(UnresolvedProtocolError):
            build_property_visitors(dmi.Device.model_validate(device_payload))

    def test_serialization_failure_aborts_all(self, device_payload):
        device_payload["spec"]["protocol"] = {"customizedProtocol": {"protocolName": "x"}}
        device_payload["spec"]["propertyVisitors"][0]["customizedProtocol"] = {
            "protocolName": "x", "configData": {"data": {"ok": 1}},
        }
        device_payload["spec"]["propertyVisitors"][1]["customizedProtocol"] = {
            "protocolName": "x", "configData": {"data": {"bad": object()}},
        }
        with pytest.raises(SerializationError) as exc_info:
            build_property_visitors(dmi.Device.model_validate(device_payload))
        assert "switch" in exc_info.value.details["section"]
