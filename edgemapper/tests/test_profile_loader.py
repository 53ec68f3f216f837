"""
Unit tests for device profile loading and assembly.
"""

import json

import pytest

from edgemapper.modules.profile_loader import assemble_profile, load_profile
from edgemapper.utils.exceptions import ConfigValidationError


class TestLoadProfile:
    def test_load(self, profile_payload):
        profile = load_profile(profile_payload)
        assert [m.name for m in profile.device_models] == ["thermometer"]
        assert [d.name for d in profile.devices] == ["dev1"]

    def test_empty(self):
        with pytest.raises(ConfigValidationError):
            load_profile("   ")

    def test_invalid_json(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_profile("{not json")
        assert exc_info.value.message == "Can not parse device profile"


class TestAssembleProfile:
    """Tests for assembling every device of a profile."""

    def test_assemble(self, assembler, profile_payload):
        result = assemble_profile(load_profile(profile_payload), assembler)
        assert list(result.models) == ["thermometer"]
        assert result.failures == {}
        instance = result.instances["dev1"]
        assert instance.protocol_name == "modbus-dev1"
        assert instance.twins[0].visitor.matched_property.name == "temp"

    def test_missing_model(self, assembler, device_payload):
        text = json.dumps({"devices": [device_payload]})
        result = assemble_profile(load_profile(text), assembler)
        instance = result.instances["dev1"]
        assert all(v.matched_property is None for v in instance.property_visitors)

    def test_failed_device_does_not_stop_others(self, assembler, device_payload, model_payload):
        broken = json.loads(json.dumps(device_payload))
        broken["name"] = "dev2"
        broken["spec"]["protocol"] = {}
        text = json.dumps({"deviceModels": [model_payload], "devices": [broken, device_payload]})

        result = assemble_profile(load_profile(text), assembler)
        assert list(result.instances) == ["dev1"]
        assert result.failures["dev2"]["error"] == "UNRESOLVED_PROTOCOL"
        assert result.failures["dev2"]["details"]["device"] == "dev2"
