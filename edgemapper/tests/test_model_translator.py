"""
Unit tests for the Model Translator module.
"""

import pytest
from pydantic import ValidationError

from edgemapper.models import dmi
from edgemapper.models.schemas import DataType
from edgemapper.modules.model_translator import (
    ModelTranslator,
    render_default,
    translate_property,
    truncate_bound,
)


def _property(name: str, **type_descriptor) -> dmi.DeviceProperty:
    return dmi.DeviceProperty.model_validate({"name": name, "type": type_descriptor})


class TestRenderDefault:
    """Tests for default value rendering."""

    def test_int(self):
        assert render_default(20) == "20"

    def test_bool(self):
        assert render_default(True) == "true"
        assert render_default(False) == "false"

    def test_integral_float(self):
        assert render_default(20.0) == "20"

    def test_fractional_float(self):
        assert render_default(1.5) == "1.5"

    def test_string(self):
        assert render_default("on") == "on"

    def test_none(self):
        assert render_default(None) == ""


class TestTruncateBound:
    def test_truncates_toward_zero(self):
        assert truncate_bound(99.9) == 99
        assert truncate_bound(-10.7) == -10

    def test_non_finite(self):
        assert truncate_bound(float("inf")) == 0
        assert truncate_bound(float("nan")) == 0


class TestTranslateProperty:
    """Tests for single property translation."""

    def test_int(self):
        prop = translate_property(
            _property("temp", int={"accessMode": "ReadWrite", "defaultValue": 20,
                                   "minimum": 0, "maximum": 100, "unit": "celsius"})
        )
        assert prop.name == "temp"
        assert prop.data_type == DataType.INT
        assert prop.access_mode == "ReadWrite"
        assert prop.default_value == "20"
        assert prop.minimum == 0
        assert prop.maximum == 100
        assert prop.unit == "celsius"

    def test_double_bounds_truncated(self):
        prop = translate_property(
            _property("pressure", double={"defaultValue": 1.25, "minimum": -0.5, "maximum": 10.9})
        )
        assert prop.data_type == DataType.DOUBLE
        assert prop.default_value == "1.25"
        assert prop.minimum == 0
        assert prop.maximum == 10

    def test_float(self):
        prop = translate_property(_property("level", float={"maximum": 3.99, "unit": "m"}))
        assert prop.data_type == DataType.FLOAT
        assert prop.maximum == 3
        assert prop.unit == "m"

    def test_string_has_no_bounds(self):
        prop = translate_property(_property("label", string={"accessMode": "ReadOnly", "defaultValue": "x"}))
        assert prop.data_type == DataType.STRING
        assert prop.default_value == "x"
        assert prop.minimum == 0
        assert prop.unit == ""

    def test_bytes_has_no_default(self):
        prop = translate_property(_property("raw", bytes={"accessMode": "ReadOnly"}))
        assert prop.data_type == DataType.BYTES
        assert prop.access_mode == "ReadOnly"
        assert prop.default_value == ""

    def test_boolean(self):
        prop = translate_property(_property("switch", boolean={"defaultValue": True}))
        assert prop.data_type == DataType.BOOLEAN
        assert prop.default_value == "true"

    def test_no_type_descriptor(self):
        prop = translate_property(dmi.DeviceProperty(name="ghost", description="untyped"))
        assert prop.data_type == DataType.UNSPECIFIED
        assert prop.data_type.value == ""
        assert prop.description == "untyped"

    def test_empty_type_descriptor(self):
        prop = translate_property(_property("ghost"))
        assert prop.data_type == DataType.UNSPECIFIED

    def test_first_descriptor_wins(self):
        prop = translate_property(_property("both", string={"defaultValue": "a"}, int={"defaultValue": 1}))
        assert prop.data_type == DataType.STRING


class TestModelTranslator:
    """Tests for whole-model translation."""

    def test_translate(self, wire_model):
        model = ModelTranslator().translate(wire_model)
        assert model.name == "thermometer"
        assert [p.name for p in model.properties] == ["temp", "switch"]
        temp = model.properties[0]
        assert temp.data_type == DataType.INT
        assert (temp.minimum, temp.maximum, temp.default_value) == (0, 100, "20")

    def test_none_model(self):
        model = ModelTranslator().translate(None)
        assert model.properties == ()

    def test_model_without_spec(self):
        model = ModelTranslator().translate(dmi.DeviceModel(name="empty"))
        assert model.name == "empty"
        assert model.properties == ()

    def test_model_without_properties(self):
        model = ModelTranslator().translate(dmi.DeviceModel.model_validate({"name": "m", "spec": {}}))
        assert model.properties == ()

    def test_translated_model_is_immutable(self, wire_model):
        model = ModelTranslator().translate(wire_model)
        with pytest.raises(ValidationError):
            model.name = "changed"
        with pytest.raises(ValidationError):
            model.properties[0].maximum = 5
