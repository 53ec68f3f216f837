"""
Pytest configuration and shared fixtures.
"""

import json
import logging
from typing import Any, Dict

import pytest
import structlog
from prometheus_client import CollectorRegistry

from edgemapper.models import dmi
from edgemapper.modules.instance_assembler import InstanceAssembler
from edgemapper.utils.logging import SERVICE_NAME
from edgemapper.utils.metrics import EdgeMapperMetrics


@pytest.fixture
def device_payload() -> Dict[str, Any]:
    """Modbus device descriptor in DMI wire form."""
    return {
        "name": "dev1",
        "spec": {
            "deviceModelReference": "thermometer",
            "protocol": {
                "modbus": {"slaveID": 1},
                "common": {
                    "tcp": {"IP": "192.168.1.10", "port": 502},
                    "commType": "tcp",
                    "collectRetryTimes": 3,
                },
            },
            "propertyVisitors": [
                {
                    "propertyName": "temp",
                    "collectCycle": 10000,
                    "reportCycle": 10000,
                    "modbus": {"register": "HoldingRegister", "offset": 2, "limit": 1, "scale": 0.1},
                    "customizedValues": {
                        "data": {"timestamp": "1700000000", "type": "int"}
                    },
                },
                {
                    "propertyName": "switch",
                    "collectCycle": 5000,
                    "reportCycle": 5000,
                    "modbus": {"register": "CoilRegister", "offset": 0, "limit": 1},
                },
            ],
        },
        "status": {
            "twins": [
                {
                    "propertyName": "temp",
                    "desired": {
                        "value": "20",
                        "metadata": {"timestamp": "1700000001", "type": "int"},
                    },
                    "reported": {
                        "value": "21",
                        "metadata": {"timestamp": "1700000002", "type": "int"},
                    },
                },
                {
                    "propertyName": "humidity",
                    "desired": {"value": "40", "metadata": {}},
                },
            ]
        },
    }


@pytest.fixture
def model_payload() -> Dict[str, Any]:
    """Thermometer device model in DMI wire form."""
    return {
        "name": "thermometer",
        "spec": {
            "properties": [
                {
                    "name": "temp",
                    "description": "temperature in degree celsius",
                    "type": {
                        "int": {
                            "accessMode": "ReadWrite",
                            "defaultValue": 20,
                            "minimum": 0,
                            "maximum": 100,
                            "unit": "degree celsius",
                        }
                    },
                },
                {
                    "name": "switch",
                    "type": {"boolean": {"accessMode": "ReadWrite", "defaultValue": False}},
                },
            ]
        },
    }


@pytest.fixture
def device(device_payload) -> dmi.Device:
    return dmi.Device.model_validate(device_payload)


@pytest.fixture
def wire_model(model_payload) -> dmi.DeviceModel:
    return dmi.DeviceModel.model_validate(model_payload)


@pytest.fixture
def metrics() -> EdgeMapperMetrics:
    """Metrics bound to a private registry."""
    return EdgeMapperMetrics(registry=CollectorRegistry())


@pytest.fixture
def assembler(metrics) -> InstanceAssembler:
    return InstanceAssembler(metrics=metrics)


@pytest.fixture
def profile_payload(device_payload, model_payload) -> bytes:
    """Device profile with one modbus device and its model."""
    return json.dumps({
        "deviceModels": [model_payload],
        "devices": [device_payload],
    }).encode()


@pytest.fixture
def make_device():
    """Factory for devices with the given protocol blocks and no visitors or twins."""

    def _make(name: str = "dev1", **protocol: Any) -> dmi.Device:
        return dmi.Device.model_validate({"name": name, "spec": {"protocol": protocol}})

    return _make


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging calls made by a test."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    root.handlers = [h for h in root.handlers if h.name != SERVICE_NAME]
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
