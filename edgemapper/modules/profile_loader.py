"""
EdgeMapper Device Profile Module

Loads a device profile document (devices plus their device models) and
assembles every device it declares.
"""

import structlog
from pydantic import BaseModel, Field, ValidationError

from edgemapper.models.dmi import DeviceProfile
from edgemapper.models.schemas import DeviceInstance, DeviceModel
from edgemapper.modules.instance_assembler import InstanceAssembler
from edgemapper.utils.exceptions import ConfigValidationError, EdgeMapperError

logger = structlog.get_logger(__name__)


class ProfileResult(BaseModel):
    """Outcome of assembling a device profile."""
    models: dict[str, DeviceModel] = Field(default_factory=dict)
    instances: dict[str, DeviceInstance] = Field(default_factory=dict)
    failures: dict[str, dict] = Field(default_factory=dict, description="Errors keyed by device name")


def load_profile(text: str | bytes) -> DeviceProfile:
    """Parse a JSON device profile."""
    if not text or not text.strip():
        raise ConfigValidationError("Device profile is empty", field="dev_init.configmap")
    try:
        return DeviceProfile.model_validate_json(text)
    except ValidationError as e:
        raise ConfigValidationError(
            "Can not parse device profile",
            field="dev_init.configmap",
            details={"errors": e.error_count(), "reason": str(e)},
        ) from e


def assemble_profile(
    profile: DeviceProfile, assembler: InstanceAssembler | None = None
) -> ProfileResult:
    """
    Translate every model and assemble every device of a profile.

    A device whose model is not part of the profile is assembled without a
    schema. A device that fails to assemble is recorded in ``failures`` and
    does not stop the others.
    """
    assembler = assembler or InstanceAssembler()
    result = ProfileResult()

    for wire_model in profile.device_models:
        result.models[wire_model.name] = assembler.translate_model(wire_model)

    for device in profile.devices:
        reference = device.spec.device_model_reference if device.spec else ""
        model = result.models.get(reference)
        if model is None:
            logger.warning("Device model not found in profile", device=device.name, model=reference)
        try:
            result.instances[device.name] = assembler.assemble(device, model)
        except EdgeMapperError as e:
            result.failures[device.name] = e.to_dict()

    logger.info(
        "Device profile assembled",
        models=len(result.models),
        devices=len(result.instances),
        failures=len(result.failures),
    )
    return result
