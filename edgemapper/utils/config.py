"""
EdgeMapper Configuration Module

Mapper configuration with validation using Pydantic Settings.
Loads configuration from a YAML file, environment variables and CLI overrides.
"""

import os
from enum import Enum
from functools import lru_cache
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from edgemapper.utils.exceptions import (
    CertificatePairError,
    ConfigValidationError,
    UnsupportedInitModeError,
)

DEFAULT_CONFIG_FILE = "./config.yaml"
DEFAULT_METASERVER_ADDR = "http://127.0.0.1:10550"
DEVICE_PROFILE_ENV = "DEVICE_PROFILE"


class DevInitMode(str, Enum):
    """How the mapper obtains its devices."""
    CONFIGMAP = "configmap"
    REGISTER = "register"
    METASERVER = "metaserver"


class MQTTSettings(BaseSettings):
    """MQTT broker configuration."""

    model_config = SettingsConfigDict(env_prefix="MQTT_")

    server: str = Field(default="", description="Broker address")
    username: str = Field(default="")
    password: str = Field(default="")
    certification: str = Field(default="", description="Client certificate file path")
    privatekey: str = Field(default="", description="Client private key file path")

    @model_validator(mode="after")
    def validate_certificate_pair(self):
        if bool(self.certification) != bool(self.privatekey):
            raise CertificatePairError()
        return self


class HTTPServerSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="HTTP_SERVER_")

    host: str = Field(default="")


class GRPCServerSettings(BaseSettings):
    """gRPC server configuration."""

    model_config = SettingsConfigDict(env_prefix="GRPC_SERVER_")

    socket_path: str = Field(default="")


class CommonSettings(BaseSettings):
    """Mapper identity."""

    model_config = SettingsConfigDict(env_prefix="COMMON_")

    name: str = Field(default="")
    version: str = Field(default="")
    api_version: str = Field(default="")
    protocol: str = Field(default="")
    address: str = Field(default="")
    edgecore_sock: str = Field(default="")


class MetaServerSettings(BaseModel):
    """Local meta service used by the metaserver init mode."""

    addr: str = Field(default=DEFAULT_METASERVER_ADDR)
    namespace: str = Field(default="default")

    @field_validator("namespace")
    @classmethod
    def default_namespace(cls, v: str) -> str:
        return v or "default"


class DevInitSettings(BaseSettings):
    """Device initialization configuration."""

    model_config = SettingsConfigDict(env_prefix="DEV_INIT_")

    mode: DevInitMode = Field(default=DevInitMode.METASERVER)
    configmap: str = Field(default="", description="Device profile file path")
    metaserver: MetaServerSettings = Field(default_factory=MetaServerSettings)
    profile: str = Field(default="", description="Device profile content (configmap mode)")

    @field_validator("mode", mode="before")
    @classmethod
    def validate_mode(cls, v):
        if v is None or v == "":
            return DevInitMode.METASERVER
        if isinstance(v, DevInitMode):
            return v
        try:
            return DevInitMode(str(v).strip().lower())
        except ValueError:
            raise UnsupportedInitModeError(str(v)) from None


class TranslationSettings(BaseSettings):
    """Translation engine behaviour."""

    model_config = SettingsConfigDict(env_prefix="TRANSLATION_")

    strict_protocol: bool = Field(
        default=False,
        description="Reject devices declaring more than one protocol",
    )


class SentrySettings(BaseSettings):
    """Sentry error tracking configuration."""

    model_config = SettingsConfigDict(env_prefix="SENTRY_")

    dsn: str | None = Field(default=None)
    environment: str = Field(default="development")
    traces_sample_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class Settings(BaseSettings):
    """Main mapper settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    env: str = Field(default="development", validation_alias=AliasChoices("env", "EDGEMAPPER_ENV"))
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("log_level", "LOG_LEVEL"))

    # Sub-configurations
    mqtt: MQTTSettings = Field(default_factory=MQTTSettings)
    http_server: HTTPServerSettings = Field(default_factory=HTTPServerSettings)
    grpc_server: GRPCServerSettings = Field(default_factory=GRPCServerSettings)
    common: CommonSettings = Field(default_factory=CommonSettings)
    dev_init: DevInitSettings = Field(default_factory=DevInitSettings)
    translation: TranslationSettings = Field(default_factory=TranslationSettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        valid_envs = ["development", "staging", "production", "test"]
        if v.lower() not in valid_envs:
            raise ValueError(f"env must be one of {valid_envs}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        return self.env == "development"


# ============================================================================
# Loading
# ============================================================================

def merge_overrides(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge overrides into base. None values are ignored."""
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_overrides(merged[key], value)
        elif isinstance(value, dict):
            merged[key] = merge_overrides({}, value)
        else:
            merged[key] = value
    return merged


def read_device_profile(path: str) -> str:
    """
    Read the device profile of the configmap init mode.
    Falls back to the DEVICE_PROFILE environment variable when the file does not exist.
    """
    try:
        with open(path, encoding="utf-8") as f:
            profile = f.read()
    except FileNotFoundError:
        profile = os.environ.get(DEVICE_PROFILE_ENV, "").strip()
    except OSError as e:
        raise ConfigValidationError(
            f"Can not read device profile {path}",
            field="dev_init.configmap",
            details={"reason": str(e)},
        ) from e

    if not profile.strip():
        raise ConfigValidationError("Can not parse configmap", field="dev_init.configmap")
    return profile


def load_settings(
    config_file: str = DEFAULT_CONFIG_FILE,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """
    Load settings from a YAML file, apply overrides and resolve the init mode.

    Raises:
        ConfigValidationError: unreadable or invalid configuration
    """
    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigValidationError(
            f"Can not read config file {config_file}",
            field="config_file",
            details={"reason": str(e)},
        ) from e
    except yaml.YAMLError as e:
        raise ConfigValidationError(
            f"Can not parse config file {config_file}",
            field="config_file",
            details={"reason": str(e)},
        ) from e

    if not isinstance(data, dict):
        raise ConfigValidationError(
            f"Config file {config_file} must contain a mapping", field="config_file"
        )

    if overrides:
        data = merge_overrides(data, overrides)

    try:
        settings = Settings(**data)
    except PydanticValidationError as e:
        raise ConfigValidationError(
            "Invalid configuration",
            details={"errors": e.error_count(), "reason": str(e)},
        ) from e

    if settings.dev_init.mode == DevInitMode.CONFIGMAP:
        settings.dev_init.profile = read_device_profile(settings.dev_init.configmap)

    return settings


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.
    Settings are loaded once from the environment and cached.
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Reload settings (clears cache).
    Use this when environment variables have changed.
    """
    get_settings.cache_clear()
    return get_settings()
