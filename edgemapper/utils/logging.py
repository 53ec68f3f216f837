"""
EdgeMapper Logging Module

structlog setup for the mapper. Events are rendered to stderr so the CLI can
keep stdout for translated output.
"""

import logging
import sys
from collections.abc import Mapping
from typing import Any

import structlog
from structlog.types import EventDict, Processor

SERVICE_NAME = "edgemapper"

SENSITIVE_KEYS = frozenset({
    "password",
    "token",
    "secret",
    "privatekey",
    "private_key",
    "certification",
    "dsn",
})

REDACTED = "***REDACTED***"


def _redact(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            k: REDACTED if any(s in str(k).lower() for s in SENSITIVE_KEYS) else _redact(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_redact(item) for item in value]
    return value


def censor_sensitive_data(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
    """Redact credential-like keys at any depth (MQTT password, key paths, DSNs)."""
    return _redact(event_dict)


def add_error_details(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
    """
    Attach the code and details of an EdgeMapperError passed as ``exc_info``.

    ``exc_info`` itself is left in place for the renderer.
    """
    exc = event_dict.get("exc_info")
    if isinstance(exc, BaseException) and hasattr(exc, "to_dict"):
        event_dict.setdefault("error_details", exc.to_dict())
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    development: bool = False,
) -> None:
    """
    Configure structlog on top of stdlib logging.

    Development mode renders colored console lines, otherwise JSON lines are
    written unless ``json_logs`` is off.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_error_details,
        censor_sensitive_data,
    ]

    if development or not json_logs:
        processors.append(structlog.dev.ConsoleRenderer(colors=development))
    else:
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if getattr(h, "name", None) != SERVICE_NAME]
    handler.name = SERVICE_NAME
    root.addHandler(handler)
    root.setLevel(log_level.upper())


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LogContext:
    """
    Bind the device being assembled (and its model) to every event logged
    inside the block.

        with LogContext(device_id="dev1", model_name="thermometer"):
            logger.info("Device assembled")
    """

    def __init__(self, device_id: str | None = None, model_name: str | None = None):
        self.bindings = {
            key: value
            for key, value in (("device_id", device_id), ("model_name", model_name))
            if value
        }
        self._tokens: Mapping[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self.bindings)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)
        self._tokens = {}
