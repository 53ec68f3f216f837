"""
EdgeMapper Error Logging Module

Integrates with Sentry for error tracking.
Provides utilities for capturing errors with context.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from edgemapper import __version__
from edgemapper.utils.config import Settings, get_settings
from edgemapper.utils.exceptions import EdgeMapperError
from edgemapper.utils.logging import SENSITIVE_KEYS, get_logger

logger = get_logger(__name__)

# Global flag to track if Sentry is initialized
_sentry_initialized = False


def init_sentry(settings: Optional[Settings] = None) -> bool:
    """
    Initialize Sentry error tracking.

    Returns:
        True if Sentry was initialized, False when no DSN is configured.
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    settings = settings or get_settings()

    if not settings.sentry.dsn:
        logger.debug("Sentry DSN not configured, error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.sentry.dsn,
        environment=settings.sentry.environment,
        traces_sample_rate=settings.sentry.traces_sample_rate,
        integrations=[LoggingIntegration(level=None, event_level=None)],
        send_default_pii=False,
        attach_stacktrace=True,
        release=f"edgemapper@{__version__}",
        before_send=_before_send,
    )

    _sentry_initialized = True
    logger.info("Sentry initialized", environment=settings.sentry.environment)
    return True


def _before_send(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Filter events before sending to Sentry.

    Recoverable EdgeMapper errors stay local; credentials are scrubbed.
    """
    exc_info = hint.get("exc_info")
    if exc_info:
        _, exc_value, _ = exc_info
        if isinstance(exc_value, EdgeMapperError) and exc_value.recoverable:
            return None

    if "extra" in event:
        event["extra"] = _scrub_sensitive(event["extra"])

    return event


def _scrub_sensitive(data: Any) -> Any:
    """Recursively scrub sensitive data from dictionaries."""
    if isinstance(data, dict):
        return {
            k: "[Filtered]" if any(s in k.lower() for s in SENSITIVE_KEYS) else _scrub_sensitive(v)
            for k, v in data.items()
        }
    elif isinstance(data, list):
        return [_scrub_sensitive(item) for item in data]
    return data


def capture_exception(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    tags: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """
    Capture an exception to Sentry, or log it locally when Sentry is off.

    Returns:
        Event ID if captured, None otherwise
    """
    if not _sentry_initialized:
        logger.error("Exception occurred", exc_info=error, context=context, tags=tags)
        return None

    with sentry_sdk.new_scope() as scope:
        for key, value in (tags or {}).items():
            scope.set_tag(key, value)
        if context:
            scope.set_context("additional", context)
        if isinstance(error, EdgeMapperError):
            scope.set_tag("error_code", error.code)
            scope.set_tag("recoverable", str(error.recoverable))
            scope.set_context("error_details", error.details)
        return sentry_sdk.capture_exception(error)


@contextmanager
def error_context(
    operation: str,
    context: Optional[Dict[str, Any]] = None,
    reraise: bool = True,
) -> Iterator[None]:
    """
    Context manager for capturing errors with context.

    Recoverable EdgeMapper errors are left to the caller, which already
    logs them, and are never sent to Sentry.

    Usage:
        with error_context("assemble_device", {"device": "dev1"}):
            assembler.assemble(device, model)
    """
    try:
        yield
    except Exception as e:
        if not (isinstance(e, EdgeMapperError) and e.recoverable):
            capture_exception(
                e,
                context={"operation": operation, **(context or {})},
                tags={"operation": operation},
            )
        if reraise:
            raise


def flush(timeout: float = 2.0) -> None:
    """Flush pending Sentry events."""
    if not _sentry_initialized:
        return
    sentry_sdk.flush(timeout=timeout)
