"""
EdgeMapper Utilities

Common utilities for configuration, logging, error handling, error tracking
and metrics.
"""

from edgemapper.utils.config import (
    DevInitMode,
    Settings,
    get_settings,
    load_settings,
    reload_settings,
)
from edgemapper.utils.error_logging import (
    capture_exception,
    error_context,
    init_sentry,
)
from edgemapper.utils.error_logging import (
    flush as flush_errors,
)
from edgemapper.utils.exceptions import (
    AmbiguousProtocolError,
    CertificatePairError,
    ConfigValidationError,
    EdgeMapperError,
    SerializationError,
    TranslationError,
    UnresolvedProtocolError,
    UnsupportedInitModeError,
)
from edgemapper.utils.logging import (
    LogContext,
    configure_logging,
    get_logger,
)
from edgemapper.utils.metrics import (
    EdgeMapperMetrics,
    get_metrics,
    metrics,
)

__all__ = [
    # Config
    "DevInitMode",
    "Settings",
    "get_settings",
    "load_settings",
    "reload_settings",
    # Error Logging
    "capture_exception",
    "error_context",
    "flush_errors",
    "init_sentry",
    # Exceptions
    "AmbiguousProtocolError",
    "CertificatePairError",
    "ConfigValidationError",
    "EdgeMapperError",
    "SerializationError",
    "TranslationError",
    "UnresolvedProtocolError",
    "UnsupportedInitModeError",
    # Logging
    "LogContext",
    "configure_logging",
    "get_logger",
    # Metrics
    "EdgeMapperMetrics",
    "get_metrics",
    "metrics",
]
