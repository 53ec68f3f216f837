"""
EdgeMapper Custom Exceptions

Centralized exception definitions for consistent error handling across the application.
All exceptions inherit from EdgeMapperError for unified error handling.
"""

from typing import Any, Dict, List, Optional


class EdgeMapperError(Exception):
    """
    Base exception for all EdgeMapper errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional error context
        recoverable: Whether the error is recoverable
    """

    def __init__(
        self,
        message: str,
        code: str = "EDGEMAPPER_ERROR",
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/CLI output."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        if self.details:
            return f"[{self.code}] {self.message} - {self.details}"
        return f"[{self.code}] {self.message}"


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigValidationError(EdgeMapperError):
    """Raised when mapper configuration is invalid, unreadable or unsupported."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        super().__init__(
            message=message,
            code="CONFIG_ERROR",
            details=details,
            recoverable=False,
            **kwargs
        )


class CertificatePairError(ConfigValidationError):
    """Raised when only one of the broker certificate and private key is set."""

    def __init__(self, **kwargs):
        super().__init__(
            message="Both certification and private key must be provided",
            field="mqtt",
            **kwargs
        )
        self.code = "CONFIG_CERT_PAIR"


class UnsupportedInitModeError(ConfigValidationError):
    """Raised when the device initialization mode is not known."""

    def __init__(self, mode: str, **kwargs):
        details = kwargs.pop("details", {})
        details["mode"] = mode
        super().__init__(
            message=f"Unsupported dev init mode {mode}",
            field="dev_init.mode",
            details=details,
            **kwargs
        )
        self.code = "CONFIG_INIT_MODE"


# =============================================================================
# Translation Errors
# =============================================================================

class TranslationError(EdgeMapperError):
    """Base class for device/model translation errors."""

    def __init__(self, message: str, device: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if device:
            details["device"] = device
        super().__init__(
            message=message,
            code="TRANSLATION_ERROR",
            details=details,
            **kwargs
        )


class UnresolvedProtocolError(TranslationError):
    """Raised when a device declares no protocol block at all."""

    def __init__(self, device: str, **kwargs):
        super().__init__(
            message=f"Can not parse device protocol for '{device}'",
            device=device,
            **kwargs
        )
        self.code = "UNRESOLVED_PROTOCOL"


class AmbiguousProtocolError(TranslationError):
    """Raised in strict mode when a device declares more than one protocol block."""

    def __init__(self, device: str, protocols: List[str], **kwargs):
        details = kwargs.pop("details", {})
        details["protocols"] = protocols
        super().__init__(
            message=f"Device '{device}' declares {len(protocols)} protocols",
            device=device,
            details=details,
            **kwargs
        )
        self.code = "AMBIGUOUS_PROTOCOL"


class SerializationError(TranslationError):
    """Raised when an opaque config block cannot be encoded."""

    def __init__(self, section: str, reason: str, **kwargs):
        details = kwargs.pop("details", {})
        details.update({"section": section, "reason": reason})
        super().__init__(
            message=f"Failed to serialize {section}: {reason}",
            details=details,
            **kwargs
        )
        self.code = "SERIALIZATION_ERROR"
