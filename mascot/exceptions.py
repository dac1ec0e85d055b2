"""Mascot Exception Hierarchy.

Provides structured exception classes for the animation core and the
signup collaborators.

Hierarchy:
    MascotError (base)
    ├── ConfigurationError
    │   └── InvalidConfigError
    ├── AnimationError
    │   └── TimelineError
    │       ├── InvalidPositionError
    │       └── TimelineStateError
    ├── SignalError
    │   └── SignalPendingError
    └── SignupError
        ├── InvalidEmailError
        └── PersistenceError
            └── DuplicateEntryError
"""

from typing import Any


class MascotError(Exception):
    """Base exception for all mascot errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MascotError):
    """Base exception for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(
        self,
        config_key: str,
        value: Any,
        reason: str,
    ) -> None:
        super().__init__(
            message=f"Invalid configuration for {config_key}: {reason}",
            details={
                "config_key": config_key,
                "value": str(value),
                "reason": reason,
            },
            recoverable=False,
        )


# =============================================================================
# Animation Errors
# =============================================================================


class AnimationError(MascotError):
    """Base exception for animation-related errors."""

    pass


class TimelineError(AnimationError):
    """Base exception for timeline construction and playback errors."""

    pass


class InvalidPositionError(TimelineError):
    """Raised when a step position cannot be parsed."""

    def __init__(self, position: Any, reason: str) -> None:
        super().__init__(
            message=f"Invalid timeline position {position!r}: {reason}",
            details={"position": repr(position), "reason": reason},
            recoverable=False,
        )


class TimelineStateError(TimelineError):
    """Raised for operations not allowed in the timeline's current state."""

    def __init__(self, operation: str, state: str) -> None:
        super().__init__(
            message=f"Cannot {operation} a timeline in state {state}",
            details={"operation": operation, "state": state},
            recoverable=False,
        )


# =============================================================================
# Signal Errors
# =============================================================================


class SignalError(MascotError):
    """Base exception for signal bridge errors."""

    pass


class SignalPendingError(SignalError):
    """Raised when a request is issued while the previous one is unresolved."""

    def __init__(self, counter: int) -> None:
        super().__init__(
            message=f"Signal request {counter} is still unresolved",
            details={"counter": counter},
            recoverable=True,  # Retry after the pending cycle resolves
        )


# =============================================================================
# Signup Errors
# =============================================================================


class SignupError(MascotError):
    """Base exception for signup collaborator errors."""

    pass


class InvalidEmailError(SignupError):
    """Raised when a submitted email is malformed."""

    def __init__(self, email: str) -> None:
        super().__init__(
            message="Please enter a valid email address",
            details={"email": email},
            recoverable=True,
        )


class PersistenceError(SignupError):
    """Raised when storing a signup fails."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=f"Failed to store signup: {reason}",
            details={"reason": reason, **(details or {})},
            recoverable=True,
        )


class DuplicateEntryError(PersistenceError):
    """Raised when the email has already been stored."""

    def __init__(self, email: str) -> None:
        super().__init__(reason="duplicate entry", details={"email": email})
