"""Mascot - Phase-sequenced celebration animation for a signup form."""

__version__ = "1.0.0"

# Export exception hierarchy for easy importing
from mascot.exceptions import (
    MascotError,
    ConfigurationError,
    InvalidConfigError,
    AnimationError,
    TimelineError,
    InvalidPositionError,
    TimelineStateError,
    SignalError,
    SignalPendingError,
    SignupError,
    InvalidEmailError,
    PersistenceError,
    DuplicateEntryError,
)

__all__ = [
    "__version__",
    # Base
    "MascotError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigError",
    # Animation
    "AnimationError",
    "TimelineError",
    "InvalidPositionError",
    "TimelineStateError",
    # Signal
    "SignalError",
    "SignalPendingError",
    # Signup
    "SignupError",
    "InvalidEmailError",
    "PersistenceError",
    "DuplicateEntryError",
]
