"""Observability package - structured logging and Prometheus metrics."""

from mascot.observability.logging import (
    SequencerLogger,
    SignalLogger,
    TimelineLogger,
    bind_run,
    configure_logging,
    get_logger,
    unbind_run,
)

__all__ = [
    "SequencerLogger",
    "SignalLogger",
    "TimelineLogger",
    "bind_run",
    "configure_logging",
    "get_logger",
    "unbind_run",
]
