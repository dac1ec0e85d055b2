"""Structured Logging - JSON or console logs with run correlation.

Provides structured logging for:
- Timeline lifecycle (play, complete, kill, reset)
- Phase sequencer transitions
- Signal bridge request/acknowledge cycles

Logs emitted during a sequencer run carry its run_id.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, output JSON; else human-readable
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


def bind_run(run_id: str) -> None:
    """Bind run_id to all logs in current context."""
    structlog.contextvars.bind_contextvars(run_id=run_id)


def unbind_run() -> None:
    """Remove run_id from log context."""
    structlog.contextvars.unbind_contextvars("run_id")


# -----------------------------------------------------------------------------
# Event-specific loggers
# -----------------------------------------------------------------------------


class TimelineLogger:
    """Logger for timeline lifecycle events."""

    def __init__(self, name: str) -> None:
        self._log = get_logger("timeline").bind(timeline=name)

    def built(self, steps: int, duration_s: float) -> None:
        """Log timeline compilation."""
        self._log.debug(
            "timeline_built",
            event_type="timeline.built",
            steps=steps,
            duration_s=round(duration_s, 3),
        )

    def started(self, duration_s: float) -> None:
        """Log playback start."""
        self._log.info(
            "timeline_started",
            event_type="timeline.started",
            duration_s=round(duration_s, 3),
        )

    def completed(self) -> None:
        """Log playback completion."""
        self._log.info("timeline_completed", event_type="timeline.completed")

    def killed(self, playhead_s: float) -> None:
        """Log cancellation mid-flight."""
        self._log.info(
            "timeline_killed",
            event_type="timeline.killed",
            playhead_s=round(playhead_s, 3),
        )

    def play_ignored(self, reason: str) -> None:
        """Log a rejected play request."""
        self._log.warning(
            "timeline_play_ignored",
            event_type="timeline.play_ignored",
            reason=reason,
        )

    def callback_failed(self, error: str) -> None:
        """Log an exception raised by a timeline callback."""
        self._log.error(
            "timeline_callback_failed",
            event_type="timeline.callback_failed",
            error=error,
        )


class SequencerLogger:
    """Logger for phase sequencer runs."""

    def __init__(self) -> None:
        self._log = get_logger("sequencer")

    def run_started(self, run_id: str) -> None:
        """Log run start."""
        self._log.info("run_started", event_type="sequencer.run_started", run_id=run_id)

    def run_completed(self, run_id: str, elapsed_s: float) -> None:
        """Log run completion."""
        self._log.info(
            "run_completed",
            event_type="sequencer.run_completed",
            run_id=run_id,
            elapsed_s=round(elapsed_s, 3),
        )

    def run_aborted(self, run_id: str, reason: str, is_playing: bool) -> None:
        """Log a run aborted on a failed precondition."""
        self._log.warning(
            "run_aborted",
            event_type="sequencer.run_aborted",
            run_id=run_id,
            reason=reason,
            is_playing=is_playing,
        )

    def play_ignored(self) -> None:
        """Log a re-entrant play request."""
        self._log.debug("play_ignored", event_type="sequencer.play_ignored")

    def step_entered(self, index: int, name: str, phase: str | None) -> None:
        """Log a phase step."""
        self._log.debug(
            "step_entered",
            event_type="sequencer.step",
            index=index,
            step=name,
            phase=phase,
        )


class SignalLogger:
    """Logger for signal bridge handshakes."""

    def __init__(self, channel: str) -> None:
        self._log = get_logger("signal").bind(channel=channel)

    def requested(self, counter: int) -> None:
        """Log a new request cycle."""
        self._log.info("signal_requested", event_type="signal.requested", counter=counter)

    def acknowledged(self, counter: int) -> None:
        """Log a resolved request cycle."""
        self._log.info(
            "signal_acknowledged", event_type="signal.acknowledged", counter=counter
        )

    def stale_acknowledge(self, counter: int) -> None:
        """Log an acknowledgment with nothing to resolve."""
        self._log.debug(
            "signal_stale_acknowledge",
            event_type="signal.stale_acknowledge",
            counter=counter,
        )

    def overlapping_request(self, counter: int, details: dict[str, Any] | None = None) -> None:
        """Log a counter change that arrived while playback is still running."""
        self._log.warning(
            "signal_overlapping_request",
            event_type="signal.overlapping_request",
            counter=counter,
            **(details or {}),
        )
