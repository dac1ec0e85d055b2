"""Prometheus Metrics - Animation run observability.

Exports:
- Sequencer runs by outcome and their duration
- Timeline completions and kills
- Signal bridge cycles
- Idle blinks fired/skipped
- Signup submissions by outcome
"""

from prometheus_client import Counter, Histogram

# -----------------------------------------------------------------------------
# Sequencer
# -----------------------------------------------------------------------------

SEQUENCER_RUNS = Counter(
    "mascot_sequencer_runs_total",
    "Phase sequencer runs",
    ["outcome"],  # started, completed, aborted
)

RUN_DURATION = Histogram(
    "mascot_sequencer_run_seconds",
    "Wall-clock duration of a completed sequencer run",
    buckets=[0.1, 0.5, 1, 2.5, 5, 10, 15, 20, 30, 60],
)

# -----------------------------------------------------------------------------
# Timeline engine
# -----------------------------------------------------------------------------

TIMELINE_EVENTS = Counter(
    "mascot_timeline_events_total",
    "Timeline lifecycle events",
    ["timeline", "event"],  # started, completed, killed
)

SIGNAL_CYCLES = Counter(
    "mascot_signal_cycles_total",
    "Signal bridge handshake events",
    ["event"],  # requested, acknowledged
)

IDLE_BLINKS = Counter(
    "mascot_idle_blinks_total",
    "Idle loop blink decisions",
    ["result"],  # fired, skipped
)

# -----------------------------------------------------------------------------
# Signup
# -----------------------------------------------------------------------------

SUBMISSIONS = Counter(
    "mascot_submissions_total",
    "Signup form submissions",
    ["outcome"],  # accepted, invalid, duplicate, failed
)


# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------

_enabled = True


def set_metrics_enabled(enabled: bool) -> None:
    """Turn metric recording on or off process-wide."""
    global _enabled
    _enabled = enabled


def record_run(outcome: str) -> None:
    """Record a sequencer run event."""
    if not _enabled:
        return
    SEQUENCER_RUNS.labels(outcome=outcome).inc()


def record_run_duration(seconds: float) -> None:
    """Record a completed run's duration."""
    if not _enabled:
        return
    RUN_DURATION.observe(seconds)


def record_timeline_event(timeline: str, event: str) -> None:
    """Record a timeline lifecycle event."""
    if not _enabled:
        return
    TIMELINE_EVENTS.labels(timeline=timeline, event=event).inc()


def record_signal(event: str) -> None:
    """Record a signal bridge event."""
    if not _enabled:
        return
    SIGNAL_CYCLES.labels(event=event).inc()


def record_blink(fired: bool) -> None:
    """Record an idle blink decision."""
    if not _enabled:
        return
    IDLE_BLINKS.labels(result="fired" if fired else "skipped").inc()


def record_submission(outcome: str) -> None:
    """Record a signup submission outcome."""
    if not _enabled:
        return
    SUBMISSIONS.labels(outcome=outcome).inc()
