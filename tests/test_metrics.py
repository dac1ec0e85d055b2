"""Tests for Prometheus Metrics.

Tests cover:
- Helper function invocations
- Label values of recorded samples
- Process-wide enable switch
"""

import pytest
from prometheus_client import REGISTRY

from mascot.observability.metrics import (
    record_blink,
    record_run,
    record_run_duration,
    record_signal,
    record_submission,
    record_timeline_event,
    set_metrics_enabled,
)


def _sample(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestRecordHelpers:
    """Tests for record_* helpers."""

    @pytest.fixture(autouse=True)
    def enabled(self):
        """Metrics enabled for each test."""
        set_metrics_enabled(True)
        yield
        set_metrics_enabled(True)

    def test_record_run(self):
        """Runs are counted by outcome."""
        before = _sample("mascot_sequencer_runs_total", outcome="completed")
        record_run("completed")
        assert _sample("mascot_sequencer_runs_total", outcome="completed") == before + 1

    def test_record_run_duration(self):
        """Run duration feeds the histogram."""
        before = _sample("mascot_sequencer_run_seconds_count")
        record_run_duration(0.5)
        assert _sample("mascot_sequencer_run_seconds_count") == before + 1

    def test_record_timeline_event(self):
        """Timeline events are labelled by timeline and event."""
        before = _sample("mascot_timeline_events_total", timeline="t", event="killed")
        record_timeline_event("t", "killed")
        assert _sample("mascot_timeline_events_total", timeline="t", event="killed") == before + 1

    def test_record_blink(self):
        """Blinks are counted as fired or skipped."""
        fired = _sample("mascot_idle_blinks_total", result="fired")
        skipped = _sample("mascot_idle_blinks_total", result="skipped")
        record_blink(fired=True)
        record_blink(fired=False)
        assert _sample("mascot_idle_blinks_total", result="fired") == fired + 1
        assert _sample("mascot_idle_blinks_total", result="skipped") == skipped + 1

    def test_record_signal_and_submission(self):
        """Signal cycles and submissions are counted."""
        signals = _sample("mascot_signal_cycles_total", event="requested")
        submissions = _sample("mascot_submissions_total", outcome="invalid")
        record_signal("requested")
        record_submission("invalid")
        assert _sample("mascot_signal_cycles_total", event="requested") == signals + 1
        assert _sample("mascot_submissions_total", outcome="invalid") == submissions + 1

    def test_disabled_records_nothing(self):
        """Nothing is recorded while disabled."""
        before = _sample("mascot_sequencer_runs_total", outcome="aborted")
        set_metrics_enabled(False)
        record_run("aborted")
        assert _sample("mascot_sequencer_runs_total", outcome="aborted") == before
