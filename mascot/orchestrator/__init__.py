"""Orchestrator package - phase sequencing and the cross-component handshake."""

from mascot.orchestrator.sequencer import (
    PHASE_STEPS,
    AnchorPolicy,
    PhaseSequencer,
    PhaseStep,
    StepKind,
)
from mascot.orchestrator.signal_bridge import (
    PlayableEngine,
    PlaySignalReceiver,
    SignalChannel,
)
from mascot.orchestrator.state import (
    POSE_ASSETS,
    AnimationState,
    Effect,
    Phase,
    PhaseTransition,
    VisualAnchor,
    pose_asset,
)

__all__ = [
    "PHASE_STEPS",
    "AnchorPolicy",
    "PhaseSequencer",
    "PhaseStep",
    "StepKind",
    "PlayableEngine",
    "PlaySignalReceiver",
    "SignalChannel",
    "POSE_ASSETS",
    "AnimationState",
    "Effect",
    "Phase",
    "PhaseTransition",
    "VisualAnchor",
    "pose_asset",
]
