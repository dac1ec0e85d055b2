"""Mascot application - composition root.

Wires one of everything around a single clock:
- VisualState, IdleLoop and the MascotAnimation engine
- SignalChannel plus the engine-side receiver
- VisualAnchor, AnimationState and the PhaseSequencer
- Signup repository and form
"""

from mascot import __version__
from mascot.animation.clock import AnimationClock
from mascot.animation.elements import VisualState
from mascot.animation.idle import BlinkEvent, IdleLoop
from mascot.animation.mascot import MascotAnimation
from mascot.config.settings import Settings, get_settings
from mascot.observability.logging import get_logger
from mascot.observability.metrics import set_metrics_enabled
from mascot.orchestrator.sequencer import AnchorPolicy, PhaseSequencer
from mascot.orchestrator.signal_bridge import PlaySignalReceiver, SignalChannel
from mascot.orchestrator.state import AnimationState, VisualAnchor
from mascot.signup.form import SignupForm
from mascot.signup.repository import InMemorySignupRepository, SignupRepository

logger = get_logger(__name__)


class MascotApp:
    """The assembled front end.

    Usage:
        async with MascotApp(settings) as app:
            await app.submit("a@b.co")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        clock: AnimationClock | None = None,
        repository: SignupRepository | None = None,
        anchor: VisualAnchor | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        set_metrics_enabled(self.settings.metrics_enabled)

        self.clock = clock or AnimationClock(
            time_scale=self.settings.time_scale,
            frame_rate=self.settings.frame_rate,
        )
        self.visual = VisualState()
        self.state = AnimationState(self.clock)
        self.anchor = anchor or VisualAnchor()

        self.idle = IdleLoop(
            self.visual,
            self.clock,
            is_busy=self._is_busy,
            blink_interval_s=self.settings.blink_interval_s,
            on_blink=self._handle_blink,
        )
        self.engine = MascotAnimation(
            self.visual,
            self.clock,
            idle=self.idle,
            autoplay=self.settings.autoplay,
            autoplay_delay_s=self.settings.autoplay_delay_s,
        )

        self.channel = SignalChannel("play")
        self.receiver = PlaySignalReceiver(self.channel, self.engine)
        self.sequencer = PhaseSequencer(
            self.state,
            self.anchor,
            self.channel,
            self.clock,
            anchor_policy=AnchorPolicy(self.settings.anchor_policy),
            success_hold_ms=self.settings.success_hold_ms,
        )

        self.repository = repository or InMemorySignupRepository(
            self.clock, delay_ms=self.settings.persist_delay_ms
        )
        self.form = SignupForm(self.sequencer, self.state, self.repository)

        # (blink, whether anything was playing when it fired)
        self.blinks: list[tuple[BlinkEvent, bool]] = []
        self._started = False

    def _is_busy(self) -> bool:
        return self.state.is_playing or self.engine.is_playing

    def _handle_blink(self, event: BlinkEvent) -> None:
        self.blinks.append((event, self._is_busy()))

    async def start(self) -> None:
        """Mount the engine (starts idling)."""
        if self._started:
            return
        self._started = True
        self.engine.mount()
        logger.info(
            "mascot_app_started",
            version=__version__,
            environment=self.settings.environment,
            time_scale=self.clock.time_scale,
            anchor_policy=self.settings.anchor_policy,
        )

    async def stop(self) -> None:
        """Unmount the engine and stop idling."""
        if not self._started:
            return
        self._started = False
        self.engine.unmount()
        self.idle.stop()
        logger.info("mascot_app_stopped", blinks=len(self.blinks))

    async def submit(self, email: str) -> bool:
        """Type an address into the form and submit it."""
        self.form.email = email
        return await self.form.submit()

    async def __aenter__(self) -> "MascotApp":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
