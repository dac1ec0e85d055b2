"""Signal Bridge - Counter plus single-shot resolver between components.

The phase sequencer and the mascot engine live in separate components.
The handshake between them is:

1. Sequencer calls request(): a fresh future is stored as the single
   resolver and the counter is incremented
2. The receiver observes the increase and starts the engine
3. The engine's completion callback calls acknowledge(), which resolves
   the stored future exactly once and clears it
4. The sequencer, awaiting the future, continues

One accepted increment produces exactly one resolution.
"""

import asyncio
from typing import Callable, Protocol

from mascot.exceptions import SignalPendingError
from mascot.observability.logging import SignalLogger
from mascot.observability.metrics import record_signal

CounterCallback = Callable[[int], None]


class PlayableEngine(Protocol):
    """What the receiver needs from the mascot engine."""

    on_complete: Callable[[], None] | None

    def play(self) -> bool: ...

    @property
    def is_playing(self) -> bool: ...

    @property
    def is_mounted(self) -> bool: ...


class SignalChannel:
    """Monotonic request counter with a one-shot resolver.

    Usage:
        channel = SignalChannel("play")
        channel.subscribe(lambda counter: engine.play())

        done = channel.request()    # counter 0 -> 1
        ...
        channel.acknowledge()       # resolves done
        await done
    """

    def __init__(self, name: str = "play") -> None:
        self._name = name
        self._counter = 0
        self._resolver: asyncio.Future | None = None
        self._subscribers: list[CounterCallback] = []
        self._acknowledged = 0
        self._logger = SignalLogger(name)

    def subscribe(self, callback: CounterCallback) -> Callable[[], None]:
        """Register a callback for counter increases.

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def request(self) -> asyncio.Future:
        """Start a new cycle.

        Returns:
            Future resolved by the matching acknowledge()

        Raises:
            SignalPendingError: If the previous cycle is unresolved
        """
        if self.is_pending:
            raise SignalPendingError(self._counter)

        self._resolver = asyncio.get_running_loop().create_future()
        self._counter += 1
        future = self._resolver

        self._logger.requested(self._counter)
        record_signal("requested")

        for callback in list(self._subscribers):
            callback(self._counter)

        return future

    def acknowledge(self) -> bool:
        """Resolve the pending cycle, at most once.

        Returns:
            True if a pending future was resolved
        """
        resolver, self._resolver = self._resolver, None
        if resolver is None or resolver.done():
            self._logger.stale_acknowledge(self._counter)
            return False

        resolver.set_result(self._counter)
        self._acknowledged += 1
        self._logger.acknowledged(self._counter)
        record_signal("acknowledged")
        return True

    def cancel(self) -> bool:
        """Drop the pending cycle without resolving it as success."""
        resolver, self._resolver = self._resolver, None
        if resolver is None or resolver.done():
            return False
        resolver.cancel()
        record_signal("cancelled")
        return True

    @property
    def name(self) -> str:
        """Channel name (used in logs)."""
        return self._name

    @property
    def counter(self) -> int:
        """Number of accepted requests."""
        return self._counter

    @property
    def acknowledged(self) -> int:
        """Number of resolved requests."""
        return self._acknowledged

    @property
    def is_pending(self) -> bool:
        """Whether a request awaits acknowledgment."""
        return self._resolver is not None and not self._resolver.done()


class PlaySignalReceiver:
    """Engine-side half of the handshake.

    Starts the engine on every counter increase and routes the engine's
    completion back to the channel.
    """

    def __init__(self, channel: SignalChannel, engine: PlayableEngine) -> None:
        self._channel = channel
        self._engine = engine
        self._last_seen = channel.counter
        self._overlaps = 0
        self._logger = SignalLogger(channel.name)

        self._chained = engine.on_complete
        engine.on_complete = self._handle_complete
        self._unsubscribe = channel.subscribe(self._handle_counter)

    def _handle_counter(self, counter: int) -> None:
        if counter <= self._last_seen:
            return
        self._last_seen = counter

        if not self._engine.play():
            # Already running: the in-flight run's completion answers this request
            self._overlaps += 1
            self._logger.overlapping_request(
                counter,
                {
                    "is_playing": self._engine.is_playing,
                    "is_mounted": self._engine.is_mounted,
                },
            )

    def _handle_complete(self) -> None:
        try:
            if self._chained is not None:
                self._chained()
        finally:
            self._channel.acknowledge()

    def close(self) -> None:
        """Detach from the channel and restore the engine's callback."""
        self._unsubscribe()
        self._engine.on_complete = self._chained

    @property
    def overlaps(self) -> int:
        """Requests that arrived while the engine could not start."""
        return self._overlaps
