"""Signup persistence.

The form only depends on the SignupRepository protocol. The in-memory
implementation simulates a remote store: a fixed latency per save and a
duplicate check on the normalized address.
"""

from typing import Protocol

from mascot.animation.clock import AnimationClock
from mascot.config.constants import TIMING
from mascot.exceptions import DuplicateEntryError
from mascot.observability.logging import get_logger

logger = get_logger(__name__)


class SignupRepository(Protocol):
    """Storage for signup addresses."""

    async def save(self, email: str) -> None:
        """Store an address.

        Raises:
            DuplicateEntryError: If the address is already stored
            PersistenceError: For any other storage failure
        """
        ...


class InMemorySignupRepository:
    """Process-local signup store with simulated latency.

    Usage:
        repo = InMemorySignupRepository(clock, delay_ms=500)
        await repo.save("a@b.co")
        await repo.save("A@B.CO")  # raises DuplicateEntryError
    """

    def __init__(
        self,
        clock: AnimationClock | None = None,
        delay_ms: int = TIMING.PERSIST_DELAY_MS,
    ) -> None:
        self._clock = clock
        self._delay_ms = delay_ms
        self._emails: list[str] = []
        self._seen: set[str] = set()

    async def save(self, email: str) -> None:
        if self._clock is not None and self._delay_ms > 0:
            await self._clock.sleep_ms(self._delay_ms)

        key = email.strip().lower()
        if key in self._seen:
            raise DuplicateEntryError(email)

        self._seen.add(key)
        self._emails.append(email)
        logger.info("signup_saved", event_type="signup.saved", total=len(self._emails))

    def __contains__(self, email: str) -> bool:
        return email.strip().lower() in self._seen

    def __len__(self) -> int:
        return len(self._emails)

    @property
    def emails(self) -> list[str]:
        """Stored addresses in insertion order."""
        return self._emails.copy()
