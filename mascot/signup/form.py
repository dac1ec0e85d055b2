"""Signup Form - Email submission that triggers the celebration.

Flow:
1. Clear the previous error
2. Validate the address (no state mutation on failure)
3. Persist it (simulated latency)
4. Clear the input and run the phase sequencer

Failures map to one inline message each. The busy flag is always cleared,
and nothing escapes submit() except cancellation.
"""

from mascot.exceptions import DuplicateEntryError, InvalidEmailError
from mascot.observability.logging import get_logger
from mascot.observability.metrics import record_submission
from mascot.orchestrator.sequencer import PhaseSequencer
from mascot.orchestrator.state import AnimationState
from mascot.signup.repository import SignupRepository
from mascot.signup.validation import parse_signup

logger = get_logger(__name__)

INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
DUPLICATE_MESSAGE = "This email is already signed up!"
GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."

LABEL_SUBMITTING = "Preparing treat..."
LABEL_ANIMATING = "Nom nom nom..."
LABEL_READY = "Give Treat"


class SignupForm:
    """Form state plus the submit action.

    Usage:
        form = SignupForm(sequencer, state, repository)
        form.email = "a@b.co"
        await form.submit()
        form.error          # "" on success
        form.button_label   # "Give Treat"
    """

    def __init__(
        self,
        sequencer: PhaseSequencer,
        state: AnimationState,
        repository: SignupRepository,
    ) -> None:
        self._sequencer = sequencer
        self._state = state
        self._repository = repository

        self.email = ""
        self._error = ""
        self._submitting = False

    async def submit(self) -> bool:
        """Validate, persist and celebrate.

        Returns:
            True if the address was stored and the sequence ran
        """
        if self.disabled:
            logger.debug("submit_ignored", event_type="signup.ignored")
            return False

        self._error = ""

        try:
            request = parse_signup(self.email)
        except InvalidEmailError as e:
            self._error = e.message
            record_submission("invalid")
            return False

        self._submitting = True
        try:
            await self._repository.save(request.email)
            self.email = ""
            record_submission("accepted")
            return await self._sequencer.play()

        except DuplicateEntryError:
            self._error = DUPLICATE_MESSAGE
            record_submission("duplicate")
            return False

        except Exception as e:
            logger.error(
                "submit_failed",
                event_type="signup.failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            self._error = GENERIC_ERROR_MESSAGE
            record_submission("failed")
            return False

        finally:
            self._submitting = False

    @property
    def error(self) -> str:
        """Inline error message ("" when none)."""
        return self._error

    @property
    def is_submitting(self) -> bool:
        """Whether a submission is in progress."""
        return self._submitting

    @property
    def disabled(self) -> bool:
        """Whether input and button are disabled."""
        return self._submitting or self._state.is_playing

    @property
    def button_label(self) -> str:
        """Text of the submit button."""
        if self._submitting:
            return LABEL_SUBMITTING
        if self._state.is_playing:
            return LABEL_ANIMATING
        return LABEL_READY
