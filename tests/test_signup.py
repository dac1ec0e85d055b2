"""Tests for the signup collaborators.

Tests cover:
- Email shape validation and the SignupRequest model
- In-memory repository duplicate detection
- SignupForm messages, busy flags and button labels
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from mascot.exceptions import DuplicateEntryError, InvalidEmailError, PersistenceError
from mascot.orchestrator.state import AnimationState
from mascot.signup.form import (
    DUPLICATE_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    INVALID_EMAIL_MESSAGE,
    LABEL_ANIMATING,
    LABEL_READY,
    LABEL_SUBMITTING,
    SignupForm,
)
from mascot.signup.repository import InMemorySignupRepository
from mascot.signup.validation import SignupRequest, parse_signup, validate_email


class TestValidateEmail:
    """Tests for validate_email."""

    @pytest.mark.parametrize(
        "email",
        ["a@b.co", "first.last@example.com", "x+tag@sub.domain.org"],
    )
    def test_accepts(self, email):
        """Well-formed addresses pass."""
        assert validate_email(email) is True

    @pytest.mark.parametrize(
        "email",
        ["not-an-email", "", "a@b", "@b.co", "a@.co.", "a b@c.de", "a@@b.co", "a@b.co\n"],
    )
    def test_rejects(self, email):
        """Malformed addresses fail."""
        assert validate_email(email) is False

    def test_model_accepts(self):
        """SignupRequest keeps a valid address as-is."""
        assert SignupRequest(email="a@b.co").email == "a@b.co"

    def test_parse_signup_raises_domain_error(self):
        """parse_signup maps validation failure to InvalidEmailError."""
        with pytest.raises(InvalidEmailError) as exc_info:
            parse_signup("not-an-email")
        assert exc_info.value.message == INVALID_EMAIL_MESSAGE


class TestInMemoryRepository:
    """Tests for InMemorySignupRepository."""

    @pytest.mark.asyncio
    async def test_save(self, clock):
        """Saved addresses are stored in order."""
        repo = InMemorySignupRepository(clock, delay_ms=10)
        await repo.save("a@b.co")
        await repo.save("c@d.io")
        assert repo.emails == ["a@b.co", "c@d.io"]
        assert len(repo) == 2
        assert "A@B.CO" in repo

    @pytest.mark.asyncio
    async def test_duplicate_case_insensitive(self):
        """The same address in another case is a duplicate."""
        repo = InMemorySignupRepository(delay_ms=0)
        await repo.save("a@b.co")
        with pytest.raises(DuplicateEntryError):
            await repo.save("A@B.co")
        assert len(repo) == 1


def _form(play_result: bool = True, repository=None):
    state = AnimationState()
    sequencer = MagicMock()
    sequencer.play = AsyncMock(return_value=play_result)
    repository = repository or InMemorySignupRepository(delay_ms=0)
    return SignupForm(sequencer, state, repository), sequencer, state


class TestSignupForm:
    """Tests for SignupForm.submit()."""

    @pytest.mark.asyncio
    async def test_invalid_email_never_plays(self):
        """A malformed address sets the message and triggers nothing."""
        form, sequencer, _ = _form()
        form.email = "not-an-email"
        assert await form.submit() is False
        assert form.error == INVALID_EMAIL_MESSAGE
        assert form.email == "not-an-email"
        assert form.is_submitting is False
        sequencer.play.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_valid_email_plays_once(self):
        """A valid address is stored, cleared and plays exactly once."""
        form, sequencer, _ = _form()
        form.email = "a@b.co"
        assert await form.submit() is True
        assert form.error == ""
        assert form.email == ""
        sequencer.play.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_message(self):
        """A duplicate shows its own message and does not play."""
        repo = InMemorySignupRepository(delay_ms=0)
        await repo.save("a@b.co")
        form, sequencer, _ = _form(repository=repo)
        form.email = "a@b.co"
        assert await form.submit() is False
        assert form.error == DUPLICATE_MESSAGE
        assert form.is_submitting is False
        sequencer.play.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_generic_failure_message(self):
        """Any other failure shows the generic message."""
        repo = MagicMock()
        repo.save = AsyncMock(side_effect=PersistenceError("store offline"))
        form, sequencer, _ = _form(repository=repo)
        form.email = "a@b.co"
        assert await form.submit() is False
        assert form.error == GENERIC_ERROR_MESSAGE
        assert form.is_submitting is False

    @pytest.mark.asyncio
    async def test_unexpected_error_contained(self):
        """Errors raised by the sequence are contained too."""
        form, sequencer, _ = _form()
        sequencer.play.side_effect = RuntimeError("boom")
        form.email = "a@b.co"
        assert await form.submit() is False
        assert form.error == GENERIC_ERROR_MESSAGE
        assert form.is_submitting is False

    @pytest.mark.asyncio
    async def test_error_cleared_on_resubmit(self):
        """A new submission clears the previous message."""
        form, _, _ = _form()
        form.email = "bad"
        await form.submit()
        form.email = "a@b.co"
        await form.submit()
        assert form.error == ""

    @pytest.mark.asyncio
    async def test_busy_flag_during_submit(self):
        """is_submitting holds while persistence and the sequence run."""
        form, sequencer, _ = _form()
        observed = []

        async def play():
            observed.append((form.is_submitting, form.disabled, form.button_label))
            return True

        sequencer.play.side_effect = play
        form.email = "a@b.co"
        await form.submit()
        assert observed == [(True, True, LABEL_SUBMITTING)]
        assert form.button_label == LABEL_READY

    @pytest.mark.asyncio
    async def test_disabled_while_animating(self):
        """The form is disabled and ignores submits while a sequence plays."""
        form, sequencer, state = _form()
        state.set_playing(True)
        assert form.disabled is True
        assert form.button_label == LABEL_ANIMATING
        form.email = "a@b.co"
        assert await form.submit() is False
        sequencer.play.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        """Cancellation is not turned into a message."""
        form, sequencer, _ = _form()
        sequencer.play.side_effect = asyncio.CancelledError()
        form.email = "a@b.co"
        with pytest.raises(asyncio.CancelledError):
            await form.submit()
        assert form.error == ""
        assert form.is_submitting is False
