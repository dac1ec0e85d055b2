"""Signup package - the form that triggers the celebration."""

from mascot.signup.form import (
    DUPLICATE_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    INVALID_EMAIL_MESSAGE,
    SignupForm,
)
from mascot.signup.repository import InMemorySignupRepository, SignupRepository
from mascot.signup.validation import SignupRequest, parse_signup, validate_email

__all__ = [
    "DUPLICATE_MESSAGE",
    "GENERIC_ERROR_MESSAGE",
    "INVALID_EMAIL_MESSAGE",
    "SignupForm",
    "InMemorySignupRepository",
    "SignupRepository",
    "SignupRequest",
    "parse_signup",
    "validate_email",
]
