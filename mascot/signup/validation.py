"""Email validation for signup submissions.

An address is accepted when it is shaped like ``local@domain.tld``: no
whitespace, exactly one ``@``, and a dot somewhere after it. This is a
shape check only; deliverability is not verified.
"""

import re

from pydantic import BaseModel, Field, ValidationError, field_validator

from mascot.exceptions import InvalidEmailError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_email(email: str) -> bool:
    """Whether the string is a plausible email address."""
    return EMAIL_PATTERN.fullmatch(email) is not None


class SignupRequest(BaseModel):
    """A validated signup submission."""

    email: str = Field(..., description="Address to sign up")

    @field_validator("email")
    @classmethod
    def check_email_shape(cls, v: str) -> str:
        """Reject anything not shaped like local@domain.tld."""
        if not validate_email(v):
            raise ValueError("not a valid email address")
        return v


def parse_signup(email: str) -> SignupRequest:
    """Build a SignupRequest from raw input.

    Raises:
        InvalidEmailError: If the address is malformed
    """
    try:
        return SignupRequest(email=email)
    except ValidationError:
        raise InvalidEmailError(email) from None
