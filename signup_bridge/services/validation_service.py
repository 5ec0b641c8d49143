"""Validation and normalization of inbound signup payloads."""
from __future__ import annotations

import re

from signup_bridge.errors import ValidationError
from signup_bridge.models.signup import SignupPayload, SignupRequest

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_NAME_LENGTH = 50


def validate_signup(payload: SignupPayload) -> SignupRequest:
    """Return a normalized request or raise ``ValidationError``.

    Only presence is checked for names: a whitespace-only name is accepted.
    ``isScientist`` is taken as given and defaults to False when absent.
    """
    if not payload.first_name or not payload.last_name or not payload.email:
        raise ValidationError("Missing required fields: firstName, lastName, email")

    if not EMAIL_RE.fullmatch(payload.email):
        raise ValidationError("Invalid email format")

    for field, value in (("firstName", payload.first_name), ("lastName", payload.last_name)):
        if len(value) > MAX_NAME_LENGTH:
            raise ValidationError(f"{field} must be at most {MAX_NAME_LENGTH} characters")

    return SignupRequest(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        is_scientist=bool(payload.is_scientist),
    )
