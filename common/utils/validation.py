"""
Email syntax validation.

Thin wrapper around ``email-validator`` (the library behind pydantic's
``EmailStr``) for the places where lists of raw strings arrive in request
bodies and every entry has to be checked before any lookup.

Example:
    from common.utils import is_email, normalize_email

    if not all(is_email(e) for e in emails):
        raise BadRequestException("Mail not valid")
"""

from typing import Any

from email_validator import EmailNotValidError, validate_email


def is_email(value: Any) -> bool:
    """
    Check that ``value`` is a syntactically valid email address.

    Deliverability (DNS) is not checked. Non-string and blank values are
    rejected.
    """
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def normalize_email(value: str) -> str:
    """Lowercase and trim an email for storage lookups."""
    return value.strip().lower()
