"""
Utilities module - Common helpers for API responses, exceptions, and validation.
"""

from common.utils.responses import success_response, error_response
from common.utils.exceptions import (
    APIException,
    BadRequestException,
    UnauthorizedException,
    InternalServerException,
    operation_boundary,
)
from common.utils.validation import is_email, normalize_email

__all__ = [
    "success_response",
    "error_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "InternalServerException",
    "operation_boundary",
    "is_email",
    "normalize_email",
]
