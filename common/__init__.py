"""
Common library for reusable infrastructure components.

- database: Async MongoDB connection (Motor) and storage error wrapping
- auth: JWT signing and verification
- utils: Standard responses, exceptions, email validation
- config: Base settings class
"""

from common.database import MongoDB, IndexSpec, StorageError
from common.auth import JWTAuth, TokenExpiredError
from common.utils import (
    success_response,
    error_response,
    APIException,
    BadRequestException,
    UnauthorizedException,
    InternalServerException,
    is_email,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    "IndexSpec",
    "StorageError",
    # Auth
    "JWTAuth",
    "TokenExpiredError",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "InternalServerException",
    "is_email",
    # Config
    "BaseAppSettings",
]
