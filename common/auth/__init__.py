"""
Authentication module - JWT token signing and verification.
"""

from common.auth.jwt_auth import JWTAuth, TokenExpiredError

__all__ = ["JWTAuth", "TokenExpiredError"]
