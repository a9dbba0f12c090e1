"""
Auth System

Cookie session verification and capability checks.
"""

from app.auth.access import (
    AccessVerifier,
    AuthKind,
    AuthResult,
    RequestContext,
)

__all__ = [
    "AccessVerifier",
    "AuthKind",
    "AuthResult",
    "RequestContext",
]
