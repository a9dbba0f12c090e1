"""
FastAPI dependencies for the Auth system.

Builds the per-request session context from cookies and writes a refreshed
access token back onto the response.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Request, Response

from app.auth.access import AccessVerifier, RequestContext
from app.config import settings
from common.auth.jwt_auth import JWTAuth
from common.utils import success_response

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

_jwt_auth: JWTAuth | None = None
_access_verifier: AccessVerifier | None = None


def init_auth_services(secret: str, algorithm: str, access_token_expire_minutes: int) -> None:
    """
    Initialize auth services.

    Called once at application startup.
    """
    global _jwt_auth, _access_verifier

    _jwt_auth = JWTAuth(
        secret=secret,
        algorithm=algorithm,
        access_token_expire_minutes=access_token_expire_minutes,
    )
    _access_verifier = AccessVerifier(jwt_auth=_jwt_auth)


def get_jwt_auth() -> JWTAuth:
    """Get JWT helper instance."""
    if _jwt_auth is None:
        raise RuntimeError("Auth services not initialized. Call init_auth_services first.")
    return _jwt_auth


def get_access_verifier() -> AccessVerifier:
    """Get access verifier instance."""
    if _access_verifier is None:
        raise RuntimeError("Auth services not initialized. Call init_auth_services first.")
    return _access_verifier


async def get_request_context(request: Request) -> RequestContext:
    """
    Dependency that collects the session cookies of the request.

    Usage:
        @router.get("/users")
        async def list_users(context: Annotated[RequestContext, Depends(get_request_context)]):
            ...
    """
    return RequestContext(
        access_token=request.cookies.get(ACCESS_TOKEN_COOKIE),
        refresh_token=request.cookies.get(REFRESH_TOKEN_COOKIE),
    )


def session_response(
    response: Response,
    context: RequestContext,
    data: Any = None,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build a success body and propagate a refreshed access token, if any.
    """
    if context.refreshed_access_token:
        response.set_cookie(
            key=ACCESS_TOKEN_COOKIE,
            value=context.refreshed_access_token,
            httponly=True,
            path="/api",
            max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            samesite=settings.COOKIE_SAMESITE,
            secure=settings.COOKIE_SECURE,
        )
    return success_response(
        data,
        message=message,
        refreshed_token_message=context.refreshed_token_message,
    )
