"""
Cookie-based access verification.

Checks the accessToken/refreshToken cookie pair of a request against a
required capability and reports the decision with a human-readable cause.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from common.auth.jwt_auth import JWTAuth, TokenExpiredError

logger = logging.getLogger(__name__)

REFRESHED_TOKEN_MESSAGE = (
    "Access token has been refreshed. "
    "Remember to copy the new one in the headers of subsequent calls"
)

ADMIN_ROLE = "Admin"
IDENTITY_CLAIMS = ("username", "email", "role")


class AuthKind(str, Enum):
    """Capability a request must hold."""

    SIMPLE = "Simple"
    USER = "User"
    ADMIN = "Admin"
    GROUP = "Group"


@dataclass(frozen=True)
class AuthResult:
    authorized: bool
    cause: str


@dataclass
class RequestContext:
    """
    Session state of one request.

    ``refreshed_access_token`` and ``refreshed_token_message`` are filled in
    by AccessVerifier when an expired access token was renewed.
    """

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    refreshed_access_token: Optional[str] = None
    refreshed_token_message: Optional[str] = None


class AccessVerifier:
    """
    Decides whether the caller holds a capability.
    """

    def __init__(self, jwt_auth: JWTAuth):
        """
        Initialize AccessVerifier.

        Args:
            jwt_auth: Signs refreshed tokens and decodes incoming ones
        """
        self._jwt_auth = jwt_auth

    def verify_auth(
        self,
        context: RequestContext,
        kind: AuthKind,
        username: Optional[str] = None,
        emails: Optional[Iterable[str]] = None,
    ) -> AuthResult:
        """
        Check a single capability.

        Args:
            context: Request session state (tokens are read, refresh is written)
            kind: Required capability
            username: Username the USER capability is checked against
            emails: Member emails the GROUP capability is checked against;
                None means the group has no member list yet and any
                authenticated caller passes

        Returns:
            AuthResult with the decision and its cause
        """
        if not context.access_token or not context.refresh_token:
            return AuthResult(False, "Unauthorized")

        try:
            refresh_claims = self._jwt_auth.decode_token(context.refresh_token)
        except TokenExpiredError:
            return AuthResult(False, "Perform login again")
        except ValueError as e:
            logger.debug(f"Refresh token rejected: {e}")
            return AuthResult(False, str(e))

        if not _has_identity(refresh_claims):
            return AuthResult(False, "Token is missing information")

        try:
            access_claims = self._jwt_auth.decode_token(context.access_token)
        except TokenExpiredError:
            claims = self._refresh(context, refresh_claims)
            return self._check_capability(claims, kind, username, emails)
        except ValueError as e:
            logger.debug(f"Access token rejected: {e}")
            return AuthResult(False, str(e))

        if not _has_identity(access_claims):
            return AuthResult(False, "Token is missing information")

        if any(access_claims[c] != refresh_claims[c] for c in IDENTITY_CLAIMS):
            return AuthResult(False, "Mismatched users")

        return self._check_capability(access_claims, kind, username, emails)

    def verify_multiple_auth(
        self,
        context: RequestContext,
        kinds: Iterable[AuthKind],
        username: Optional[str] = None,
        emails: Optional[Iterable[str]] = None,
    ) -> AuthResult:
        """
        Check that the caller holds at least one of ``kinds``.

        The cause of the last failing check is reported when none pass.
        """
        emails = list(emails) if emails is not None else None
        result = AuthResult(False, "Unauthorized")
        for kind in kinds:
            result = self.verify_auth(context, kind, username=username, emails=emails)
            if result.authorized:
                return result
        return result

    def _refresh(self, context: RequestContext, refresh_claims: dict) -> dict:
        claims = {c: refresh_claims[c] for c in IDENTITY_CLAIMS}
        if "id" in refresh_claims:
            claims["id"] = refresh_claims["id"]
        context.refreshed_access_token = self._jwt_auth.create_token(claims)
        context.refreshed_token_message = REFRESHED_TOKEN_MESSAGE
        logger.info(f"Refreshed access token for {claims['username']}")
        return claims

    @staticmethod
    def _check_capability(
        claims: dict,
        kind: AuthKind,
        username: Optional[str],
        emails: Optional[Iterable[str]],
    ) -> AuthResult:
        if kind == AuthKind.USER:
            if claims["username"] != username:
                return AuthResult(False, "Tokens have a different username from the requested one")
        elif kind == AuthKind.ADMIN:
            if claims["role"] != ADMIN_ROLE:
                return AuthResult(False, "Not an admin")
        elif kind == AuthKind.GROUP:
            if emails is not None:
                member_emails = {e.lower() for e in emails}
                if claims["email"].lower() not in member_emails:
                    return AuthResult(False, "User is not part of the group")
        return AuthResult(True, "Authorized")


def _has_identity(claims: dict) -> bool:
    return all(claims.get(c) for c in IDENTITY_CLAIMS)
