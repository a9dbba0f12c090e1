"""
Read-only user queries.
"""

import logging
from typing import Any, Dict, List

from app.auth.access import AccessVerifier, AuthKind, RequestContext
from app.users.services.user_service import UserService
from common.utils import BadRequestException, UnauthorizedException, operation_boundary

logger = logging.getLogger(__name__)


def format_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Project a user document to its public fields."""
    return {
        "username": user.get("username"),
        "email": user.get("email"),
        "role": user.get("role"),
    }


class UserQueryService:
    """
    Lists users for admins and shows one user to itself or to an admin.
    """

    def __init__(self, access_verifier: AccessVerifier, user_service: UserService):
        """
        Initialize UserQueryService.

        Args:
            access_verifier: Capability checks on the request session
            user_service: Users storage
        """
        self._access = access_verifier
        self._users = user_service

    @operation_boundary
    async def get_users(self, context: RequestContext) -> List[Dict[str, Any]]:
        """
        Get all users.

        Returns:
            List of ``{username, email, role}``; empty if there are no users

        Raises:
            UnauthorizedException: Caller is not an admin
        """
        result = self._access.verify_auth(context, AuthKind.ADMIN)
        if not result.authorized:
            raise UnauthorizedException(message=result.cause)

        users = await self._users.list_users()
        return [format_user(u) for u in users]

    @operation_boundary
    async def get_user(self, username: str, context: RequestContext) -> Dict[str, Any]:
        """
        Get one user by username.

        Regular callers may only read their own record (the session username
        must match ``username``); admins may read any record.

        Raises:
            UnauthorizedException: Caller is neither that user nor an admin
            BadRequestException: No user with that username
        """
        result = self._access.verify_multiple_auth(
            context, [AuthKind.USER, AuthKind.ADMIN], username=username
        )
        if not result.authorized:
            raise UnauthorizedException(message=result.cause)

        user = await self._users.find_by_username(username)
        if not user:
            raise BadRequestException(message="User not found", code="USER_NOT_FOUND")
        return format_user(user)
