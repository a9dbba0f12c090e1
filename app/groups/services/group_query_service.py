"""
Read-only group queries.
"""

import logging
from typing import Any, Dict, List

from app.auth.access import AccessVerifier, AuthKind, RequestContext
from app.groups.services.group_service import GroupService, format_group, member_emails
from common.utils import BadRequestException, UnauthorizedException, operation_boundary

logger = logging.getLogger(__name__)


class GroupQueryService:
    """Lists groups for admins and shows a single group to its members."""

    def __init__(self, access_verifier: AccessVerifier, group_service: GroupService):
        self._access = access_verifier
        self._groups = group_service

    @operation_boundary
    async def get_groups(self, context: RequestContext) -> List[Dict[str, Any]]:
        """All groups as ``{name, members}``. Admin only."""
        result = self._access.verify_auth(context, AuthKind.ADMIN)
        if not result.authorized:
            raise UnauthorizedException(message=result.cause)

        groups = await self._groups.list_groups()
        return [format_group(g) for g in groups]

    @operation_boundary
    async def get_group(self, name: str, context: RequestContext) -> Dict[str, Any]:
        """One group as ``{name, members}``. Members of the group or admins."""
        group = await self._groups.find_by_name(name)

        result = self._access.verify_multiple_auth(
            context,
            [AuthKind.GROUP, AuthKind.ADMIN],
            emails=member_emails(group) if group else [],
        )
        if not result.authorized:
            raise UnauthorizedException(message=result.cause)

        if not group:
            raise BadRequestException(message="Group not found", code="GROUP_NOT_FOUND")
        return format_group(group)
