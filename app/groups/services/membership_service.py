"""
Group membership orchestration.

Runs every group-mutating operation as authorize -> validate -> mutate,
failing fast before the first storage write. The mutate phase is a
sequence of single-document updates and is not atomic as a whole:
concurrent requests on the same group can interleave between the
classification read and the member update.
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from app.auth.access import AccessVerifier, AuthKind, RequestContext
from app.groups.services.email_classifier import ClassificationResult, EmailClassifier
from app.groups.services.group_service import GroupService, format_group, member_emails
from app.users.services.user_service import UserService
from common.utils import (
    BadRequestException,
    UnauthorizedException,
    is_email,
    normalize_email,
    operation_boundary,
)

logger = logging.getLogger(__name__)


class RouteIntent(str, Enum):
    """Capability level selected by the trailing segment of a membership route."""

    ADD_SELF = "add"
    ADD_ADMIN = "insert"
    REMOVE_SELF = "remove"
    REMOVE_ADMIN = "pull"
    INVALID = "invalid"

    @classmethod
    def from_segment(cls, segment: Optional[str]) -> "RouteIntent":
        """Map a path segment to an intent; unknown segments are INVALID."""
        try:
            intent = cls(segment)
        except ValueError:
            return cls.INVALID
        return intent


ADD_INTENTS = {RouteIntent.ADD_SELF: AuthKind.GROUP, RouteIntent.ADD_ADMIN: AuthKind.ADMIN}
REMOVE_INTENTS = {RouteIntent.REMOVE_SELF: AuthKind.GROUP, RouteIntent.REMOVE_ADMIN: AuthKind.ADMIN}


class MembershipService:
    """
    Creates, extends, shrinks and deletes groups, and deletes users.
    """

    def __init__(
        self,
        access_verifier: AccessVerifier,
        user_service: UserService,
        group_service: GroupService,
        classifier: EmailClassifier,
    ):
        """
        Initialize MembershipService.

        Args:
            access_verifier: Capability checks on the request session
            user_service: Users and transactions storage
            group_service: Groups storage
            classifier: Candidate email partitioning
        """
        self._access = access_verifier
        self._users = user_service
        self._groups = group_service
        self._classifier = classifier

    # ─────────────────────────────────────────────────────────────
    # Operations
    # ─────────────────────────────────────────────────────────────

    @operation_boundary
    async def create_group(
        self,
        name: Optional[str],
        member_emails: Optional[List[str]],
        context: RequestContext,
    ) -> Dict[str, Any]:
        """
        Create a group from the candidate emails that are free to join.

        Returns:
            dict with group, alreadyInGroup and membersNotFound

        Raises:
            BadRequestException: Missing input, duplicate name, bad email syntax,
                or no candidate can join
            UnauthorizedException: Caller lacks the Group capability
        """
        if not name or member_emails is None:
            raise BadRequestException(message="Missing parameters", code="MISSING_PARAMETERS")

        self._authorize(context, AuthKind.GROUP)

        if await self._groups.find_by_name(name):
            raise BadRequestException(
                message="A group with the same name already exists",
                code="GROUP_ALREADY_EXISTS",
            )

        self._require_email_syntax(member_emails)

        classification = await self._classifier.classify(member_emails)
        if not classification.has_valid:
            raise self._no_valid_emails(classification)

        members = await self._resolve_members(classification.valid_emails)
        group = await self._groups.create_group(name, members)

        return {
            "group": format_group(group),
            "alreadyInGroup": classification.already_in_group,
            "membersNotFound": classification.members_not_found,
        }

    @operation_boundary
    async def add_to_group(
        self,
        name: Optional[str],
        member_emails: Optional[List[str]],
        context: RequestContext,
        intent: RouteIntent,
    ) -> Dict[str, Any]:
        """
        Add candidates that are not in any group to an existing group.

        ``add`` requires the caller to be a member of the group,
        ``insert`` requires an admin.

        Returns:
            dict with the updated group, alreadyInGroup and membersNotFound
        """
        if not name or member_emails is None:
            raise BadRequestException(
                message="The request body does not contain all the necessary attributes",
                code="MISSING_PARAMETERS",
            )

        group = await self._authorize_for_group(name, context, intent, ADD_INTENTS)
        self._require_email_syntax(member_emails)

        classification = await self._classifier.classify(member_emails)
        if not classification.has_valid:
            raise self._no_valid_emails(classification)

        members = await self._resolve_members(classification.valid_emails)
        await self._groups.push_members(group["name"], members)
        updated = await self._reload(group)

        return {
            "group": format_group(updated),
            "alreadyInGroup": classification.already_in_group,
            "membersNotFound": classification.members_not_found,
        }

    @operation_boundary
    async def remove_from_group(
        self,
        name: Optional[str],
        member_emails: Optional[List[str]],
        context: RequestContext,
        intent: RouteIntent,
    ) -> Dict[str, Any]:
        """
        Remove candidates that currently belong to the group.

        ``remove`` requires the caller to be a member of the group,
        ``pull`` requires an admin. Emptied groups are kept.

        Returns:
            dict with the updated group, notInGroup and membersNotFound
        """
        if not name or member_emails is None:
            raise BadRequestException(message="Missing parameters", code="MISSING_PARAMETERS")

        group = await self._authorize_for_group(name, context, intent, REMOVE_INTENTS)
        self._require_email_syntax(member_emails)

        classification = await self._classifier.classify(member_emails, target_group=group["name"])
        if not classification.has_valid:
            raise self._no_valid_emails(classification)

        await self._groups.pull_members(group["name"], classification.valid_emails)
        updated = await self._reload(group)

        return {
            "group": format_group(updated),
            "notInGroup": classification.not_in_group,
            "membersNotFound": classification.members_not_found,
        }

    @operation_boundary
    async def delete_user(self, email: Optional[str], context: RequestContext) -> Dict[str, Any]:
        """
        Delete a user, its transactions and its group membership.

        Steps are not rolled back if a later one fails.

        Returns:
            dict with deletedTransactionsNumber and isRemovedFromGroup
        """
        self._authorize(context, AuthKind.ADMIN)

        if email is None:
            raise BadRequestException(message="Missing parameters", code="MISSING_PARAMETERS")
        if not is_email(email):
            raise BadRequestException(message="Mail not valid", code="INVALID_EMAIL")

        user = await self._users.find_by_email(email)
        if not user:
            raise BadRequestException(message="User not found", code="USER_NOT_FOUND")

        deleted_transactions = await self._users.delete_transactions(user["username"])
        removed_from = await self._groups.pull_member_everywhere(user["email"])
        await self._users.delete_by_email(user["email"])

        logger.info(
            f"Deleted user {user['email']} "
            f"(transactions={deleted_transactions}, groups={removed_from})"
        )
        return {
            "deletedTransactionsNumber": deleted_transactions,
            "isRemovedFromGroup": removed_from > 0,
        }

    @operation_boundary
    async def delete_group(self, name: Optional[str], context: RequestContext) -> Dict[str, Any]:
        """
        Delete a group by name. Requires both Admin and Group capabilities.

        Returns:
            dict with a confirmation message
        """
        self._authorize(context, AuthKind.ADMIN)

        if name is None:
            raise BadRequestException(message="Missing parameters", code="MISSING_PARAMETERS")
        if not name.strip():
            raise BadRequestException(
                message="the request body is an empty string",
                code="EMPTY_GROUP_NAME",
            )

        self._authorize(context, AuthKind.GROUP)

        deleted = await self._groups.delete_by_name(name)
        if deleted == 0:
            raise BadRequestException(message="Group not found", code="GROUP_NOT_FOUND")

        return {"message": "Group deleted"}

    # ─────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────

    def _authorize(
        self,
        context: RequestContext,
        kind: AuthKind,
        emails: Optional[Iterable[str]] = None,
    ) -> None:
        result = self._access.verify_auth(context, kind, emails=emails)
        if not result.authorized:
            raise UnauthorizedException(message=result.cause)

    async def _authorize_for_group(
        self,
        name: str,
        context: RequestContext,
        intent: RouteIntent,
        allowed: Dict[RouteIntent, AuthKind],
    ) -> Dict[str, Any]:
        """
        Check route intent, require the group to exist, then check capability.

        The self-service capability is checked against the group's current
        members.
        """
        kind = allowed.get(intent)
        if kind is None:
            raise BadRequestException(message="Path not correct", code="INVALID_PATH")

        group = await self._groups.find_by_name(name)
        if not group:
            raise BadRequestException(message="Group not found", code="GROUP_NOT_FOUND")

        if kind == AuthKind.GROUP:
            self._authorize(context, kind, emails=member_emails(group))
        else:
            self._authorize(context, kind)
        return group

    @staticmethod
    def _require_email_syntax(emails: List[str]) -> None:
        invalid = [e for e in emails if not is_email(e)]
        if invalid:
            raise BadRequestException(
                message="Mail not valid",
                code="INVALID_EMAIL",
                details={"invalidEmails": invalid},
            )

    @staticmethod
    def _no_valid_emails(classification: ClassificationResult) -> BadRequestException:
        details = classification.to_dict()
        details.pop("validEmails")

        if classification.already_in_group and not classification.members_not_found:
            return BadRequestException(
                message="All the emails are already in a group",
                code="ALL_ALREADY_IN_GROUP",
                details=details,
            )
        return BadRequestException(
            message="All the emails are invalid",
            code="NO_VALID_EMAILS",
            details=details,
        )

    async def _resolve_members(self, emails: List[str]) -> List[Dict[str, Any]]:
        members = []
        for email in emails:
            user = await self._users.find_by_email(email)
            members.append({
                "email": normalize_email(email),
                "user": user["_id"] if user else None,
            })
        return members

    async def _reload(self, group: Dict[str, Any]) -> Dict[str, Any]:
        updated = await self._groups.find_by_name(group["name"])
        if updated is None:
            logger.warning(f"Group {group['name']} disappeared during update")
            return {"name": group["name"], "members": []}
        return updated
