"""
FastAPI router for Group system endpoints.

Provides endpoints for group creation, listing, membership changes
and deletion.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from app.auth.access import RequestContext
from app.auth.dependencies import get_request_context, session_response
from app.dependencies import get_group_query_service, get_membership_service
from app.groups.models import CreateGroupRequest, DeleteGroupRequest, MemberEmailsRequest
from app.groups.services.group_query_service import GroupQueryService
from app.groups.services.membership_service import MembershipService, RouteIntent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("")
async def create_group(
    response: Response,
    context: Annotated[RequestContext, Depends(get_request_context)],
    membership_service: Annotated[MembershipService, Depends(get_membership_service)],
    body: CreateGroupRequest = CreateGroupRequest(),
):
    """
    Create a group.

    Candidates that are unknown or already in a group are skipped and
    reported in alreadyInGroup / membersNotFound.
    """
    result = await membership_service.create_group(body.name, body.memberEmails, context)
    return session_response(response, context, result)


@router.get("")
async def get_groups(
    response: Response,
    context: Annotated[RequestContext, Depends(get_request_context)],
    group_query_service: Annotated[GroupQueryService, Depends(get_group_query_service)],
):
    """List all groups (admin only)."""
    groups = await group_query_service.get_groups(context)
    return session_response(response, context, groups)


@router.get("/{name}")
async def get_group(
    name: str,
    response: Response,
    context: Annotated[RequestContext, Depends(get_request_context)],
    group_query_service: Annotated[GroupQueryService, Depends(get_group_query_service)],
):
    """Get a group (its members or admins)."""
    group = await group_query_service.get_group(name, context)
    return session_response(response, context, group)


@router.patch("/{name}/{segment}")
async def update_members(
    name: str,
    segment: str,
    response: Response,
    context: Annotated[RequestContext, Depends(get_request_context)],
    membership_service: Annotated[MembershipService, Depends(get_membership_service)],
    body: MemberEmailsRequest = MemberEmailsRequest(),
):
    """
    Add or remove group members.

    ``add`` / ``remove`` are self-service (caller must be a member),
    ``insert`` / ``pull`` are admin-only. Any other segment is rejected.
    """
    intent = RouteIntent.from_segment(segment)

    if intent in (RouteIntent.ADD_SELF, RouteIntent.ADD_ADMIN):
        result = await membership_service.add_to_group(name, body.memberEmails, context, intent)
    else:
        result = await membership_service.remove_from_group(name, body.memberEmails, context, intent)

    return session_response(response, context, result)


@router.delete("")
async def delete_group(
    response: Response,
    context: Annotated[RequestContext, Depends(get_request_context)],
    membership_service: Annotated[MembershipService, Depends(get_membership_service)],
    body: DeleteGroupRequest = DeleteGroupRequest(),
):
    """Delete a group (admin only)."""
    result = await membership_service.delete_group(body.name, context)
    return session_response(response, context, message=result["message"])
