"""
FastAPI router for User system endpoints.

Provides endpoints for listing, reading and deleting users.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from app.auth.access import RequestContext
from app.auth.dependencies import get_request_context, session_response
from app.dependencies import get_membership_service, get_user_query_service
from app.groups.services.membership_service import MembershipService
from app.users.models import DeleteUserRequest
from app.users.services.user_query_service import UserQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
async def get_users(
    response: Response,
    context: Annotated[RequestContext, Depends(get_request_context)],
    user_query_service: Annotated[UserQueryService, Depends(get_user_query_service)],
):
    """List all users (admin only)."""
    users = await user_query_service.get_users(context)
    return session_response(response, context, users)


@router.get("/{username}")
async def get_user(
    username: str,
    response: Response,
    context: Annotated[RequestContext, Depends(get_request_context)],
    user_query_service: Annotated[UserQueryService, Depends(get_user_query_service)],
):
    """
    Get one user.

    Regular users may only read their own record; admins may read any.
    """
    user = await user_query_service.get_user(username, context)
    return session_response(response, context, user)


@router.delete("")
async def delete_user(
    response: Response,
    context: Annotated[RequestContext, Depends(get_request_context)],
    membership_service: Annotated[MembershipService, Depends(get_membership_service)],
    body: DeleteUserRequest = DeleteUserRequest(),
):
    """
    Delete a user (admin only).

    Also deletes the user's transactions and removes it from its group.
    """
    result = await membership_service.delete_user(body.email, context)
    return session_response(response, context, result)
