"""
FastAPI dependencies for the Wallet application.

Provides dependency injection for all services.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.auth.dependencies import init_auth_services, get_access_verifier
from app.config import Settings
from app.groups.services.email_classifier import EmailClassifier
from app.groups.services.group_query_service import GroupQueryService
from app.groups.services.group_service import GroupService
from app.groups.services.membership_service import MembershipService
from app.users.services.user_query_service import UserQueryService
from app.users.services.user_service import UserService

logger = logging.getLogger(__name__)


_user_service: UserService | None = None
_group_service: GroupService | None = None
_user_query_service: UserQueryService | None = None
_group_query_service: GroupQueryService | None = None
_membership_service: MembershipService | None = None


def init_all_services(db: AsyncIOMotorDatabase, settings: Settings) -> None:
    """
    Initialize all services with database connection and settings.

    Called once at application startup.

    Args:
        db: MongoDB database connection
        settings: Application settings
    """
    global _user_service, _group_service, _user_query_service
    global _group_query_service, _membership_service

    init_auth_services(
        secret=settings.get_access_key(),
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    access_verifier = get_access_verifier()

    _user_service = UserService(
        db=db,
        users_collection=settings.USERS_COLLECTION,
        transactions_collection=settings.TRANSACTIONS_COLLECTION,
    )
    _group_service = GroupService(db=db, groups_collection=settings.GROUPS_COLLECTION)

    classifier = EmailClassifier(
        user_exists=_user_service.exists,
        in_any_group=_group_service.in_any_group,
        in_group=_group_service.has_member,
    )

    _user_query_service = UserQueryService(
        access_verifier=access_verifier,
        user_service=_user_service,
    )
    _group_query_service = GroupQueryService(
        access_verifier=access_verifier,
        group_service=_group_service,
    )
    _membership_service = MembershipService(
        access_verifier=access_verifier,
        user_service=_user_service,
        group_service=_group_service,
        classifier=classifier,
    )
    logger.info("Wallet services initialized")


def get_user_query_service() -> UserQueryService:
    """Get user query service instance."""
    if _user_query_service is None:
        raise RuntimeError("Services not initialized. Call init_all_services first.")
    return _user_query_service


def get_group_query_service() -> GroupQueryService:
    """Get group query service instance."""
    if _group_query_service is None:
        raise RuntimeError("Services not initialized. Call init_all_services first.")
    return _group_query_service


def get_membership_service() -> MembershipService:
    """Get membership orchestration service instance."""
    if _membership_service is None:
        raise RuntimeError("Services not initialized. Call init_all_services first.")
    return _membership_service
