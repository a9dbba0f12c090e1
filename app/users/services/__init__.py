"""User services."""

from app.users.services.user_service import UserService
from app.users.services.user_query_service import UserQueryService

__all__ = [
    "UserService",
    "UserQueryService",
]
