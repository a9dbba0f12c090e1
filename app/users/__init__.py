"""
User System

Lists and looks up users, and deletes a user together with its
transactions and group membership.
"""

from app.users.services.user_service import UserService
from app.users.services.user_query_service import UserQueryService

__all__ = [
    "UserService",
    "UserQueryService",
]
