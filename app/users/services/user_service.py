"""
User storage service.

Raw Motor access to the users and transactions collections.
"""

import logging
from typing import Optional, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from common.database import storage_call
from common.utils import normalize_email

logger = logging.getLogger(__name__)

USER_PROJECTION = {"_id": 1, "username": 1, "email": 1, "role": 1}


class UserService:
    """
    Reads and deletes user records and their transaction history.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        users_collection: str = "users",
        transactions_collection: str = "transactions",
    ):
        """
        Initialize UserService.

        Args:
            db: MongoDB database connection
            users_collection: Name of the users collection
            transactions_collection: Name of the transactions collection
        """
        self._db = db
        self._users_collection = db[users_collection]
        self._transactions_collection = db[transactions_collection]

    @storage_call
    async def find_by_email(self, email: str) -> Optional[dict]:
        """Get user by email (case-insensitive), or None."""
        return await self._users_collection.find_one(
            {"email": normalize_email(email)}, USER_PROJECTION
        )

    @storage_call
    async def find_by_username(self, username: str) -> Optional[dict]:
        """Get user by username, or None."""
        return await self._users_collection.find_one({"username": username}, USER_PROJECTION)

    @storage_call
    async def exists(self, email: str) -> bool:
        """Check whether a registered user owns ``email``."""
        count = await self._users_collection.count_documents(
            {"email": normalize_email(email)}, limit=1
        )
        return count > 0

    @storage_call
    async def list_users(self) -> List[dict]:
        """Get all users."""
        cursor = self._users_collection.find({}, USER_PROJECTION)
        return await cursor.to_list(length=None)

    @storage_call
    async def delete_transactions(self, username: str) -> int:
        """
        Delete every transaction recorded for ``username``.

        Returns:
            Number of deleted transactions
        """
        result = await self._transactions_collection.delete_many({"username": username})
        logger.info(f"Deleted {result.deleted_count} transactions of {username}")
        return result.deleted_count

    @storage_call
    async def delete_by_email(self, email: str) -> int:
        """
        Delete the user record(s) owning ``email``.

        Returns:
            Number of deleted users
        """
        result = await self._users_collection.delete_many({"email": normalize_email(email)})
        logger.info(f"Deleted {result.deleted_count} user record(s) for {email}")
        return result.deleted_count
