"""
Group storage service.

Raw Motor access to the groups collection. Member lists are embedded
arrays of ``{email, user}`` sub-documents; all membership changes are
single-document array updates.
"""

import logging
from typing import Optional, List, Dict, Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from common.database import storage_call
from common.utils import normalize_email

logger = logging.getLogger(__name__)


def member_emails(group: Dict[str, Any]) -> List[str]:
    """Emails of a group document's members, in stored order."""
    return [m.get("email") for m in group.get("members", [])]


def format_group(group: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a group document for API responses."""
    return {"name": group.get("name", ""), "members": member_emails(group)}


class GroupService:
    """
    Reads and mutates group documents and their embedded member arrays.
    """

    def __init__(self, db: AsyncIOMotorDatabase, groups_collection: str = "groups"):
        """
        Initialize GroupService.

        Args:
            db: MongoDB database connection
            groups_collection: Name of the groups collection
        """
        self._db = db
        self._groups_collection = db[groups_collection]

    @storage_call
    async def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Get group by exact name, or None."""
        return await self._groups_collection.find_one({"name": name})

    @storage_call
    async def in_any_group(self, email: str) -> bool:
        """Check whether ``email`` is a member of any group."""
        count = await self._groups_collection.count_documents(
            {"members.email": normalize_email(email)}, limit=1
        )
        return count > 0

    @storage_call
    async def has_member(self, name: str, email: str) -> bool:
        """Check whether group ``name`` contains ``email``."""
        count = await self._groups_collection.count_documents(
            {"name": name, "members.email": normalize_email(email)}, limit=1
        )
        return count > 0

    @storage_call
    async def list_groups(self) -> List[Dict[str, Any]]:
        """Get all groups."""
        cursor = self._groups_collection.find({})
        return await cursor.to_list(length=None)

    @storage_call
    async def create_group(self, name: str, members: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Insert a new group.

        Args:
            name: Unique group name
            members: Member sub-documents ``{email, user}``

        Returns:
            Created group document
        """
        group_doc = {"name": name, "members": members}
        result = await self._groups_collection.insert_one(group_doc)
        group_doc["_id"] = result.inserted_id

        logger.info(f"Created group {name} with {len(members)} members")
        return group_doc

    @storage_call
    async def push_members(self, name: str, members: List[Dict[str, Any]]) -> int:
        """
        Append members to a group, only if none of them is already in it.

        Returns:
            Number of modified groups (0 or 1)
        """
        emails = [m["email"] for m in members]
        result = await self._groups_collection.update_one(
            {"name": name, "members.email": {"$nin": emails}},
            {"$push": {"members": {"$each": members}}},
        )
        logger.info(f"Added {len(members)} members to group {name} (modified={result.modified_count})")
        return result.modified_count

    @storage_call
    async def pull_members(self, name: str, emails: List[str]) -> int:
        """
        Remove members from a group. The group itself is kept even if emptied.

        Returns:
            Number of modified groups (0 or 1)
        """
        result = await self._groups_collection.update_one(
            {"name": name},
            {"$pull": {"members": {"email": {"$in": emails}}}},
        )
        logger.info(f"Removed {len(emails)} members from group {name} (modified={result.modified_count})")
        return result.modified_count

    @storage_call
    async def pull_member_everywhere(self, email: str) -> int:
        """
        Remove ``email`` from every group containing it.

        Returns:
            Number of modified groups
        """
        email = normalize_email(email)
        result = await self._groups_collection.update_many(
            {"members.email": email},
            {"$pull": {"members": {"email": email}}},
        )
        return result.modified_count

    @storage_call
    async def delete_by_name(self, name: str) -> int:
        """
        Delete group(s) named ``name``.

        Returns:
            Number of deleted groups
        """
        result = await self._groups_collection.delete_many({"name": name})
        logger.info(f"Deleted {result.deleted_count} group(s) named {name}")
        return result.deleted_count
