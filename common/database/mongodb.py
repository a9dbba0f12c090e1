"""
Generic MongoDB connection manager using Motor.

This module provides async MongoDB connectivity that works with any database.
Indexes are provided at connection time, allowing complete separation of
database infrastructure from application-specific collections.

Example:
    from common.database import MongoDB, IndexSpec

    db = MongoDB()
    await db.connect(
        uri="mongodb://localhost:27017",
        database_name="wallet",
        indexes=[IndexSpec("users", "email", unique=True)],
    )

Singleton access:
    from common.database.mongodb import get_main_database

    main_db = get_main_database()
    users = main_db.db["users"]
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────
# Singleton database instance
# ─────────────────────────────────────────────────────────────────

_main_database: Optional["MongoDB"] = None


@dataclass(frozen=True)
class IndexSpec:
    """Single-field index to ensure on a collection at startup."""

    collection: str
    field: str
    unique: bool = False


def mask_uri(uri: str) -> str:
    """Strip credentials from a MongoDB URI for logging."""
    return uri.split("@")[-1] if "@" in uri else uri


class MongoDB:
    """Generic MongoDB connection manager - works with any database."""

    def __init__(self):
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None
        self._initialized: bool = False

    async def connect(
        self,
        uri: str,
        database_name: str,
        indexes: Sequence[IndexSpec] = (),
    ) -> None:
        """
        Connect to MongoDB and ensure the provided indexes exist.

        Args:
            uri: MongoDB connection string
            database_name: Name of the database to use
            indexes: Index specifications to create if missing
        """
        logger.info(f"Connecting to MongoDB: {mask_uri(uri)}")
        logger.debug(f"Database name: {database_name}")

        try:
            self._client = AsyncIOMotorClient(uri)
            self._database_name = database_name

            await self.ensure_indexes(indexes)
            self._initialized = True
            logger.info(f"Successfully connected to MongoDB database: {database_name}")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    async def ensure_indexes(self, indexes: Sequence[IndexSpec]) -> List[str]:
        """
        Create the given indexes (no-op for indexes that already exist).

        Returns:
            Names of the ensured indexes
        """
        names = []
        for spec in indexes:
            logger.debug(f"Ensuring index {spec.collection}.{spec.field} (unique={spec.unique})")
            name = await self.db[spec.collection].create_index(spec.field, unique=spec.unique)
            names.append(name)
        return names

    async def disconnect(self) -> None:
        """Close the MongoDB connection."""
        if self._client:
            logger.info(f"Disconnecting from MongoDB database: {self._database_name}")
            self._client.close()
            self._client = None
            self._database_name = None
            self._initialized = False
            logger.debug("MongoDB connection closed")

    @property
    def is_connected(self) -> bool:
        """Check if database is connected and initialized."""
        return self._initialized

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Get the underlying Motor database instance."""
        if not self._client or not self._database_name:
            raise RuntimeError("Database not connected")
        return self._client[self._database_name]


# ─────────────────────────────────────────────────────────────────
# Singleton initialization and getters
# ─────────────────────────────────────────────────────────────────

def set_main_database(db: "MongoDB") -> None:
    """
    Set the main database singleton from an existing MongoDB instance.

    Args:
        db: MongoDB instance to use as main database
    """
    global _main_database
    _main_database = db
    logger.info("Main database singleton set")


def get_main_database() -> "MongoDB":
    """
    Get the main application database singleton.

    Returns:
        MongoDB instance

    Raises:
        RuntimeError: If database not initialized
    """
    if _main_database is None:
        raise RuntimeError("Main database not initialized. Call set_main_database() first.")
    return _main_database
