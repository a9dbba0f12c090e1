"""
Database module - Generic async MongoDB connection using Motor.

Usage:
    from common.database import MongoDB, get_main_database

    # Set up singleton
    db = MongoDB()
    await db.connect(uri, database_name, indexes)
    set_main_database(db)

    # Access anywhere
    main_db = get_main_database()
    collection = main_db.db["users"]
"""

from common.database.mongodb import (
    MongoDB,
    IndexSpec,
    mask_uri,
    # Singleton management
    set_main_database,
    get_main_database,
)
from common.database.errors import StorageError, storage_call

__all__ = [
    "MongoDB",
    "IndexSpec",
    "mask_uri",
    "StorageError",
    "storage_call",
    # Singleton management
    "set_main_database",
    "get_main_database",
]
