"""
Wallet API Routers.

All routers are imported here for easy access.
"""

from app.users.router import router as users_router
from app.groups.router import router as groups_router

__all__ = [
    "users_router",
    "groups_router",
]
