"""
Wallet application-specific code.

This package contains the users and groups API:
- auth: Cookie session verification and capability checks
- users: User listing, lookup and deletion
- groups: Group creation and membership reconciliation
- config: Application settings

Uses generic infrastructure from the common/ package.
"""

from app.config import settings

__all__ = ["settings"]
