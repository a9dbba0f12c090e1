"""
Wallet application settings.

Extends the base settings with collection names and the development
fallback for the token signing key.
"""

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Wallet-specific settings."""

    # ==========================================================================
    # Collections
    # ==========================================================================
    USERS_COLLECTION: str = "users"
    GROUPS_COLLECTION: str = "groups"
    TRANSACTIONS_COLLECTION: str = "transactions"

    # ==========================================================================
    # Development defaults
    # ==========================================================================
    DEV_ACCESS_KEY: str = "dev-access-key-change-me"

    def get_access_key(self) -> str:
        """Get the token signing key, falling back to the dev key in development."""
        if self.ACCESS_KEY:
            return self.ACCESS_KEY
        if self.is_development():
            return self.DEV_ACCESS_KEY
        raise ValueError("ACCESS_KEY is not configured")


# Global settings instance
settings = Settings()
