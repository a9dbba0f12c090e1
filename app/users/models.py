"""
Pydantic models for User system request validation.
"""

from typing import Optional
from pydantic import BaseModel


class DeleteUserRequest(BaseModel):
    """Request body for deleting a user."""
    email: Optional[str] = None

