"""
Pydantic models for Group system request validation.

Fields are optional so that absent attributes reach the service layer
and are reported as 400 rather than as schema errors.
"""

from typing import Optional, List
from pydantic import BaseModel


class CreateGroupRequest(BaseModel):
    """Request body for creating a group."""
    name: Optional[str] = None
    memberEmails: Optional[List[str]] = None


class MemberEmailsRequest(BaseModel):
    """Request body for adding or removing members."""
    memberEmails: Optional[List[str]] = None


class DeleteGroupRequest(BaseModel):
    """Request body for deleting a group."""
    name: Optional[str] = None
