"""
Group System

Creates and deletes groups and reconciles their membership against
registered users, keeping each user in at most one group.
"""

from app.groups.services.email_classifier import EmailClassifier
from app.groups.services.group_service import GroupService
from app.groups.services.group_query_service import GroupQueryService
from app.groups.services.membership_service import MembershipService, RouteIntent

__all__ = [
    "EmailClassifier",
    "GroupService",
    "GroupQueryService",
    "MembershipService",
    "RouteIntent",
]
