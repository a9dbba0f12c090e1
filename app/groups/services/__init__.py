"""Group services."""

from app.groups.services.email_classifier import ClassificationResult, EmailClassifier
from app.groups.services.group_service import GroupService
from app.groups.services.group_query_service import GroupQueryService
from app.groups.services.membership_service import MembershipService, RouteIntent

__all__ = [
    "ClassificationResult",
    "EmailClassifier",
    "GroupService",
    "GroupQueryService",
    "MembershipService",
    "RouteIntent",
]
