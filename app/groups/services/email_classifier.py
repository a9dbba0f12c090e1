"""
Candidate email classification for group membership changes.

Given a list of emails, decides which are registered users, which already
belong to some group (or, when a target group is given, which are not in
that group), and which are unknown. Storage access goes through injected
lookup callbacks so the decision logic stays free of I/O.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from common.utils import normalize_email

logger = logging.getLogger(__name__)

# Type aliases for lookup callbacks
UserExistsCallback = Callable[[str], Awaitable[bool]]
InAnyGroupCallback = Callable[[str], Awaitable[bool]]
InGroupCallback = Callable[[str, str], Awaitable[bool]]


@dataclass
class ClassificationResult:
    """Disjoint partition of the de-duplicated candidate emails."""

    valid_emails: List[str] = field(default_factory=list)
    already_in_group: List[str] = field(default_factory=list)
    members_not_found: List[str] = field(default_factory=list)
    not_in_group: List[str] = field(default_factory=list)

    @property
    def has_valid(self) -> bool:
        return bool(self.valid_emails)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "validEmails": list(self.valid_emails),
            "alreadyInGroup": list(self.already_in_group),
            "membersNotFound": list(self.members_not_found),
            "notInGroup": list(self.not_in_group),
        }


def unique_emails(emails: Iterable[str]) -> List[str]:
    """Normalize emails and drop case-insensitive duplicates, keeping first-seen order."""
    seen = set()
    result = []
    for email in emails:
        normalized = normalize_email(email)
        if normalized not in seen:
            seen.add(normalized)
            result.append(normalized)
    return result


class EmailClassifier:
    """
    Partitions candidate emails for group creation, addition and removal.

    Assumes every candidate already passed syntactic validation.
    """

    def __init__(
        self,
        user_exists: UserExistsCallback,
        in_any_group: InAnyGroupCallback,
        in_group: InGroupCallback,
    ):
        """
        Initialize EmailClassifier.

        Args:
            user_exists: Whether a registered user owns the email
            in_any_group: Whether the email is a member of any group
            in_group: Whether the email is a member of the named group
        """
        self._user_exists = user_exists
        self._in_any_group = in_any_group
        self._in_group = in_group

    async def classify(
        self,
        candidate_emails: Iterable[str],
        target_group: Optional[str] = None,
    ) -> ClassificationResult:
        """
        Classify candidate emails.

        Algorithm:
            - Unknown users go to members_not_found and are never checked
              against group state
            - Without a target group, members of any group go to
              already_in_group and the rest are valid
            - With a target group, members of that group are valid and the
              rest go to not_in_group

        Args:
            candidate_emails: Emails to classify (duplicates allowed)
            target_group: Group name for removal; None for creation/addition

        Returns:
            ClassificationResult with four disjoint lists
        """
        result = ClassificationResult()

        for email in unique_emails(candidate_emails):
            if not await self._user_exists(email):
                result.members_not_found.append(email)
                continue

            if target_group is None:
                if await self._in_any_group(email):
                    result.already_in_group.append(email)
                else:
                    result.valid_emails.append(email)
            elif await self._in_group(target_group, email):
                result.valid_emails.append(email)
            else:
                result.not_in_group.append(email)

        logger.debug(
            f"Classified emails (target={target_group}): "
            f"valid={len(result.valid_emails)}, "
            f"alreadyInGroup={len(result.already_in_group)}, "
            f"notInGroup={len(result.not_in_group)}, "
            f"notFound={len(result.members_not_found)}"
        )
        return result
