"""Shared test fixtures for Wallet API tests."""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from app.auth.access import AccessVerifier, AuthResult, RequestContext
from app.groups.services.group_service import member_emails
from common.auth.jwt_auth import JWTAuth


TEST_SECRET = "test-secret-key-for-testing-only"


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like find_one, update_one,
    # count_documents etc. stay as AsyncMock.
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


# ─────────────────────────────────────────────────────────────────
# Auth
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def jwt_auth():
    return JWTAuth(secret=TEST_SECRET, access_token_expire_minutes=60)


@pytest.fixture
def access_verifier(jwt_auth):
    return AccessVerifier(jwt_auth=jwt_auth)


@pytest.fixture
def make_context(jwt_auth):
    """Build a RequestContext with a signed access/refresh token pair."""

    def _make(
        username="alice",
        email="alice@example.com",
        role="Regular",
        access_expires=timedelta(hours=1),
        refresh_expires=timedelta(days=7),
    ):
        claims = {"username": username, "email": email, "role": role}
        return RequestContext(
            access_token=jwt_auth.create_token(claims, expires_delta=access_expires),
            refresh_token=jwt_auth.create_token(claims, expires_delta=refresh_expires),
        )

    return _make


@pytest.fixture
def context():
    return RequestContext(access_token="access", refresh_token="refresh")


@pytest.fixture
def allow_all_access():
    """Access verifier stub that authorizes every check."""
    verifier = MagicMock()
    verifier.verify_auth = MagicMock(return_value=AuthResult(True, "Authorized"))
    verifier.verify_multiple_auth = MagicMock(return_value=AuthResult(True, "Authorized"))
    return verifier


# ─────────────────────────────────────────────────────────────────
# In-memory storage backing the service mocks
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def store():
    """Users keyed by email and groups keyed by name."""
    users = {
        email: {"_id": ObjectId(), "username": email.split("@")[0], "email": email, "role": role}
        for email, role in [
            ("alice@example.com", "Regular"),
            ("bob@example.com", "Regular"),
            ("carol@example.com", "Regular"),
            ("dave@example.com", "Regular"),
            ("admin@example.com", "Admin"),
        ]
    }
    groups = {
        "Family": {
            "_id": ObjectId(),
            "name": "Family",
            "members": [
                {"email": "carol@example.com", "user": users["carol@example.com"]["_id"]},
                {"email": "dave@example.com", "user": users["dave@example.com"]["_id"]},
            ],
        },
    }
    return {"users": users, "groups": groups}


@pytest.fixture
def mock_user_service(store):
    users = store["users"]
    service = AsyncMock()
    service.exists = AsyncMock(side_effect=lambda email: email.lower() in users)
    service.find_by_email = AsyncMock(side_effect=lambda email: users.get(email.lower()))
    service.find_by_username = AsyncMock(
        side_effect=lambda username: next(
            (u for u in users.values() if u["username"] == username), None
        )
    )
    service.list_users = AsyncMock(side_effect=lambda: list(users.values()))
    service.delete_transactions = AsyncMock(return_value=0)

    def _delete(email):
        return 1 if users.pop(email.lower(), None) else 0

    service.delete_by_email = AsyncMock(side_effect=_delete)
    return service


@pytest.fixture
def mock_group_service(store):
    groups = store["groups"]
    service = AsyncMock()

    def _create(name, members):
        groups[name] = {"_id": ObjectId(), "name": name, "members": list(members)}
        return groups[name]

    def _push(name, members):
        groups[name]["members"].extend(members)
        return 1

    def _pull(name, emails):
        before = len(groups[name]["members"])
        groups[name]["members"] = [m for m in groups[name]["members"] if m["email"] not in emails]
        return 1 if len(groups[name]["members"]) != before else 0

    def _pull_everywhere(email):
        modified = 0
        for group in groups.values():
            if email in member_emails(group):
                group["members"] = [m for m in group["members"] if m["email"] != email]
                modified += 1
        return modified

    def _delete(name):
        return 1 if groups.pop(name, None) else 0

    service.find_by_name = AsyncMock(side_effect=lambda name: groups.get(name))
    service.in_any_group = AsyncMock(
        side_effect=lambda email: any(email in member_emails(g) for g in groups.values())
    )
    service.has_member = AsyncMock(
        side_effect=lambda name, email: name in groups and email in member_emails(groups[name])
    )
    service.list_groups = AsyncMock(side_effect=lambda: list(groups.values()))
    service.create_group = AsyncMock(side_effect=_create)
    service.push_members = AsyncMock(side_effect=_push)
    service.pull_members = AsyncMock(side_effect=_pull)
    service.pull_member_everywhere = AsyncMock(side_effect=_pull_everywhere)
    service.delete_by_name = AsyncMock(side_effect=_delete)
    return service
