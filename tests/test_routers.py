"""
HTTP tests for the users and groups routers.

Services are replaced through FastAPI dependency overrides; requests go
through httpx's ASGI transport so routing, body parsing, the error
envelope and the refreshed-token cookie are all exercised.
"""

import pytest
from unittest.mock import AsyncMock

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.auth.access import REFRESHED_TOKEN_MESSAGE
from app.dependencies import get_group_query_service, get_membership_service, get_user_query_service
from app.groups.services.membership_service import RouteIntent
from app.routers import groups_router, users_router
from common.database import StorageError
from common.utils import BadRequestException, UnauthorizedException
from common.utils.handlers import register_exception_handlers


BASE_URL = "http://test"
COOKIES = {"accessToken": "access-token", "refreshToken": "refresh-token"}


@pytest.fixture
def membership_service():
    return AsyncMock()


@pytest.fixture
def user_query_service():
    return AsyncMock()


@pytest.fixture
def group_query_service():
    return AsyncMock()


@pytest.fixture
def app(membership_service, user_query_service, group_query_service):
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(users_router, prefix="/api")
    app.include_router(groups_router, prefix="/api")
    app.dependency_overrides[get_membership_service] = lambda: membership_service
    app.dependency_overrides[get_user_query_service] = lambda: user_query_service
    app.dependency_overrides[get_group_query_service] = lambda: group_query_service
    return app


def _client(app, **kwargs):
    return AsyncClient(transport=ASGITransport(app=app, **kwargs), base_url=BASE_URL, cookies=COOKIES)


# ─────────────────────────────────────────────────────────────────
# Users
# ─────────────────────────────────────────────────────────────────


class TestUsersRouter:

    @pytest.mark.asyncio
    async def test_get_users(self, app, user_query_service):
        user_query_service.get_users.return_value = [
            {"username": "alice", "email": "alice@example.com", "role": "Regular"}
        ]

        async with _client(app) as client:
            response = await client.get("/api/users")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": [{"username": "alice", "email": "alice@example.com", "role": "Regular"}],
        }

    @pytest.mark.asyncio
    async def test_cookies_reach_the_service(self, app, user_query_service):
        user_query_service.get_users.return_value = []

        async with _client(app) as client:
            await client.get("/api/users")

        context = user_query_service.get_users.await_args.args[0]
        assert context.access_token == "access-token"
        assert context.refresh_token == "refresh-token"

    @pytest.mark.asyncio
    async def test_get_user_unauthorized(self, app, user_query_service):
        user_query_service.get_user.side_effect = UnauthorizedException(
            message="Tokens have a different username from the requested one"
        )

        async with _client(app) as client:
            response = await client.get("/api/users/bob")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["message"] == "Tokens have a different username from the requested one"
        assert user_query_service.get_user.await_args.args[0] == "bob"

    @pytest.mark.asyncio
    async def test_delete_user(self, app, membership_service):
        membership_service.delete_user.return_value = {
            "deletedTransactionsNumber": 2,
            "isRemovedFromGroup": True,
        }

        async with _client(app) as client:
            response = await client.request(
                "DELETE", "/api/users", json={"email": "carol@example.com"}
            )

        assert response.status_code == 200
        assert response.json()["data"]["deletedTransactionsNumber"] == 2
        assert membership_service.delete_user.await_args.args[0] == "carol@example.com"

    @pytest.mark.asyncio
    async def test_delete_user_without_email_reaches_service(self, app, membership_service):
        membership_service.delete_user.side_effect = BadRequestException(
            message="Missing parameters", code="MISSING_PARAMETERS"
        )

        async with _client(app) as client:
            response = await client.request("DELETE", "/api/users", json={})

        assert response.status_code == 400
        assert response.json()["error"] == {"message": "Missing parameters", "code": "MISSING_PARAMETERS"}
        assert membership_service.delete_user.await_args.args[0] is None


# ─────────────────────────────────────────────────────────────────
# Groups
# ─────────────────────────────────────────────────────────────────


class TestGroupsRouter:

    @pytest.mark.asyncio
    async def test_create_group(self, app, membership_service):
        membership_service.create_group.return_value = {
            "group": {"name": "Friends", "members": ["alice@example.com"]},
            "alreadyInGroup": [],
            "membersNotFound": [],
        }

        async with _client(app) as client:
            response = await client.post(
                "/api/groups", json={"name": "Friends", "memberEmails": ["alice@example.com"]}
            )

        assert response.status_code == 200
        assert response.json()["data"]["group"]["name"] == "Friends"
        name, emails, _ = membership_service.create_group.await_args.args
        assert (name, emails) == ("Friends", ["alice@example.com"])

    @pytest.mark.asyncio
    async def test_create_group_error_details(self, app, membership_service):
        membership_service.create_group.side_effect = BadRequestException(
            message="Mail not valid",
            code="INVALID_EMAIL",
            details={"invalidEmails": ["nope"]},
        )

        async with _client(app) as client:
            response = await client.post("/api/groups", json={"name": "Friends", "memberEmails": ["nope"]})

        assert response.status_code == 400
        assert response.json()["error"]["details"] == {"invalidEmails": ["nope"]}

    @pytest.mark.asyncio
    async def test_get_group(self, app, group_query_service):
        group_query_service.get_group.return_value = {"name": "Family", "members": []}

        async with _client(app) as client:
            response = await client.get("/api/groups/Family")

        assert response.json()["data"] == {"name": "Family", "members": []}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("segment,intent", [
        ("add", RouteIntent.ADD_SELF),
        ("insert", RouteIntent.ADD_ADMIN),
    ])
    async def test_add_routes(self, app, membership_service, segment, intent):
        membership_service.add_to_group.return_value = {}

        async with _client(app) as client:
            response = await client.patch(
                f"/api/groups/Family/{segment}", json={"memberEmails": ["alice@example.com"]}
            )

        assert response.status_code == 200
        assert membership_service.add_to_group.await_args.args[3] == intent
        membership_service.remove_from_group.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("segment,intent", [
        ("remove", RouteIntent.REMOVE_SELF),
        ("pull", RouteIntent.REMOVE_ADMIN),
        ("rename", RouteIntent.INVALID),
    ])
    async def test_remove_and_unknown_routes(self, app, membership_service, segment, intent):
        membership_service.remove_from_group.return_value = {}

        async with _client(app) as client:
            await client.patch(
                f"/api/groups/Family/{segment}", json={"memberEmails": ["carol@example.com"]}
            )

        assert membership_service.remove_from_group.await_args.args[3] == intent
        membership_service.add_to_group.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_group(self, app, membership_service):
        membership_service.delete_group.return_value = {"message": "Group deleted"}

        async with _client(app) as client:
            response = await client.request("DELETE", "/api/groups", json={"name": "Family"})

        assert response.json() == {"success": True, "message": "Group deleted"}


class TestMissingBody:

    @pytest.mark.asyncio
    async def test_patch_without_body_reaches_service(self, app, membership_service):
        membership_service.add_to_group.side_effect = BadRequestException(
            message="The request body does not contain all the necessary attributes",
            code="MISSING_PARAMETERS",
        )

        async with _client(app) as client:
            response = await client.patch("/api/groups/Family/add")

        assert response.status_code == 400
        assert membership_service.add_to_group.await_args.args[1] is None

    @pytest.mark.asyncio
    async def test_post_without_body_reaches_service(self, app, membership_service):
        membership_service.create_group.side_effect = BadRequestException(
            message="Missing parameters", code="MISSING_PARAMETERS"
        )

        async with _client(app) as client:
            response = await client.post("/api/groups")

        assert response.status_code == 400
        name, emails, _ = membership_service.create_group.await_args.args
        assert (name, emails) == (None, None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["/api/groups", "/api/users"])
    async def test_delete_without_body_reaches_service(self, app, membership_service, url):
        error = BadRequestException(message="Missing parameters", code="MISSING_PARAMETERS")
        membership_service.delete_group.side_effect = error
        membership_service.delete_user.side_effect = error

        async with _client(app) as client:
            response = await client.delete(url)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Missing parameters"


# ─────────────────────────────────────────────────────────────────
# Session refresh and error envelope
# ─────────────────────────────────────────────────────────────────


class TestSessionAndErrors:

    @pytest.mark.asyncio
    async def test_refreshed_token_sets_cookie(self, app, group_query_service):
        async def _get_groups(context):
            context.refreshed_access_token = "new-access-token"
            context.refreshed_token_message = REFRESHED_TOKEN_MESSAGE
            return []

        group_query_service.get_groups.side_effect = _get_groups

        async with _client(app) as client:
            response = await client.get("/api/groups")

        assert response.status_code == 200
        assert response.json()["refreshedTokenMessage"] == REFRESHED_TOKEN_MESSAGE
        set_cookie = response.headers["set-cookie"]
        assert "accessToken=new-access-token" in set_cookie
        assert "HttpOnly" in set_cookie
        assert "Path=/api" in set_cookie

    @pytest.mark.asyncio
    async def test_no_cookie_without_refresh(self, app, group_query_service):
        group_query_service.get_groups.return_value = []

        async with _client(app) as client:
            response = await client.get("/api/groups")

        assert "set-cookie" not in response.headers
        assert "refreshedTokenMessage" not in response.json()

    @pytest.mark.asyncio
    async def test_storage_error_envelope(self, app, group_query_service):
        group_query_service.get_groups.side_effect = StorageError("list_groups", "connection lost")

        async with _client(app) as client:
            response = await client.get("/api/groups")

        assert response.status_code == 500
        assert response.json()["error"] == {"message": "connection lost", "code": "STORAGE_ERROR"}

    @pytest.mark.asyncio
    async def test_unexpected_error_envelope(self, app, group_query_service):
        group_query_service.get_groups.side_effect = RuntimeError("boom")

        async with _client(app, raise_app_exceptions=False) as client:
            response = await client.get("/api/groups")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"
