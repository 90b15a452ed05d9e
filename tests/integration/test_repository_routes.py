"""Tests for the generated repository routes."""

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.conftest import principal_headers

API = "/restify-api"

ALICE = principal_headers(1)
BOB = principal_headers(2)
ADMIN = principal_headers(9, is_admin=True)


pytestmark = pytest.mark.asyncio


def assert_error(response, status_code: int, error_code: str):
    assert response.status_code == status_code
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == error_code
    assert "message" in body
    assert "details" in body
    return body


class TestIndex:
    """Listing entries."""

    async def test_guest_cannot_list_posts(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/posts")

        body = assert_error(response, status.HTTP_403_FORBIDDEN, "ACCESS_DENIED")
        assert body["message"] == "This action is unauthorized."

    async def test_entries_filtered_without_show_every(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/posts", headers=BOB)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [entry["id"] for entry in body["data"]] == [6]
        assert body["meta"] == {"authorizedToShowEvery": False, "authorizedToStore": True}
        assert body["pagination"]["total"] == 2

    async def test_owner_sees_own_drafts(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/posts", headers=ALICE)

        assert response.status_code == status.HTTP_200_OK
        assert [entry["id"] for entry in response.json()["data"]] == [5, 6]

    async def test_show_every_lists_everything(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/posts", headers=ADMIN)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [entry["id"] for entry in body["data"]] == [5, 6]
        assert body["meta"]["authorizedToShowEvery"] is True

    async def test_policy_without_collection_methods_is_open(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/users")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [entry["id"] for entry in body["data"]] == [1, 2]
        assert body["meta"] == {"authorizedToShowEvery": True, "authorizedToStore": False}

    async def test_model_without_policy_is_open(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/books")

        assert response.status_code == status.HTTP_200_OK
        entry = response.json()["data"][0]
        assert entry["attributes"]["title"] == "Dune"
        assert all(entry["meta"].values())

    async def test_pagination(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/posts", params={"page": 2, "perPage": 1}, headers=ADMIN)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [entry["id"] for entry in body["data"]] == [6]
        assert body["pagination"]["pages"] == 2
        assert body["pagination"]["has_prev"] is True

    async def test_unknown_repository(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/comments")

        body = assert_error(response, status.HTTP_404_NOT_FOUND, "REPOSITORY_NOT_FOUND")
        assert body["details"] == {"repository": "comments"}


class TestShow:
    """Reading one entry."""

    async def test_published_post_is_public(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/posts/6")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["id"] == 6
        assert data["type"] == "posts"
        assert data["meta"] == {
            "authorizedToShow": True,
            "authorizedToStore": False,
            "authorizedToUpdate": False,
            "authorizedToDelete": False,
        }

    async def test_draft_visible_to_owner_only(self, async_client: AsyncClient, seed):
        denied = await async_client.get(f"{API}/posts/5", headers=BOB)
        allowed = await async_client.get(f"{API}/posts/5", headers=ALICE)

        assert_error(denied, status.HTTP_403_FORBIDDEN, "ACCESS_DENIED")
        assert allowed.status_code == status.HTTP_200_OK
        assert allowed.json()["data"]["attributes"]["title"] == "Draft"

    async def test_unknown_key(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/posts/999", headers=ALICE)

        assert_error(response, status.HTTP_404_NOT_FOUND, "RESOURCE_NOT_FOUND")

    async def test_invalid_key(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/posts/abc", headers=ALICE)

        assert_error(response, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR")


class TestStore:
    """Creating entries."""

    async def test_authenticated_principal_creates_post(self, async_client: AsyncClient, seed):
        response = await async_client.post(
            f"{API}/posts",
            json={"title": "New", "body": "Fresh", "user_id": 2, "id": 500},
            headers=BOB,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["id"] != 500
        assert data["attributes"]["title"] == "New"
        assert data["attributes"]["is_published"] is False
        assert data["meta"]["authorizedToUpdate"] is True

    async def test_guest_cannot_create_post(self, async_client: AsyncClient, seed):
        response = await async_client.post(f"{API}/posts", json={"title": "New"})

        assert_error(response, status.HTTP_403_FORBIDDEN, "ACCESS_DENIED")

    async def test_guest_creates_book(self, async_client: AsyncClient, seed):
        response = await async_client.post(f"{API}/books", json={"title": "Hyperion"})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["attributes"]["title"] == "Hyperion"

    async def test_policy_without_store_denies(self, async_client: AsyncClient, seed):
        response = await async_client.post(
            f"{API}/users", json={"name": "Carol", "email": "carol@example.com"}, headers=ALICE
        )

        assert_error(response, status.HTTP_403_FORBIDDEN, "ACCESS_DENIED")

    async def test_before_hook_grants_admin(self, async_client: AsyncClient, seed):
        response = await async_client.post(
            f"{API}/users", json={"name": "Carol", "email": "carol@example.com"}, headers=ADMIN
        )

        assert response.status_code == status.HTTP_201_CREATED

    async def test_duplicate_entry_conflicts(self, async_client: AsyncClient, seed):
        response = await async_client.post(
            f"{API}/users", json={"name": "Alice", "email": "alice@example.com"}, headers=ADMIN
        )

        assert_error(response, status.HTTP_409_CONFLICT, "DUPLICATE_RESOURCE")

    async def test_payload_must_be_object(self, async_client: AsyncClient, seed):
        response = await async_client.post(f"{API}/books", json=["Hyperion"])

        assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR")


class TestUpdate:
    """Updating entries."""

    async def test_owner_updates_post(self, async_client: AsyncClient, seed):
        response = await async_client.patch(
            f"{API}/posts/5", json={"title": "Edited"}, headers=ALICE
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["attributes"]["title"] == "Edited"

    async def test_put_is_accepted(self, async_client: AsyncClient, seed):
        response = await async_client.put(
            f"{API}/posts/6", json={"title": "Replaced", "body": None}, headers=ALICE
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["attributes"]["body"] is None

    async def test_other_principal_cannot_update(self, async_client: AsyncClient, seed):
        response = await async_client.patch(
            f"{API}/posts/5", json={"title": "Hijacked"}, headers=BOB
        )
        assert_error(response, status.HTTP_403_FORBIDDEN, "ACCESS_DENIED")

        unchanged = await async_client.get(f"{API}/posts/5", headers=ALICE)
        assert unchanged.json()["data"]["attributes"]["title"] == "Draft"

    async def test_user_updates_self(self, async_client: AsyncClient, seed):
        allowed = await async_client.patch(f"{API}/users/2", json={"name": "Robert"}, headers=BOB)
        denied = await async_client.patch(f"{API}/users/1", json={"name": "Mallory"}, headers=BOB)

        assert allowed.status_code == status.HTTP_200_OK
        assert allowed.json()["data"]["attributes"]["name"] == "Robert"
        assert_error(denied, status.HTTP_403_FORBIDDEN, "ACCESS_DENIED")


class TestDelete:
    """Deleting entries."""

    async def test_owner_deletes_post(self, async_client: AsyncClient, seed):
        response = await async_client.delete(f"{API}/posts/5", headers=ALICE)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert response.content == b""

        missing = await async_client.get(f"{API}/posts/5", headers=ALICE)
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    async def test_policy_result_denial(self, async_client: AsyncClient, seed):
        response = await async_client.delete(f"{API}/posts/5", headers=BOB)

        body = assert_error(response, status.HTTP_403_FORBIDDEN, "ACCESS_DENIED")
        assert body["message"] == "This action is unauthorized."

    async def test_users_are_never_deleted_except_by_admin(self, async_client: AsyncClient, seed):
        denied = await async_client.delete(f"{API}/users/2", headers=BOB)
        allowed = await async_client.delete(f"{API}/users/2", headers=ADMIN)

        assert_error(denied, status.HTTP_403_FORBIDDEN, "ACCESS_DENIED")
        assert allowed.status_code == status.HTTP_204_NO_CONTENT


class TestActions:
    """Custom repository actions."""

    async def test_owner_publishes_post(self, async_client: AsyncClient, seed):
        response = await async_client.post(f"{API}/posts/5/actions/publish", headers=ALICE)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["action"] == "publish"
        assert body["data"] == {"id": 5, "is_published": True}

        public = await async_client.get(f"{API}/posts/5")
        assert public.status_code == status.HTTP_200_OK

    async def test_action_checks_ability_of_same_name(self, async_client: AsyncClient, seed):
        response = await async_client.post(f"{API}/posts/5/actions/publish", headers=BOB)

        assert_error(response, status.HTTP_403_FORBIDDEN, "ACCESS_DENIED")

    async def test_unknown_action(self, async_client: AsyncClient, seed):
        response = await async_client.post(f"{API}/posts/5/actions/archive", headers=ALICE)

        body = assert_error(response, status.HTTP_404_NOT_FOUND, "NOT_FOUND")
        assert body["details"] == {"repository": "posts", "action": "archive"}


class TestApplication:
    """Health check and middleware."""

    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "healthy"

    async def test_unknown_route_uses_error_shape(self, async_client: AsyncClient):
        response = await async_client.get("/missing")

        assert_error(response, status.HTTP_404_NOT_FOUND, "NOT_FOUND")

    async def test_request_id_header(self, async_client: AsyncClient, seed):
        response = await async_client.get(f"{API}/books")

        assert "X-Request-ID" in response.headers
        assert "X-Process-Time" in response.headers
