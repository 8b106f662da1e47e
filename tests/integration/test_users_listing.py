"""
User listing integration tests.

Verifies:
- Cursor pagination (next/prev links)
- Page and size handling
- Username prefix search
- Query validation messages
- Public single user lookups
"""
import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def roster(make_user) -> dict:
    """Five listed users and one archived user, keyed by username."""
    users = {
        name: make_user(name, email=f"{name}@example.com")
        for name in ("alpha", "bravo", "charlie", "delta", "echo")
    }
    users["zulu"] = make_user("zulu", roles={"archived": True})
    return users


def usernames(response) -> list:
    return [user["username"] for user in response.json()["users"]]


class TestListing:
    """Test GET /users."""

    def test_lists_non_archived_users_by_username(self, client: TestClient, roster: dict):
        response = client.get("/users")

        assert response.status_code == 200
        assert response.json()["message"] == "Users returned successfully!"
        assert usernames(response) == ["alpha", "bravo", "charlie", "delta", "echo"]

    def test_private_fields_are_hidden(self, client: TestClient, roster: dict):
        response = client.get("/users")

        for user in response.json()["users"]:
            assert "email" not in user
            assert "phone" not in user
            assert "tokens" not in user

    def test_empty_listing_has_empty_links(self, client: TestClient):
        response = client.get("/users")

        assert response.status_code == 200
        assert response.json()["users"] == []
        assert response.json()["links"] == {"next": "", "prev": ""}

    def test_size_limits_page(self, client: TestClient, roster: dict):
        response = client.get("/users", params={"size": 2})

        assert usernames(response) == ["alpha", "bravo"]

    def test_page_is_offset_in_pages(self, client: TestClient, roster: dict):
        response = client.get("/users", params={"size": 2, "page": 1})

        assert usernames(response) == ["charlie", "delta"]

    def test_links_point_at_page_edges(self, client: TestClient, roster: dict):
        response = client.get("/users", params={"size": 2, "page": 1})
        links = response.json()["links"]

        assert links["next"] == f"/users?size=2&next={roster['delta']['id']}"
        assert links["prev"] == f"/users?size=2&prev={roster['charlie']['id']}"

    def test_following_next_link(self, client: TestClient, roster: dict):
        first = client.get("/users", params={"size": 2})

        second = client.get(first.json()["links"]["next"])

        assert usernames(second) == ["charlie", "delta"]

    def test_following_prev_link(self, client: TestClient, roster: dict):
        response = client.get("/users", params={"size": 2, "next": roster["bravo"]["id"]})
        assert usernames(response) == ["charlie", "delta"]

        previous = client.get(response.json()["links"]["prev"])

        assert usernames(previous) == ["alpha", "bravo"]

    def test_last_page_keeps_next_link(self, client: TestClient, roster: dict):
        response = client.get("/users", params={"size": 2, "next": roster["delta"]["id"]})

        assert usernames(response) == ["echo"]
        assert response.json()["links"]["next"].endswith(roster["echo"]["id"])

    def test_search_is_username_prefix(self, client: TestClient, roster: dict):
        response = client.get("/users", params={"search": "ch"})

        assert usernames(response) == ["charlie"]

    def test_search_is_kept_in_links(self, client: TestClient, roster: dict):
        response = client.get("/users", params={"search": "a", "size": 1})

        assert usernames(response) == ["alpha"]
        assert response.json()["links"]["next"].startswith("/users?search=a&size=1&next=")

    def test_unknown_cursor_is_not_found(self, client: TestClient, roster: dict):
        response = client.get("/users", params={"next": "missing"})

        assert response.status_code == 404
        assert response.json()["message"] == "User doesn't exist"


class TestListingValidation:
    """Test query validation of GET /users."""

    @pytest.mark.parametrize("size", ["0", "101"])
    def test_size_out_of_range(self, client: TestClient, size: str):
        response = client.get("/users", params={"size": size})

        assert response.status_code == 400
        assert response.json()["message"] == "size must be in range 1-100"

    def test_size_must_be_number(self, client: TestClient):
        response = client.get("/users", params={"size": "many"})

        assert response.status_code == 400
        assert response.json()["message"] == '"size" must be a number'

    def test_unknown_param(self, client: TestClient):
        response = client.get("/users", params={"sort": "username"})

        assert response.status_code == 400
        assert response.json() == {
            "statusCode": 400,
            "error": "Bad Request",
            "message": "Invalid query param"
        }

    def test_next_and_prev_together(self, client: TestClient):
        response = client.get("/users", params={"next": "a", "prev": "b"})

        assert response.status_code == 400
        assert response.json()["message"] == "Both prev and next can't be passed"

    def test_page_and_next_together(self, client: TestClient):
        response = client.get("/users", params={"page": 1, "next": "a"})

        assert response.status_code == 400
        assert response.json()["message"] == "Both page and next can't be passed"

    def test_page_and_prev_together(self, client: TestClient):
        response = client.get("/users", params={"page": 1, "prev": "a"})

        assert response.status_code == 400
        assert response.json()["message"] == "Both page and prev can't be passed"


class TestSingleUser:
    """Test public lookups of a single user."""

    def test_get_by_id_query(self, client: TestClient, roster: dict):
        response = client.get("/users", params={"id": roster["bravo"]["id"]})

        assert response.status_code == 200
        assert response.json()["message"] == "User returned successfully!"
        assert response.json()["user"]["username"] == "bravo"
        assert "email" not in response.json()["user"]

    def test_get_by_id_query_missing(self, client: TestClient):
        response = client.get("/users", params={"id": "missing"})

        assert response.status_code == 404
        assert response.json()["message"] == "User doesn't exist"

    def test_get_by_username(self, client: TestClient, roster: dict):
        response = client.get("/users/charlie")

        assert response.status_code == 200
        assert response.json()["user"]["id"] == roster["charlie"]["id"]
        assert "email" not in response.json()["user"]

    def test_get_by_username_is_case_insensitive(self, client: TestClient, roster: dict):
        response = client.get("/users/Charlie")

        assert response.status_code == 200

    def test_get_by_username_missing(self, client: TestClient):
        response = client.get("/users/nobody")

        assert response.status_code == 404
        assert response.json() == {
            "statusCode": 404,
            "error": "Not Found",
            "message": "User doesn't exist"
        }

    def test_get_by_user_id_requires_auth(self, client: TestClient, roster: dict):
        response = client.get(f"/users/userId/{roster['alpha']['id']}")

        assert response.status_code == 401

    def test_get_by_user_id(self, client: TestClient, roster: dict, login):
        login(roster["echo"])

        response = client.get(f"/users/userId/{roster['alpha']['id']}")

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alpha"

    def test_username_availability(self, client: TestClient, roster: dict, login):
        login(roster["alpha"])

        taken = client.get("/users/isUsernameAvailable/bravo")
        free = client.get("/users/isUsernameAvailable/foxtrot")

        assert taken.json() == {"isUsernameAvailable": False}
        assert free.json() == {"isUsernameAvailable": True}
