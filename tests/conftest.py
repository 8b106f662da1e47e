"""Test configuration and fixtures for Userbase.

This module provides isolated test environments:
- Temporary database (SQLite)
- Users and super users created straight through the repositories
- Auth cookies issued with the real token service
"""
import sys
from pathlib import Path
from typing import Callable, Dict, Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

# Ensure userbase is importable
sys.path.insert(0, str(Path(__file__).parent.parent))


LONG_TEXT = (
    "I have been writing software for a few years and enjoy building tools "
    "that other people rely on every day."
)


@pytest.fixture(scope="function")
def isolated_environment(tmp_path: Path) -> Dict:
    """Create completely isolated environment for a single test.

    Returns:
        Dict with paths: db_path, base_dir
    """
    return {
        "db_path": tmp_path / "test.db",
        "base_dir": tmp_path
    }


@pytest.fixture(scope="function")
def patched_config(isolated_environment: Dict, monkeypatch):
    """Point the configuration at the isolated database."""
    import userbase.config as config

    monkeypatch.setattr(config, "DATABASE_PATH", isolated_environment["db_path"])
    monkeypatch.setattr(config, "BASE_DIR", isolated_environment["base_dir"])

    yield isolated_environment


@pytest.fixture(scope="function")
def fresh_database(patched_config: Dict):
    """Initialize fresh database with schema for each test."""
    from userbase.database import close_db, init_db

    # Reset any existing thread-local connection
    close_db()

    init_db()

    yield patched_config["db_path"]

    close_db()


@pytest.fixture(scope="function")
def db(fresh_database: Path):
    """Connection to the test database for arranging and asserting state."""
    from userbase.database import get_db
    return get_db()


@pytest.fixture(scope="function")
def client(fresh_database: Path) -> Generator[TestClient, None, None]:
    """Create test client with fresh isolated environment.

    Usage:
        def test_something(client):
            response = client.get("/users")
            assert response.status_code == 200
    """
    from userbase.main import app

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_user(db) -> Callable[..., Dict]:
    """Factory creating users directly in the database.

    Usage:
        user = make_user("ankur", roles={"super_user": True})
    """
    from userbase.infrastructure.repositories import UserRepository

    def _make_user(username: str = None, **fields) -> Dict:
        repo = UserRepository(db)
        data = {"incompleteUserDetails": False, **fields}
        if username is not None:
            data["username"] = username
        result = repo.add_or_update(data)
        return repo.get_by_id(result["userId"])

    return _make_user


@pytest.fixture(scope="function")
def test_user(make_user) -> Dict:
    """A regular member with private fields set."""
    return make_user(
        "ankur",
        first_name="Ankur",
        last_name="Narkhede",
        github_id="ankur1337",
        phone="1234567890",
        email="ankur@example.com",
        tokens={"githubAccessToken": "secret"},
        roles={"member": True},
    )


@pytest.fixture(scope="function")
def super_user(make_user) -> Dict:
    return make_user("nikhil", first_name="Nikhil", roles={"super_user": True})


def login_as(client: TestClient, user: Dict, issued_at: int = None) -> TestClient:
    """Put an auth cookie for ``user`` on the client."""
    from userbase import config
    from userbase.application.services import AuthService

    token = AuthService().generate_token(user["id"], issued_at=issued_at)
    client.cookies.set(config.COOKIE_NAME, token)
    return client


@pytest.fixture(scope="function")
def login(client: TestClient) -> Callable[..., TestClient]:
    """Switch the client to another user.

    Usage:
        login(super_user)
        client.patch(f"/users/{user_id}", json={"id": diff_id})
    """
    def _login(user: Dict, issued_at: int = None) -> TestClient:
        return login_as(client, user, issued_at=issued_at)

    return _login


@pytest.fixture(scope="function")
def authenticated_client(client: TestClient, test_user: Dict) -> TestClient:
    """Client authenticated as test_user."""
    return login_as(client, test_user)


@pytest.fixture(scope="function")
def super_user_client(client: TestClient, super_user: Dict) -> TestClient:
    """Client authenticated as super_user."""
    return login_as(client, super_user)


@pytest.fixture(scope="function")
def identity_client(client: TestClient) -> Mock:
    """Replace the identity service client with a mock."""
    from userbase.dependencies import get_identity_client
    from userbase.main import app

    mock = Mock()
    mock.request_verification.return_value = True
    app.dependency_overrides[get_identity_client] = lambda: mock
    return mock


@pytest.fixture(scope="function")
def discord_client(client: TestClient) -> Mock:
    """Replace the Discord bot client with a mock."""
    from userbase.dependencies import get_discord_client
    from userbase.main import app

    mock = Mock()
    mock.get_members.return_value = []
    app.dependency_overrides[get_discord_client] = lambda: mock
    return mock


@pytest.fixture(scope="function")
def join_payload() -> Dict:
    """Valid onboarding form."""
    return {
        "firstName": "Ankur",
        "lastName": "Narkhede",
        "city": "Pune",
        "state": "Maharashtra",
        "country": "India",
        "foundFrom": "twitter",
        "introduction": LONG_TEXT,
        "skills": "python, sql",
        "college": "COEP",
        "forFun": LONG_TEXT,
        "funFact": LONG_TEXT,
        "whyRds": LONG_TEXT,
        "flowSkills": ["backend"],
        "numberOfHours": 10,
    }
