"""Pytest configuration and global fixtures for Sisyflow tests.

This file provides test fixtures that are automatically available to all tests.
"""

import uuid
import pytest
from typing import Any, Callable, Dict, List

from fastapi.testclient import TestClient

from sisyflow.core import config
from sisyflow.core.config import get_settings, reload_settings
from sisyflow.core.database import get_db, Profile
from sisyflow.c1_database_session.database_manager import (
    DATABASE_ENV_VAR,
    get_database_manager,
    reset_database_managers,
)
from sisyflow.c2_auth_service.security import create_session_token
from sisyflow.server import create_app
from tests.fixtures.mock_llm_provider import MockLLMProvider
from tests.fixtures.users import PASSWORD_HASH


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep real credentials and .env values out of the tests.

    Runs for every test so settings never leak between tests.
    """
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    monkeypatch.setenv("DEBUG", "true")
    reload_settings()
    yield
    # Rebuilt lazily from the restored environment
    config.settings = None


@pytest.fixture
def mock_llm_provider():
    """Provide a fresh mock LLM provider for each test.

    Usage:
        def test_something(mock_llm_provider):
            mock_llm_provider.suggestions = [...]

    Returns:
        MockLLMProvider instance
    """
    provider = MockLLMProvider()
    yield provider
    provider.reset()


@pytest.fixture
def test_db(tmp_path, monkeypatch):
    """Point every database session at a fresh SQLite file.

    Returns:
        Path of the database file
    """
    db_path = str(tmp_path / "sisyflow_test.db")
    monkeypatch.setenv(DATABASE_ENV_VAR, db_path)
    get_database_manager(db_path).create_tables()
    yield db_path
    reset_database_managers()


@pytest.fixture
def make_user(test_db) -> Callable[..., Dict[str, Any]]:
    """Factory creating profiles directly in the database.

    Usage:
        admin = make_user("admin", role="ADMIN")

    Returns:
        Callable returning the created profile as a dict
    """

    def _make_user(username: str, role: str = "USER", email: str = None) -> Dict[str, Any]:
        with get_db() as db:
            profile = Profile(
                id=str(uuid.uuid4()),
                email=email or f"{username.lower()}@example.com",
                username=username,
                password_hash=PASSWORD_HASH,
                role=role,
            )
            db.add(profile)
            db.flush()
            return profile.to_dict()

    return _make_user


@pytest.fixture
def admin_user(make_user):
    return make_user("admin", role="ADMIN")


@pytest.fixture
def regular_user(make_user):
    return make_user("alice")


@pytest.fixture
def other_user(make_user):
    return make_user("bob")


@pytest.fixture
def app(test_db, mock_llm_provider):
    """FastAPI app wired to the test database and the mock LLM provider."""
    application = create_app(get_settings())
    application.state.server_state.llm_provider = mock_llm_provider
    return application


@pytest.fixture
def client(app):
    """Anonymous test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client_for(app):
    """Factory returning a TestClient carrying a session cookie for a user.

    Each call returns a separate client with its own cookie jar, so tests
    can act as several users at once.
    """
    clients: List[TestClient] = []

    def _client_for(user: Dict[str, Any]) -> TestClient:
        test_client = TestClient(app)
        test_client.__enter__()
        token = create_session_token({"sub": user["id"], "role": user["role"]})
        test_client.cookies.set(get_settings().auth.session_cookie_name, token)
        clients.append(test_client)
        return test_client

    yield _client_for

    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture
def admin_client(client_for, admin_user):
    return client_for(admin_user)


@pytest.fixture
def user_client(client_for, regular_user):
    return client_for(regular_user)


@pytest.fixture
def browser_for(app):
    """Factory for signed-in API clients, one per simulated browser.

    Signs in through ``/api/auth/sign-in`` so the session cookie is the one
    the server issued.

    Usage:
        admin_api = browser_for(admin_user)

    Returns:
        Callable returning a SisyflowClient for the given user
    """
    from sisyflow.client.api_client import SisyflowClient
    from tests.fixtures.users import TEST_PASSWORD

    clients: List[TestClient] = []

    def _browser_for(user: Dict[str, Any]) -> SisyflowClient:
        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        api = SisyflowClient(http_client=test_client)
        api.sign_in(user["email"], TEST_PASSWORD)
        return api

    yield _browser_for

    for test_client in clients:
        test_client.__exit__(None, None, None)
