"""Test fixtures: a throwaway sqlite database per test and a fake GitHub."""
import json
import os
from typing import Any, Optional, Union

os.environ.setdefault("GITHUB_CLIENT_ID", "test-client-id")
os.environ.setdefault("GITHUB_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from auth import GitHubOAuthClient, GitHubProfile
from config import Settings
from database import create_db_and_tables
from main import create_app
from services import account_service

CLIENT_URL = "http://frontend.test"

PROFILE = {
    "id": 1001,
    "login": "octocat",
    "name": "The Octocat",
    "email": "octocat@github.com",
    "avatar_url": "https://avatars.githubusercontent.com/u/1001",
    "html_url": "https://github.com/octocat",
    "company": "GitHub",
    "location": "San Francisco",
    "bio": "Mascot",
}


class GitHubStub:
    """Handler for httpx.MockTransport standing in for github.com and api.github.com."""

    def __init__(self):
        self.token_status = 200
        self.token_body: Union[dict, str, None] = {"access_token": "gho_test_token", "token_type": "bearer", "scope": "read:user"}
        self.token_exc: Optional[Exception] = None
        self.profile_status = 200
        self.profile_body: Union[dict, str, None] = dict(PROFILE)
        self.profile_exc: Optional[Exception] = None
        self.requests: list[httpx.Request] = []

    @staticmethod
    def _respond(status: int, body: Any) -> httpx.Response:
        if body is None:
            return httpx.Response(status)
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/login/oauth/access_token":
            if self.token_exc is not None:
                raise self.token_exc
            return self._respond(self.token_status, self.token_body)
        if request.url.path == "/user":
            if self.profile_exc is not None:
                raise self.profile_exc
            return self._respond(self.profile_status, self.profile_body)
        return httpx.Response(404)

    def sent_json(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        github_client_id="test-client-id",
        github_client_secret="test-client-secret",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'growtime-test.db'}",
        client_url=CLIENT_URL,
        github_timeout_seconds=2.0,
        max_page_size=50,
    )


@pytest.fixture
def github_stub() -> GitHubStub:
    return GitHubStub()


@pytest.fixture
def github_client(settings, github_stub) -> GitHubOAuthClient:
    return GitHubOAuthClient(settings, transport=httpx.MockTransport(github_stub))


@pytest_asyncio.fixture
async def app(settings, github_client):
    app = create_app(settings, github_client=github_client)
    await create_db_and_tables(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def session(app):
    async with app.state.session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


def make_profile(**overrides) -> GitHubProfile:
    return GitHubProfile.model_validate({**PROFILE, **overrides})


@pytest.fixture
def seed_user(app):
    async def _seed(github_id: int = 1001, login: str = "octocat", token: str = "gho_seed"):
        async with app.state.session_maker() as session:
            return await account_service.link_account(session, make_profile(id=github_id, login=login), token)

    return _seed
