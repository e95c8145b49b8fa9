# backend/auth.py
"""GitHub OAuth authorization-code exchange.

Two outbound calls per login: code -> access token, token -> profile. Each is a
single attempt with a bounded timeout. Failures surface as ``ProviderError``
subclasses so the caller can tell a network problem from an unreadable body from
an error GitHub reported on purpose.
"""
from typing import Any, Optional

import httpx
from authlib.common.urls import add_params_to_uri
from authlib.integrations.httpx_client import AsyncOAuth2Client
from pydantic import BaseModel, ValidationError

from config import Settings
from errors import ProviderNetworkError, ProviderRejectedError, ProviderResponseError
from logger import async_log_timing, get_logger

logger = get_logger(__name__)

GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"
GITHUB_SCOPE = "read:user,user:email"


class GitHubProfile(BaseModel):
    id: int
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    html_url: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class GitHubOAuthClient:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client_id = settings.github_client_id
        self._client_secret = settings.github_client_secret
        self.timeout = settings.github_timeout_seconds
        self._transport = transport

    def _session(self, token: Optional[dict] = None) -> AsyncOAuth2Client:
        kwargs: dict[str, Any] = {"timeout": self.timeout}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return AsyncOAuth2Client(client_id=self.client_id, client_secret=self._client_secret, token=token, **kwargs)

    def authorization_url(self) -> str:
        return add_params_to_uri(GITHUB_AUTHORIZE_URL, [("client_id", self.client_id), ("scope", GITHUB_SCOPE)])

    async def exchange_code(self, code: str) -> str:
        payload = {"client_id": self.client_id, "client_secret": self._client_secret, "code": code}
        try:
            async with self._session() as client:
                async with async_log_timing("github token exchange", logger=logger):
                    response = await client.request(
                        "POST", GITHUB_TOKEN_URL, withhold_token=True,
                        json=payload, headers={"Accept": "application/json"},
                    )
        except httpx.HTTPError as e:
            logger.error("GitHub token request failed", error_type=type(e).__name__)
            raise ProviderNetworkError(f"Token request failed: {type(e).__name__}") from e

        body = _json_body(response)
        if isinstance(body, dict) and body.get("error"):
            logger.error(
                "GitHub rejected the authorization code",
                provider_error=body["error"], status_code=response.status_code,
            )
            raise ProviderRejectedError(body["error"], body.get("error_description"), response.status_code)
        if response.is_error:
            logger.error("GitHub token endpoint returned an error status", status_code=response.status_code)
            raise ProviderRejectedError(f"http_{response.status_code}", status_code=response.status_code)
        if not isinstance(body, dict):
            logger.error("GitHub token response is not a JSON object", status_code=response.status_code)
            raise ProviderResponseError("Token response is not a JSON object")

        access_token = body.get("access_token")
        if not access_token:
            logger.error("GitHub token response has no access token", status_code=response.status_code)
            raise ProviderResponseError("Token response has no access_token")
        return access_token

    async def fetch_profile(self, access_token: str) -> GitHubProfile:
        token = {"access_token": access_token, "token_type": "bearer"}
        try:
            async with self._session(token=token) as client:
                async with async_log_timing("github profile fetch", logger=logger):
                    response = await client.request(
                        "GET", GITHUB_USER_URL, headers={"Accept": "application/vnd.github.v3+json"},
                    )
        except httpx.HTTPError as e:
            logger.error("GitHub profile request failed", error_type=type(e).__name__)
            raise ProviderNetworkError(f"Profile request failed: {type(e).__name__}") from e

        body = _json_body(response)
        if response.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            logger.error("GitHub profile endpoint returned an error status", status_code=response.status_code)
            raise ProviderRejectedError(f"http_{response.status_code}", message, response.status_code)
        if not isinstance(body, dict):
            logger.error("GitHub profile response is empty or not JSON", status_code=response.status_code)
            raise ProviderResponseError("Profile response is empty or not a JSON object")

        try:
            return GitHubProfile.model_validate(body)
        except ValidationError as e:
            logger.error("GitHub profile payload is incomplete", error_count=e.error_count())
            raise ProviderResponseError("Profile response is missing required fields") from e
