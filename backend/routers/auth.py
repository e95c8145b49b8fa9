# backend/routers/auth.py
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from auth import GitHubOAuthClient
from config import Settings
from database import get_session
from dependencies import get_github_client, get_settings
from errors import ProviderError
from logger import get_logger
from schemas import LoginUrlResponse
from services import account_service

router = APIRouter(tags=["auth"])
logger = get_logger(__name__)


@router.get("/login", response_model=LoginUrlResponse)
async def login(github: GitHubOAuthClient = Depends(get_github_client)):
    return LoginUrlResponse(authUrl=github.authorization_url(), message="Redirect to authUrl to sign in with GitHub")


@router.get("/callback", name="auth_callback")
async def auth_callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
    github: GitHubOAuthClient = Depends(get_github_client),
    settings: Settings = Depends(get_settings),
):
    def login_error(reason: str) -> RedirectResponse:
        return RedirectResponse(url=f"{settings.client_url}/login?{urlencode({'error': reason})}")

    if error:
        logger.warning("GitHub returned an OAuth error", provider_error=error, description=error_description)
        return login_error(error)
    if not code or not code.strip():
        logger.warning("GitHub callback without an authorization code")
        return login_error("no_auth_code")

    try:
        try:
            access_token = await github.exchange_code(code.strip())
        except ProviderError as e:
            logger.error("Could not obtain an access token", error_type=type(e).__name__)
            return login_error("no_token")

        try:
            profile = await github.fetch_profile(access_token)
        except ProviderError as e:
            logger.error("Could not fetch the GitHub profile", error_type=type(e).__name__)
            return login_error("no_user_info")

        db_user = await account_service.link_account(session, profile, access_token)
    except Exception:
        logger.exception("Unexpected error during GitHub callback")
        return login_error("server_error")

    logger.info("GitHub login completed", github_id=db_user.githubId, login=db_user.login)
    return RedirectResponse(url=f"{settings.client_url}/dashboard?{urlencode({'githubId': db_user.githubId})}")
