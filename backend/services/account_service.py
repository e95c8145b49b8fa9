# backend/services/account_service.py
import re
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from auth import GitHubProfile
from errors import AccountConflictError, InvalidUserDataError, UserNotFoundError
from logger import get_logger
from models import Note, QuickLink, User, utcnow

logger = get_logger(__name__)

GITHUB_ID_PATTERN = re.compile(r"[A-Za-z0-9-]{1,39}")


def normalize_github_id(github_id: Optional[str]) -> str:
    """Trim and validate a GitHub id taken from a path or payload."""
    trimmed = (github_id or "").strip()
    if not GITHUB_ID_PATTERN.fullmatch(trimmed):
        raise InvalidUserDataError(f"Invalid GitHub ID format: {github_id!r}")
    return trimmed


async def find_user_by_github_id(session: AsyncSession, github_id: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.githubId == github_id))
    return result.scalar_one_or_none()


def _apply_profile(user: User, profile: GitHubProfile, access_token: str) -> None:
    user.login = profile.login
    user.name = profile.name
    user.email = profile.email
    user.avatarUrl = profile.avatar_url
    user.htmlUrl = profile.html_url
    user.company = profile.company
    user.location = profile.location
    user.bio = profile.bio
    user.oauth_access_token = access_token
    user.updatedAt = utcnow()


async def _update_existing(session: AsyncSession, user: User, profile: GitHubProfile, access_token: str) -> User:
    _apply_profile(user, profile, access_token)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.info("Updated linked GitHub account", github_id=user.githubId, login=user.login)
    return user


async def link_account(session: AsyncSession, profile: GitHubProfile, access_token: str) -> User:
    """Create or update the User for a GitHub profile, keyed by the GitHub id.

    Every profile field and the access token are overwritten on an existing row.
    A concurrent first login for the same id loses the insert on the unique
    constraint; that request re-reads the winner's row and updates it once.
    """
    github_id = str(profile.id)
    try:
        db_user = await find_user_by_github_id(session, github_id)
        if db_user:
            return await _update_existing(session, db_user, profile, access_token)

        db_user = User(githubId=github_id, login=profile.login)
        _apply_profile(db_user, profile, access_token)
        db_user.createdAt = db_user.updatedAt
        session.add(db_user)
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.warning("Duplicate insert while linking account, retrying as update", github_id=github_id)
    except Exception:
        await session.rollback()
        raise
    else:
        await session.refresh(db_user)
        logger.info("Linked new GitHub account", github_id=github_id, login=db_user.login)
        return db_user

    try:
        existing = await find_user_by_github_id(session, github_id)
        if existing is None:
            raise AccountConflictError(github_id)
        return await _update_existing(session, existing, profile, access_token)
    except IntegrityError as e:
        await session.rollback()
        raise AccountConflictError(github_id) from e


async def get_user(session: AsyncSession, github_id: str) -> Optional[User]:
    return await find_user_by_github_id(session, normalize_github_id(github_id))


async def require_user(session: AsyncSession, github_id: str) -> User:
    user = await get_user(session, github_id)
    if user is None:
        logger.warning("User lookup failed", github_id=github_id)
        raise UserNotFoundError(github_id)
    return user


async def delete_user(session: AsyncSession, github_id: str) -> None:
    user = await require_user(session, github_id)
    await session.execute(delete(Note).where(Note.userId == user.id))
    await session.execute(delete(QuickLink).where(QuickLink.userId == user.id))
    await session.delete(user)
    await session.commit()
    logger.info("Deleted user", github_id=user.githubId, user_id=user.id)
