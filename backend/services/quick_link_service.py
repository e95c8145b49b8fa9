# backend/services/quick_link_service.py
from typing import Optional
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from errors import InvalidQuickLinkDataError, QuickLinkNotFoundError
from logger import get_logger
from models import QuickLink, utcnow
from services.account_service import require_user

logger = get_logger(__name__)

FAVICON_SERVICE_URL = "https://www.google.com/s2/favicons?domain={domain}&sz=64"


def favicon_url_for(url: str) -> Optional[str]:
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    return FAVICON_SERVICE_URL.format(domain=host) if host else None


async def list_links(session: AsyncSession, github_id: str) -> list[QuickLink]:
    owner = await require_user(session, github_id)
    result = await session.execute(
        select(QuickLink).where(QuickLink.userId == owner.id).order_by(col(QuickLink.createdAt), col(QuickLink.id))
    )
    return list(result.scalars().all())


async def create_link(session: AsyncSession, github_id: str, title: str, url: str) -> QuickLink:
    clean_title = (title or "").strip()
    clean_url = (url or "").strip()
    if not clean_title or len(clean_title) > 100:
        raise InvalidQuickLinkDataError("title: must be 1-100 characters")
    if not clean_url.startswith(("http://", "https://")):
        raise InvalidQuickLinkDataError("url: must start with http:// or https://")
    owner = await require_user(session, github_id)

    now = utcnow()
    link = QuickLink(
        userId=owner.id, title=clean_title, url=clean_url,
        faviconUrl=favicon_url_for(clean_url), createdAt=now, updatedAt=now,
    )
    session.add(link)
    await session.commit()
    await session.refresh(link)
    logger.info("Quick link created", github_id=owner.githubId, link_id=link.id)
    return link


async def delete_link(session: AsyncSession, github_id: str, link_id: int) -> None:
    owner = await require_user(session, github_id)
    result = await session.execute(select(QuickLink).where(QuickLink.id == link_id, QuickLink.userId == owner.id))
    link = result.scalar_one_or_none()
    if link is None:
        raise QuickLinkNotFoundError(link_id)
    await session.delete(link)
    await session.commit()
    logger.info("Quick link deleted", github_id=owner.githubId, link_id=link_id)
