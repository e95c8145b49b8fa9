# backend/services/note_service.py
"""Retrospective notes, always addressed through their owner's GitHub id.

A note id that exists under a different owner is reported exactly like a
missing one.
"""
import math
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from errors import InvalidNoteDataError, NoteNotFoundError
from logger import get_logger
from models import Note, User, utcnow
from services.account_service import require_user

logger = get_logger(__name__)

TITLE_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 5000
DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_PAGE_SIZE = 100


@dataclass
class NotePage:
    items: list[Note]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0


def validate_note_data(title: Optional[str], content: Optional[str]) -> tuple[str, str]:
    """Return trimmed title and content, or raise with a field-level message."""
    clean_title = (title or "").strip()
    clean_content = (content or "").strip()
    if not clean_title:
        raise InvalidNoteDataError("title: must not be empty")
    if len(clean_title) > TITLE_MAX_LENGTH:
        raise InvalidNoteDataError(f"title: must be at most {TITLE_MAX_LENGTH} characters")
    if not clean_content:
        raise InvalidNoteDataError("content: must not be empty")
    if len(clean_content) > CONTENT_MAX_LENGTH:
        raise InvalidNoteDataError(f"content: must be at most {CONTENT_MAX_LENGTH} characters")
    return clean_title, clean_content


def _newest_first(statement):
    return statement.order_by(col(Note.createdAt).desc(), col(Note.id).desc())


async def _owned_note(session: AsyncSession, owner: User, note_id: int) -> Note:
    result = await session.execute(select(Note).where(Note.id == note_id, Note.userId == owner.id))
    note = result.scalar_one_or_none()
    if note is None:
        logger.warning("Note lookup failed", github_id=owner.githubId, note_id=note_id)
        raise NoteNotFoundError(note_id)
    return note


async def create_note(session: AsyncSession, github_id: str, title: str, content: str) -> Note:
    clean_title, clean_content = validate_note_data(title, content)
    owner = await require_user(session, github_id)

    now = utcnow()
    note = Note(title=clean_title, content=clean_content, userId=owner.id, createdAt=now, updatedAt=now)
    session.add(note)
    await session.commit()
    await session.refresh(note)
    logger.info("Note created", github_id=owner.githubId, note_id=note.id)
    return note


async def list_notes(
    session: AsyncSession,
    github_id: str,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
) -> NotePage:
    if page < 0:
        raise InvalidNoteDataError("page: must be zero or greater")
    if size < 1 or size > max_page_size:
        raise InvalidNoteDataError(f"size: must be between 1 and {max_page_size}")
    owner = await require_user(session, github_id)

    total = await count_notes_for(session, owner)
    result = await session.execute(
        _newest_first(select(Note).where(Note.userId == owner.id)).offset(page * size).limit(size)
    )
    return NotePage(items=list(result.scalars().all()), total=total, page=page, size=size)


async def get_note(session: AsyncSession, github_id: str, note_id: int) -> Note:
    owner = await require_user(session, github_id)
    return await _owned_note(session, owner, note_id)


async def update_note(session: AsyncSession, github_id: str, note_id: int, title: str, content: str) -> Note:
    clean_title, clean_content = validate_note_data(title, content)
    owner = await require_user(session, github_id)
    note = await _owned_note(session, owner, note_id)

    note.title = clean_title
    note.content = clean_content
    note.updatedAt = utcnow()
    session.add(note)
    await session.commit()
    await session.refresh(note)
    logger.info("Note updated", github_id=owner.githubId, note_id=note.id)
    return note


async def delete_note(session: AsyncSession, github_id: str, note_id: int) -> None:
    owner = await require_user(session, github_id)
    note = await _owned_note(session, owner, note_id)
    await session.delete(note)
    await session.commit()
    logger.info("Note deleted", github_id=owner.githubId, note_id=note_id)


async def search_notes(session: AsyncSession, github_id: str, keyword: Optional[str]) -> list[Note]:
    owner = await require_user(session, github_id)
    statement = select(Note).where(Note.userId == owner.id)
    term = (keyword or "").strip()
    if term:
        statement = statement.where(
            or_(
                col(Note.title).contains(term, autoescape=True),
                col(Note.content).contains(term, autoescape=True),
            )
        )
    result = await session.execute(_newest_first(statement))
    return list(result.scalars().all())


async def count_notes_for(session: AsyncSession, owner: User) -> int:
    result = await session.execute(select(func.count()).select_from(Note).where(Note.userId == owner.id))
    return result.scalar_one()


async def count_notes(session: AsyncSession, github_id: str) -> int:
    owner = await require_user(session, github_id)
    return await count_notes_for(session, owner)
