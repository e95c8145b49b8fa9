# backend/routers/notes.py
from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings
from database import get_session
from dependencies import get_settings
from schemas import MessageResponse, NoteCountResponse, NoteInfo, NoteListResponse, NoteRequest, NoteSearchResponse
from services import note_service

router = APIRouter(prefix="/api/notes", tags=["notes"])

# Row ids are BIGINT-sized
NoteId = Annotated[int, Path(ge=1, le=2**63 - 1)]


@router.post("/{githubId}", response_model=NoteInfo)
async def create_note(githubId: str, request: NoteRequest, session: AsyncSession = Depends(get_session)):
    return await note_service.create_note(session, githubId, request.title, request.content)


@router.get("/{githubId}", response_model=NoteListResponse)
async def list_notes(
    githubId: str,
    page: int = 0,
    size: int = note_service.DEFAULT_PAGE_SIZE,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    result = await note_service.list_notes(session, githubId, page, size, max_page_size=settings.max_page_size)
    return NoteListResponse.from_page(result)


@router.get("/{githubId}/search", response_model=NoteSearchResponse)
async def search_notes(githubId: str, keyword: str = "", session: AsyncSession = Depends(get_session)):
    notes = await note_service.search_notes(session, githubId, keyword)
    return NoteSearchResponse(notes=[NoteInfo.model_validate(n) for n in notes], totalCount=len(notes))


@router.get("/{githubId}/count", response_model=NoteCountResponse)
async def count_notes(githubId: str, session: AsyncSession = Depends(get_session)):
    return NoteCountResponse(count=await note_service.count_notes(session, githubId))


@router.get("/{githubId}/{noteId}", response_model=NoteInfo)
async def get_note(githubId: str, noteId: NoteId, session: AsyncSession = Depends(get_session)):
    return await note_service.get_note(session, githubId, noteId)


@router.put("/{githubId}/{noteId}", response_model=NoteInfo)
async def update_note(githubId: str, noteId: NoteId, request: NoteRequest, session: AsyncSession = Depends(get_session)):
    return await note_service.update_note(session, githubId, noteId, request.title, request.content)


@router.delete("/{githubId}/{noteId}", response_model=MessageResponse)
async def delete_note(githubId: str, noteId: NoteId, session: AsyncSession = Depends(get_session)):
    await note_service.delete_note(session, githubId, noteId)
    return MessageResponse(message="Note deleted successfully")
