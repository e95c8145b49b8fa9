# backend/routers/users.py
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session
from errors import UserNotFoundError
from schemas import MessageResponse, QuickLinkInfo, QuickLinkRequest, UserInfo
from services import account_service, quick_link_service

router = APIRouter(prefix="/api/user", tags=["user"])

LinkId = Annotated[int, Path(ge=1, le=2**63 - 1)]


@router.get("/{githubId}", response_model=UserInfo)
async def get_profile(githubId: str, session: AsyncSession = Depends(get_session)):
    user = await account_service.get_user(session, githubId)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.delete("/{githubId}", response_model=MessageResponse)
async def delete_user(githubId: str, session: AsyncSession = Depends(get_session)):
    try:
        await account_service.delete_user(session, githubId)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    return MessageResponse(message="User deleted successfully")


# --- Quick links ---
@router.get("/{githubId}/quick-links", response_model=list[QuickLinkInfo])
async def list_quick_links(githubId: str, session: AsyncSession = Depends(get_session)):
    return await quick_link_service.list_links(session, githubId)


@router.post("/{githubId}/quick-links", response_model=QuickLinkInfo)
async def create_quick_link(githubId: str, request: QuickLinkRequest, session: AsyncSession = Depends(get_session)):
    return await quick_link_service.create_link(session, githubId, request.title, request.url)


@router.delete("/{githubId}/quick-links/{linkId}", response_model=MessageResponse)
async def delete_quick_link(githubId: str, linkId: LinkId, session: AsyncSession = Depends(get_session)):
    await quick_link_service.delete_link(session, githubId, linkId)
    return MessageResponse(message="Quick link deleted successfully")
