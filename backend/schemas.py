# backend/schemas.py
from typing import Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from services.note_service import NotePage


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# --- Requests ---
class NoteRequest(BaseModel): title: str = ""; content: str = ""
class QuickLinkRequest(BaseModel): title: str = ""; url: str = ""


# --- Responses ---
class MessageResponse(BaseModel): message: str
class LoginUrlResponse(BaseModel): authUrl: str; message: str
class NoteCountResponse(BaseModel): count: int


class NoteInfo(ORMModel):
    id: int
    title: str
    content: str
    createdAt: datetime
    updatedAt: datetime


class NoteListResponse(BaseModel):
    notes: list[NoteInfo]
    totalElements: int
    totalPages: int
    currentPage: int
    size: int

    @classmethod
    def from_page(cls, page: NotePage) -> "NoteListResponse":
        return cls(
            notes=[NoteInfo.model_validate(n) for n in page.items],
            totalElements=page.total, totalPages=page.total_pages,
            currentPage=page.page, size=page.size,
        )


class NoteSearchResponse(BaseModel):
    notes: list[NoteInfo]
    totalCount: int


class UserInfo(ORMModel):
    """Public view of a linked account. Never carries the OAuth token."""

    id: int
    githubId: str
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatarUrl: Optional[str] = None
    htmlUrl: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime


class QuickLinkInfo(ORMModel):
    id: int
    title: str
    url: str
    faviconUrl: Optional[str] = None
    createdAt: datetime


class ErrorDetail(BaseModel): code: str; message: str
class ErrorResponse(BaseModel): error: ErrorDetail
