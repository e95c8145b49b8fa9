# backend/models.py
from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    githubId: str = Field(unique=True, index=True, max_length=64)
    login: str = Field(max_length=255)
    name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    avatarUrl: Optional[str] = Field(default=None, max_length=512)
    htmlUrl: Optional[str] = Field(default=None, max_length=512)
    company: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    bio: Optional[str] = Field(default=None, max_length=1024)
    oauth_access_token: Optional[str] = Field(default=None, max_length=2048)
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)


class Note(SQLModel, table=True):
    __tablename__ = "notes"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=100)
    content: str = Field(sa_column=Column(Text, nullable=False))
    userId: int = Field(foreign_key="users.id", index=True)
    createdAt: datetime = Field(default_factory=utcnow, index=True)
    updatedAt: datetime = Field(default_factory=utcnow)


class QuickLink(SQLModel, table=True):
    __tablename__ = "quick_links"

    id: Optional[int] = Field(default=None, primary_key=True)
    userId: int = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=100)
    url: str = Field(max_length=2048)
    faviconUrl: Optional[str] = Field(default=None, max_length=512)
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)
