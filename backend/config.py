# backend/config.py
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./growtime.db"
DEFAULT_CLIENT_URL = "http://localhost:3000"


def _env_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Runtime configuration, built once at startup and passed down explicitly."""

    github_client_id: str = Field(min_length=1)
    github_client_secret: str = Field(min_length=1)
    database_url: str = DEFAULT_DATABASE_URL
    client_url: str = DEFAULT_CLIENT_URL
    github_timeout_seconds: float = Field(default=5.0, gt=0)
    max_page_size: int = Field(default=100, ge=1)
    debug: bool = False

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        load_dotenv(env_file)
        client_id = os.getenv("GITHUB_CLIENT_ID")
        client_secret = os.getenv("GITHUB_CLIENT_SECRET")
        if not client_id or not client_secret:
            raise ValueError("GITHUB_CLIENT_ID and GITHUB_CLIENT_SECRET must be set in .env file!")
        return cls(
            github_client_id=client_id,
            github_client_secret=client_secret,
            database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
            client_url=(os.getenv("CLIENT_URL") or DEFAULT_CLIENT_URL).rstrip("/"),
            github_timeout_seconds=float(os.getenv("GITHUB_TIMEOUT_SECONDS") or 5.0),
            max_page_size=int(os.getenv("MAX_PAGE_SIZE") or 100),
            debug=_env_bool(os.getenv("DEBUG")),
        )
