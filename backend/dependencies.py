# backend/dependencies.py
from fastapi import Request

from auth import GitHubOAuthClient
from config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_github_client(request: Request) -> GitHubOAuthClient:
    return request.app.state.github
