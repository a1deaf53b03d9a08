"""FastAPI dependencies that hand route functions their collaborators."""

from __future__ import annotations

from fastapi import Request

from backoffice.infrastructure.bootstrap import Repositories
from backoffice.infrastructure.config import Settings


def get_repositories(request: Request) -> Repositories:
    return request.app.state.repositories


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
