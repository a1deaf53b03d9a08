"""FastAPI routes for product categories."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from backoffice.application.add_category import AddCategoryHandler
from backoffice.infrastructure.api.auth import require_admin
from backoffice.infrastructure.api.dependencies import get_repositories
from backoffice.infrastructure.api.presenters import present
from backoffice.infrastructure.api.schemas import CreateCategoryRequest
from backoffice.infrastructure.bootstrap import Repositories

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("")
def list_categories(repos: Repositories = Depends(get_repositories)) -> dict:
    categories = sorted(repos.categories.list_all(), key=lambda c: c.name.lower())
    return {"categories": present(categories)}


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
def add_category(
    body: CreateCategoryRequest,
    repos: Repositories = Depends(get_repositories),
) -> dict:
    return {"category": present(AddCategoryHandler(repos.categories).handle(body.name))}
