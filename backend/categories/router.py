# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Category endpoints.  READ on the vault to list / view, WRITE to change.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from core.security import get_current_user
from models.user import User
from categories import service
from categories.schemas import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)

router = APIRouter(prefix="/categories", tags=["categories"])


# ---------------------------------------------------------------------------
# GET /categories?vault_id=  – categories of one vault, by name
# ---------------------------------------------------------------------------


@router.get("", response_model=CategoryListResponse)
def list_categories(
    vault_id: int = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CategoryListResponse(categories=service.list_vault_categories(db, vault_id, current_user.id))


# ---------------------------------------------------------------------------
# POST /categories
# ---------------------------------------------------------------------------


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.create_category(
        db, body.name, body.description, body.color, body.vault_id, current_user.id
    )


# ---------------------------------------------------------------------------
# GET /categories/{id}
# ---------------------------------------------------------------------------


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.get_category(db, category_id, current_user.id)


# ---------------------------------------------------------------------------
# PUT /categories/{id}
# ---------------------------------------------------------------------------


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    body: CategoryUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.update_category(db, category_id, body.model_dump(exclude_unset=True), current_user.id)


# ---------------------------------------------------------------------------
# DELETE /categories/{id}  – items keep existing, uncategorised
# ---------------------------------------------------------------------------


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service.delete_category(db, category_id, current_user.id)
