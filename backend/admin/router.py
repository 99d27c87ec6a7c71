# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Admin endpoints – user lifecycle management.

Every endpoint in this router is guarded by ``require_admin``.  A request
that carries a valid JWT but belongs to a ``user`` role will receive 403
before any business logic runs.

Users are never physically deleted.  ``DELETE /admin/users/{id}`` only
deactivates the account: owned vaults, authored items and vault grants keep
pointing at the row, and existing grants stay in place.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from core.logger import get_logger
from core.security import require_admin
from auth.service import set_password, validate_new_password
from models.user import User
from admin.schemas import (
    CreateUserRequest,
    ResetPasswordRequest,
    UpdateUserRequest,
    UserListResponse,
    UserRow,
)

router = APIRouter(prefix="/admin", tags=["admin"])

log = get_logger("admin")


def _load_user(db: Session, user_id: int) -> User:
    target = db.query(User).filter(User.id == user_id).first()
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return target


def _email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    q = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        q = q.filter(User.id != exclude_id)
    return q.first() is not None


# ---------------------------------------------------------------------------
# POST /admin/users  – create a new user
# ---------------------------------------------------------------------------


@router.post("/users", response_model=UserRow, status_code=status.HTTP_201_CREATED)
def create_user(
    body: CreateUserRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Create a user account.  The new user will have ``force_password_change``
    set to True so they must set their own password on first login.
    """
    if _email_taken(db, body.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists",
        )
    validate_new_password(body.password)

    user = User(
        email=body.email,
        full_name=body.full_name,
        role=body.role,
        is_active=True,
        force_password_change=True,  # must change on first login
    )
    set_password(user, body.password)
    db.add(user)
    db.commit()
    db.refresh(user)

    log.info("User %d created by admin %d (role=%s)", user.id, admin.id, body.role)
    return user


# ---------------------------------------------------------------------------
# GET /admin/users  – list all users
# ---------------------------------------------------------------------------


@router.get("/users", response_model=UserListResponse)
def list_users(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Return every user row (no password data – handled by the schema)."""
    users = db.query(User).order_by(User.id).all()
    return UserListResponse(users=users)


# ---------------------------------------------------------------------------
# GET /admin/users/{id}
# ---------------------------------------------------------------------------


@router.get("/users/{user_id}", response_model=UserRow)
def get_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _load_user(db, user_id)


# ---------------------------------------------------------------------------
# PUT /admin/users/{id}  – partial update (email, name, role, active flag)
# ---------------------------------------------------------------------------


@router.put("/users/{user_id}", response_model=UserRow)
def update_user(
    user_id: int,
    body: UpdateUserRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Guards:
    * An admin cannot change their own role (prevents accidental self-lockout).
    * An admin cannot deactivate their own account.
    * Email must stay unique.
    """
    changes = body.model_dump(exclude_unset=True)

    if user_id == admin.id:
        if "role" in changes and changes["role"] != admin.role:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot change your own role",
            )
        if changes.get("is_active") is False:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot disable yourself",
            )

    target = _load_user(db, user_id)

    if "email" in changes and _email_taken(db, changes["email"], exclude_id=user_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists",
        )

    for field, value in changes.items():
        setattr(target, field, value)
    db.commit()
    db.refresh(target)

    log.info("User %d updated by admin %d (%s)", user_id, admin.id, ", ".join(sorted(changes)))
    return target


# ---------------------------------------------------------------------------
# PUT /admin/users/{id}/reset-password  – admin resets another user's password
# ---------------------------------------------------------------------------


@router.put("/users/{user_id}/reset-password")
def reset_password(
    user_id: int,
    body: ResetPasswordRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Overwrite a user's password.  ``force_password_change`` is set back to
    True so the user must pick a new password on their next login.
    """
    target = _load_user(db, user_id)
    validate_new_password(body.new_password)

    set_password(target, body.new_password)
    target.force_password_change = True
    db.commit()

    log.info("Password of user %d reset by admin %d", user_id, admin.id)
    return {"detail": "Password reset successfully"}


# ---------------------------------------------------------------------------
# DELETE /admin/users/{id}  – soft delete (deactivate)
# ---------------------------------------------------------------------------


@router.delete("/users/{user_id}", response_model=UserRow)
def deactivate_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Set ``is_active = False``.  The user can no longer log in, existing
    tokens are rejected by ``get_current_user``, and no new vault grants can
    be issued to them.
    """
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot disable yourself",
        )

    target = _load_user(db, user_id)
    target.is_active = False
    db.commit()
    db.refresh(target)

    log.info("User %d deactivated by admin %d", user_id, admin.id)
    return target
