# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Auth endpoints – login, logout, password change, current-user info.

Security notes
--------------
* Login answers with one message whether the email is unknown or the
  password is wrong, so accounts cannot be enumerated.
* Logout puts the token in the session store; ``get_current_user`` refuses
  it from then on, in every worker process.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from core.security import get_current_user, oauth2_scheme
from models.user import User
from auth import service
from auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    UserInfoResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = service.authenticate(db, body.email, body.password)
    token, expires_at = service.issue_token(user)
    return LoginResponse(
        access_token=token,
        token_type="bearer",
        expires_at=expires_at,
        force_password_change=user.force_password_change,
        user=UserInfoResponse.model_validate(user),
    )


# ---------------------------------------------------------------------------
# POST /auth/logout
# ---------------------------------------------------------------------------


@router.post("/logout")
def logout(
    token: str = Depends(oauth2_scheme),
    current_user: User = Depends(get_current_user),  # token must still be good
    db: Session = Depends(get_db),
):
    service.logout(db, token)
    return {"detail": "Logged out"}


# ---------------------------------------------------------------------------
# PUT /auth/change-password
# ---------------------------------------------------------------------------


@router.put("/change-password")
def change_password(
    body: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The new password must pass ``service.validate_new_password``."""
    service.change_password(db, current_user, body.old_password, body.new_password)
    return {"detail": "Password changed successfully"}


# ---------------------------------------------------------------------------
# GET /auth/me
# ---------------------------------------------------------------------------


@router.get("/me", response_model=UserInfoResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
