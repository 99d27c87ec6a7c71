# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Password generator endpoints.  Login is required but no vault access –
nothing here touches stored data.
"""

from fastapi import APIRouter, Depends, Query

from core.security import get_current_user
from models.user import User
from generator import service
from generator.schemas import GeneratedPasswordResponse, StrengthRequest, StrengthResponse

router = APIRouter(prefix="/generator", tags=["generator"])


# ---------------------------------------------------------------------------
# GET /generator/password
# ---------------------------------------------------------------------------


@router.get("/password", response_model=GeneratedPasswordResponse)
def generate_password(
    length: int = Query(16, ge=4, le=128),
    include_uppercase: bool = True,
    include_lowercase: bool = True,
    include_numbers: bool = True,
    include_symbols: bool = True,
    exclude_ambiguous: bool = False,
    current_user: User = Depends(get_current_user),  # must be logged in
):
    """Generate a password from the selected character sets (length 4-128)."""
    return service.generate_password(
        length=length,
        include_uppercase=include_uppercase,
        include_lowercase=include_lowercase,
        include_numbers=include_numbers,
        include_symbols=include_symbols,
        exclude_ambiguous=exclude_ambiguous,
    )


# ---------------------------------------------------------------------------
# POST /generator/strength
# ---------------------------------------------------------------------------
# POST so the candidate password travels in the body, not in URLs and logs.


@router.post("/strength", response_model=StrengthResponse)
def password_strength(
    body: StrengthRequest,
    current_user: User = Depends(get_current_user),
):
    return service.calculate_password_strength(body.password)
