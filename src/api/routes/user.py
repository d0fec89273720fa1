from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.depends import get_current_user

router = APIRouter(tags=["User"])


class UserResponse(BaseModel):
    """User details in response"""
    id: str
    email: str
    full_name: Optional[str] = None
    email_verified: bool
    account_type: str


class SessionResponse(BaseModel):
    """Current session in response"""
    id: str
    expires_at: str


class MeResponse(BaseModel):
    """GET /me response payload"""
    user: UserResponse
    session: SessionResponse


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MeResponse)
async def get_me(current_user: dict = Depends(get_current_user)):
    """
    Load Current User

    Returns the caller and their session. Tokens of revoked or expired
    sessions are rejected.

    Raises:
        - 401 Unauthorized: Invalid/expired JWT or revoked session
        - 403 Forbidden: User disabled
    """
    return current_user
