# schemas/user/account.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.base import APIModel


class UserClaims(APIModel):
    """IdP 로그인 콜백에서 넘어오는 클레임 (sub → id)."""
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class UserResponse(APIModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TokenResponse(APIModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
