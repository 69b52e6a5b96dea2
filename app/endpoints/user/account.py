# app/endpoints/user/account.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.deps import get_db, get_current_user
from core.security import issue_tokens
from crud.user import account as user_crud
from models.user.account import User
from schemas.user.account import TokenResponse, UserClaims, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# ==============================
# IdP 로그인 콜백 (스텁)
# - 클레임으로 유저 upsert
# - 개발용 토큰 발급
# ==============================
@router.post("/sync", response_model=TokenResponse)
def sync_user(
    claims: UserClaims,
    db: Session = Depends(get_db),
):
    try:
        user = user_crud.upsert_user(db, **claims.model_dump(exclude_unset=True))
    except user_crud.UserConflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    tokens = issue_tokens(user.id)
    logger.info("user synced id=%s", user.id)
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        user=UserResponse.model_validate(user),
    )


@router.get("/user", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user
