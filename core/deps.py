# core/deps.py
from __future__ import annotations

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from core.security import parse_access_token
from crud.partner.partner_core import get_partner_by_user_id
from database.session import get_db
from models.partner.partner_core import Partner
from models.user.account import User

_bearer = HTTPBearer(auto_error=False)

__all__ = ["get_db", "get_current_user", "get_current_partner"]


# ==============================
# 인증 스텁 (IdP 토큰 검증으로 교체 예정)
# Authorization: Bearer dev-access-{user_id}
# ==============================
def get_current_user(
    creds: HTTPAuthorizationCredentials = Security(_bearer),
    db: Session = Depends(get_db),
) -> User:
    user_id = parse_access_token(creds.credentials if creds else None)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
    return user


# ==============================
# 파트너 조회
# - 유저당 파트너 최대 1개
# - 파트너 등록 전이면 404
# ==============================
def get_current_partner(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Partner:
    partner = get_partner_by_user_id(db, current_user.id)
    if partner is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="partner not found")
    return partner
