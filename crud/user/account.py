# crud/user/account.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.user.account import User


# ========= Exceptions =========
class UserError(Exception): ...
class UserConflict(UserError): ...


# IdP 가 매 로그인마다 덮어쓰는 필드
_MUTABLE_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# users
# =============================================================================
def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def get_by_email(db: Session, email: str) -> Optional[User]:
    stmt = select(User).where(User.email == email)
    return db.execute(stmt).scalars().first()


def upsert_user(db: Session, *, id: str, **fields) -> User:
    """
    id 가 없으면 insert, 있으면 넘겨받은 mutable 필드만 덮어쓰고 updated_at 갱신.
    같은 값으로 반복 호출해도 결과 동일 (updated_at 제외).
    """
    data = {k: v for k, v in fields.items() if k in _MUTABLE_FIELDS}

    obj = get_user(db, id)
    created = obj is None
    if created:
        obj = User(id=id, **data)
        db.add(obj)
    else:
        _apply(obj, data)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        existing = get_user(db, id) if created else None
        if existing is None:
            raise UserConflict("user conflicts with an existing account") from e
        # 동시 첫 로그인: 다른 요청이 먼저 insert 함 -> update 로 한 번만 재시도
        obj = existing
        _apply(obj, data)
        try:
            db.commit()
        except IntegrityError as e2:
            db.rollback()
            raise UserConflict("user conflicts with an existing account") from e2
    db.refresh(obj)
    return obj


def _apply(obj: User, data: dict) -> None:
    for field, value in data.items():
        setattr(obj, field, value)
    obj.updated_at = _utcnow()
