# crud/partner/partner_core.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.config import DEFAULT_CLASSIFICATION
from models.partner.partner_core import Partner, PartnerDocument


# ========= Exceptions =========
class PartnerError(Exception):
    ...


class PartnerNotFound(PartnerError):
    ...


class PartnerConflict(PartnerError):
    ...


class PartnerDocumentError(Exception):
    ...


# ========= Helpers =========
def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ========= Partner CRUD =========
def get_partner(db: Session, partner_id: int) -> Optional[Partner]:
    return db.get(Partner, partner_id)


def get_partner_by_user_id(db: Session, user_id: str) -> Optional[Partner]:
    """거의 모든 API 의 권한 기준점."""
    stmt = select(Partner).where(Partner.user_id == user_id).limit(1)
    return db.execute(stmt).scalar_one_or_none()


def get_partner_by_utm_tag(db: Session, utm_tag: str) -> Optional[Partner]:
    stmt = select(Partner).where(Partner.utm_tag == utm_tag).limit(1)
    return db.execute(stmt).scalar_one_or_none()


def create_partner(
    db: Session,
    *,
    user_id: str,
    company: str,
    utm_tag: str,
    classification: Optional[str] = None,
) -> Partner:
    """
    utm_tag 전역 유일, user 당 1개.
    classification 은 운영자 시드 용도, 기본 bronze.
    충돌 시 rollback 후 PartnerConflict (새 row 남지 않음).
    """
    obj = Partner(
        user_id=user_id,
        company=company,
        utm_tag=utm_tag,
    )
    obj.classification = classification or DEFAULT_CLASSIFICATION

    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise PartnerConflict("utm tag or user already registered") from e
    db.refresh(obj)
    return obj


def update_partner(db: Session, partner_id: int, *, commit: bool = True, **fields) -> Partner:
    """
    넘겨받은 필드만 반영 + updated_at 갱신.
    commit=False 면 flush 만 (상위 트랜잭션에서 commit).
    """
    obj = db.get(Partner, partner_id)
    if obj is None:
        raise PartnerNotFound(f"partner {partner_id} not found")

    for field, value in fields.items():
        if hasattr(obj, field):
            setattr(obj, field, value)
    obj.updated_at = _utcnow()

    try:
        if commit:
            db.commit()
            db.refresh(obj)
        else:
            db.flush()
    except IntegrityError as e:
        db.rollback()
        raise PartnerConflict("partner update violates a constraint") from e
    return obj


# ========= PartnerDocument CRUD =========
def create_partner_document(
    db: Session,
    *,
    partner_id: int,
    enrollment_id: int,
    document_name: str,
    file_url: str,
) -> PartnerDocument:
    obj = PartnerDocument(
        partner_id=partner_id,
        enrollment_id=enrollment_id,
        document_name=document_name,
        file_url=file_url,
    )
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise PartnerDocumentError("document references a missing enrollment") from e
    db.refresh(obj)
    return obj


def list_partner_documents(db: Session, partner_id: int) -> Sequence[PartnerDocument]:
    stmt = (
        select(PartnerDocument)
        .where(PartnerDocument.partner_id == partner_id)
        .order_by(PartnerDocument.upload_date.desc(), PartnerDocument.id.desc())
    )
    return db.execute(stmt).scalars().all()


def set_document_status(db: Session, document_id: int, status: str) -> Optional[PartnerDocument]:
    """운영자 심사 결과 반영. 없는 서류면 None."""
    obj = db.get(PartnerDocument, document_id)
    if obj is None:
        return None
    obj.status = status
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise PartnerDocumentError(f"invalid document status {status!r}") from e
    db.refresh(obj)
    return obj
