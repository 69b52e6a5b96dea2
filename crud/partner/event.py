# crud/partner/event.py
from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager

from models.common.event import EventRegistration


# ========= Exceptions =========
class RegistrationError(Exception): ...
class RegistrationConflict(RegistrationError): ...


def register_for_event(
    db: Session,
    *,
    partner_id: int,
    event_id: int,
    commit: bool = True,
) -> EventRegistration:
    obj = EventRegistration(partner_id=partner_id, event_id=event_id)
    db.add(obj)
    try:
        if commit:
            db.commit()
            db.refresh(obj)
        else:
            db.flush()
    except IntegrityError as e:
        db.rollback()
        # UNIQUE(partner_id, event_id) 또는 FK 위반
        raise RegistrationConflict("already registered or event missing") from e
    return obj


def find_registration(db: Session, *, partner_id: int, event_id: int) -> Optional[EventRegistration]:
    stmt = (
        select(EventRegistration)
        .where(
            EventRegistration.partner_id == partner_id,
            EventRegistration.event_id == event_id,
        )
        .limit(1)
    )
    return db.execute(stmt).scalar_one_or_none()


def list_partner_event_registrations(db: Session, partner_id: int) -> Sequence[EventRegistration]:
    """파트너 이벤트 신청 목록 (event join), 최신 신청 순."""
    stmt = (
        select(EventRegistration)
        .join(EventRegistration.event)
        .options(contains_eager(EventRegistration.event))
        .where(EventRegistration.partner_id == partner_id)
        .order_by(EventRegistration.registration_date.desc(), EventRegistration.id.desc())
    )
    return db.execute(stmt).unique().scalars().all()


def set_attended(db: Session, registration_id: int, attended: bool = True) -> Optional[EventRegistration]:
    obj = db.get(EventRegistration, registration_id)
    if obj is None:
        return None
    obj.attended = attended
    db.commit()
    db.refresh(obj)
    return obj


def count_partner_registrations(db: Session, partner_id: int) -> tuple[int, int]:
    """(신청 수, 참석 수)."""
    stmt = select(
        func.count(EventRegistration.id),
        func.count(EventRegistration.id).filter(EventRegistration.attended.is_(True)),
    ).where(EventRegistration.partner_id == partner_id)
    total, attended = db.execute(stmt).one()
    return int(total or 0), int(attended or 0)
