# service/partner/event.py
from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from crud.common import event as event_crud
from crud.partner import event as registration_crud
from models.common.event import EventRegistration
from models.partner.partner_core import Partner

logger = logging.getLogger(__name__)


# ========= Exceptions =========
class EventNotFound(Exception): ...
class EventFull(registration_crud.RegistrationConflict): ...


def _registered_count(db: Session, event_id: int) -> int:
    stmt = select(func.count(EventRegistration.id)).where(EventRegistration.event_id == event_id)
    return int(db.execute(stmt).scalar_one() or 0)


def register_partner(db: Session, *, partner: Partner, event_id: int) -> EventRegistration:
    """
    이벤트 신청.
    - 비활성/없는 이벤트: EventNotFound
    - 이미 신청: RegistrationConflict
    - 정원 초과: EventFull
    신청 row 와 registered_participants 는 한 트랜잭션에서 같이 반영.
    """
    event = event_crud.get_event(db, event_id)
    if event is None or not event.is_active:
        raise EventNotFound("event not found")

    if registration_crud.find_registration(db, partner_id=partner.id, event_id=event_id):
        raise registration_crud.RegistrationConflict("already registered for this event")

    current = _registered_count(db, event_id)
    if event.max_participants is not None and current >= event.max_participants:
        raise EventFull("event is full")

    try:
        registration = registration_crud.register_for_event(
            db, partner_id=partner.id, event_id=event_id, commit=False,
        )
        event.registered_participants = current + 1
        db.flush()
        db.commit()
    except registration_crud.RegistrationConflict:
        # register_for_event 에서 이미 rollback
        raise
    except Exception:
        db.rollback()
        raise

    db.refresh(registration)
    logger.info("partner %s registered for event %s", partner.id, event_id)
    return registration
