# crud/common/event.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.config import UPCOMING_EVENTS_LIMIT
from models.common.event import Event


def get_event(db: Session, event_id: int) -> Optional[Event]:
    return db.get(Event, event_id)


def list_active_events(db: Session) -> Sequence[Event]:
    stmt = (
        select(Event)
        .where(Event.is_active.is_(True))
        .order_by(Event.event_date.asc(), Event.id.asc())
    )
    return db.execute(stmt).scalars().all()


def list_upcoming_events(
    db: Session,
    *,
    now: Optional[datetime] = None,
    limit: int = UPCOMING_EVENTS_LIMIT,
) -> Sequence[Event]:
    """활성 + event_date >= now, 가까운 순 최대 limit 개."""
    now = now or datetime.now(timezone.utc)
    stmt = (
        select(Event)
        .where(Event.is_active.is_(True), Event.event_date >= now)
        .order_by(Event.event_date.asc(), Event.id.asc())
        .limit(limit)
    )
    return db.execute(stmt).scalars().all()


def create_event(
    db: Session,
    *,
    title: str,
    description: str,
    event_date: datetime,
    duration: int,
    type: str,
    is_online: bool = True,
    max_participants: Optional[int] = None,
    is_active: bool = True,
) -> Event:
    obj = Event(
        title=title,
        description=description,
        event_date=event_date,
        duration=duration,
        type=type,
        is_online=is_online,
        max_participants=max_participants,
        is_active=is_active,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
