# schemas/common/event.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.base import APIModel
from schemas.enums import EventType


class EventCreate(APIModel):
    title: str = Field(..., min_length=1)
    description: str
    event_date: datetime
    duration: int = Field(..., gt=0)  # 분
    type: EventType
    is_online: bool = True
    max_participants: Optional[int] = Field(None, gt=0)
    is_active: bool = True


class EventResponse(APIModel):
    id: int
    title: str
    description: str
    event_date: datetime
    duration: int
    type: EventType
    is_online: bool
    max_participants: Optional[int] = None
    registered_participants: int
    is_active: bool
    created_at: datetime


class EventRegistrationResponse(APIModel):
    id: int
    partner_id: int
    event_id: int
    registration_date: datetime
    attended: bool


class EventRegistrationWithEvent(EventRegistrationResponse):
    event: EventResponse
