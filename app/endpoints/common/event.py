# app/endpoints/common/event.py
from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.deps import get_db, get_current_user, get_current_partner
from crud.common import event as event_crud
from crud.partner import event as registration_crud
from models.partner.partner_core import Partner
from schemas.common.event import EventResponse, EventRegistrationResponse
from service.partner import event as event_service

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[EventResponse])
def list_events(db: Session = Depends(get_db)):
    return event_crud.list_active_events(db)


@router.get("/upcoming", response_model=List[EventResponse])
def list_upcoming_events(db: Session = Depends(get_db)):
    return event_crud.list_upcoming_events(db)


@router.post("/{event_id}/register", response_model=EventRegistrationResponse, status_code=status.HTTP_201_CREATED)
def register_event(
    event_id: int,
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    try:
        return event_service.register_partner(db, partner=partner, event_id=event_id)
    except event_service.EventNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except registration_crud.RegistrationConflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
