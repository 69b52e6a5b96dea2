# app/endpoints/partner/partner_core.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.deps import get_db, get_current_user, get_current_partner
from crud.partner import partner_core as partner_crud
from crud.partner import event as registration_crud
from models.partner.partner_core import Partner
from models.user.account import User
from schemas.common.event import EventRegistrationWithEvent
from schemas.partner.partner_core import (
    PartnerCreate, PartnerUpdate, PartnerResponse, PartnerStatsResponse,
    PartnerDocumentCreate, PartnerDocumentResponse,
)
from service.partner.dashboard import build_partner_stats
from service.partner.enrollment import find_partner_enrollment

logger = logging.getLogger(__name__)

router = APIRouter()


# ==============================
# Partner
# ==============================
@router.get("", response_model=PartnerResponse)
def get_my_partner(partner: Partner = Depends(get_current_partner)):
    return partner


@router.post("", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
def create_partner(
    data: PartnerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """classification 은 항상 bronze 로 시작 (변경은 운영자 스크립트)."""
    try:
        partner = partner_crud.create_partner(
            db,
            user_id=current_user.id,
            company=data.company,
            utm_tag=data.utm_tag,
        )
    except partner_crud.PartnerConflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info("partner created id=%s utm=%s user=%s", partner.id, partner.utm_tag, current_user.id)
    return partner


@router.patch("", response_model=PartnerResponse)
def update_my_partner(
    data: PartnerUpdate,
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        return partner
    return partner_crud.update_partner(db, partner.id, **fields)


@router.get("/stats", response_model=PartnerStatsResponse)
def get_my_stats(
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    return build_partner_stats(db, partner)


# ==============================
# Partner documents
# ==============================
@router.get("/documents", response_model=List[PartnerDocumentResponse])
def list_my_documents(
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    return partner_crud.list_partner_documents(db, partner.id)


@router.post("/documents", response_model=PartnerDocumentResponse, status_code=status.HTTP_201_CREATED)
def create_my_document(
    data: PartnerDocumentCreate,
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    if find_partner_enrollment(db, partner=partner, enrollment_id=data.enrollment_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="enrollment not found")
    try:
        return partner_crud.create_partner_document(
            db,
            partner_id=partner.id,
            enrollment_id=data.enrollment_id,
            document_name=data.document_name,
            file_url=data.file_url,
        )
    except partner_crud.PartnerDocumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# ==============================
# Partner event registrations
# ==============================
@router.get("/events", response_model=List[EventRegistrationWithEvent])
def list_my_event_registrations(
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    return registration_crud.list_partner_event_registrations(db, partner.id)
