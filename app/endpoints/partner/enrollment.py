# app/endpoints/partner/enrollment.py
from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.deps import get_db, get_current_partner
from crud.partner import student as student_crud
from models.partner.partner_core import Partner
from schemas.partner.student import (
    EnrollmentCreate, EnrollmentUpdate, EnrollmentResponse, PartnerEnrollmentResponse,
)
from service.partner import enrollment as enrollment_service

router = APIRouter()

# grade 는 null 로 지울 수 있고 나머지는 null 이면 무시
_NULLABLE_PATCH_FIELDS = {"grade"}


@router.get("", response_model=List[PartnerEnrollmentResponse])
def list_enrollments(
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    return student_crud.list_partner_enrollments(db, partner.id)


@router.post("", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
def create_enrollment(
    data: EnrollmentCreate,
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    """partner_id / status(enrolled) / start_date 는 서버에서 세팅."""
    try:
        return enrollment_service.enroll_student(
            db,
            partner=partner,
            student_id=data.student_id,
            course_id=data.course_id,
        )
    except enrollment_service.EnrollmentTargetNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except student_crud.EnrollmentConflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.patch("/{enrollment_id}", response_model=EnrollmentResponse)
def update_enrollment(
    enrollment_id: int,
    data: EnrollmentUpdate,
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    enrollment = enrollment_service.find_partner_enrollment(db, partner=partner, enrollment_id=enrollment_id)
    if enrollment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="enrollment not found")

    changes = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in _NULLABLE_PATCH_FIELDS
    }
    try:
        return enrollment_service.apply_update(db, enrollment=enrollment, changes=changes)
    except enrollment_service.EnrollmentRuleError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except student_crud.EnrollmentConflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
