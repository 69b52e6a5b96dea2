# app/endpoints/partner/student.py
from __future__ import annotations
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from core.deps import get_db, get_current_partner
from crud.partner import student as student_crud
from models.partner.partner_core import Partner

from schemas.partner.student import (
    StudentCreate, StudentUpdate, StudentResponse,
)

router = APIRouter()


# ==============================
# Students (로그인 파트너 소유만)
# ==============================
@router.get("", response_model=List[StudentResponse])
def list_students(
    q: Optional[str] = Query(None, description="이름/이메일 검색"),
    limit: int = Query(200, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    return student_crud.list_students(
        db,
        partner_id=partner.id,
        q=q,
        limit=limit,
        offset=offset,
    )


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    data: StudentCreate,
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    try:
        return student_crud.create_student(
            db,
            partner_id=partner.id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            cpf=data.cpf,
            address=data.address,
        )
    except student_crud.StudentConflict as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: int,
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    obj = student_crud.get_student(db, student_id)
    if not obj or obj.partner_id != partner.id:
        raise HTTPException(status_code=404, detail="student not found")
    return obj


@router.patch("/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: int,
    data: StudentUpdate,
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    obj = student_crud.get_student(db, student_id)
    if not obj or obj.partner_id != partner.id:
        raise HTTPException(status_code=404, detail="student not found")
    return student_crud.update_student(db, student_id, **data.model_dump(exclude_unset=True, exclude_none=True))
