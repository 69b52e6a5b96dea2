# app/endpoints/common/course.py
from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.deps import get_db, get_current_user, get_current_partner
from crud.common import course as course_crud
from crud.partner import student as student_crud
from models.partner.partner_core import Partner
from schemas.common.course import CourseResponse, CourseStatsResponse, CourseDocumentResponse
from schemas.partner.student import CourseEnrollmentResponse, EnrollmentResponse
from service.partner.dashboard import build_course_stats

# 코스 카탈로그는 로그인만 필요 (파트너 등록 전에도 열람 가능)
router = APIRouter(dependencies=[Depends(get_current_user)])


def _get_course_or_404(db: Session, course_id: int):
    course = course_crud.get_course(db, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="course not found")
    return course


@router.get("", response_model=List[CourseResponse])
def list_courses(db: Session = Depends(get_db)):
    return course_crud.list_active_courses(db)


@router.get("/{course_id}", response_model=CourseResponse)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return _get_course_or_404(db, course_id)


@router.get("/{course_id}/enrollments", response_model=List[CourseEnrollmentResponse])
def list_course_enrollments(course_id: int, db: Session = Depends(get_db)):
    # TODO: 파트너 본인 수강만 보이도록 제한할지 운영 쪽과 정리 필요 (현재 전체 공개)
    _get_course_or_404(db, course_id)
    return student_crud.list_course_enrollments(db, course_id)


@router.get("/{course_id}/stats", response_model=CourseStatsResponse)
def get_course_stats(course_id: int, db: Session = Depends(get_db)):
    _get_course_or_404(db, course_id)
    return build_course_stats(db, course_id)


@router.get("/{course_id}/progress", response_model=EnrollmentResponse)
def get_my_course_progress(
    course_id: int,
    db: Session = Depends(get_db),
    partner: Partner = Depends(get_current_partner),
):
    """로그인 파트너의 해당 코스 최신 수강 건."""
    _get_course_or_404(db, course_id)
    enrollment = student_crud.get_enrollment_progress(db, partner_id=partner.id, course_id=course_id)
    if enrollment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="enrollment not found")
    return enrollment


@router.get("/{course_id}/documents", response_model=List[CourseDocumentResponse])
def list_course_documents(course_id: int, db: Session = Depends(get_db)):
    _get_course_or_404(db, course_id)
    return course_crud.list_course_documents(db, course_id)
