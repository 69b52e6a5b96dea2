# schemas/partner/student.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import EmailStr, Field

from schemas.base import APIModel
from schemas.enums import EnrollmentStatus
from schemas.common.course import CourseResponse
from schemas.partner.partner_core import PartnerResponse


# ==============================
# students
# ==============================
class StudentCreate(APIModel):
    # partner_id 는 서버에서 로그인 파트너로 채움
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    cpf: Optional[str] = None
    address: Optional[str] = None


class StudentUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    cpf: Optional[str] = None
    address: Optional[str] = None


class StudentResponse(APIModel):
    id: int
    partner_id: int
    name: str
    email: str
    phone: Optional[str] = None
    cpf: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ==============================
# enrollments
# ==============================
class EnrollmentCreate(APIModel):
    # partner_id / status / start_date 는 서버에서 채움
    course_id: int
    student_id: int


class EnrollmentUpdate(APIModel):
    """
    PATCH 용. 보낸 필드만 반영 (exclude_unset).
    certificate_issued 는 운영자 전용이라 여기 없음.
    """
    status: Optional[EnrollmentStatus] = None
    progress: Optional[Decimal] = Field(None, ge=0, le=100)
    grade: Optional[Decimal] = Field(None, ge=0, le=10)
    completion_date: Optional[datetime] = None
    certificate_requested: Optional[bool] = None


class EnrollmentResponse(APIModel):
    id: int
    student_id: int
    course_id: int
    partner_id: int
    status: EnrollmentStatus
    progress: Decimal
    grade: Optional[Decimal] = None
    start_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    certificate_requested: bool
    certificate_issued: bool
    created_at: datetime
    updated_at: datetime


class PartnerEnrollmentResponse(EnrollmentResponse):
    """GET /enrollments: 파트너 기준 수강 + 코스 + 학생."""
    course: CourseResponse
    student: StudentResponse


class CourseEnrollmentResponse(EnrollmentResponse):
    """GET /courses/{id}/enrollments: 코스 기준 수강 + 학생 + 파트너."""
    student: StudentResponse
    partner: PartnerResponse
