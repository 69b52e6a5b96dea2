# schemas/common/course.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from schemas.base import APIModel
from schemas.enums import CourseLevel, CourseDocumentType


# ==============================
# courses
# ==============================
class CourseCreate(APIModel):
    name: str = Field(..., min_length=1)
    description: str
    duration: int = Field(..., gt=0)  # 시간
    instructors: list[str] = []
    requirements: list[str] = []
    image_url: Optional[str] = None
    level: CourseLevel = CourseLevel.beginner
    rating: Decimal = Field(Decimal("0"), ge=0, le=5)
    is_active: bool = True


class CourseResponse(APIModel):
    id: int
    name: str
    description: str
    duration: int
    instructors: list[str] = []
    requirements: list[str] = []
    image_url: Optional[str] = None
    level: CourseLevel
    rating: Decimal
    enrolled_students: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CourseStatsResponse(APIModel):
    course_id: int
    total_enrollments: int
    enrolled: int
    in_progress: int
    completed: int
    dropped: int
    completion_rate: Decimal
    average_progress: Decimal
    average_grade: Optional[Decimal] = None  # None = 등록된 성적 없음
    graded_count: int


# ==============================
# course_documents
# ==============================
class CourseDocumentCreate(APIModel):
    course_id: int
    name: str
    type: CourseDocumentType
    file_url: str
    is_required: bool = False


class CourseDocumentResponse(APIModel):
    id: int
    course_id: int
    name: str
    type: CourseDocumentType
    file_url: str
    is_required: bool
    created_at: datetime
