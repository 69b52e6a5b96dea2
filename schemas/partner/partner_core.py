# schemas/partner/partner_core.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from schemas.base import APIModel
from schemas.enums import Classification, DocumentStatus


# ==============================
# partners
# ==============================
class PartnerCreate(APIModel):
    # user_id 는 서버에서 로그인 유저로 채움, classification 은 운영자 전용
    company: str = Field(..., min_length=1)
    utm_tag: str = Field(..., min_length=1, max_length=64)


class PartnerUpdate(APIModel):
    company: Optional[str] = Field(None, min_length=1)


class PartnerResponse(APIModel):
    id: int
    user_id: str
    company: str
    classification: Classification
    utm_tag: str
    total_score: int
    completed_courses: int
    courses_in_progress: int
    completion_rate: Decimal
    created_at: datetime
    updated_at: datetime


class PartnerStatsResponse(APIModel):
    """
    대시보드/여정 화면용 서버 계산 통계.
    average_grade 가 None 이면 '성적 없음' (0점과 구분).
    tier_progress 는 등급별 고정값(33/66/100)이며 실제 진척도가 아님.
    """
    classification: Classification
    tier_progress: int
    next_tier: Optional[Classification] = None
    promotion_criteria: list[str] = []

    total_enrollments: int
    enrolled: int
    in_progress: int
    completed: int
    dropped: int
    completion_rate: Decimal
    average_progress: Decimal
    average_grade: Optional[Decimal] = None
    graded_count: int

    events_registered: int
    events_attended: int


# ==============================
# partner_documents
# ==============================
class PartnerDocumentCreate(APIModel):
    enrollment_id: int
    document_name: str = Field(..., min_length=1)
    file_url: str = Field(..., min_length=1)


class PartnerDocumentResponse(APIModel):
    id: int
    partner_id: int
    enrollment_id: int
    document_name: str
    file_url: str
    status: DocumentStatus
    upload_date: datetime
