# service/partner/dashboard.py
"""
대시보드/여정/코스 통계 응답 조립.
집계 자체는 service.partner.stats (순수 함수) 에 위임.
"""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from crud.partner import event as registration_crud
from models.partner.partner_core import Partner
from models.partner.student import Enrollment
from schemas.common.course import CourseStatsResponse
from schemas.partner.partner_core import PartnerStatsResponse
from service.partner import stats


def _enrollments(db: Session, **where) -> list[Enrollment]:
    stmt = select(Enrollment).filter_by(**where)
    return list(db.execute(stmt).scalars().all())


def build_partner_stats(db: Session, partner: Partner) -> PartnerStatsResponse:
    summary = stats.summarize(_enrollments(db, partner_id=partner.id))
    registered, attended = registration_crud.count_partner_registrations(db, partner.id)

    return PartnerStatsResponse(
        classification=partner.classification,
        tier_progress=stats.tier_progress(partner.classification),
        next_tier=stats.next_tier(partner.classification),
        promotion_criteria=stats.promotion_criteria(partner.classification),
        total_enrollments=summary.total,
        enrolled=summary.enrolled,
        in_progress=summary.in_progress,
        completed=summary.completed,
        dropped=summary.dropped,
        completion_rate=summary.completion_rate,
        average_progress=summary.average_progress,
        average_grade=summary.average_grade,
        graded_count=summary.graded_count,
        events_registered=registered,
        events_attended=attended,
    )


def build_course_stats(db: Session, course_id: int) -> CourseStatsResponse:
    summary = stats.summarize(_enrollments(db, course_id=course_id))
    return CourseStatsResponse(
        course_id=course_id,
        total_enrollments=summary.total,
        enrolled=summary.enrolled,
        in_progress=summary.in_progress,
        completed=summary.completed,
        dropped=summary.dropped,
        completion_rate=summary.completion_rate,
        average_progress=summary.average_progress,
        average_grade=summary.average_grade,
        graded_count=summary.graded_count,
    )
