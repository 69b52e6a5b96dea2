# service/partner/enrollment.py
"""
수강 상태 머신 + 카운터 동기화.

상태 전이 (그 외는 InvalidTransition):
    enrolled    -> in_progress | dropped
    in_progress -> completed   | dropped
    completed, dropped: terminal

수강 생성/상태 변경은 row 변경과 파트너·코스 카운터 재계산을
하나의 트랜잭션으로 묶는다. 중간 실패 시 전부 rollback.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from crud.common import course as course_crud
from crud.partner import partner_core as partner_crud
from crud.partner import student as student_crud
from models.partner.partner_core import Partner
from models.partner.student import Enrollment
from schemas.enums import EnrollmentStatus
from service.partner.stats import completion_rate_from_counts

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[EnrollmentStatus, frozenset[EnrollmentStatus]] = {
    EnrollmentStatus.enrolled: frozenset({EnrollmentStatus.in_progress, EnrollmentStatus.dropped}),
    EnrollmentStatus.in_progress: frozenset({EnrollmentStatus.completed, EnrollmentStatus.dropped}),
    EnrollmentStatus.completed: frozenset(),
    EnrollmentStatus.dropped: frozenset(),
}

_OPEN_STATUSES = (EnrollmentStatus.enrolled.value, EnrollmentStatus.in_progress.value)


# ========= Exceptions =========
class EnrollmentRuleError(Exception):
    """수강 불변식 위반 (400)."""


class InvalidTransition(EnrollmentRuleError):
    def __init__(self, current: EnrollmentStatus, target: EnrollmentStatus):
        self.current = current
        self.target = target
        super().__init__(f"cannot change status from {current.value} to {target.value}")


class EnrollmentTargetNotFound(Exception):
    """학생/코스가 없거나 다른 파트너 소유 (404)."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_status(v: Any) -> EnrollmentStatus:
    return v if isinstance(v, EnrollmentStatus) else EnrollmentStatus(v)


# ==============================
# 전이 검증
# ==============================
def can_transition(current: Any, target: Any) -> bool:
    current, target = _as_status(current), _as_status(target)
    return target in ALLOWED_TRANSITIONS[current]


def validate_transition(current: Any, target: Any) -> None:
    current, target = _as_status(current), _as_status(target)
    if current == target:
        return
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransition(current, target)


def is_terminal(status: Any) -> bool:
    return not ALLOWED_TRANSITIONS[_as_status(status)]


# ==============================
# 카운터 재계산 (flush 만, commit 은 호출 측)
# ==============================
def sync_partner_counters(db: Session, partner_id: int) -> Partner:
    counts = student_crud.count_enrollments_by_status(db, partner_id=partner_id)
    return partner_crud.update_partner(
        db,
        partner_id,
        commit=False,
        courses_in_progress=sum(counts.get(s, 0) for s in _OPEN_STATUSES),
        completed_courses=counts.get(EnrollmentStatus.completed.value, 0),
        completion_rate=completion_rate_from_counts(counts),
    )


def sync_course_counter(db: Session, course_id: int) -> None:
    counts = student_crud.count_enrollments_by_status(db, course_id=course_id)
    active = sum(n for s, n in counts.items() if s != EnrollmentStatus.dropped.value)
    course_crud.update_course(db, course_id, commit=False, enrolled_students=active)


# ==============================
# 수강 등록
# ==============================
def enroll_student(
    db: Session,
    *,
    partner: Partner,
    student_id: int,
    course_id: int,
) -> Enrollment:
    student = student_crud.get_student(db, student_id)
    if student is None or student.partner_id != partner.id:
        raise EnrollmentTargetNotFound("student not found")

    course = course_crud.get_course(db, course_id)
    if course is None or not course.is_active:
        raise EnrollmentTargetNotFound("course not found")

    if student_crud.find_open_enrollment(db, student_id=student_id, course_id=course_id):
        raise student_crud.EnrollmentConflict("student already enrolled in this course")

    try:
        enrollment = student_crud.create_enrollment(
            db,
            student_id=student_id,
            course_id=course_id,
            partner_id=partner.id,
            status=EnrollmentStatus.enrolled.value,
            start_date=_utcnow(),
            commit=False,
        )
        sync_course_counter(db, course_id)
        sync_partner_counters(db, partner.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(enrollment)
    logger.info(
        "enrollment created id=%s partner=%s student=%s course=%s",
        enrollment.id, partner.id, student_id, course_id,
    )
    return enrollment


# ==============================
# 수강 수정 (PATCH)
# ==============================
def apply_update(db: Session, *, enrollment: Enrollment, changes: Mapping[str, Any]) -> Enrollment:
    """
    - status: 허용된 전이만. completed 로 가면 completion_date 자동 세팅
    - completion_date: completed 로 가는 요청에서만 허용
    - certificate_requested: 상태와 무관하게 허용 (수료 전 신청도 통과)
    - certificate_issued 가 true 인데 requested 를 false 로 되돌릴 수 없음
    """
    fields = dict(changes)
    current = _as_status(enrollment.status)
    target = _as_status(fields["status"]) if fields.get("status") is not None else current
    status_changed = target != current

    validate_transition(current, target)

    if "completion_date" in fields:
        if target != EnrollmentStatus.completed or not status_changed:
            raise EnrollmentRuleError("completion date can only be set when completing an enrollment")
    if status_changed and target == EnrollmentStatus.completed and fields.get("completion_date") is None:
        fields["completion_date"] = _utcnow()

    if fields.get("certificate_requested") is False and enrollment.certificate_issued:
        raise EnrollmentRuleError("certificate already issued")

    if "status" in fields:
        fields["status"] = target.value

    try:
        updated = student_crud.update_enrollment(db, enrollment.id, commit=False, **fields)
        if status_changed:
            sync_course_counter(db, updated.course_id)
            sync_partner_counters(db, updated.partner_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(updated)
    if status_changed:
        logger.info("enrollment %s status %s -> %s", updated.id, current.value, target.value)
    return updated


# ==============================
# 운영자: 수료증 발급
# ==============================
def issue_certificate(db: Session, enrollment_id: int) -> Enrollment:
    enrollment = student_crud.get_enrollment(db, enrollment_id)
    if enrollment is None:
        raise student_crud.EnrollmentNotFound(f"enrollment {enrollment_id} not found")
    if not enrollment.certificate_requested:
        raise EnrollmentRuleError("certificate was not requested")

    updated = student_crud.update_enrollment(db, enrollment_id, certificate_issued=True)
    logger.info("certificate issued for enrollment %s", enrollment_id)
    return updated


def find_partner_enrollment(db: Session, *, partner: Partner, enrollment_id: int) -> Optional[Enrollment]:
    """파트너 소유 수강만 반환. 다른 파트너 건은 None (404 처리)."""
    enrollment = student_crud.get_enrollment(db, enrollment_id)
    if enrollment is None or enrollment.partner_id != partner.id:
        return None
    return enrollment
