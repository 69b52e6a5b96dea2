from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from crud.common import course as course_crud
from crud.partner import student as student_crud
from models.partner.student import Enrollment
from service.partner import enrollment as enrollment_service

from conftest import make_course, make_partner, make_student


@pytest.fixture
def setup(db_session):
    partner = make_partner(db_session)
    course = make_course(db_session)
    student = make_student(db_session, partner.id)
    return partner, course, student


def _enroll(db, partner, course, student):
    return enrollment_service.enroll_student(
        db, partner=partner, student_id=student.id, course_id=course.id,
    )


def test_enroll_creates_single_row_and_counters(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)

    rows = db_session.execute(
        select(Enrollment).where(Enrollment.student_id == student.id, Enrollment.course_id == course.id)
    ).scalars().all()
    assert len(rows) == 1
    assert enrollment.status == "enrolled"
    assert enrollment.progress == 0
    assert enrollment.partner_id == partner.id
    assert enrollment.start_date is not None
    assert enrollment.completion_date is None

    db_session.expire_all()
    assert partner.courses_in_progress == 1
    assert partner.completed_courses == 0
    assert course_crud.get_course(db_session, course.id).enrolled_students == 1


def test_duplicate_open_enrollment_conflicts(db_session, setup):
    partner, course, student = setup
    first = _enroll(db_session, partner, course, student)

    with pytest.raises(student_crud.EnrollmentConflict):
        _enroll(db_session, partner, course, student)

    # dropped 이후 재등록 가능
    enrollment_service.apply_update(db_session, enrollment=first, changes={"status": "dropped"})
    again = _enroll(db_session, partner, course, student)
    assert again.id != first.id

    total = db_session.execute(select(func.count(Enrollment.id))).scalar_one()
    assert total == 2


def test_enroll_foreign_student_not_found(db_session, setup):
    partner, course, _ = setup
    other = make_partner(db_session, user_id="user-2", utm_tag="OTHER-1")
    foreign_student = make_student(db_session, other.id, email="x@example.com")

    with pytest.raises(enrollment_service.EnrollmentTargetNotFound):
        _enroll(db_session, partner, course, foreign_student)


def test_enroll_inactive_course_not_found(db_session, setup):
    partner, _, student = setup
    inactive = make_course(db_session, name="Old course", is_active=False)

    with pytest.raises(enrollment_service.EnrollmentTargetNotFound):
        _enroll(db_session, partner, inactive, student)


def test_complete_flow_sets_completion_date_and_counters(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)

    enrollment = enrollment_service.apply_update(
        db_session, enrollment=enrollment, changes={"status": "in_progress", "progress": Decimal("60")},
    )
    assert enrollment.status == "in_progress"
    assert enrollment.completion_date is None

    enrollment = enrollment_service.apply_update(
        db_session, enrollment=enrollment, changes={"status": "completed", "progress": Decimal("100"), "grade": Decimal("9")},
    )
    assert enrollment.status == "completed"
    assert enrollment.completion_date is not None

    db_session.expire_all()
    assert partner.completed_courses == 1
    assert partner.courses_in_progress == 0
    assert partner.completion_rate == Decimal("100")


def test_skipping_in_progress_is_rejected(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)

    with pytest.raises(enrollment_service.InvalidTransition):
        enrollment_service.apply_update(db_session, enrollment=enrollment, changes={"status": "completed"})

    db_session.expire_all()
    assert student_crud.get_enrollment(db_session, enrollment.id).status == "enrolled"


def test_terminal_status_cannot_reopen(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)
    enrollment = enrollment_service.apply_update(db_session, enrollment=enrollment, changes={"status": "dropped"})

    with pytest.raises(enrollment_service.InvalidTransition):
        enrollment_service.apply_update(db_session, enrollment=enrollment, changes={"status": "in_progress"})


def test_completion_date_requires_completing(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)

    with pytest.raises(enrollment_service.EnrollmentRuleError):
        enrollment_service.apply_update(
            db_session,
            enrollment=enrollment,
            changes={"completion_date": datetime(2026, 1, 1, tzinfo=timezone.utc)},
        )


def test_supplied_completion_date_is_kept(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)
    enrollment = enrollment_service.apply_update(db_session, enrollment=enrollment, changes={"status": "in_progress"})

    when = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    enrollment = enrollment_service.apply_update(
        db_session, enrollment=enrollment, changes={"status": "completed", "completion_date": when},
    )
    assert enrollment.completion_date.replace(tzinfo=None) == when.replace(tzinfo=None)


def test_certificate_request_after_completion(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)
    enrollment = enrollment_service.apply_update(db_session, enrollment=enrollment, changes={"status": "in_progress"})
    enrollment = enrollment_service.apply_update(db_session, enrollment=enrollment, changes={"status": "completed"})

    enrollment = enrollment_service.apply_update(
        db_session, enrollment=enrollment, changes={"certificate_requested": True},
    )
    assert enrollment.certificate_requested is True
    assert enrollment.certificate_issued is False


def test_certificate_request_while_enrolled_is_accepted(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)

    enrollment = enrollment_service.apply_update(
        db_session, enrollment=enrollment, changes={"certificate_requested": True},
    )
    assert enrollment.status == "enrolled"
    assert enrollment.certificate_requested is True


def test_issue_certificate_requires_request(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)

    with pytest.raises(enrollment_service.EnrollmentRuleError):
        enrollment_service.issue_certificate(db_session, enrollment.id)

    enrollment_service.apply_update(db_session, enrollment=enrollment, changes={"certificate_requested": True})
    issued = enrollment_service.issue_certificate(db_session, enrollment.id)
    assert issued.certificate_issued is True

    with pytest.raises(enrollment_service.EnrollmentRuleError):
        enrollment_service.apply_update(db_session, enrollment=issued, changes={"certificate_requested": False})


def test_storage_rejects_issued_without_requested(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)

    with pytest.raises(student_crud.EnrollmentConflict):
        student_crud.update_enrollment(db_session, enrollment.id, certificate_issued=True)


def test_storage_rejects_completed_without_date(db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)

    with pytest.raises(student_crud.EnrollmentConflict):
        student_crud.update_enrollment(db_session, enrollment.id, status="completed")


def test_counters_match_rows_across_partners(db_session, setup):
    partner, course, student = setup
    second_student = make_student(db_session, partner.id, name="Maria", email="maria@example.com")
    other_course = make_course(db_session, name="Spraying")

    e1 = _enroll(db_session, partner, course, student)
    _enroll(db_session, partner, other_course, second_student)
    e1 = enrollment_service.apply_update(db_session, enrollment=e1, changes={"status": "in_progress"})
    enrollment_service.apply_update(db_session, enrollment=e1, changes={"status": "completed"})

    db_session.expire_all()
    counts = student_crud.count_enrollments_by_status(db_session, partner_id=partner.id)
    assert counts == {"completed": 1, "enrolled": 1}
    assert partner.completed_courses == 1
    assert partner.courses_in_progress == 1
    assert partner.completion_rate == Decimal("50")


# ==============================
# 트랜잭션: 카운터 갱신 실패 시 전부 rollback
# ==============================
def _fail_partner_sync(db, partner_id):
    raise RuntimeError("counter sync failed")


def test_enroll_rolls_back_when_counter_sync_fails(monkeypatch, db_session, setup):
    partner, course, student = setup
    monkeypatch.setattr(enrollment_service, "sync_partner_counters", _fail_partner_sync)

    with pytest.raises(RuntimeError):
        _enroll(db_session, partner, course, student)

    db_session.expire_all()
    assert db_session.execute(select(func.count(Enrollment.id))).scalar_one() == 0
    assert course_crud.get_course(db_session, course.id).enrolled_students == 0
    assert partner.courses_in_progress == 0


def test_status_change_rolls_back_when_counter_sync_fails(monkeypatch, db_session, setup):
    partner, course, student = setup
    enrollment = _enroll(db_session, partner, course, student)
    monkeypatch.setattr(enrollment_service, "sync_partner_counters", _fail_partner_sync)

    with pytest.raises(RuntimeError):
        enrollment_service.apply_update(db_session, enrollment=enrollment, changes={"status": "dropped"})

    db_session.expire_all()
    assert student_crud.get_enrollment(db_session, enrollment.id).status == "enrolled"
    # course 카운터는 partner 보다 먼저 갱신되지만 함께 되돌려져야 함
    assert course_crud.get_course(db_session, course.id).enrolled_students == 1
    assert partner.courses_in_progress == 1
