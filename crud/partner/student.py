# crud/partner/student.py
from __future__ import annotations
from typing import Optional, Sequence
from datetime import datetime, timezone

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager

from models.partner.student import Student, Enrollment


# ========= Exceptions =========
class StudentError(Exception): ...
class StudentNotFound(StudentError): ...
class StudentConflict(StudentError): ...

class EnrollmentError(Exception): ...
class EnrollmentNotFound(EnrollmentError): ...
class EnrollmentConflict(EnrollmentError): ...


# ========= Helpers =========
def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ========= Student CRUD =========
def create_student(
    db: Session,
    *,
    partner_id: int,
    name: str,
    email: str,
    phone: Optional[str] = None,
    cpf: Optional[str] = None,
    address: Optional[str] = None,
) -> Student:
    obj = Student(
        partner_id=partner_id,
        name=name,
        email=email,
        phone=phone,
        cpf=cpf,
        address=address,
    )
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise StudentConflict("partner does not exist") from e
    db.refresh(obj)
    return obj


def get_student(db: Session, student_id: int) -> Optional[Student]:
    return db.get(Student, student_id)


def list_students(
    db: Session,
    *,
    partner_id: int,
    q: Optional[str] = None,  # 이름/이메일 검색
    limit: int = 200,
    offset: int = 0,
) -> Sequence[Student]:
    stmt = select(Student).where(Student.partner_id == partner_id)

    if q:
        like = f"%{q}%"
        stmt = stmt.where(Student.name.ilike(like) | Student.email.ilike(like))

    stmt = (
        stmt.order_by(Student.created_at.desc(), Student.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return db.execute(stmt).scalars().all()


def update_student(db: Session, student_id: int, **fields) -> Student:
    # partner_id 는 바꾸지 않는다 (학생 이관 불가)
    fields.pop("partner_id", None)

    obj = db.get(Student, student_id)
    if obj is None:
        raise StudentNotFound(f"student {student_id} not found")

    for field, value in fields.items():
        if hasattr(obj, field):
            setattr(obj, field, value)
    obj.updated_at = _utcnow()

    db.commit()
    db.refresh(obj)
    return obj


# ========= Enrollment CRUD =========
def create_enrollment(
    db: Session,
    *,
    student_id: int,
    course_id: int,
    partner_id: int,
    status: str = "enrolled",
    start_date: Optional[datetime] = None,
    commit: bool = True,
) -> Enrollment:
    """
    수강 row 만 추가. 카운터 갱신은 호출 측 책임
    (service.partner.enrollment 에서 같은 트랜잭션으로 처리).
    """
    obj = Enrollment(
        student_id=student_id,
        course_id=course_id,
        partner_id=partner_id,
        status=status,
        start_date=start_date or _utcnow(),
    )
    db.add(obj)
    try:
        if commit:
            db.commit()
            db.refresh(obj)
        else:
            db.flush()
    except IntegrityError as e:
        db.rollback()
        raise EnrollmentConflict("student, course or partner does not exist") from e
    return obj


def get_enrollment(db: Session, enrollment_id: int) -> Optional[Enrollment]:
    return db.get(Enrollment, enrollment_id)


def find_open_enrollment(db: Session, *, student_id: int, course_id: int) -> Optional[Enrollment]:
    """dropped 가 아닌 수강 건 (같은 학생/코스 중복 등록 방지용)."""
    stmt = (
        select(Enrollment)
        .where(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
            Enrollment.status != "dropped",
        )
        .limit(1)
    )
    return db.execute(stmt).scalar_one_or_none()


def get_enrollment_progress(db: Session, *, partner_id: int, course_id: int) -> Optional[Enrollment]:
    stmt = (
        select(Enrollment)
        .where(Enrollment.partner_id == partner_id, Enrollment.course_id == course_id)
        .order_by(Enrollment.created_at.desc(), Enrollment.id.desc())
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def list_partner_enrollments(db: Session, partner_id: int) -> Sequence[Enrollment]:
    """파트너 수강 목록 (course, student join), 최신 생성 순."""
    stmt = (
        select(Enrollment)
        .join(Enrollment.course)
        .join(Enrollment.student)
        .options(contains_eager(Enrollment.course), contains_eager(Enrollment.student))
        .where(Enrollment.partner_id == partner_id)
        .order_by(Enrollment.created_at.desc(), Enrollment.id.desc())
    )
    return db.execute(stmt).unique().scalars().all()


def list_course_enrollments(db: Session, course_id: int) -> Sequence[Enrollment]:
    """코스 기준 수강 목록 (student, partner join), 최신 생성 순."""
    stmt = (
        select(Enrollment)
        .join(Enrollment.student)
        .join(Enrollment.partner)
        .options(contains_eager(Enrollment.student), contains_eager(Enrollment.partner))
        .where(Enrollment.course_id == course_id)
        .order_by(Enrollment.created_at.desc(), Enrollment.id.desc())
    )
    return db.execute(stmt).unique().scalars().all()



def update_enrollment(db: Session, enrollment_id: int, *, commit: bool = True, **fields) -> Enrollment:
    """
    넘겨받은 필드만 반영 + updated_at 갱신. 상태 전이 검증은 하지 않는다
    (service.partner.enrollment.apply_update 에서 처리).
    """
    obj = db.get(Enrollment, enrollment_id)
    if obj is None:
        raise EnrollmentNotFound(f"enrollment {enrollment_id} not found")

    for field, value in fields.items():
        if hasattr(obj, field):
            setattr(obj, field, value)
    obj.updated_at = _utcnow()

    try:
        if commit:
            db.commit()
            db.refresh(obj)
        else:
            db.flush()
    except IntegrityError as e:
        db.rollback()
        raise EnrollmentConflict("enrollment update violates a constraint") from e
    return obj


def count_enrollments_by_status(
    db: Session,
    *,
    partner_id: Optional[int] = None,
    course_id: Optional[int] = None,
) -> dict[str, int]:
    """{status: count}. 카운터 재계산용."""
    stmt = select(Enrollment.status, func.count(Enrollment.id)).group_by(Enrollment.status)
    if partner_id is not None:
        stmt = stmt.where(Enrollment.partner_id == partner_id)
    if course_id is not None:
        stmt = stmt.where(Enrollment.course_id == course_id)
    return {status: int(n) for status, n in db.execute(stmt).all()}
