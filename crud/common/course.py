# crud/common/course.py
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from models.common.course import Course, CourseDocument


# ========= Exceptions =========
class CourseError(Exception): ...
class CourseNotFound(CourseError): ...


# ==============================
# Course
# ==============================
def get_course(db: Session, course_id: int) -> Optional[Course]:
    """is_active 와 무관하게 조회 (비활성화된 코스 상세도 열람 가능)."""
    return db.get(Course, course_id)


def list_active_courses(db: Session) -> Sequence[Course]:
    stmt = (
        select(Course)
        .where(Course.is_active.is_(True))
        .order_by(Course.name.asc(), Course.id.asc())
    )
    return db.execute(stmt).scalars().all()


def create_course(
    db: Session,
    *,
    name: str,
    description: str,
    duration: int,
    instructors: Optional[List[str]] = None,
    requirements: Optional[List[str]] = None,
    image_url: Optional[str] = None,
    level: str = "beginner",
    rating: Decimal = Decimal("0"),
    is_active: bool = True,
) -> Course:
    obj = Course(
        name=name,
        description=description,
        duration=duration,
        instructors=list(instructors or []),
        requirements=list(requirements or []),
        image_url=image_url,
        level=level,
        rating=rating,
        is_active=is_active,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def update_course(db: Session, course_id: int, *, commit: bool = True, **fields) -> Course:
    obj = db.get(Course, course_id)
    if obj is None:
        raise CourseNotFound(f"course {course_id} not found")

    for field, value in fields.items():
        if hasattr(obj, field):
            setattr(obj, field, value)

    if commit:
        db.commit()
        db.refresh(obj)
    else:
        db.flush()
    return obj


def deactivate_course(db: Session, course_id: int) -> Course:
    # hard delete 없음
    return update_course(db, course_id, is_active=False)


# ==============================
# CourseDocument
# ==============================
def list_course_documents(db: Session, course_id: int) -> Sequence[CourseDocument]:
    stmt = (
        select(CourseDocument)
        .where(CourseDocument.course_id == course_id)
        .order_by(CourseDocument.is_required.desc(), CourseDocument.id.asc())
    )
    return db.execute(stmt).scalars().all()


def create_course_document(
    db: Session,
    *,
    course_id: int,
    name: str,
    type: str,
    file_url: str,
    is_required: bool = False,
) -> CourseDocument:
    obj = CourseDocument(
        course_id=course_id,
        name=name,
        type=type,
        file_url=file_url,
        is_required=is_required,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
