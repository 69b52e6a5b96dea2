# models/common/course.py
from sqlalchemy import (
    Column, BigInteger, Integer, Text, Boolean, Numeric, DateTime,
    ForeignKey, CheckConstraint, Index, text
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from models.base import Base, IdPKMixin, TimeStampMixin, JSONList


# ========== courses ==========
class Course(IdPKMixin, TimeStampMixin, Base):
    # 파트너 공용 카탈로그. 삭제하지 않고 is_active=false 로 숨김
    __tablename__ = "courses"

    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)  # 시간 단위
    instructors = Column(JSONList, nullable=False, default=list)
    requirements = Column(JSONList, nullable=False, default=list)
    image_url = Column(Text, nullable=True)
    level = Column(Text, nullable=False, server_default=text("'beginner'"))  # beginner|intermediate|advanced
    rating = Column(Numeric(3, 2), nullable=False, server_default=text("0"))
    enrolled_students = Column(Integer, nullable=False, server_default=text("0"))
    is_active = Column(Boolean, nullable=False, server_default=text("true"))

    enrollments = relationship("Enrollment", back_populates="course")
    documents = relationship("CourseDocument", back_populates="course", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("level IN ('beginner','intermediate','advanced')", name="chk_courses_level"),
        CheckConstraint("duration > 0", name="chk_courses_duration"),
        Index("idx_courses_active_name", "is_active", "name"),
    )


# ========== course_documents ==========
class CourseDocument(IdPKMixin, Base):
    __tablename__ = "course_documents"

    course_id = Column(
        BigInteger,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )

    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)  # material|assignment|certificate
    file_url = Column(Text, nullable=False)
    is_required = Column(Boolean, nullable=False, server_default=text("false"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    course = relationship("Course", back_populates="documents")

    __table_args__ = (
        CheckConstraint("type IN ('material','assignment','certificate')", name="chk_course_documents_type"),
        Index("idx_course_documents_course", "course_id"),
    )
