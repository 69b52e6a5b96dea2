# models/partner/student.py
from sqlalchemy import (
    Column, BigInteger, Text, Boolean, DateTime, Numeric,
    ForeignKey, CheckConstraint, Index, text
)
from sqlalchemy.orm import relationship

from models.base import Base, IdPKMixin, TimeStampMixin


# ========== students ==========
class Student(IdPKMixin, TimeStampMixin, Base):
    # 파트너 전속, 다른 파트너로 이관하지 않는다
    __tablename__ = "students"

    partner_id = Column(
        BigInteger,
        ForeignKey("partners.id", ondelete="CASCADE"),
        nullable=False,
    )

    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    cpf = Column(Text, nullable=True)  # 납세자 번호
    address = Column(Text, nullable=True)

    partner = relationship("Partner", back_populates="students")
    enrollments = relationship("Enrollment", back_populates="student", passive_deletes=True)

    __table_args__ = (
        Index("idx_students_partner_created", "partner_id", "created_at"),
        Index("idx_students_partner_email", "partner_id", "email"),
    )


# ========== enrollments ==========
class Enrollment(IdPKMixin, TimeStampMixin, Base):
    """
    학생 1명 × 코스 1개 수강 기록.
    partner_id 는 student.partner_id 와 같지만 조회 효율/이력 보존용으로 중복 저장.
    """
    __tablename__ = "enrollments"

    student_id = Column(
        BigInteger,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    course_id = Column(
        BigInteger,
        ForeignKey("courses.id"),
        nullable=False,
    )
    partner_id = Column(
        BigInteger,
        ForeignKey("partners.id", ondelete="CASCADE"),
        nullable=False,
    )

    status = Column(Text, nullable=False, server_default=text("'enrolled'"))
    progress = Column(Numeric(5, 2), nullable=False, server_default=text("0"))
    grade = Column(Numeric(5, 2), nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    completion_date = Column(DateTime(timezone=True), nullable=True)
    certificate_requested = Column(Boolean, nullable=False, server_default=text("false"))
    certificate_issued = Column(Boolean, nullable=False, server_default=text("false"))

    student = relationship("Student", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
    partner = relationship("Partner", back_populates="enrollments")
    documents = relationship("PartnerDocument", back_populates="enrollment", passive_deletes=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('enrolled','in_progress','completed','dropped')",
            name="chk_enrollments_status",
        ),
        CheckConstraint(
            "(status = 'completed' AND completion_date IS NOT NULL)"
            " OR (status <> 'completed' AND completion_date IS NULL)",
            name="chk_enrollments_completion",
        ),
        CheckConstraint(
            "NOT certificate_issued OR certificate_requested",
            name="chk_enrollments_certificate",
        ),
        CheckConstraint("progress >= 0 AND progress <= 100", name="chk_enrollments_progress"),
        CheckConstraint("grade IS NULL OR (grade >= 0 AND grade <= 10)", name="chk_enrollments_grade"),
        Index("idx_enrollments_partner_created", "partner_id", "created_at"),
        Index("idx_enrollments_course_created", "course_id", "created_at"),
        Index("idx_enrollments_student", "student_id"),
        Index("idx_enrollments_status", "status"),
    )
