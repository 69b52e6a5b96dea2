# models/partner/partner_core.py
from sqlalchemy import (
    Column, BigInteger, Integer, Text, Numeric, DateTime,
    ForeignKey, UniqueConstraint, CheckConstraint, Index, text
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from models.base import Base, IdPKMixin, TimeStampMixin


# ========== partners ==========
class Partner(IdPKMixin, TimeStampMixin, Base):
    """
    유저(회사 계정) 1명당 최대 1개.
    classification 은 운영자가 직접 지정하며 자동 승급 로직은 없다.
    """
    __tablename__ = "partners"

    # FK → users.id (IdP subject)
    user_id = Column(
        Text,
        ForeignKey("users.id"),
        nullable=False,
    )

    company = Column(Text, nullable=False)
    classification = Column(Text, nullable=False, server_default=text("'bronze'"))  # bronze|silver|gold
    utm_tag = Column(Text, nullable=False)

    # 집계 카운터: 수강 변경 트랜잭션 안에서 enrollments 기준으로 재계산
    total_score = Column(Integer, nullable=False, server_default=text("0"))
    completed_courses = Column(Integer, nullable=False, server_default=text("0"))
    courses_in_progress = Column(Integer, nullable=False, server_default=text("0"))
    completion_rate = Column(Numeric(5, 2), nullable=False, server_default=text("0"))

    user = relationship("User", back_populates="partner")
    students = relationship("Student", back_populates="partner", passive_deletes=True)
    enrollments = relationship("Enrollment", back_populates="partner", passive_deletes=True)
    documents = relationship("PartnerDocument", back_populates="partner", passive_deletes=True)
    event_registrations = relationship("EventRegistration", back_populates="partner", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("utm_tag", name="uq_partners_utm_tag"),
        # 한 유저당 하나의 파트너 레코드만 허용
        UniqueConstraint("user_id", name="uq_partners_user_id"),
        CheckConstraint("classification IN ('bronze','silver','gold')", name="chk_partners_classification"),
        CheckConstraint("completion_rate >= 0 AND completion_rate <= 100", name="chk_partners_completion_rate"),
        Index("idx_partners_classification", "classification"),
    )


# ========== partner_documents ==========
class PartnerDocument(IdPKMixin, Base):
    """파트너가 특정 수강 건에 대해 제출한 서류 (파일 자체는 외부 저장소)."""
    __tablename__ = "partner_documents"

    partner_id = Column(
        BigInteger,
        ForeignKey("partners.id", ondelete="CASCADE"),
        nullable=False,
    )
    enrollment_id = Column(
        BigInteger,
        ForeignKey("enrollments.id", ondelete="CASCADE"),
        nullable=False,
    )

    document_name = Column(Text, nullable=False)
    file_url = Column(Text, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))  # pending|approved|rejected
    upload_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    partner = relationship("Partner", back_populates="documents")
    enrollment = relationship("Enrollment", back_populates="documents")

    __table_args__ = (
        CheckConstraint("status IN ('pending','approved','rejected')", name="chk_partner_documents_status"),
        Index("idx_partner_documents_partner", "partner_id", "upload_date"),
    )
