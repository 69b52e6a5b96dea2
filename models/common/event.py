# models/common/event.py
from sqlalchemy import (
    Column, BigInteger, Integer, Text, Boolean, DateTime,
    ForeignKey, UniqueConstraint, CheckConstraint, Index, text
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from models.base import Base, IdPKMixin


# ========== events ==========
class Event(IdPKMixin, Base):
    __tablename__ = "events"

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    event_date = Column(DateTime(timezone=True), nullable=False)
    duration = Column(Integer, nullable=False)  # 분 단위
    type = Column(Text, nullable=False)  # workshop|webinar|conference
    is_online = Column(Boolean, nullable=False, server_default=text("true"))
    max_participants = Column(Integer, nullable=True)  # NULL = 정원 제한 없음
    registered_participants = Column(Integer, nullable=False, server_default=text("0"))
    is_active = Column(Boolean, nullable=False, server_default=text("true"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    registrations = relationship("EventRegistration", back_populates="event", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("type IN ('workshop','webinar','conference')", name="chk_events_type"),
        CheckConstraint(
            "max_participants IS NULL OR registered_participants <= max_participants",
            name="chk_events_capacity",
        ),
        Index("idx_events_active_date", "is_active", "event_date"),
    )


# ========== event_registrations ==========
class EventRegistration(IdPKMixin, Base):
    __tablename__ = "event_registrations"

    partner_id = Column(
        BigInteger,
        ForeignKey("partners.id", ondelete="CASCADE"),
        nullable=False,
    )
    event_id = Column(
        BigInteger,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    registration_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    attended = Column(Boolean, nullable=False, server_default=text("false"))

    partner = relationship("Partner", back_populates="event_registrations")
    event = relationship("Event", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint("partner_id", "event_id", name="uq_event_registrations_partner_event"),
        Index("idx_event_registrations_partner", "partner_id", "registration_date"),
    )
