"""
Event, registration and attendance models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from sdgclub.core.db import Base
from sdgclub.models._mixins import id_column, created_at_column, updated_at_column

class Event(Base):
    __tablename__ = "events"

    id = id_column()
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=True)
    location = Column(String(255), nullable=True)
    max_attendees = Column(Integer, nullable=True)
    is_published = Column(Boolean, default=False, nullable=False)
    registration_required = Column(Boolean, default=False, nullable=False)
    image_url = Column(String(500), nullable=True)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    registrations = relationship(
        "EventRegistration", back_populates="event", cascade="all, delete-orphan", passive_deletes=True
    )
    attendance = relationship(
        "EventAttendance", back_populates="event", cascade="all, delete-orphan", passive_deletes=True
    )

class EventRegistration(Base):
    __tablename__ = "event_registrations"

    id = id_column()
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(String(36), ForeignKey("members.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(100), nullable=False)
    # trimmed, lower-cased name used for the uniqueness check
    name_key = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    whatsapp_number = Column(String(20), nullable=True)
    registered_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    event = relationship("Event", back_populates="registrations")
    member = relationship("Member")

    __table_args__ = (
        UniqueConstraint("event_id", "name_key", name="uq_event_registrant"),
    )

class EventAttendance(Base):
    __tablename__ = "event_attendance"

    id = id_column()
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(String(36), ForeignKey("members.id", ondelete="SET NULL"), nullable=True, index=True)
    registration_id = Column(String(36), ForeignKey("event_registrations.id", ondelete="SET NULL"), nullable=True)
    checked_in_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    checked_in_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    event = relationship("Event", back_populates="attendance")
    member = relationship("Member")
    registration = relationship("EventRegistration")

    __table_args__ = (
        UniqueConstraint("event_id", "member_id", name="uq_attendance_member"),
        UniqueConstraint("event_id", "registration_id", name="uq_attendance_registration"),
    )
