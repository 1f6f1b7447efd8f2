"""Event and Shift ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, Integer, Boolean, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class EventType(str, enum.Enum):
    regular = "regular"
    boothing = "boothing"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(500), nullable=False, default="")
    start_time_utc = Column(DateTime(timezone=True), nullable=False)
    end_time_utc = Column(DateTime(timezone=True), nullable=False)
    event_type = Column(SAEnum(EventType), nullable=False, default=EventType.regular)
    is_offsite = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    carpools = relationship("Carpool", back_populates="event", cascade="all, delete-orphan")
    rsvps = relationship("Rsvp", back_populates="event", cascade="all, delete-orphan")
    shifts = relationship(
        "Shift", back_populates="event", cascade="all, delete-orphan", order_by="Shift.start_time_utc"
    )


class Shift(Base):
    __tablename__ = "shifts"

    shift_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    start_time_utc = Column(DateTime(timezone=True), nullable=False)
    end_time_utc = Column(DateTime(timezone=True), nullable=False)
    required_people = Column(Integer, nullable=False)

    event = relationship("Event", back_populates="shifts")
