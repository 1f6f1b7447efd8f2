"""Carpool and CarpoolMember ORM models."""
import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.database import Base


class CarpoolStatus(str, enum.Enum):
    draft = "draft"
    finalized = "finalized"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Carpool(Base):
    __tablename__ = "carpools"

    carpool_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    driver_rsvp_id = Column(String(36), ForeignKey("rsvps.rsvp_id"), nullable=False, unique=True)
    status = Column(SAEnum(CarpoolStatus), nullable=False, default=CarpoolStatus.draft)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    event = relationship("Event", back_populates="carpools")
    driver_rsvp = relationship("Rsvp")
    members = relationship("CarpoolMember", back_populates="carpool", cascade="all, delete-orphan")

    @property
    def is_draft(self) -> bool:
        return self.status == CarpoolStatus.draft

    @property
    def capacity(self) -> int:
        if self.driver_rsvp is None or self.driver_rsvp.capacity is None:
            return 0
        return self.driver_rsvp.capacity


class CarpoolMember(Base):
    __tablename__ = "carpool_members"

    member_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    carpool_id = Column(String(36), ForeignKey("carpools.carpool_id"), nullable=False, index=True)
    # A rider sits in at most one carpool
    rsvp_id = Column(String(36), ForeignKey("rsvps.rsvp_id"), nullable=False, unique=True)

    carpool = relationship("Carpool", back_populates="members")
    rsvp = relationship("Rsvp")
