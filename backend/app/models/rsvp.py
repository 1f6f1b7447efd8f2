"""RSVP ORM model: an attendee's registration and transportation intent."""
import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.database import Base


class CampusLocation(str, enum.Enum):
    on_campus = "onCampus"
    off_campus = "offCampus"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Rsvp(Base):
    __tablename__ = "rsvps"

    rsvp_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    shift_id = Column(String(36), ForeignKey("shifts.shift_id"), nullable=True, index=True)
    needs_ride = Column(Boolean, nullable=False, default=False)
    can_drive = Column(Boolean, nullable=False, default=False)
    self_transport = Column(Boolean, nullable=False, default=False)
    campus_location = Column(SAEnum(CampusLocation), nullable=True)
    # Driver info: car_type, car_color and capacity are set together or all null
    car_type = Column(String(100), nullable=True)
    car_color = Column(String(50), nullable=True)
    capacity = Column(Integer, nullable=True)
    # Set in Python for sub-second precision; "latest wins" dedup orders on it
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    event = relationship("Event", back_populates="rsvps")
    user = relationship("User")

    @property
    def has_driver_info(self) -> bool:
        return self.capacity is not None

    @property
    def is_driver(self) -> bool:
        return bool(self.can_drive and self.has_driver_info and not self.self_transport)

    @property
    def is_rider(self) -> bool:
        return bool(self.needs_ride and not self.self_transport)
