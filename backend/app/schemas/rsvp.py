"""Pydantic schemas for RSVPs and the two attendee views."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class DriverInfo(BaseModel):
    car_type: str
    car_color: str
    capacity: int = Field(gt=0)


class RsvpCreate(BaseModel):
    event_id: str
    shift_id: Optional[str] = None
    needs_ride: bool = False
    can_drive: bool = False
    self_transport: bool = False
    campus_location: Optional[str] = None  # onCampus, offCampus
    driver_info: Optional[DriverInfo] = None


class RsvpOut(BaseModel):
    rsvp_id: str
    event_id: str
    user_id: str
    shift_id: Optional[str] = None
    needs_ride: bool
    can_drive: bool
    self_transport: bool
    campus_location: Optional[str] = None
    driver_info: Optional[DriverInfo] = None
    created_at: datetime


class PublicAttendeeView(BaseModel):
    """What any signed-in member sees about another attendee."""

    rsvp_id: str
    name: str
    shift_id: Optional[str] = None


class BoardAttendeeView(PublicAttendeeView):
    """Board members additionally see contact and transportation details."""

    email: str
    phone_number: Optional[str] = None
    needs_ride: bool
    can_drive: bool
    self_transport: bool
    campus_location: Optional[str] = None
    driver_info: Optional[DriverInfo] = None
    created_at: datetime
