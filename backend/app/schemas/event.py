"""Pydantic schemas for Events and Shifts."""
from __future__ import annotations
from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, Field

from app.models.event import EventType
from app.schemas.rsvp import BoardAttendeeView, PublicAttendeeView


class EventCreate(BaseModel):
    title: str
    description: str = ""
    location: str = ""
    start_time_utc: datetime
    end_time_utc: datetime
    event_type: EventType = EventType.regular
    is_offsite: bool = False


class ShiftCreate(BaseModel):
    start_time_utc: datetime
    end_time_utc: datetime
    required_people: int = Field(gt=0)


class ShiftOut(BaseModel):
    shift_id: str
    event_id: str
    start_time_utc: datetime
    end_time_utc: datetime
    required_people: int

    model_config = {"from_attributes": True}


class EventOut(BaseModel):
    event_id: str
    title: str
    description: str
    location: str
    start_time_utc: datetime
    end_time_utc: datetime
    event_type: str
    is_offsite: bool
    created_by: str
    created_at: datetime
    shifts: list[ShiftOut] = []

    model_config = {"from_attributes": True}


class EventDetailOut(EventOut):
    # Board members get BoardAttendeeView entries, everyone else PublicAttendeeView
    attendees: list[Union[BoardAttendeeView, PublicAttendeeView]] = []
