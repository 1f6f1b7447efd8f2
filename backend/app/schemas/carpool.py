"""Pydantic schemas for carpool operations."""
from typing import Optional
from pydantic import BaseModel


class GenerateCarpoolsResult(BaseModel):
    carpools_created: int
    riders_assigned: int
    riders_unassigned: int


class CarpoolDriverOut(BaseModel):
    rsvp_id: str
    name: str
    email: str
    phone_number: Optional[str] = None
    campus_location: Optional[str] = None
    car_type: str
    car_color: str
    capacity: int


class CarpoolRiderOut(BaseModel):
    rsvp_id: str
    name: str
    email: str
    phone_number: Optional[str] = None
    campus_location: Optional[str] = None


class CarpoolOut(BaseModel):
    carpool_id: str
    status: str
    driver: CarpoolDriverOut
    riders: list[CarpoolRiderOut] = []


class CarpoolAssignmentUpdate(BaseModel):
    add_rsvp_ids: Optional[list[str]] = None
    remove_rsvp_ids: Optional[list[str]] = None


class ReassignRiderRequest(BaseModel):
    rider_rsvp_id: str
    from_carpool_id: Optional[str] = None
    to_carpool_id: Optional[str] = None


class ReassignRiderResult(BaseModel):
    success: bool
    rider_rsvp_id: str
    from_carpool_id: Optional[str] = None
    to_carpool_id: Optional[str] = None


class FinalizeCarpoolsResult(BaseModel):
    carpools_finalized: int


class CarpoolEmailsResult(BaseModel):
    emails_sent: int
    emails_failed: int
    carpools_processed: int
