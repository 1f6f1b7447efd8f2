"""Carpool assignment email for a driver."""
from dataclasses import dataclass, field
from html import escape
from typing import Optional

from app.emails.layout import mailto, render_page, tel


@dataclass
class Passenger:
    name: str
    email: str
    phone_number: Optional[str] = None


@dataclass
class DriverEmail:
    event_title: str
    event_date: str
    event_time: str
    event_location: str
    driver_name: str
    car_color: str
    car_type: str
    capacity: int
    riders: list[Passenger] = field(default_factory=list)


def driver_email_subject(event_title: str) -> str:
    return f"Carpool Assignment: {event_title} - Driver"


def _passenger_item(rider: Passenger) -> str:
    phone = f"<br/>{tel(rider.phone_number)}" if rider.phone_number else ""
    return f"<li>{escape(rider.name)}<br/>{mailto(rider.email)}{phone}</li>"


def render_driver_email(props: DriverEmail, club_name: str, reply_to: str = "") -> str:
    if props.riders:
        items = "".join(_passenger_item(r) for r in props.riders)
        passengers = f'<ul class="rider-list">{items}</ul>'
    else:
        passengers = "<p>No passengers assigned to your vehicle.</p>"

    body = f"""      <p>Hi {escape(props.driver_name)},</p>
      <h3>Event: {escape(props.event_title)}</h3>
      <p><strong>Date:</strong> {escape(props.event_date)}</p>
      <p><strong>Time:</strong> {escape(props.event_time)}</p>
      <p><strong>Location:</strong> {escape(props.event_location)}</p>
      <div class="carpool-info">
        <h4>Your Carpool Assignment</h4>
        <p><strong>Role:</strong> Driver</p>
        <p><strong>Your Vehicle:</strong> {escape(props.car_color)} {escape(props.car_type)}</p>
        <p><strong>Capacity:</strong> {props.capacity} passengers</p>
        <h4>Your Passengers:</h4>
        {passengers}
      </div>
      <p>Please coordinate with your passengers about pickup times and locations. If you have any questions or need to make changes, please contact the board.</p>"""
    return render_page(club_name, "Carpool Assignment - Driver", body, reply_to)
