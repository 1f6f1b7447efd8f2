"""Carpool assignment email for a rider."""
from dataclasses import dataclass, field
from html import escape
from typing import Optional

from app.emails.layout import mailto, render_page, tel


@dataclass
class CoRider:
    name: str
    phone_number: Optional[str] = None


@dataclass
class RiderEmail:
    event_title: str
    event_date: str
    event_time: str
    event_location: str
    rider_name: str
    driver_name: str
    driver_email: str
    car_color: str
    car_type: str
    driver_phone_number: Optional[str] = None
    other_riders: list[CoRider] = field(default_factory=list)


def rider_email_subject(event_title: str) -> str:
    return f"Carpool Assignment: {event_title} - Rider"


def render_rider_email(props: RiderEmail, club_name: str, reply_to: str = "") -> str:
    driver_phone = f"<br/>{tel(props.driver_phone_number)}" if props.driver_phone_number else ""
    if props.other_riders:
        items = "".join(
            f"<li>{escape(r.name)}{'<br/>' + tel(r.phone_number) if r.phone_number else ''}</li>"
            for r in props.other_riders
        )
        others = f'<ul class="rider-list">{items}</ul>'
    else:
        others = "<p>You are the only passenger in this vehicle.</p>"

    body = f"""      <p>Hi {escape(props.rider_name)},</p>
      <h3>Event: {escape(props.event_title)}</h3>
      <p><strong>Date:</strong> {escape(props.event_date)}</p>
      <p><strong>Time:</strong> {escape(props.event_time)}</p>
      <p><strong>Location:</strong> {escape(props.event_location)}</p>
      <div class="carpool-info">
        <h4>Your Carpool Assignment</h4>
        <p><strong>Role:</strong> Passenger</p>
        <p><strong>Driver:</strong> {escape(props.driver_name)}<br/>{mailto(props.driver_email)}{driver_phone}</p>
        <p><strong>Vehicle:</strong> {escape(props.car_color)} {escape(props.car_type)}</p>
        <h4>Other Passengers:</h4>
        {others}
      </div>
      <p>Please reach out to your driver to confirm pickup time and location.</p>"""
    return render_page(club_name, "Carpool Assignment - Rider", body, reply_to)
