"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates all tables for the club carpool service:
users, events, shifts, rsvps, carpools, carpool_members.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone_number", sa.String(40), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("location", sa.String(500), nullable=False, server_default=""),
        sa.Column("start_time_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("event_type", sa.String(20), nullable=False, server_default="regular"),
        sa.Column("is_offsite", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- shifts ---
    op.create_table(
        "shifts",
        sa.Column("shift_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False, index=True),
        sa.Column("start_time_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("required_people", sa.Integer, nullable=False),
    )

    # --- rsvps ---
    op.create_table(
        "rsvps",
        sa.Column("rsvp_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False, index=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False, index=True),
        sa.Column("shift_id", sa.String(36), sa.ForeignKey("shifts.shift_id"), nullable=True, index=True),
        sa.Column("needs_ride", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("can_drive", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("self_transport", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("campus_location", sa.String(20), nullable=True),
        sa.Column("car_type", sa.String(100), nullable=True),
        sa.Column("car_color", sa.String(50), nullable=True),
        sa.Column("capacity", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    # --- carpools ---
    op.create_table(
        "carpools",
        sa.Column("carpool_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False, index=True),
        sa.Column("driver_rsvp_id", sa.String(36), sa.ForeignKey("rsvps.rsvp_id"), nullable=False, unique=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    # --- carpool_members ---
    op.create_table(
        "carpool_members",
        sa.Column("member_id", sa.String(36), primary_key=True),
        sa.Column("carpool_id", sa.String(36), sa.ForeignKey("carpools.carpool_id"), nullable=False, index=True),
        sa.Column("rsvp_id", sa.String(36), sa.ForeignKey("rsvps.rsvp_id"), nullable=False, unique=True),
    )


def downgrade() -> None:
    op.drop_table("carpool_members")
    op.drop_table("carpools")
    op.drop_table("rsvps")
    op.drop_table("shifts")
    op.drop_table("events")
    op.drop_table("users")
