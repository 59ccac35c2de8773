"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates the tables for events, user profiles, RSVP form questions and
invitation RSVPs.
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
    # --- events ---
    op.create_table(
        "events",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("www_id", sa.String(16), nullable=False),
        sa.Column("title", sa.String, nullable=False),
        sa.Column("couple_names", sa.String, nullable=True),
        sa.Column("event_date", sa.Date, nullable=True),
        sa.Column("venue", sa.String, nullable=True),
        sa.Column("description", sa.String, nullable=True),
        sa.Column(
            "status",
            sa.Enum("PLANNED", "ACTIVE", "CANCELLED", name="eventstatus"),
            nullable=False,
        ),
        sa.Column("organizer_id", sa.Uuid, nullable=True),
        sa.Column("gallery_enabled", sa.Boolean, nullable=False),
        sa.Column("rsvp_enabled", sa.Boolean, nullable=False),
        sa.Column("section_visibility", sa.JSON, nullable=True),
        sa.Column("section_content", sa.JSON, nullable=True),
        sa.Column("settings", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_events_www_id", "events", ["www_id"], unique=True)
    op.create_index("ix_events_organizer_id", "events", ["organizer_id"])

    # --- user_profiles ---
    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("email", sa.String, nullable=False),
        sa.Column("display_name", sa.String, nullable=True),
        sa.Column(
            "role",
            sa.Enum("GUEST", "ORGANIZER", "SUPERADMIN", name="userrole"),
            nullable=False,
        ),
        sa.Column("event_id", sa.String, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
    )

    # --- rsvp_form_questions ---
    op.create_table(
        "rsvp_form_questions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("event_id", sa.Uuid, sa.ForeignKey("events.id"), nullable=False),
        sa.Column(
            "question_type",
            sa.Enum(
                "YES_NO", "MULTIPLE_CHOICE", "TEXT", "ATTENDANCE", "FOOD_PREFERENCE",
                name="questiontype",
            ),
            nullable=False,
        ),
        sa.Column("title", sa.String, nullable=False),
        sa.Column("description", sa.String, nullable=True),
        sa.Column("options", sa.JSON, nullable=True),
        sa.Column("required", sa.Boolean, nullable=False),
        sa.Column("order_index", sa.Integer, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_rsvp_form_questions_event_id", "rsvp_form_questions", ["event_id"])

    # --- invitation_rsvps ---
    op.create_table(
        "invitation_rsvps",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("event_id", sa.Uuid, sa.ForeignKey("events.id"), nullable=False),
        sa.Column("main_guest", sa.JSON, nullable=False),
        sa.Column("additional_guests", sa.JSON, nullable=True),
        sa.Column("wedding_day_attendance", sa.JSON, nullable=True),
        sa.Column("after_party_attendance", sa.JSON, nullable=True),
        sa.Column("food_preferences", sa.JSON, nullable=True),
        sa.Column("accommodation_needed", sa.JSON, nullable=True),
        sa.Column("transportation_needed", sa.JSON, nullable=True),
        sa.Column("notes", sa.JSON, nullable=True),
        sa.Column("custom_responses", sa.JSON, nullable=True),
        sa.Column("email", sa.String, nullable=True),
        sa.Column("send_email_confirmation", sa.Boolean, nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "CONFIRMED", "DECLINED", name="rsvpstatus"),
            nullable=False,
        ),
    )
    op.create_index("ix_invitation_rsvps_event_id", "invitation_rsvps", ["event_id"])


def downgrade() -> None:
    op.drop_table("invitation_rsvps")
    op.drop_table("rsvp_form_questions")
    op.drop_table("user_profiles")
    op.drop_table("events")
    sa.Enum(name="rsvpstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="questiontype").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="eventstatus").drop(op.get_bind(), checkfirst=True)
