from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field

from .timestamps import timestamp_column, utc_now


class RsvpStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class InvitationRsvp(SQLModel, table=True):
    __tablename__ = "invitation_rsvps"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="events.id", index=True)
    main_guest: Dict[str, str] = Field(sa_column=Column(JSON, nullable=False))
    additional_guests: List[Dict[str, str]] = Field(default_factory=list, sa_column=Column(JSON))

    # Per-guest answers, keyed by the guest's "name surname"
    wedding_day_attendance: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    after_party_attendance: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    food_preferences: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    accommodation_needed: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    transportation_needed: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    notes: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    # Keyed by custom question id
    custom_responses: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    email: Optional[str] = None
    send_email_confirmation: bool = Field(default=True)
    submitted_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    status: RsvpStatus = Field(default=RsvpStatus.PENDING)
