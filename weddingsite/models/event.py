from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field

from .timestamps import timestamp_column, utc_now


class EventStatus(str, Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    CANCELLED = "cancelled"


class Event(SQLModel, table=True):
    __tablename__ = "events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    www_id: str = Field(index=True, unique=True, max_length=16)
    title: str
    couple_names: Optional[str] = None
    event_date: Optional[date] = None
    venue: Optional[str] = None
    description: Optional[str] = None
    status: EventStatus = Field(default=EventStatus.PLANNED)
    organizer_id: Optional[UUID] = Field(default=None, nullable=True, index=True)
    gallery_enabled: bool = Field(default=False)
    rsvp_enabled: bool = Field(default=False)
    section_visibility: Dict[str, bool] = Field(default_factory=dict, sa_column=Column(JSON))
    section_content: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    settings: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
