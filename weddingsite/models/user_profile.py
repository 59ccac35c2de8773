from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from datetime import datetime
from typing import Optional
from enum import Enum

from .timestamps import timestamp_column, utc_now


class UserRole(str, Enum):
    GUEST = "guest"
    ORGANIZER = "organizer"
    SUPERADMIN = "superadmin"


class UserProfile(SQLModel, table=True):
    __tablename__ = "user_profiles"  # This must match the Supabase table name

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str
    display_name: Optional[str] = None
    role: UserRole = Field(default=UserRole.GUEST)
    event_id: Optional[str] = Field(default=None, nullable=True)  # www_id, only used for ORGANIZER
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    last_login: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))
