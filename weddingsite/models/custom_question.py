from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field

from .timestamps import timestamp_column, utc_now


class QuestionType(str, Enum):
    YES_NO = "yes_no"
    MULTIPLE_CHOICE = "multiple_choice"
    TEXT = "text"
    ATTENDANCE = "attendance"
    FOOD_PREFERENCE = "food_preference"


class CustomQuestion(SQLModel, table=True):
    __tablename__ = "rsvp_form_questions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="events.id", index=True)
    question_type: QuestionType = Field(default=QuestionType.TEXT)
    title: str
    description: Optional[str] = None
    options: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    required: bool = Field(default=True)
    order_index: int = Field(default=0)
    is_active: bool = Field(default=True)  # False once the organizer deletes the question
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
