import logging
from datetime import datetime
from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import func
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from weddingsite.errors import NotFound
from weddingsite.models import CustomQuestion, Event, QuestionType

logger = logging.getLogger(__name__)


class CustomQuestionData(SQLModel):
    questionType: QuestionType = QuestionType.TEXT
    title: str
    description: Optional[str] = None
    options: List[str] = []
    required: bool = True


class CustomQuestionUpdate(SQLModel):
    questionType: Optional[QuestionType] = None
    title: Optional[str] = None
    description: Optional[str] = None
    options: Optional[List[str]] = None
    required: Optional[bool] = None
    orderIndex: Optional[int] = None
    isActive: Optional[bool] = None


class CustomQuestionResponse(SQLModel):
    id: UUID
    eventId: UUID
    questionType: QuestionType
    title: str
    description: Optional[str] = None
    options: List[str]
    required: bool
    orderIndex: int
    isActive: bool
    createdAt: datetime


def to_question_response(question: CustomQuestion) -> CustomQuestionResponse:
    return CustomQuestionResponse(
        id=question.id,
        eventId=question.event_id,
        questionType=question.question_type,
        title=question.title,
        description=question.description,
        options=question.options or [],
        required=question.required,
        orderIndex=question.order_index,
        isActive=question.is_active,
        createdAt=question.created_at,
    )


async def list_active_custom_questions(session: AsyncSession, event_id: UUID) -> List[CustomQuestion]:
    """Active questions in flow order: ``order_index`` then creation order."""
    statement = (
        select(CustomQuestion)
        .where(
            CustomQuestion.event_id == event_id,
            CustomQuestion.is_active == True,  # noqa: E712 - SQLAlchemy boolean comparison
        )
        .order_by(CustomQuestion.order_index, CustomQuestion.created_at)
    )
    result = await session.execute(statement)
    return result.scalars().all()


async def list_custom_questions(session: AsyncSession, event_id: UUID) -> List[CustomQuestion]:
    statement = (
        select(CustomQuestion)
        .where(CustomQuestion.event_id == event_id)
        .order_by(CustomQuestion.order_index, CustomQuestion.created_at)
    )
    result = await session.execute(statement)
    return result.scalars().all()


async def get_event_question_ids(session: AsyncSession, event_id: UUID) -> Set[UUID]:
    """Ids of every question owned by the event, active or not."""
    result = await session.execute(
        select(CustomQuestion.id).where(CustomQuestion.event_id == event_id)
    )
    return set(result.scalars().all())


async def get_event_question_or_404(
    session: AsyncSession, event: Event, question_id: UUID
) -> CustomQuestion:
    question = await session.get(CustomQuestion, question_id)
    if question is None or question.event_id != event.id:
        raise NotFound("Question not found")
    return question


async def create_custom_question(
    session: AsyncSession, event: Event, data: CustomQuestionData
) -> CustomQuestion:
    result = await session.execute(
        select(func.max(CustomQuestion.order_index)).where(CustomQuestion.event_id == event.id)
    )
    last_order_index = result.scalar_one_or_none()

    question = CustomQuestion(
        event_id=event.id,
        question_type=data.questionType,
        title=data.title,
        description=data.description,
        options=list(data.options),
        required=data.required,
        order_index=(last_order_index or 0) + 1,
        is_active=True,
    )
    session.add(question)
    await session.commit()
    await session.refresh(question)
    logger.info("Created question %s for event %s", question.id, event.www_id)
    return question


async def update_custom_question(
    session: AsyncSession, event: Event, question_id: UUID, data: CustomQuestionUpdate
) -> CustomQuestion:
    question = await get_event_question_or_404(session, event, question_id)

    if data.questionType is not None:
        question.question_type = data.questionType
    if data.title is not None:
        question.title = data.title
    if data.description is not None:
        question.description = data.description
    if data.options is not None:
        question.options = list(data.options)
    if data.required is not None:
        question.required = data.required
    if data.orderIndex is not None:
        question.order_index = data.orderIndex
    if data.isActive is not None:
        question.is_active = data.isActive

    session.add(question)
    await session.commit()
    await session.refresh(question)
    logger.info("Updated question %s for event %s", question.id, event.www_id)
    return question


async def deactivate_custom_question(
    session: AsyncSession, event: Event, question_id: UUID
) -> CustomQuestion:
    return await update_custom_question(
        session, event, question_id, CustomQuestionUpdate(isActive=False)
    )
