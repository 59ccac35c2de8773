"""Invitation (RSVP wizard) flow planning.

A flow is a flat list of steps: a fixed prefix, one step per active custom
question in ``order_index`` order (ties broken by creation time), then a fixed
suffix. The plan is rebuilt for every request from the current question set,
so a question deactivated mid-session drops out of the very next navigation
decision. A guest holding a step id that is no longer planned gets
:class:`UnknownStep` and is expected to re-fetch the plan.
"""
import logging
from enum import Enum
from operator import attrgetter
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from weddingsite.errors import UnknownStep
from weddingsite.models import CustomQuestion, Event
from weddingsite.services.questions import list_active_custom_questions

logger = logging.getLogger(__name__)

CUSTOM_STEP_PREFIX = "custom-question-"


class StepKind(str, Enum):
    BUILTIN = "builtin"
    CUSTOM = "custom"


class FlowStep(SQLModel):
    id: str
    kind: StepKind
    title: str
    questionId: Optional[UUID] = None


def builtin_step(step_id: str, title: str) -> FlowStep:
    return FlowStep(id=step_id, kind=StepKind.BUILTIN, title=title)


def question_step(question: CustomQuestion) -> FlowStep:
    return FlowStep(
        id=f"{CUSTOM_STEP_PREFIX}{question.id}",
        kind=StepKind.CUSTOM,
        title=question.title,
        questionId=question.id,
    )


PREFIX_STEPS = (
    builtin_step("welcome", "Welcome"),
    builtin_step("guest-identity", "Add Guests"),
    builtin_step("attendance", "Wedding Day Attendance"),
    builtin_step("food-preferences", "Food Selection"),
    builtin_step("accommodation", "Accommodation"),
    builtin_step("transportation", "Transportation"),
)

SUFFIX_STEPS = (
    builtin_step("notes", "Send a Note"),
    builtin_step("review", "Review"),
    builtin_step("confirmation", "Confirmation"),
)


class FlowNavigation(SQLModel):
    current: FlowStep
    previous: Optional[FlowStep] = None
    next: Optional[FlowStep] = None
    position: int
    total: int
    isFirst: bool
    isLast: bool


class FlowPlanner:
    """Ordered steps for one event plus an id → position index.

    ``next_step`` returns ``None`` at the end of the flow and
    ``previous_step`` returns ``None`` at the start; an id that is not in
    the plan raises :class:`UnknownStep` instead.
    """

    def __init__(self, questions: Iterable[CustomQuestion]):
        active = sorted(
            (q for q in questions if q.is_active),
            key=attrgetter("order_index", "created_at"),
        )
        self.steps: List[FlowStep] = [
            *PREFIX_STEPS,
            *(question_step(q) for q in active),
            *SUFFIX_STEPS,
        ]
        self._positions: Dict[str, int] = {step.id: i for i, step in enumerate(self.steps)}

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def step_ids(self) -> List[str]:
        return [step.id for step in self.steps]

    def position(self, step_id: str) -> int:
        try:
            return self._positions[step_id]
        except KeyError:
            logger.info("Step %s is not part of the current flow", step_id)
            raise UnknownStep(step_id, self.step_ids) from None

    def step(self, step_id: str) -> FlowStep:
        return self.steps[self.position(step_id)]

    def next_step(self, step_id: str) -> Optional[FlowStep]:
        index = self.position(step_id)
        if index == len(self.steps) - 1:
            return None
        return self.steps[index + 1]

    def previous_step(self, step_id: str) -> Optional[FlowStep]:
        index = self.position(step_id)
        if index == 0:
            return None
        return self.steps[index - 1]

    def is_last_step(self, step_id: str) -> bool:
        return self.position(step_id) == len(self.steps) - 1

    def navigation(self, step_id: str) -> FlowNavigation:
        index = self.position(step_id)
        return FlowNavigation(
            current=self.steps[index],
            previous=self.previous_step(step_id),
            next=self.next_step(step_id),
            position=index,
            total=len(self.steps),
            isFirst=index == 0,
            isLast=index == len(self.steps) - 1,
        )


async def plan_invitation_flow(session: AsyncSession, event: Event) -> FlowPlanner:
    questions = await list_active_custom_questions(session, event.id)
    return FlowPlanner(questions)
