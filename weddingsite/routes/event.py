from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from weddingsite.db.database import get_session
from weddingsite.errors import GalleryDisabled, RsvpDisabled
from weddingsite.services.directory import (
    PublicEventResponse,
    resolve_public_event,
    to_public_event,
)
from weddingsite.services.flow import FlowNavigation, FlowStep, plan_invitation_flow
from weddingsite.services.questions import (
    CustomQuestionResponse,
    list_active_custom_questions,
    to_question_response,
)
from weddingsite.services.rsvp import RsvpSubmission, RsvpSubmitResponse, submit_rsvp

router = APIRouter(
    prefix="/event-id",
    tags=["Event"],
)


class GalleryContentResponse(SQLModel):
    wwwId: str
    coupleNames: Optional[str] = None
    content: Optional[Dict[str, Any]] = None


class InvitationFlowResponse(SQLModel):
    wwwId: str
    total: int
    steps: List[FlowStep]


@router.get("/{wwwId}")
async def get_public_event(
    wwwId: str,
    session: AsyncSession = Depends(get_session),
) -> PublicEventResponse:
    event = await resolve_public_event(session, wwwId)
    return to_public_event(event)


@router.get("/{wwwId}/gallery")
async def get_gallery_content(
    wwwId: str,
    session: AsyncSession = Depends(get_session),
) -> GalleryContentResponse:
    event = await resolve_public_event(session, wwwId)
    if not event.gallery_enabled:
        raise GalleryDisabled()
    return GalleryContentResponse(
        wwwId=event.www_id,
        coupleNames=event.couple_names,
        content=(event.settings or {}).get("galleryContent"),
    )


@router.get("/{wwwId}/invitation/questions")
async def get_invitation_questions(
    wwwId: str,
    session: AsyncSession = Depends(get_session),
) -> List[CustomQuestionResponse]:
    event = await resolve_public_event(session, wwwId)
    if not event.rsvp_enabled:
        raise RsvpDisabled()
    questions = await list_active_custom_questions(session, event.id)
    return [to_question_response(q) for q in questions]


@router.get("/{wwwId}/invitation/flow")
async def get_invitation_flow(
    wwwId: str,
    session: AsyncSession = Depends(get_session),
) -> InvitationFlowResponse:
    event = await resolve_public_event(session, wwwId)
    if not event.rsvp_enabled:
        raise RsvpDisabled()
    planner = await plan_invitation_flow(session, event)
    return InvitationFlowResponse(wwwId=event.www_id, total=len(planner), steps=planner.steps)


@router.get("/{wwwId}/invitation/flow/{stepId}")
async def navigate_invitation_flow(
    wwwId: str,
    stepId: str,
    session: AsyncSession = Depends(get_session),
) -> FlowNavigation:
    event = await resolve_public_event(session, wwwId)
    if not event.rsvp_enabled:
        raise RsvpDisabled()
    planner = await plan_invitation_flow(session, event)
    return planner.navigation(stepId)


@router.post(
    "/{wwwId}/invitation/rsvp",
    status_code=status.HTTP_201_CREATED,
)
async def submit_invitation_rsvp(
    wwwId: str,
    submission: RsvpSubmission,
    session: AsyncSession = Depends(get_session),
) -> RsvpSubmitResponse:
    rsvp = await submit_rsvp(session, wwwId, submission)
    return RsvpSubmitResponse(rsvpId=rsvp.id, status=rsvp.status, submittedAt=rsvp.submitted_at)
