from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from weddingsite.auth.dependencies import Caller, get_current_caller
from weddingsite.db.database import get_session
from weddingsite.errors import Forbidden, RsvpDisabled, Unauthorized
from weddingsite.models import Event, EventStatus, UserRole
from weddingsite.services.authorization import (
    Action,
    get_authorized_event,
    get_authorized_event_by_id,
    listing_scope,
    require_superadmin,
)
from weddingsite.services.directory import (
    EventPage,
    EventSummary,
    OrganizerSummary,
    PublicEventResponse,
    get_organizer_event,
    list_available_events,
    list_events,
    list_organizers,
    to_event_summary,
    to_public_event,
    update_event,
)
from weddingsite.services.links import (
    EventLinkResponse,
    build_event_url,
    build_gallery_url,
    build_rsvp_url,
)
from weddingsite.services.questions import (
    CustomQuestionData,
    CustomQuestionResponse,
    CustomQuestionUpdate,
    create_custom_question,
    deactivate_custom_question,
    list_active_custom_questions,
    list_custom_questions,
    to_question_response,
    update_custom_question,
)
from weddingsite.services.rsvp import RsvpRecordResponse, list_event_rsvps, to_rsvp_response

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


class SectionVisibilityRequest(SQLModel):
    wwwId: str
    sectionVisibility: Dict[str, bool]


class SectionVisibilityResponse(SQLModel):
    id: UUID
    wwwId: str
    sectionVisibility: Dict[str, bool]


class SectionContentRequest(SQLModel):
    wwwId: str
    sectionContent: Dict[str, Any]
    galleryContent: Optional[Dict[str, Any]] = None


class SectionContentResponse(SQLModel):
    id: UUID
    wwwId: str
    sectionContent: Dict[str, Any]


class EventInfoUpdate(SQLModel):
    title: Optional[str] = None
    coupleNames: Optional[str] = None
    eventDate: Optional[date] = None
    venue: Optional[str] = None
    description: Optional[str] = None
    galleryEnabled: Optional[bool] = None
    rsvpEnabled: Optional[bool] = None
    status: Optional[EventStatus] = None


class GeneralInfoRequest(EventInfoUpdate):
    wwwId: str


GENERAL_INFO_COLUMNS = {
    "title": "title",
    "coupleNames": "couple_names",
    "eventDate": "event_date",
    "venue": "venue",
    "description": "description",
    "galleryEnabled": "gallery_enabled",
    "rsvpEnabled": "rsvp_enabled",
    "status": "status",
}


class CreateQuestionCommand(SQLModel):
    wwwId: str
    questionData: CustomQuestionData


class UpdateQuestionCommand(SQLModel):
    wwwId: str
    questionId: UUID
    questionData: CustomQuestionUpdate


class EventQuestionsResponse(SQLModel):
    eventId: UUID
    wwwId: str
    title: str
    questions: List[CustomQuestionResponse]


class DayDetailsResponse(SQLModel):
    eventId: UUID
    wwwId: str
    title: str
    coupleNames: Optional[str] = None
    eventDate: Optional[date] = None
    venue: Optional[str] = None
    eventUrl: str
    galleryEnabled: bool
    rsvpEnabled: bool
    status: EventStatus
    sectionVisibility: Dict[str, bool]


class RsvpGuestsResponse(SQLModel):
    event: PublicEventResponse
    guests: List[RsvpRecordResponse]
    customQuestions: List[CustomQuestionResponse]


@router.put("/events/section-visibility")
async def update_section_visibility(
    request: SectionVisibilityRequest,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> SectionVisibilityResponse:
    event = await get_authorized_event(session, caller, request.wwwId, Action.WRITE)
    event = await update_event(session, event, {"section_visibility": dict(request.sectionVisibility)})
    return SectionVisibilityResponse(
        id=event.id,
        wwwId=event.www_id,
        sectionVisibility=event.section_visibility,
    )


@router.put("/events/content")
async def update_section_content(
    request: SectionContentRequest,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> SectionContentResponse:
    event = await get_authorized_event(session, caller, request.wwwId, Action.WRITE)
    fields: Dict[str, Any] = {"section_content": dict(request.sectionContent)}
    if request.galleryContent is not None:
        fields["settings"] = {**(event.settings or {}), "galleryContent": request.galleryContent}
    event = await update_event(session, event, fields)
    return SectionContentResponse(
        id=event.id,
        wwwId=event.www_id,
        sectionContent=event.section_content,
    )


@router.put("/events/general-info")
async def update_general_info(
    request: GeneralInfoRequest,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> PublicEventResponse:
    event = await get_authorized_event(session, caller, request.wwwId, Action.WRITE)
    event = await _apply_info_update(session, event, request)
    return to_public_event(event)


async def _apply_info_update(session: AsyncSession, event: Event, request: EventInfoUpdate) -> Event:
    fields = {
        column: getattr(request, field)
        for field, column in GENERAL_INFO_COLUMNS.items()
        if getattr(request, field) is not None
    }
    if not fields:
        return event
    return await update_event(session, event, fields)


@router.get("/events/rsvp-link")
async def get_rsvp_link(
    wwwId: str,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> EventLinkResponse:
    event = await get_authorized_event(session, caller, wwwId, Action.READ)
    return EventLinkResponse(eventId=event.id, wwwId=event.www_id, title=event.title, url=build_rsvp_url(event))


@router.get("/events/gallery-link")
async def get_gallery_link(
    wwwId: str,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> EventLinkResponse:
    event = await get_authorized_event(session, caller, wwwId, Action.READ)
    return EventLinkResponse(eventId=event.id, wwwId=event.www_id, title=event.title, url=build_gallery_url(event))


@router.get("/events/rsvp-form-questions")
async def get_rsvp_form_questions(
    wwwId: str,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> EventQuestionsResponse:
    event = await get_authorized_event(session, caller, wwwId, Action.READ)
    if not event.rsvp_enabled:
        raise RsvpDisabled()
    questions = await list_custom_questions(session, event.id)
    return EventQuestionsResponse(
        eventId=event.id,
        wwwId=event.www_id,
        title=event.title,
        questions=[to_question_response(q) for q in questions],
    )


@router.post(
    "/events/rsvp-form-questions",
    status_code=status.HTTP_201_CREATED,
)
async def add_rsvp_form_question(
    command: CreateQuestionCommand,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> CustomQuestionResponse:
    event = await get_authorized_event(session, caller, command.wwwId, Action.WRITE)
    if not event.rsvp_enabled:
        raise RsvpDisabled()
    question = await create_custom_question(session, event, command.questionData)
    return to_question_response(question)


@router.put("/events/rsvp-form-questions")
async def edit_rsvp_form_question(
    command: UpdateQuestionCommand,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> CustomQuestionResponse:
    event = await get_authorized_event(session, caller, command.wwwId, Action.WRITE)
    question = await update_custom_question(session, event, command.questionId, command.questionData)
    return to_question_response(question)


@router.delete("/events/rsvp-form-questions/{questionId}")
async def remove_rsvp_form_question(
    questionId: UUID,
    wwwId: str,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> CustomQuestionResponse:
    event = await get_authorized_event(session, caller, wwwId, Action.WRITE)
    question = await deactivate_custom_question(session, event, questionId)
    return to_question_response(question)


@router.get("/events/rsvp-guests/{wwwId}")
async def get_rsvp_guests(
    wwwId: str,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> RsvpGuestsResponse:
    event = await get_authorized_event(session, caller, wwwId, Action.READ)
    if not event.rsvp_enabled:
        raise RsvpDisabled()
    rsvps = await list_event_rsvps(session, event)
    questions = await list_active_custom_questions(session, event.id)
    return RsvpGuestsResponse(
        event=to_public_event(event),
        guests=[to_rsvp_response(r) for r in rsvps],
        customQuestions=[to_question_response(q) for q in questions],
    )


@router.get("/organizer/event")
async def get_my_event(
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> Optional[PublicEventResponse]:
    if caller is None:
        raise Unauthorized()
    if caller.role != UserRole.ORGANIZER:
        raise Forbidden("Organizer access required")

    event = await get_organizer_event(session, caller)
    if event is None:
        return None
    return to_public_event(event)


@router.get("/events")
async def get_events(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    eventStatus: Optional[EventStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> EventPage:
    organizer_id = listing_scope(caller)
    events, total = await list_events(session, organizer_id, eventStatus, search, page, limit)
    return EventPage(
        items=[to_event_summary(event) for event in events],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/events/available")
async def get_available_events(
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> List[EventSummary]:
    require_superadmin(caller)
    events = await list_available_events(session)
    return [to_event_summary(event) for event in events]


@router.get("/events/day-details")
async def get_day_details(
    wwwId: str,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> DayDetailsResponse:
    event = await get_authorized_event(session, caller, wwwId, Action.READ)
    return DayDetailsResponse(
        eventId=event.id,
        wwwId=event.www_id,
        title=event.title,
        coupleNames=event.couple_names,
        eventDate=event.event_date,
        venue=event.venue,
        eventUrl=build_event_url(event),
        galleryEnabled=event.gallery_enabled,
        rsvpEnabled=event.rsvp_enabled,
        status=event.status,
        sectionVisibility=event.section_visibility or {},
    )


@router.get("/organizers")
async def get_organizers(
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> List[OrganizerSummary]:
    require_superadmin(caller)
    return await list_organizers(session)


# Registered last so the fixed /events/... paths above take precedence
@router.get("/events/{eventId}")
async def get_event(
    eventId: UUID,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> PublicEventResponse:
    event = await get_authorized_event_by_id(session, caller, eventId, Action.READ)
    return to_public_event(event)


@router.put("/events/{eventId}")
async def update_event_info(
    eventId: UUID,
    request: EventInfoUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> PublicEventResponse:
    event = await get_authorized_event_by_id(session, caller, eventId, Action.WRITE)
    event = await _apply_info_update(session, event, request)
    return to_public_event(event)
