"""RSVP submission validation and persistence.

A household fills in the whole invitation flow client-side and submits once.
:func:`normalize_submission` checks the submission against the event and turns
it into a new :class:`InvitationRsvp`; the first violated rule is reported
and nothing is written.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set
from uuid import UUID

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from weddingsite.errors import InvalidReason, InvalidSubmission, RsvpDisabled
from weddingsite.models import Event, InvitationRsvp, RsvpStatus, utc_now
from weddingsite.services.directory import resolve_public_event
from weddingsite.services.questions import get_event_question_ids

logger = logging.getLogger(__name__)

# Submission field -> InvitationRsvp column, for the answers keyed by guest name
GUEST_ANSWER_FIELDS = {
    "weddingDayAttendance": "wedding_day_attendance",
    "afterPartyAttendance": "after_party_attendance",
    "foodPreferences": "food_preferences",
    "accommodationNeeded": "accommodation_needed",
    "transportationNeeded": "transportation_needed",
    "notes": "notes",
}


class GuestName(SQLModel):
    name: str = ""
    surname: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.name.strip()} {self.surname.strip()}".strip()


class RsvpSubmission(SQLModel):
    mainGuest: Optional[GuestName] = None
    additionalGuests: List[GuestName] = []
    weddingDayAttendance: Optional[Dict[str, Any]] = None
    afterPartyAttendance: Optional[Dict[str, Any]] = None
    foodPreferences: Optional[Dict[str, Any]] = None
    accommodationNeeded: Optional[Dict[str, Any]] = None
    transportationNeeded: Optional[Dict[str, Any]] = None
    notes: Optional[Dict[str, Any]] = None
    customResponses: Optional[Dict[str, Any]] = None
    email: Optional[str] = None
    sendEmailConfirmation: bool = True


class RsvpSubmitResponse(SQLModel):
    success: bool = True
    rsvpId: UUID
    status: RsvpStatus
    submittedAt: datetime


class RsvpRecordResponse(SQLModel):
    id: UUID
    eventId: UUID
    mainGuest: Dict[str, str]
    additionalGuests: List[Dict[str, str]]
    weddingDayAttendance: Dict[str, Any]
    afterPartyAttendance: Dict[str, Any]
    foodPreferences: Dict[str, Any]
    accommodationNeeded: Dict[str, Any]
    transportationNeeded: Dict[str, Any]
    notes: Dict[str, Any]
    customResponses: Dict[str, Any]
    email: Optional[str] = None
    sendEmailConfirmation: bool
    submittedAt: datetime
    status: RsvpStatus


def to_rsvp_response(rsvp: InvitationRsvp) -> RsvpRecordResponse:
    return RsvpRecordResponse(
        id=rsvp.id,
        eventId=rsvp.event_id,
        mainGuest=rsvp.main_guest,
        additionalGuests=rsvp.additional_guests or [],
        weddingDayAttendance=rsvp.wedding_day_attendance or {},
        afterPartyAttendance=rsvp.after_party_attendance or {},
        foodPreferences=rsvp.food_preferences or {},
        accommodationNeeded=rsvp.accommodation_needed or {},
        transportationNeeded=rsvp.transportation_needed or {},
        notes=rsvp.notes or {},
        customResponses=rsvp.custom_responses or {},
        email=rsvp.email,
        sendEmailConfirmation=rsvp.send_email_confirmation,
        submittedAt=rsvp.submitted_at,
        status=rsvp.status,
    )


def _parse_question_id(key: str) -> Optional[UUID]:
    try:
        return UUID(str(key))
    except ValueError:
        return None


def normalize_submission(
    event: Event,
    submission: RsvpSubmission,
    event_question_ids: Iterable[UUID],
) -> InvitationRsvp:
    """Validate a household submission and build the record to insert.

    Checks run in a fixed order and the first failure is raised:
    RSVP enabled, main guest and additional guests named, every per-guest
    answer keyed by a listed guest, every custom response keyed by a question
    of this event and answered at most once.
    """
    if not event.rsvp_enabled:
        raise RsvpDisabled()

    main_guest = submission.mainGuest
    if main_guest is None or not main_guest.name.strip() or not main_guest.surname.strip():
        raise InvalidSubmission(
            InvalidReason.MISSING_MAIN_GUEST,
            "Main guest name and surname are required",
            field="mainGuest",
        )

    blank = [i for i, guest in enumerate(submission.additionalGuests) if not guest.full_name]
    if blank:
        raise InvalidSubmission(
            InvalidReason.BLANK_ADDITIONAL_GUEST,
            f"Additional guests need a name: positions {', '.join(map(str, blank))}",
            field="additionalGuests",
        )

    guest_names: Set[str] = {main_guest.full_name}
    guest_names.update(guest.full_name for guest in submission.additionalGuests)

    answers: Dict[str, Dict[str, Any]] = {}
    for field, column in GUEST_ANSWER_FIELDS.items():
        mapping = getattr(submission, field) or {}
        unknown = sorted(key for key in mapping if key not in guest_names)
        if unknown:
            raise InvalidSubmission(
                InvalidReason.UNKNOWN_GUEST_REFERENCE,
                f"Unknown guest in {field}: {', '.join(unknown)}",
                field=field,
            )
        answers[column] = dict(mapping)

    question_ids = set(event_question_ids)
    custom_responses = submission.customResponses or {}
    foreign = sorted(
        key for key in custom_responses
        if _parse_question_id(key) not in question_ids
    )
    if foreign:
        raise InvalidSubmission(
            InvalidReason.QUESTION_EVENT_MISMATCH,
            f"Questions do not belong to this event: {', '.join(foreign)}",
            field="customResponses",
        )

    responses: Dict[str, Any] = {}
    for key, value in custom_responses.items():
        question_key = str(_parse_question_id(key))
        if question_key in responses:
            raise InvalidSubmission(
                InvalidReason.DUPLICATE_QUESTION_RESPONSE,
                f"More than one answer for question {question_key}",
                field="customResponses",
            )
        responses[question_key] = value

    return InvitationRsvp(
        event_id=event.id,
        main_guest={"name": main_guest.name.strip(), "surname": main_guest.surname.strip()},
        additional_guests=[
            {"name": guest.name.strip(), "surname": guest.surname.strip()}
            for guest in submission.additionalGuests
        ],
        custom_responses=responses,
        email=submission.email or "",
        send_email_confirmation=submission.sendEmailConfirmation,
        submitted_at=utc_now(),
        status=RsvpStatus.PENDING,
        **answers,
    )


async def submit_rsvp(session: AsyncSession, www_id: str, submission: RsvpSubmission) -> InvitationRsvp:
    """Validate and insert a new RSVP. Resubmissions always create a new record."""
    event = await resolve_public_event(session, www_id)

    if not event.rsvp_enabled:
        raise RsvpDisabled()

    question_ids = await get_event_question_ids(session, event.id)
    try:
        rsvp = normalize_submission(event, submission, question_ids)
    except InvalidSubmission as exc:
        logger.info("Rejected RSVP for event %s: %s", www_id, exc.reason.value)
        raise

    session.add(rsvp)
    await session.commit()
    await session.refresh(rsvp)
    logger.info("Stored RSVP %s for event %s", rsvp.id, www_id)
    return rsvp


async def list_event_rsvps(session: AsyncSession, event: Event) -> List[InvitationRsvp]:
    statement = (
        select(InvitationRsvp)
        .where(InvitationRsvp.event_id == event.id)
        .order_by(InvitationRsvp.submitted_at.desc())
    )
    result = await session.execute(statement)
    return result.scalars().all()
