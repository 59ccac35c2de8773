import logging
import secrets
import string
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import SQLModel, col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from weddingsite.auth.dependencies import Caller
from weddingsite.errors import Conflict, EventGone, NotFound
from weddingsite.models import Event, EventStatus, UserProfile, UserRole, utc_now

logger = logging.getLogger(__name__)

WWW_ID_ALPHABET = string.ascii_uppercase + string.digits
WWW_ID_LENGTH = 7
WWW_ID_MAX_ATTEMPTS = 10

# ``id`` and ``www_id`` are fixed at creation.
MUTABLE_EVENT_FIELDS = {
    "title",
    "couple_names",
    "event_date",
    "venue",
    "description",
    "status",
    "organizer_id",
    "gallery_enabled",
    "rsvp_enabled",
    "section_visibility",
    "section_content",
    "settings",
}


class CreateEventCommand(SQLModel):
    title: str
    coupleNames: Optional[str] = None
    eventDate: Optional[date] = None
    venue: Optional[str] = None
    description: Optional[str] = None
    galleryEnabled: bool = False
    rsvpEnabled: bool = False
    settings: Dict[str, Any] = {}


class PublicEventResponse(SQLModel):
    id: UUID
    wwwId: str
    title: str
    coupleNames: Optional[str] = None
    eventDate: Optional[date] = None
    venue: Optional[str] = None
    description: Optional[str] = None
    galleryEnabled: bool
    rsvpEnabled: bool
    status: EventStatus
    organizerId: Optional[UUID] = None
    sectionVisibility: Dict[str, bool]
    sectionContent: Dict[str, Any]


def to_public_event(event: Event) -> PublicEventResponse:
    return PublicEventResponse(
        id=event.id,
        wwwId=event.www_id,
        title=event.title,
        coupleNames=event.couple_names,
        eventDate=event.event_date,
        venue=event.venue,
        description=event.description,
        galleryEnabled=event.gallery_enabled,
        rsvpEnabled=event.rsvp_enabled,
        status=event.status,
        organizerId=event.organizer_id,
        sectionVisibility=event.section_visibility or {},
        sectionContent=event.section_content or {},
    )


def generate_www_id() -> str:
    return "".join(secrets.choice(WWW_ID_ALPHABET) for _ in range(WWW_ID_LENGTH))


async def find_event_by_public_id(session: AsyncSession, www_id: str) -> Optional[Event]:
    result = await session.execute(select(Event).where(Event.www_id == www_id))
    return result.scalar_one_or_none()


async def resolve_by_public_id(session: AsyncSession, www_id: str) -> Event:
    event = await find_event_by_public_id(session, www_id)
    if event is None:
        raise NotFound("Event not found")
    return event


async def resolve_internal(session: AsyncSession, event_id: UUID) -> Event:
    event = await session.get(Event, event_id)
    if event is None:
        raise NotFound("Event not found")
    return event


async def resolve_public_event(session: AsyncSession, www_id: str) -> Event:
    """Resolve an event for a public (unauthenticated) endpoint.

    Cancelled events exist in the store but are never served publicly.
    """
    event = await resolve_by_public_id(session, www_id)
    if event.status == EventStatus.CANCELLED:
        raise EventGone()
    return event


async def update_event(session: AsyncSession, event: Event, fields: Dict[str, Any]) -> Event:
    """Apply a partial update. Concurrent updates to the same event are last-write-wins."""
    immutable = set(fields) - MUTABLE_EVENT_FIELDS
    if immutable:
        raise ValueError(f"Event fields cannot be updated: {', '.join(sorted(immutable))}")

    for key, value in fields.items():
        setattr(event, key, value)
    event.updated_at = utc_now()

    session.add(event)
    await session.commit()
    await session.refresh(event)
    logger.info("Updated event %s fields: %s", event.www_id, ", ".join(sorted(fields)))
    return event


async def create_event(session: AsyncSession, command: CreateEventCommand) -> Event:
    for _ in range(WWW_ID_MAX_ATTEMPTS):
        www_id = generate_www_id()
        if await find_event_by_public_id(session, www_id) is None:
            break
    else:
        raise RuntimeError("Could not generate a unique public event id")

    event = Event(
        www_id=www_id,
        title=command.title,
        couple_names=command.coupleNames,
        event_date=command.eventDate,
        venue=command.venue,
        description=command.description,
        status=EventStatus.PLANNED,
        gallery_enabled=command.galleryEnabled,
        rsvp_enabled=command.rsvpEnabled,
        settings=dict(command.settings),
    )
    session.add(event)
    await session.commit()
    await session.refresh(event)
    logger.info("Created event %s", event.www_id)
    return event


async def assign_organizer(session: AsyncSession, event: Event, profile: UserProfile) -> Event:
    """Link an organizer profile and an event in both directions.

    An organizer administers at most one event, so any previous link on
    either side is released first. Superadmin profiles are never demoted
    to organizer.
    """
    if profile.role == UserRole.SUPERADMIN:
        raise Conflict("A superadmin cannot be assigned as an event organizer")

    if profile.event_id and profile.event_id != event.www_id:
        previous_event = await find_event_by_public_id(session, profile.event_id)
        if previous_event is not None and previous_event.organizer_id == profile.id:
            previous_event.organizer_id = None
            session.add(previous_event)

    if event.organizer_id is not None and event.organizer_id != profile.id:
        previous_organizer = await session.get(UserProfile, event.organizer_id)
        if previous_organizer is not None and previous_organizer.event_id == event.www_id:
            previous_organizer.event_id = None
            session.add(previous_organizer)

    event.organizer_id = profile.id
    event.updated_at = utc_now()
    profile.role = UserRole.ORGANIZER
    profile.event_id = event.www_id

    session.add(event)
    session.add(profile)
    await session.commit()
    await session.refresh(event)
    logger.info("Assigned organizer %s to event %s", profile.id, event.www_id)
    return event


async def get_organizer_event(session: AsyncSession, caller: Caller) -> Optional[Event]:
    if not caller.event_id:
        return None
    return await find_event_by_public_id(session, caller.event_id)


class EventSummary(SQLModel):
    id: UUID
    wwwId: str
    title: str
    coupleNames: Optional[str] = None
    eventDate: Optional[date] = None
    status: EventStatus
    organizerId: Optional[UUID] = None


class EventPage(SQLModel):
    items: List[EventSummary]
    total: int
    page: int
    limit: int


class OrganizerSummary(SQLModel):
    id: UUID
    email: str
    displayName: Optional[str] = None
    eventId: Optional[str] = None
    event: Optional[EventSummary] = None


def to_event_summary(event: Event) -> EventSummary:
    return EventSummary(
        id=event.id,
        wwwId=event.www_id,
        title=event.title,
        coupleNames=event.couple_names,
        eventDate=event.event_date,
        status=event.status,
        organizerId=event.organizer_id,
    )


async def list_events(
    session: AsyncSession,
    organizer_id: Optional[UUID] = None,
    status: Optional[EventStatus] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Event], int]:
    """Newest events first, optionally narrowed to one organizer's events.

    Returns the requested page and the total number of matching events.
    """
    statement = select(Event)
    if organizer_id is not None:
        statement = statement.where(Event.organizer_id == organizer_id)
    if status is not None:
        statement = statement.where(Event.status == status)
    if search:
        pattern = f"%{search}%"
        statement = statement.where(
            or_(col(Event.title).ilike(pattern), col(Event.couple_names).ilike(pattern))
        )

    count_result = await session.execute(select(func.count()).select_from(statement.subquery()))
    total = count_result.scalar_one()

    result = await session.execute(
        statement.order_by(col(Event.created_at).desc()).offset((page - 1) * limit).limit(limit)
    )
    return result.scalars().all(), total


async def list_available_events(session: AsyncSession) -> List[Event]:
    """Events with no organizer assigned, newest first."""
    result = await session.execute(
        select(Event)
        .where(Event.organizer_id == None)  # noqa: E711 - SQLAlchemy IS NULL
        .order_by(col(Event.created_at).desc())
    )
    return result.scalars().all()


async def list_organizers(session: AsyncSession) -> List[OrganizerSummary]:
    result = await session.execute(
        select(UserProfile)
        .where(UserProfile.role == UserRole.ORGANIZER)
        .order_by(col(UserProfile.created_at).desc())
    )
    organizers = result.scalars().all()

    www_ids = {profile.event_id for profile in organizers if profile.event_id}
    events: Dict[str, Event] = {}
    if www_ids:
        event_result = await session.execute(select(Event).where(col(Event.www_id).in_(www_ids)))
        events = {event.www_id: event for event in event_result.scalars().all()}

    summaries = []
    for profile in organizers:
        event = events.get(profile.event_id) if profile.event_id else None
        summaries.append(
            OrganizerSummary(
                id=profile.id,
                email=profile.email,
                displayName=profile.display_name,
                eventId=profile.event_id,
                event=to_event_summary(event) if event else None,
            )
        )
    return summaries
