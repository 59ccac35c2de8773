import os
from uuid import UUID

from dotenv import load_dotenv
from sqlmodel import SQLModel

from weddingsite.errors import GalleryDisabled, RsvpDisabled
from weddingsite.models import Event

load_dotenv()

PUBLIC_APP_URL = os.getenv("PUBLIC_APP_URL", "http://localhost:3000").rstrip("/")


class EventLinkResponse(SQLModel):
    eventId: UUID
    wwwId: str
    title: str
    url: str


def build_event_url(event: Event) -> str:
    return f"{PUBLIC_APP_URL}/event-id/{event.www_id}"


def build_rsvp_url(event: Event) -> str:
    if not event.rsvp_enabled:
        raise RsvpDisabled()
    return f"{build_event_url(event)}/invitation"


def build_gallery_url(event: Event) -> str:
    if not event.gallery_enabled:
        raise GalleryDisabled()
    return f"{build_event_url(event)}/gallery"
