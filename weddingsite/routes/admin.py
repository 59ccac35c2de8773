from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from weddingsite.auth.dependencies import Caller, get_current_caller
from weddingsite.db.database import get_session
from weddingsite.errors import NotFound
from weddingsite.models import UserProfile
from weddingsite.services.authorization import require_superadmin
from weddingsite.services.directory import (
    CreateEventCommand,
    PublicEventResponse,
    assign_organizer,
    create_event,
    resolve_by_public_id,
    to_public_event,
)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
)


class AssignOrganizerCommand(SQLModel):
    organizerId: UUID


@router.post(
    "/events",
    status_code=status.HTTP_201_CREATED,
)
async def create_new_event(
    command: CreateEventCommand,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> PublicEventResponse:
    require_superadmin(caller)
    event = await create_event(session, command)
    return to_public_event(event)


@router.put("/events/{wwwId}/organizer")
async def set_event_organizer(
    wwwId: str,
    command: AssignOrganizerCommand,
    session: AsyncSession = Depends(get_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> PublicEventResponse:
    require_superadmin(caller)
    event = await resolve_by_public_id(session, wwwId)
    profile = await session.get(UserProfile, command.organizerId)
    if profile is None:
        raise NotFound("User profile not found")
    event = await assign_organizer(session, event, profile)
    return to_public_event(event)
