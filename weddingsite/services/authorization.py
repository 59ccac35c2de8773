"""Event ownership checks.

Every privileged read or write on an event goes through :func:`authorize`.
There is a single ownership predicate: superadmins may do anything, an
organizer may act on the event whose ``organizer_id`` is their own id, and
nobody else may. The field being touched does not matter.
"""
import logging
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from weddingsite.auth.dependencies import Caller
from weddingsite.errors import Forbidden, Unauthorized
from weddingsite.models import Event, UserRole
from weddingsite.services.directory import resolve_by_public_id, resolve_internal

logger = logging.getLogger(__name__)


class Action(str, Enum):
    READ = "read"
    WRITE = "write"


class DenyReason(str, Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"


class Verdict(SQLModel):
    allowed: bool
    reason: Optional[DenyReason] = None

    @classmethod
    def allow(cls) -> "Verdict":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason) -> "Verdict":
        return cls(allowed=False, reason=reason)


def authorize(caller: Optional[Caller], event: Event, action: Action) -> Verdict:
    # ``action`` is accepted for the audit trail only; reads and writes share the rule set.
    if caller is None:
        return Verdict.deny(DenyReason.UNAUTHORIZED)

    if not caller.has_profile:
        return Verdict.deny(DenyReason.FORBIDDEN)

    if caller.role == UserRole.SUPERADMIN:
        return Verdict.allow()

    if (
        caller.role == UserRole.ORGANIZER
        and event.organizer_id is not None
        and caller.id == event.organizer_id
    ):
        return Verdict.allow()

    return Verdict.deny(DenyReason.FORBIDDEN)


def raise_for_verdict(verdict: Verdict) -> None:
    if verdict.allowed:
        return
    if verdict.reason == DenyReason.UNAUTHORIZED:
        raise Unauthorized()
    raise Forbidden()


def require_access(caller: Optional[Caller], event: Event, action: Action) -> Caller:
    verdict = authorize(caller, event, action)
    if not verdict.allowed:
        logger.warning(
            "Denied %s on event %s for caller %s: %s",
            action.value,
            event.www_id,
            caller.id if caller else None,
            verdict.reason.value,
        )
    raise_for_verdict(verdict)
    return caller


async def get_authorized_event(
    session: AsyncSession,
    caller: Optional[Caller],
    www_id: str,
    action: Action,
) -> Event:
    """Resolve an event and check the caller may act on it."""
    event = await resolve_by_public_id(session, www_id)
    require_access(caller, event, action)
    return event


def require_superadmin(caller: Optional[Caller]) -> Caller:
    if caller is None:
        raise Unauthorized()
    if caller.role != UserRole.SUPERADMIN:
        logger.warning("Denied admin operation for caller %s", caller.id)
        raise Forbidden("Superadmin access required")
    return caller


async def get_authorized_event_by_id(
    session: AsyncSession,
    caller: Optional[Caller],
    event_id: UUID,
    action: Action,
) -> Event:
    event = await resolve_internal(session, event_id)
    require_access(caller, event, action)
    return event


def listing_scope(caller: Optional[Caller]) -> Optional[UUID]:
    """The query form of :func:`authorize` for event listings.

    Returns ``None`` when every event is visible (superadmin) or the organizer
    id the listing must be narrowed to.
    """
    if caller is None:
        raise Unauthorized()
    if caller.role == UserRole.SUPERADMIN:
        return None
    if caller.role == UserRole.ORGANIZER:
        return caller.id
    logger.warning("Denied event listing for caller %s", caller.id)
    raise Forbidden()
