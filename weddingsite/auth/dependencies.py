import logging
import os
from typing import Optional
from uuid import UUID

from jose import jwt, JWTError
from fastapi import Header, Depends
from dotenv import load_dotenv
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from weddingsite.db.database import get_session
from weddingsite.models import UserProfile, UserRole

# Load .env file
load_dotenv()

logger = logging.getLogger(__name__)

SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")

if not SUPABASE_JWT_SECRET:
    raise RuntimeError("SUPABASE_JWT_SECRET is not set in environment variables")


class Caller(SQLModel):
    """An authenticated principal.

    ``role`` is ``None`` when the token is valid but no profile row exists
    for the subject.
    """

    id: UUID
    email: Optional[str] = None
    display_name: Optional[str] = None
    role: Optional[UserRole] = None
    event_id: Optional[str] = None

    @property
    def has_profile(self) -> bool:
        return self.role is not None


def caller_from_profile(profile: UserProfile) -> Caller:
    return Caller(
        id=profile.id,
        email=profile.email,
        display_name=profile.display_name,
        role=profile.role,
        event_id=profile.event_id,
    )


def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        SUPABASE_JWT_SECRET,
        algorithms=["HS256"],
        options={"verify_aud": False}
    )


async def get_current_caller(
    authorization: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_session)
) -> Optional[Caller]:
    """Resolve the bearer token to a caller, or ``None`` when there is no valid credential."""
    if not authorization or not authorization.startswith("Bearer "):
        return None

    token = authorization.split(" ")[1]

    try:
        payload = decode_access_token(token)
    except JWTError as e:
        logger.warning("JWT decode error: %s", e)
        return None

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        logger.warning("JWT subject is not a valid user id: %r", payload.get("sub"))
        return None

    profile = await session.get(UserProfile, user_id)
    if profile is None:
        logger.info("No user profile for authenticated user %s", user_id)
        return Caller(id=user_id, email=payload.get("email"))

    return caller_from_profile(profile)
