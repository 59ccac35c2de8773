"""Convenience exports for the models package."""

from .custom_question import CustomQuestion, QuestionType
from .event import Event, EventStatus
from .invitation_rsvp import InvitationRsvp, RsvpStatus
from .user_profile import UserProfile, UserRole
from .timestamps import utc_now
