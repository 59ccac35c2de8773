"""HTTP errors raised by the service layer.

Each error is an ``HTTPException`` so services can raise them directly and
FastAPI renders them without any extra handler.
"""
from enum import Enum
from typing import Any, List, Optional

from fastapi import HTTPException, status


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str = "Conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class EventGone(HTTPException):
    def __init__(self, detail: str = "Event has been cancelled"):
        super().__init__(status_code=status.HTTP_410_GONE, detail=detail)


class RsvpDisabled(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="RSVP is not enabled for this event",
        )


class GalleryDisabled(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Gallery is not enabled for this event",
        )


class InvalidReason(str, Enum):
    MISSING_MAIN_GUEST = "missing_main_guest"
    BLANK_ADDITIONAL_GUEST = "blank_additional_guest"
    UNKNOWN_GUEST_REFERENCE = "unknown_guest_reference"
    QUESTION_EVENT_MISMATCH = "question_event_mismatch"
    DUPLICATE_QUESTION_RESPONSE = "duplicate_question_response"


class InvalidSubmission(HTTPException):
    def __init__(self, reason: InvalidReason, message: str, field: Optional[str] = None):
        self.reason = reason
        detail: dict[str, Any] = {"reason": reason.value, "message": message}
        if field is not None:
            detail["field"] = field
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UnknownStep(HTTPException):
    """A flow step id that is not part of the current plan.

    The detail carries the current step ids so the client can resynchronise
    the guest's position instead of treating this as terminal.
    """

    def __init__(self, step_id: str, steps: List[str]):
        self.step_id = step_id
        self.steps = steps
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "reason": "unknown_step",
                "stepId": step_id,
                "steps": steps,
            },
        )
