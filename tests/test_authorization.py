from uuid import uuid4

import pytest

from weddingsite.auth.dependencies import Caller
from weddingsite.errors import Forbidden, Unauthorized
from weddingsite.models import Event, UserRole
from weddingsite.services.authorization import (
    Action,
    DenyReason,
    authorize,
    require_access,
    require_superadmin,
)


def _event(www_id="ABC1234", organizer_id=None):
    return Event(www_id=www_id, title="Jane & John", organizer_id=organizer_id)


def test_anonymous_caller_is_unauthorized():
    verdict = authorize(None, _event(), Action.WRITE)

    assert not verdict.allowed
    assert verdict.reason == DenyReason.UNAUTHORIZED


def test_caller_without_profile_is_forbidden():
    caller = Caller(id=uuid4())
    verdict = authorize(caller, _event(organizer_id=caller.id), Action.READ)

    assert not verdict.allowed
    assert verdict.reason == DenyReason.FORBIDDEN


def test_superadmin_is_allowed_on_any_event():
    caller = Caller(id=uuid4(), role=UserRole.SUPERADMIN)

    assert authorize(caller, _event(), Action.WRITE).allowed
    assert authorize(caller, _event(organizer_id=uuid4()), Action.READ).allowed


def test_organizer_is_allowed_on_own_event():
    organizer_id = uuid4()
    caller = Caller(id=organizer_id, role=UserRole.ORGANIZER, event_id="ABC1234")

    assert authorize(caller, _event(organizer_id=organizer_id), Action.WRITE).allowed


def test_organizer_writing_another_event_is_forbidden():
    organizer_id = uuid4()
    caller = Caller(id=organizer_id, role=UserRole.ORGANIZER, event_id="ABC1234")
    other_event = _event(www_id="XYZ9999", organizer_id=uuid4())

    verdict = authorize(caller, other_event, Action.WRITE)

    assert not verdict.allowed
    assert verdict.reason == DenyReason.FORBIDDEN


def test_organizer_cannot_claim_unassigned_event():
    caller = Caller(id=uuid4(), role=UserRole.ORGANIZER)

    assert authorize(caller, _event(organizer_id=None), Action.WRITE).reason == DenyReason.FORBIDDEN


def test_guest_matching_organizer_id_is_forbidden():
    guest_id = uuid4()
    caller = Caller(id=guest_id, role=UserRole.GUEST)

    assert not authorize(caller, _event(organizer_id=guest_id), Action.READ).allowed


@pytest.mark.parametrize("role", list(UserRole))
def test_verdict_does_not_depend_on_action(role):
    caller = Caller(id=uuid4(), role=role)
    event = _event(organizer_id=caller.id)

    assert authorize(caller, event, Action.READ) == authorize(caller, event, Action.WRITE)


def test_require_access_raises_matching_errors():
    event = _event(organizer_id=uuid4())

    with pytest.raises(Unauthorized):
        require_access(None, event, Action.WRITE)

    with pytest.raises(Forbidden):
        require_access(Caller(id=uuid4(), role=UserRole.ORGANIZER), event, Action.WRITE)

    owner = Caller(id=event.organizer_id, role=UserRole.ORGANIZER)
    assert require_access(owner, event, Action.WRITE) is owner


def test_require_superadmin():
    with pytest.raises(Unauthorized):
        require_superadmin(None)

    with pytest.raises(Forbidden):
        require_superadmin(Caller(id=uuid4(), role=UserRole.ORGANIZER))

    admin = Caller(id=uuid4(), role=UserRole.SUPERADMIN)
    assert require_superadmin(admin) is admin
