import asyncio
import re

import pytest
from fastapi.testclient import TestClient

from weddingsite.errors import Conflict
from weddingsite.main import app
from weddingsite.models import Event, UserProfile, UserRole
from weddingsite.services.directory import assign_organizer
from tests.conftest import AsyncSessionLocal, auth_header, seed


@pytest.fixture(scope="module")
def profiles(setup_database):
    superadmin = UserProfile(email="admin@example.com", role=UserRole.SUPERADMIN)
    organizer = UserProfile(email="organizer@example.com", role=UserRole.GUEST)
    seed(superadmin, organizer)
    return {"superadmin": superadmin, "organizer": organizer}


async def _load(model, key):
    async with AsyncSessionLocal() as session:
        return await session.get(model, key)


def test_superadmin_creates_unassigned_event(profiles):
    with TestClient(app) as client:
        response = client.post(
            "/admin/events",
            json={"title": "Jane & John", "coupleNames": "Jane & John", "rsvpEnabled": True},
            headers=auth_header(profiles["superadmin"].id),
        )

    assert response.status_code == 201
    body = response.json()
    assert re.fullmatch(r"[A-Z0-9]{7}", body["wwwId"])
    assert body["status"] == "planned"
    assert body["organizerId"] is None
    assert body["rsvpEnabled"] is True


def test_only_superadmin_creates_events(profiles):
    with TestClient(app) as client:
        anonymous = client.post("/admin/events", json={"title": "Nope"})
        guest = client.post(
            "/admin/events",
            json={"title": "Nope"},
            headers=auth_header(profiles["organizer"].id),
        )

    assert anonymous.status_code == 401
    assert guest.status_code == 403


def test_assigning_organizer_links_both_directions(profiles):
    first = Event(www_id="ADM0001", title="First")
    second = Event(www_id="ADM0002", title="Second")
    seed(first, second)
    admin_headers = auth_header(profiles["superadmin"].id)
    organizer_id = str(profiles["organizer"].id)

    with TestClient(app) as client:
        assigned = client.put(
            "/admin/events/ADM0001/organizer",
            json={"organizerId": organizer_id},
            headers=admin_headers,
        )
        write = client.put(
            "/dashboard/events/section-visibility",
            json={"wwwId": "ADM0001", "sectionVisibility": {"heroSection": True}},
            headers=auth_header(profiles["organizer"].id),
        )
        reassigned = client.put(
            "/admin/events/ADM0002/organizer",
            json={"organizerId": organizer_id},
            headers=admin_headers,
        )

    assert assigned.status_code == 200
    assert assigned.json()["organizerId"] == organizer_id
    assert write.status_code == 200
    assert reassigned.status_code == 200

    profile = asyncio.run(_load(UserProfile, profiles["organizer"].id))
    assert profile.role == UserRole.ORGANIZER
    assert profile.event_id == "ADM0002"

    released = asyncio.run(_load(Event, first.id))
    assert released.organizer_id is None


def test_assigning_unknown_profile_is_not_found(profiles):
    seed(Event(www_id="ADM0003", title="Third"))

    with TestClient(app) as client:
        response = client.put(
            "/admin/events/ADM0003/organizer",
            json={"organizerId": "00000000-0000-0000-0000-000000000000"},
            headers=auth_header(profiles["superadmin"].id),
        )

    assert response.status_code == 404


def test_superadmin_cannot_be_assigned_as_organizer(profiles):
    event = Event(www_id="ADM0004", title="Fourth")
    seed(event)

    with TestClient(app) as client:
        response = client.put(
            "/admin/events/ADM0004/organizer",
            json={"organizerId": str(profiles["superadmin"].id)},
            headers=auth_header(profiles["superadmin"].id),
        )

    assert response.status_code == 409

    profile = asyncio.run(_load(UserProfile, profiles["superadmin"].id))
    assert profile.role == UserRole.SUPERADMIN
    assert profile.event_id is None

    untouched = asyncio.run(_load(Event, event.id))
    assert untouched.organizer_id is None


def test_assign_organizer_service_keeps_superadmin_role():
    admin = UserProfile(email="second-admin@example.com", role=UserRole.SUPERADMIN)
    event = Event(www_id="ADM0005", title="Fifth")
    seed(admin, event)

    async def verify_service():
        async with AsyncSessionLocal() as session:
            stored_event = await session.get(Event, event.id)
            stored_admin = await session.get(UserProfile, admin.id)
            with pytest.raises(Conflict):
                await assign_organizer(session, stored_event, stored_admin)
            assert stored_admin.role == UserRole.SUPERADMIN

    asyncio.run(verify_service())
