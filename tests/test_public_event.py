from fastapi.testclient import TestClient

from weddingsite.main import app
from weddingsite.models import CustomQuestion, Event, EventStatus
from tests.conftest import seed


def test_public_event_is_served_for_planned_and_active_events():
    seed(
        Event(
            www_id="PUB0001",
            title="Jane & John",
            couple_names="Jane & John",
            status=EventStatus.ACTIVE,
            section_visibility={"heroSection": True, "menuSection": False},
            section_content={"heroSection": {"headline": "We're getting married"}},
        ),
        Event(www_id="PUB0002", title="Planned", status=EventStatus.PLANNED),
    )

    with TestClient(app) as client:
        active = client.get("/event-id/PUB0001")
        planned = client.get("/event-id/PUB0002")

    assert active.status_code == 200
    body = active.json()
    assert body["wwwId"] == "PUB0001"
    assert body["coupleNames"] == "Jane & John"
    assert body["sectionVisibility"] == {"heroSection": True, "menuSection": False}
    assert body["sectionContent"]["heroSection"]["headline"] == "We're getting married"
    assert planned.status_code == 200


def test_cancelled_event_is_gone():
    seed(Event(www_id="PUB0003", title="Called off", status=EventStatus.CANCELLED))

    with TestClient(app) as client:
        response = client.get("/event-id/PUB0003")
        flow = client.get("/event-id/PUB0003/invitation/flow")

    assert response.status_code == 410
    assert flow.status_code == 410


def test_unknown_event_is_not_found():
    with TestClient(app) as client:
        response = client.get("/event-id/MISSING")

    assert response.status_code == 404


def test_gallery_content_requires_gallery_enabled():
    seed(
        Event(
            www_id="PUB0004",
            title="Gallery",
            gallery_enabled=True,
            settings={"galleryContent": {"welcomeText": "Welcome To"}},
        ),
        Event(www_id="PUB0005", title="No gallery", gallery_enabled=False),
    )

    with TestClient(app) as client:
        enabled = client.get("/event-id/PUB0004/gallery")
        disabled = client.get("/event-id/PUB0005/gallery")

    assert enabled.status_code == 200
    assert enabled.json()["content"] == {"welcomeText": "Welcome To"}
    assert disabled.status_code == 403
    assert disabled.json()["detail"] == "Gallery is not enabled for this event"


def test_invitation_flow_for_event_with_custom_questions():
    event = Event(www_id="ABC1234", title="Flow", rsvp_enabled=True)
    first = CustomQuestion(event_id=event.id, title="Song request?", order_index=1)
    second = CustomQuestion(event_id=event.id, title="Allergies?", order_index=2)
    inactive = CustomQuestion(event_id=event.id, title="Old", order_index=3, is_active=False)
    seed(event, first, second, inactive)

    with TestClient(app) as client:
        flow = client.get("/event-id/ABC1234/invitation/flow")
        questions = client.get("/event-id/ABC1234/invitation/questions")
        from_transport = client.get("/event-id/ABC1234/invitation/flow/transportation")
        from_last_question = client.get(f"/event-id/ABC1234/invitation/flow/custom-question-{second.id}")

    assert flow.status_code == 200
    body = flow.json()
    assert body["total"] == 11
    step_ids = [step["id"] for step in body["steps"]]
    assert step_ids[6:8] == [f"custom-question-{first.id}", f"custom-question-{second.id}"]
    assert f"custom-question-{inactive.id}" not in step_ids

    assert [q["title"] for q in questions.json()] == ["Song request?", "Allergies?"]

    assert from_transport.json()["next"]["id"] == f"custom-question-{first.id}"
    assert from_last_question.json()["next"]["id"] == "notes"
    assert from_last_question.json()["previous"]["id"] == f"custom-question-{first.id}"


def test_stale_step_returns_conflict_with_current_plan():
    event = Event(www_id="PUB0006", title="Stale", rsvp_enabled=True)
    retired = CustomQuestion(event_id=event.id, title="Retired", order_index=1, is_active=False)
    seed(event, retired)

    with TestClient(app) as client:
        response = client.get(f"/event-id/PUB0006/invitation/flow/custom-question-{retired.id}")
        last = client.get("/event-id/PUB0006/invitation/flow/confirmation")

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["reason"] == "unknown_step"
    assert len(detail["steps"]) == 9

    assert last.status_code == 200
    assert last.json()["next"] is None
    assert last.json()["isLast"] is True


def test_invitation_flow_requires_rsvp_enabled():
    seed(Event(www_id="PUB0007", title="No RSVP", rsvp_enabled=False))

    with TestClient(app) as client:
        flow = client.get("/event-id/PUB0007/invitation/flow")
        questions = client.get("/event-id/PUB0007/invitation/questions")

    assert flow.status_code == 403
    assert questions.status_code == 403
