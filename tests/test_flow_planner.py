from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from weddingsite.errors import UnknownStep
from weddingsite.models import CustomQuestion
from weddingsite.services.flow import (
    PREFIX_STEPS,
    SUFFIX_STEPS,
    FlowPlanner,
    StepKind,
)

EVENT_ID = uuid4()
BASE_TIME = datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def _question(order_index, is_active=True, title=None, created_offset=0):
    return CustomQuestion(
        id=uuid4(),
        event_id=EVENT_ID,
        title=title or f"Question {order_index}",
        order_index=order_index,
        is_active=is_active,
        created_at=BASE_TIME + timedelta(seconds=created_offset),
    )


def test_flow_without_questions_is_prefix_and_suffix():
    planner = FlowPlanner([])

    assert len(planner) == len(PREFIX_STEPS) + len(SUFFIX_STEPS) == 9
    assert planner.step_ids == [
        "welcome",
        "guest-identity",
        "attendance",
        "food-preferences",
        "accommodation",
        "transportation",
        "notes",
        "review",
        "confirmation",
    ]


def test_inactive_question_contributes_no_step():
    first = _question(1)
    second = _question(2)
    inactive = _question(3, is_active=False)

    planner = FlowPlanner([second, inactive, first])

    assert len(planner) == 6 + 2 + 3
    custom = [step for step in planner.steps if step.kind == StepKind.CUSTOM]
    assert [step.questionId for step in custom] == [first.id, second.id]
    assert inactive.id not in {step.questionId for step in planner.steps}


def test_custom_steps_sit_between_transportation_and_notes():
    question = _question(1)
    planner = FlowPlanner([question])

    step_id = f"custom-question-{question.id}"
    assert planner.previous_step(step_id).id == "transportation"
    assert planner.next_step(step_id).id == "notes"
    assert planner.step(step_id).title == question.title


def test_equal_order_index_falls_back_to_creation_time():
    earlier = _question(1, title="earlier", created_offset=0)
    later = _question(1, title="later", created_offset=5)

    planner = FlowPlanner([later, earlier])

    titles = [step.title for step in planner.steps if step.kind == StepKind.CUSTOM]
    assert titles == ["earlier", "later"]


def test_custom_steps_follow_ascending_order_index():
    questions = [_question(i) for i in (5, 2, 9, 1)]
    planner = FlowPlanner(questions)

    ordered = [step.questionId for step in planner.steps if step.kind == StepKind.CUSTOM]
    expected = [q.id for q in sorted(questions, key=lambda q: q.order_index)]
    assert ordered == expected


def test_boundaries_return_none():
    planner = FlowPlanner([])

    assert planner.previous_step("welcome") is None
    assert planner.next_step("confirmation") is None
    assert planner.is_last_step("confirmation")
    assert not planner.is_last_step("review")


def test_round_trip_navigation_does_not_skip_steps():
    planner = FlowPlanner([_question(1), _question(2)])

    for step_id in planner.step_ids[:-1]:
        following = planner.next_step(step_id)
        assert planner.previous_step(following.id).id == step_id
        assert planner.next_step(planner.previous_step(following.id).id).id == following.id


def test_unknown_step_is_reported_with_current_plan():
    stale = _question(1)
    planner = FlowPlanner([_question(2)])

    with pytest.raises(UnknownStep) as excinfo:
        planner.next_step(f"custom-question-{stale.id}")

    assert excinfo.value.status_code == 409
    assert excinfo.value.steps == planner.step_ids

    with pytest.raises(UnknownStep):
        planner.previous_step("not-a-step")


def test_deactivated_question_drops_out_of_rebuilt_plan():
    question = _question(1)
    step_id = f"custom-question-{question.id}"
    assert FlowPlanner([question]).next_step(step_id).id == "notes"

    question.is_active = False

    with pytest.raises(UnknownStep):
        FlowPlanner([question]).next_step(step_id)


def test_navigation_summary():
    planner = FlowPlanner([])
    navigation = planner.navigation("welcome")

    assert navigation.current.id == "welcome"
    assert navigation.previous is None
    assert navigation.next.id == "guest-identity"
    assert navigation.position == 0
    assert navigation.total == 9
    assert navigation.isFirst and not navigation.isLast
