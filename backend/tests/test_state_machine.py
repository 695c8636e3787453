"""Unit tests for workout status transitions and lifecycle timestamps."""

from datetime import datetime, timedelta

import pytest

from app.exceptions import BusinessLogicError, InvalidArgumentError
from app.models.workout_session import WorkoutSession, WorkoutStatus
from app.services.workout_service import apply_status_timestamps, next_status


@pytest.mark.parametrize(
    "current,action,expected",
    [
        (WorkoutStatus.PLANNED, "start", WorkoutStatus.IN_PROGRESS),
        (WorkoutStatus.IN_PROGRESS, "pause", WorkoutStatus.PAUSED),
        (WorkoutStatus.PAUSED, "resume", WorkoutStatus.IN_PROGRESS),
        (WorkoutStatus.IN_PROGRESS, "complete", WorkoutStatus.COMPLETED),
        (WorkoutStatus.PAUSED, "complete", WorkoutStatus.COMPLETED),
        (WorkoutStatus.PLANNED, "  Start ", WorkoutStatus.IN_PROGRESS),
    ],
)
def test_allowed_transitions(current, action, expected):
    assert next_status(current, action) == expected


@pytest.mark.parametrize(
    "current,action",
    [
        (WorkoutStatus.PLANNED, "pause"),
        (WorkoutStatus.PLANNED, "complete"),
        (WorkoutStatus.PAUSED, "start"),
        (WorkoutStatus.COMPLETED, "complete"),
        (WorkoutStatus.COMPLETED, "resume"),
        (WorkoutStatus.IN_PROGRESS, "start"),
    ],
)
def test_disallowed_transitions(current, action):
    with pytest.raises(BusinessLogicError) as exc_info:
        next_status(current, action)

    assert current.value in exc_info.value.message
    assert action in exc_info.value.message


@pytest.mark.parametrize("action", ["", "stop", "cancel", None])
def test_unknown_actions_never_no_op(action):
    with pytest.raises(InvalidArgumentError):
        next_status(WorkoutStatus.PLANNED, action)


def test_start_keeps_existing_started_at():
    earlier = datetime(2024, 1, 1, 9, 0)
    workout = WorkoutSession(name="Run", started_at=earlier)

    apply_status_timestamps(workout, WorkoutStatus.IN_PROGRESS, now=datetime(2024, 1, 1, 10, 0))

    assert workout.started_at == earlier


def test_complete_derives_duration_from_start():
    workout = WorkoutSession(name="Run", started_at=datetime(2024, 1, 1, 9, 0))

    apply_status_timestamps(workout, WorkoutStatus.COMPLETED, now=datetime(2024, 1, 1, 9, 45, 30))

    assert workout.completed_at == datetime(2024, 1, 1, 9, 45, 30)
    assert workout.actual_duration_minutes == 45


def test_complete_keeps_recorded_duration():
    workout = WorkoutSession(
        name="Run", started_at=datetime(2024, 1, 1, 9, 0), actual_duration_minutes=30
    )

    apply_status_timestamps(workout, WorkoutStatus.COMPLETED, now=datetime(2024, 1, 1, 10, 0))

    assert workout.actual_duration_minutes == 30


def test_pause_touches_no_timestamps():
    start = datetime(2024, 1, 1, 9, 0)
    workout = WorkoutSession(name="Run", started_at=start)

    apply_status_timestamps(workout, WorkoutStatus.PAUSED, now=start + timedelta(minutes=5))

    assert workout.started_at == start
    assert workout.completed_at is None


def test_complete_names_every_allowed_source():
    with pytest.raises(BusinessLogicError) as exc_info:
        next_status(WorkoutStatus.PLANNED, "complete")

    assert "IN_PROGRESS or PAUSED" in exc_info.value.message


def test_complete_without_start_stamps_nothing():
    workout = WorkoutSession(name="Run")

    apply_status_timestamps(workout, WorkoutStatus.COMPLETED, now=datetime(2024, 1, 1, 10, 0))

    assert workout.completed_at is None
    assert workout.actual_duration_minutes is None
