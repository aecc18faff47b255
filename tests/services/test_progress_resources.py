"""Progress Resources - attempt submission and student progress reads."""

import pytest

from trilingo_access.core.errors import PermissionDeniedError, UnknownNetworkError
from trilingo_access.schemas.progress import ExerciseAttempt


def _attempt(exercise_id=100, score=8.0, seconds=30, number=1):
    return ExerciseAttempt(
        exercise_id=exercise_id, score=score,
        time_spent_seconds=seconds, attempt_number=number,
    )


async def test_submit_attempt_returns_points(logged_in_api, fake_backend):
    result = await logged_in_api.progress.submit_exercise_attempt(_attempt())
    assert result.points_earned == 80
    assert result.is_first_attempt
    assert fake_backend.attempts[0]["exerciseId"] == 100


async def test_score_clamped_before_sending(logged_in_api, fake_backend):
    await logged_in_api.progress.submit_exercise_attempt(_attempt(score=14.5))
    await logged_in_api.progress.submit_exercise_attempt(_attempt(exercise_id=101, score=-3))
    assert [a["score"] for a in fake_backend.attempts] == [10, 0]


async def test_repeat_attempt_not_first(logged_in_api):
    await logged_in_api.progress.submit_exercise_attempt(_attempt())
    again = await logged_in_api.progress.submit_exercise_attempt(_attempt(number=2))
    assert not again.is_first_attempt
    assert again.points_earned == 0


async def test_submit_requires_login(api):
    with pytest.raises(PermissionDeniedError):
        await api.progress.submit_exercise_attempt(_attempt())


async def test_student_progress_and_summary(logged_in_api):
    assert await logged_in_api.progress.get_student_summary("7") is None
    await logged_in_api.progress.submit_exercise_attempt(_attempt(seconds=40))
    entries = await logged_in_api.progress.get_student_progress("7")
    assert [e.exercise_id for e in entries] == [100]
    summary = await logged_in_api.progress.get_student_summary("7")
    assert summary.total_activities_completed == 1
    assert summary.total_time_spent_seconds == 40


async def test_progress_reads_best_effort_without_login(api):
    assert await api.progress.get_student_progress("7", best_effort=True) == []
    assert await api.progress.get_student_summary("7", best_effort=True) is None


async def test_malformed_summary_best_effort_is_none(logged_in_api, fake_backend):
    await logged_in_api.progress.submit_exercise_attempt(_attempt())
    fake_backend.summary_malformed = True
    with pytest.raises(UnknownNetworkError):
        await logged_in_api.progress.get_student_summary("7")
    assert await logged_in_api.progress.get_student_summary("7", best_effort=True) is None
