"""Progress Schemas - exercise attempts and per-student progress.

Invariants:
    - ExerciseAttempt.score is clamped to 0..10 before it leaves the client
    - attempt_number starts at 1
"""

from pydantic import Field, field_validator

from trilingo_access.schemas.base import WireModel

MIN_SCORE = 0
MAX_SCORE = 10


class ExerciseAttempt(WireModel):
    exercise_id: int = Field(alias="exerciseId")
    score: float
    time_spent_seconds: int = Field(ge=0, alias="timeSpentSeconds")
    attempt_number: int = Field(ge=1, alias="attemptNumber")
    attempt_details: str | None = Field(None, alias="attemptDetails")

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        return min(max(v, MIN_SCORE), MAX_SCORE)


class AttemptResult(WireModel):
    points_earned: int = Field(0, alias="pointsEarned")
    is_first_attempt: bool = Field(False, alias="isFirstAttempt")
    total_xp_points: int = Field(0, alias="totalXpPoints")


class ProgressEntry(WireModel):
    id: int | None = None
    student_id: str | None = Field(None, alias="studentId")
    activity_id: int | None = Field(None, alias="activityId")
    exercise_id: int | None = Field(None, alias="exerciseId")
    score: float | None = None
    completed_at: str | None = Field(None, alias="completedAt")


class ProgressSummary(WireModel):
    total_activities_completed: int = Field(0, alias="totalActivitiesCompleted")
    total_xp_points: int = Field(0, alias="totalXpPoints")
    total_time_spent_seconds: int = Field(0, alias="totalTimeSpentSeconds")
