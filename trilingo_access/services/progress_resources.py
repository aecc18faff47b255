"""Progress Resources - exercise attempt submission and student progress reads.

Invariants:
    - Submitted scores are clamped to 0..10 by the ExerciseAttempt schema
    - Attempt submission is a write: authenticated, idempotency-keyed, write retry policy
    - Progress reads skip the public channel
    - best_effort=True maps any AccessError, malformed data included, to [] or None
"""

import logging

from trilingo_access.infrastructure.access_client import AccessClient
from trilingo_access.schemas.progress import (
    AttemptResult, ExerciseAttempt, ProgressEntry, ProgressSummary,
)
from trilingo_access.services.resource_helpers import (
    default_on_failure, envelope_data, parse_list, parse_optional,
)

logger = logging.getLogger(__name__)


class ProgressResources:

    def __init__(self, client: AccessClient):
        self.client = client

    async def submit_exercise_attempt(self, attempt: ExerciseAttempt) -> AttemptResult:
        """Record one attempt; returns points earned (zeros when the backend omits data)."""
        payload = await self.client.post("/progress/attempts", attempt.to_wire())
        result = parse_optional(
            envelope_data(payload), AttemptResult, endpoint="/progress/attempts",
        )
        if result is None:
            logger.warning(
                f"Attempt for exercise {attempt.exercise_id} recorded without result data",
                extra={"endpoint": "/progress/attempts"},
            )
            return AttemptResult()
        return result

    async def get_student_progress(
        self, student_id: str, *, best_effort: bool = False,
    ) -> list[ProgressEntry]:
        path = f"/progress/student/{student_id}"
        read = self._fetch_progress(path)
        if best_effort:
            return await default_on_failure(read, [], endpoint=path)
        return await read

    async def get_student_summary(
        self, student_id: str, *, best_effort: bool = False,
    ) -> ProgressSummary | None:
        path = f"/progress/student/{student_id}/summary"
        read = self._fetch_summary(path)
        if best_effort:
            return await default_on_failure(read, None, endpoint=path)
        return await read

    async def _fetch_progress(self, path: str) -> list[ProgressEntry]:
        data = await self._read_envelope(path)
        return parse_list(data, ProgressEntry, endpoint=path)

    async def _fetch_summary(self, path: str) -> ProgressSummary | None:
        data = await self._read_envelope(path)
        return parse_optional(data, ProgressSummary, endpoint=path)

    async def _read_envelope(self, path: str):
        payload = await self.client.get(path, public_first=False)
        # Older backends return the bare list without the envelope
        return envelope_data(payload) if isinstance(payload, dict) else payload
