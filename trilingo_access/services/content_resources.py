"""Content Resources - activities, activity types, main activities, exercises, levels, stages.

Invariants:
    - Reads go public-first, except exercises which go straight to the authenticated channel
    - List endpoints return [] when the payload is not a list
    - By-id endpoints return None for an empty payload
    - best_effort=True turns any AccessError, malformed payloads included, into [] or None
    - get_stages_by_level never raises AccessError: unreachable data reads as "no stages"

Design Decisions:
    - Stage fallback fetches each candidate stage concurrently (asyncio.gather)
    - Fallback keeps only stages carrying all three names: inferred placeholders are not shown
"""

import asyncio
import logging

from trilingo_access.infrastructure.access_client import AccessClient
from trilingo_access.schemas.content import (
    ActivityDto, ActivityTypeDto, ExerciseDto, LevelDto, MainActivityDto, StageDto,
)
from trilingo_access.services.resource_helpers import (
    default_on_failure, parse_list, parse_optional,
)

logger = logging.getLogger(__name__)


class ContentResources:
    """Learning-content catalogue."""

    def __init__(self, client: AccessClient):
        self.client = client

    # ─── Activities ─────────────────────────────────────────────

    async def get_all_activities(self, *, best_effort: bool = False) -> list[ActivityDto]:
        return await self._list("/Activities", ActivityDto, best_effort=best_effort)

    async def get_activity_by_id(
        self, activity_id: int, *, best_effort: bool = False,
    ) -> ActivityDto | None:
        return await self._one(
            f"/Activities/{activity_id}", ActivityDto, best_effort=best_effort,
        )

    async def get_activities_by_stage(
        self, stage_id: int, *, best_effort: bool = False,
    ) -> list[ActivityDto]:
        return await self._list(
            f"/Activities/stage/{stage_id}", ActivityDto, best_effort=best_effort,
        )

    async def get_all_activity_types(
        self, *, best_effort: bool = False,
    ) -> list[ActivityTypeDto]:
        return await self._list("/activitytypes", ActivityTypeDto, best_effort=best_effort)

    async def get_activity_type_by_id(
        self, type_id: int, *, best_effort: bool = False,
    ) -> ActivityTypeDto | None:
        return await self._one(
            f"/activitytypes/{type_id}", ActivityTypeDto, best_effort=best_effort,
        )

    async def get_all_main_activities(
        self, *, best_effort: bool = False,
    ) -> list[MainActivityDto]:
        return await self._list("/mainactivities", MainActivityDto, best_effort=best_effort)

    async def get_main_activity_by_id(
        self, main_id: int, *, best_effort: bool = False,
    ) -> MainActivityDto | None:
        return await self._one(
            f"/mainactivities/{main_id}", MainActivityDto, best_effort=best_effort,
        )

    # ─── Exercises (authenticated directly) ─────────────────────

    async def get_all_exercises(self, *, best_effort: bool = False) -> list[ExerciseDto]:
        return await self._list(
            "/exercises", ExerciseDto, public_first=False, best_effort=best_effort,
        )

    async def get_exercise_by_id(
        self, exercise_id: int, *, best_effort: bool = False,
    ) -> ExerciseDto | None:
        return await self._one(
            f"/exercises/{exercise_id}", ExerciseDto,
            public_first=False, best_effort=best_effort,
        )

    async def get_exercises_by_activity(
        self, activity_id: int, *, best_effort: bool = False,
    ) -> list[ExerciseDto]:
        return await self._list(
            f"/Activities/{activity_id}/exercises", ExerciseDto,
            public_first=False, best_effort=best_effort,
        )

    # ─── Levels & Stages ────────────────────────────────────────

    async def get_all_levels(self, *, best_effort: bool = False) -> list[LevelDto]:
        return await self._list("/Levels", LevelDto, best_effort=best_effort)

    async def get_level_by_id(
        self, level_id: int, *, best_effort: bool = False,
    ) -> LevelDto | None:
        return await self._one(f"/Levels/{level_id}", LevelDto, best_effort=best_effort)

    async def get_all_stages(self, *, best_effort: bool = False) -> list[StageDto]:
        return await self._list("/Stages", StageDto, best_effort=best_effort)

    async def get_stage_by_id(
        self, stage_id: int, *, best_effort: bool = False,
    ) -> StageDto | None:
        return await self._one(f"/Stages/{stage_id}", StageDto, best_effort=best_effort)

    async def get_stages_by_level(self, level_id: int) -> list[StageDto]:
        """Stages of one level, derived from activities when /Stages is unavailable."""
        all_stages = await self.get_all_stages(best_effort=True)
        direct = [s for s in all_stages if s.level_id == level_id]
        if direct:
            logger.debug(f"Found {len(direct)} stages directly for level {level_id}")
            return direct

        activities = await self.get_all_activities(best_effort=True)
        stage_ids = sorted({a.stage_id for a in activities if a.stage_id})
        logger.info(
            f"Deriving stages for level {level_id} from {len(stage_ids)} activity stage ids",
        )
        fetched = await asyncio.gather(*(
            self.get_stage_by_id(sid, best_effort=True) for sid in stage_ids
        ))
        stages = [
            s for s in fetched
            if s is not None and s.level_id == level_id and s.has_all_names
        ]
        return sorted(stages, key=lambda s: s.id)

    # ─── Helpers ────────────────────────────────────────────────

    async def _list(
        self, path: str, tp: type, *, public_first: bool = True, best_effort: bool = False,
    ) -> list:
        read = self._fetch_list(path, tp, public_first)
        if best_effort:
            return await default_on_failure(read, [], endpoint=path)
        return await read

    async def _one(
        self, path: str, tp: type, *, public_first: bool = True, best_effort: bool = False,
    ):
        read = self._fetch_one(path, tp, public_first)
        if best_effort:
            return await default_on_failure(read, None, endpoint=path)
        return await read

    async def _fetch_list(self, path: str, tp: type, public_first: bool) -> list:
        payload = await self.client.get(path, public_first=public_first)
        return parse_list(payload, tp, endpoint=path)

    async def _fetch_one(self, path: str, tp: type, public_first: bool):
        payload = await self.client.get(path, public_first=public_first)
        return parse_optional(payload, tp, endpoint=path)
