"""Content Schemas - activities, exercises, levels and stages as the backend sends them.

Invariants:
    - Trilingual names kept verbatim (name_en / name_ta / name_si)
    - JSON-in-string fields (details_JSON, jsonData) stay strings: parsing is the caller's job
"""

from pydantic import Field

from trilingo_access.schemas.base import WireModel


class ActivityDto(WireModel):
    id: int
    details_json: str | None = Field(None, alias="details_JSON")
    stage_id: int = Field(alias="stageId")
    main_activity_id: int = Field(alias="mainActivityId")
    activity_type_id: int = Field(alias="activityTypeId")
    name_en: str = ""
    name_ta: str = ""
    name_si: str = ""
    sequence_order: int = Field(0, alias="sequenceOrder")


class ActivityTypeDto(WireModel):
    id: int
    name_en: str = ""
    name_ta: str = ""
    name_si: str = ""
    json_method: str | None = Field(None, alias="jsonMethod")
    main_activity_id: int = Field(alias="mainActivityId")


class ExerciseDto(WireModel):
    id: int
    activity_id: int = Field(alias="activityId")
    json_data: str = Field("", alias="jsonData")
    sequence_order: int = Field(0, alias="sequenceOrder")
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")


class MainActivityDto(WireModel):
    id: int
    name_en: str = ""
    name_ta: str = ""
    name_si: str = ""


class LevelDto(WireModel):
    id: int
    name_en: str = ""
    name_ta: str = ""
    name_si: str = ""
    level_id: int | None = Field(None, alias="levelId")


class StageDto(WireModel):
    id: int
    name_en: str = ""
    name_ta: str = ""
    name_si: str = ""
    level_id: int = Field(alias="levelId")
    sequence_order: int | None = Field(None, alias="sequenceOrder")

    @property
    def has_all_names(self) -> bool:
        return bool(self.name_en and self.name_ta and self.name_si)
