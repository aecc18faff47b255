"""Schema Base - shared pydantic configuration and the backend's response envelope.

Invariants:
    - populate_by_name: callers may build models with snake_case names or wire aliases
    - model_dump(by_alias=True) reproduces the backend's JSON names
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class WireModel(BaseModel):
    """Base for every backend payload."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ApiResponse(WireModel, Generic[T]):
    """Standard backend envelope: {isSuccess, message, data, errors}."""
    is_success: bool = Field(False, alias="isSuccess")
    message: str = ""
    data: T | None = None
    errors: list[str] | None = None
