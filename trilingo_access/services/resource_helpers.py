"""Resource Helpers - payload parsing shared by every resource module.

Invariants:
    - Parsing never returns half-validated data: a malformed payload raises UnknownNetworkError
    - parse_list returns [] when the payload is not a list (backend sends null or {} for "none")
    - parse_optional returns None for an empty payload (null, "", {})
    - default_on_failure only swallows AccessError; programming errors still propagate

Design Decisions:
    - TypeAdapter cached per type: resource modules parse the same DTOs repeatedly
"""

import logging
from functools import lru_cache
from typing import Any, Awaitable, TypeVar

from pydantic import TypeAdapter, ValidationError

from trilingo_access.core.errors import AccessError, ErrorContext, UnknownNetworkError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=64)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def parse_payload(payload: Any, tp: type[T], *, endpoint: str) -> T:
    """Validate a success payload against tp."""
    try:
        return _adapter(tp).validate_python(payload)
    except ValidationError as e:
        logger.error(
            f"Malformed response from {endpoint}: {e.error_count()} validation error(s)",
            extra={"endpoint": endpoint},
        )
        raise UnknownNetworkError(
            f"Unexpected response format from {endpoint}.",
            ErrorContext(endpoint=endpoint, debug_info={"errors": e.errors()[:5]}),
        ) from e


def parse_list(payload: Any, item_tp: type[T], *, endpoint: str) -> list[T]:
    if not isinstance(payload, list):
        return []
    return parse_payload(payload, list[item_tp], endpoint=endpoint)


def parse_optional(payload: Any, tp: type[T], *, endpoint: str) -> T | None:
    if not payload:
        return None
    return parse_payload(payload, tp, endpoint=endpoint)


def envelope_data(payload: Any) -> Any:
    """The data field of an {isSuccess, message, data} envelope, else None."""
    if isinstance(payload, dict):
        return payload.get("data")
    return None


async def default_on_failure(aw: Awaitable[T], default: T, *, endpoint: str) -> T:
    """Await aw; on AccessError log and return default."""
    try:
        return await aw
    except AccessError as e:
        logger.warning(
            f"Best-effort call to {endpoint} failed ({e.code}); using default",
            extra={"endpoint": endpoint, "error_kind": e.kind.value, "error_code": e.code},
        )
        return default
