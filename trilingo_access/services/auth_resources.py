"""Auth Resources - login, registration, session and profile operations.

Invariants:
    - login/register are pure-public: a 401 means "invalid credentials", never escalation
    - A token is stored only when the backend answers isSuccess with a non-empty token
    - logout always ends with exactly one credential clear, whatever the backend says
    - Profile images go out as multipart field "file", named profile_<epoch ms>.<ext>

Design Decisions:
    - logout opts out of the dispatcher's clear-on-401 so the store is mutated once
    - MIME type derived from the extension (allow-list), unknown extensions sent as JPEG
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable

from trilingo_access.core.domain_types import Credential, HttpMethod
from trilingo_access.core.errors import AccessError
from trilingo_access.core.request_types import RequestDescriptor, UploadFile
from trilingo_access.infrastructure.access_client import AccessClient
from trilingo_access.schemas.auth import (
    AuthResponse, LoginRequest, ProfileUpdate, RegisterRequest, User,
)
from trilingo_access.schemas.base import ApiResponse
from trilingo_access.services.resource_helpers import (
    default_on_failure, envelope_data, parse_optional, parse_payload,
)

logger = logging.getLogger(__name__)

PROFILE_IMAGE_FIELD = "file"
DEFAULT_IMAGE_MIME = "image/jpeg"
IMAGE_MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
}


def image_mime_type(filename: str) -> str:
    ext = Path(filename).suffix.lstrip(".").lower()
    return IMAGE_MIME_TYPES.get(ext, DEFAULT_IMAGE_MIME)


def profile_image_name(source: str | Path, now_ms: int) -> str:
    """profile_<ms>.<ext>, keeping the source extension (jpg when it has none)."""
    ext = Path(source).suffix.lstrip(".").lower() or "jpg"
    return f"profile_{now_ms}.{ext}"


class AuthResources:
    """Account and profile endpoints."""

    def __init__(self, client: AccessClient, clock: Callable[[], float] = time.time):
        self.client = client
        self._clock = clock

    async def login(self, request: LoginRequest) -> AuthResponse:
        payload = await self.client.post("/auth/login", request.to_wire())
        response = parse_payload(payload, AuthResponse, endpoint="/auth/login")
        await self._store_token(response)
        return response

    async def register(self, request: RegisterRequest) -> AuthResponse:
        payload = await self.client.post("/auth/register", request.to_wire())
        response = parse_payload(payload, AuthResponse, endpoint="/auth/register")
        await self._store_token(response)
        return response

    async def logout(self) -> None:
        """Best-effort backend logout, then always drop the local credential."""
        descriptor = RequestDescriptor.write(
            HttpMethod.POST, "/auth/logout", {},
            invalidates_credential_on_401=False,
        )
        try:
            await self.client.request(descriptor)
        except AccessError as e:
            logger.warning(
                f"Backend logout failed ({e.code}); clearing local session anyway",
                extra={"endpoint": "/auth/logout", "error_code": e.code},
            )
        finally:
            await self.client.credentials.clear()

    async def get_current_user(self, *, best_effort: bool = False) -> User | None:
        """Current user from /auth/me, or None when the backend has none.

        With best_effort any AccessError reads as None instead of raising.
        """
        read = self._fetch_current_user()
        if best_effort:
            return await default_on_failure(read, None, endpoint="/auth/me")
        return await read

    async def _fetch_current_user(self) -> User | None:
        payload = await self.client.get("/auth/me", public_first=False)
        return parse_optional(envelope_data(payload), User, endpoint="/auth/me")

    async def check_admin(self) -> bool:
        payload = await self.client.get("/auth/check-admin")
        return bool(envelope_data(payload))

    async def get_profile(self) -> ApiResponse[dict]:
        payload = await self.client.get("/auth/profile")
        return parse_payload(payload, ApiResponse[dict], endpoint="/auth/profile")

    async def update_profile(self, update: ProfileUpdate) -> AuthResponse:
        payload = await self.client.put("/auth/update-profile", update.to_wire())
        return parse_payload(payload, AuthResponse, endpoint="/auth/update-profile")

    async def upload_profile_image(self, image_path: str | Path) -> AuthResponse:
        path = Path(image_path)
        content = await asyncio.to_thread(path.read_bytes)
        filename = profile_image_name(path, int(self._clock() * 1000))
        upload = UploadFile(
            field_name=PROFILE_IMAGE_FIELD,
            filename=filename,
            content=content,
            content_type=image_mime_type(filename),
        )
        payload = await self.client.upload("/auth/upload-profile-image", upload)
        return parse_payload(
            payload, AuthResponse, endpoint="/auth/upload-profile-image",
        )

    async def _store_token(self, response: AuthResponse) -> None:
        if response.is_success and response.token:
            await self.client.credentials.set(Credential(response.token))
