"""Auth Resources - login/logout lifecycle and profile endpoints against the fake backend.

Tests:
    - Successful login persists the token; failed login does not
    - Login 401 surfaces the backend message and never uses the authenticated channel
    - Logout clears the credential even when the backend fails
    - Profile image upload naming, field and MIME type
"""

import pytest

from trilingo_access.core.errors import PermissionDeniedError, ResponseValidationError
from trilingo_access.schemas.auth import LoginRequest, ProfileUpdate, RegisterRequest
from trilingo_access.services.auth_resources import (
    image_mime_type, profile_image_name,
)

from tests.services.fake_backend import PASSWORD, USER, VALID_TOKEN


async def test_login_stores_token(api):
    response = await api.auth.login(LoginRequest(identifier=USER["email"], password=PASSWORD))
    assert response.is_success
    assert response.username == USER["username"]
    assert await api.client.credentials.get() == VALID_TOKEN


async def test_failed_login_raises_backend_message(api, fake_backend):
    with pytest.raises(PermissionDeniedError) as exc_info:
        await api.auth.login(LoginRequest(identifier="nila", password="wrong"))
    assert exc_info.value.message == "Invalid username or password"
    assert await api.client.credentials.get() is None
    assert fake_backend.calls("/auth/login") == [("POST", "/auth/login", False)]


async def test_register_duplicate_is_validation_error(api):
    with pytest.raises(ResponseValidationError) as exc_info:
        await api.auth.register(RegisterRequest(
            username=USER["username"], email="x@example.com", password="p",
        ))
    assert exc_info.value.message == "Username already exists"


async def test_register_stores_token(api):
    response = await api.auth.register(RegisterRequest(
        username="kavi", email="kavi@example.com", password="p",
    ))
    assert response.username == "kavi"
    assert await api.client.credentials.get() == VALID_TOKEN


async def test_logout_clears_credential(logged_in_api):
    await logged_in_api.auth.logout()
    assert await logged_in_api.client.credentials.get() is None


async def test_logout_clears_even_when_backend_fails(logged_in_api, fake_backend):
    fake_backend.logout_fails = True
    await logged_in_api.auth.logout()
    assert await logged_in_api.client.credentials.get() is None


async def test_get_current_user(logged_in_api, fake_backend):
    user = await logged_in_api.auth.get_current_user()
    assert user.username == USER["username"]
    assert user.id == "7"
    assert user.native_language == "ta"
    # /auth/me goes straight to the authenticated channel
    assert fake_backend.calls("/auth/me") == [("GET", "/auth/me", True)]


async def test_get_current_user_best_effort_returns_none(api):
    assert await api.auth.get_current_user(best_effort=True) is None


async def test_get_current_user_strict_raises(api):
    with pytest.raises(PermissionDeniedError):
        await api.auth.get_current_user()


async def test_check_admin_escalates(logged_in_api, fake_backend):
    assert await logged_in_api.auth.check_admin() is False
    assert [c[2] for c in fake_backend.calls("/auth/check-admin")] == [False, True]


async def test_profile_roundtrip(logged_in_api):
    updated = await logged_in_api.auth.update_profile(ProfileUpdate(name="Nila K"))
    assert updated.is_success
    profile = await logged_in_api.auth.get_profile()
    assert profile.is_success
    assert profile.data["name"] == "Nila K"


async def test_upload_profile_image(logged_in_api, fake_backend, tmp_path):
    image = tmp_path / "avatar.PNG"
    image.write_bytes(b"\x89PNG\r\n")
    logged_in_api.auth._clock = lambda: 1700000000.5

    response = await logged_in_api.auth.upload_profile_image(image)

    assert response.profile_image_url == "https://cdn.test/profiles/profile_1700000000500.png"
    upload = fake_backend.uploads[0]
    assert upload["field"] == "file"
    assert upload["content_type"] == "image/png"
    assert upload["request_content_type"].startswith("multipart/form-data")


@pytest.mark.parametrize("name,mime", [
    ("a.png", "image/png"),
    ("a.JPG", "image/jpeg"),
    ("a.jpeg", "image/jpeg"),
    ("a.gif", "image/gif"),
    ("a.webp", "image/webp"),
    ("a.heic", "image/jpeg"),
    ("noext", "image/jpeg"),
])
def test_image_mime_type(name, mime):
    assert image_mime_type(name) == mime


def test_profile_image_name_defaults_to_jpg():
    assert profile_image_name("photo", 5) == "profile_5.jpg"
