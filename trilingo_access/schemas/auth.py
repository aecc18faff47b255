"""Auth Schemas - login, registration, user and profile payloads.

Invariants:
    - LoginRequest.identifier accepts username or email
    - Passwords are never echoed back in any response model
    - ProfileUpdate sends only fields the caller set
"""

from pydantic import Field, field_validator

from trilingo_access.schemas.base import WireModel


class LoginRequest(WireModel):
    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("identifier")
    @classmethod
    def strip_identifier(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("identifier cannot be empty or whitespace")
        return v


class RegisterRequest(WireModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class AuthResponse(WireModel):
    """Answer to login/register/profile updates."""
    is_success: bool = Field(False, alias="isSuccess")
    message: str = ""
    token: str | None = None
    username: str | None = None
    email: str | None = None
    role: str | None = None
    profile_image_url: str | None = Field(None, alias="profileImageUrl")


class User(WireModel):
    id: str
    username: str
    email: str = ""
    name: str = ""
    age: str = ""
    native_language: str = Field("", alias="nativeLanguage")
    learning_language: str = Field("", alias="learningLanguage")
    is_admin: bool = Field(False, alias="isAdmin")
    is_guest: bool = Field(False, alias="isGuest")

    @field_validator("id", "age", mode="before")
    @classmethod
    def coerce_to_str(cls, v: object) -> object:
        return str(v) if isinstance(v, int) else v


class ProfileUpdate(WireModel):
    name: str | None = None
    email: str | None = None
    age: str | None = None
    native_language: str | None = Field(None, alias="nativeLanguage")
    learning_language: str | None = Field(None, alias="learningLanguage")
    profile_image_url: str | None = Field(None, alias="profileImageUrl")
