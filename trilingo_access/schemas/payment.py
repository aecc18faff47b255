"""Payment Schemas - hosted checkout sessions for unlocking levels.

Invariants:
    - A successful session carries session_url, unless the user already has access
"""

from pydantic import Field

from trilingo_access.schemas.base import WireModel


class PaymentSessionRequest(WireModel):
    level_id: int = Field(alias="levelId")
    success_url: str = Field(alias="successUrl")
    cancel_url: str = Field(alias="cancelUrl")


class PaymentSessionResponse(WireModel):
    is_success: bool = Field(False, alias="isSuccess")
    message: str | None = None
    session_id: str | None = Field(None, alias="sessionId")
    session_url: str | None = Field(None, alias="sessionUrl")
    error: str | None = None

    @property
    def already_has_access(self) -> bool:
        return self.is_success and not self.session_url


class PaymentVerification(WireModel):
    is_success: bool = Field(False, alias="isSuccess")
    has_access: bool = Field(False, alias="hasAccess")
    message: str | None = None
    error: str | None = None
