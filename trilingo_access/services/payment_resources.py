"""Payment Resources - hosted checkout sessions that unlock paid levels."""

from trilingo_access.infrastructure.access_client import AccessClient
from trilingo_access.schemas.payment import (
    PaymentSessionRequest, PaymentSessionResponse, PaymentVerification,
)
from trilingo_access.services.resource_helpers import parse_payload


class PaymentResources:

    def __init__(self, client: AccessClient):
        self.client = client

    async def create_payment_session(
        self, level_id: int, success_url: str, cancel_url: str,
    ) -> PaymentSessionResponse:
        request = PaymentSessionRequest(
            level_id=level_id, success_url=success_url, cancel_url=cancel_url,
        )
        payload = await self.client.post("/payments/create-session", request.to_wire())
        return parse_payload(
            payload, PaymentSessionResponse, endpoint="/payments/create-session",
        )

    async def verify_payment(self, session_id: str) -> PaymentVerification:
        payload = await self.client.post(
            "/payments/verify-session", {"sessionId": session_id},
        )
        return parse_payload(
            payload, PaymentVerification, endpoint="/payments/verify-session",
        )
