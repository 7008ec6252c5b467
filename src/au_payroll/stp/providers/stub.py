"""Tax authority stub provider for local development and testing.

Replace with a real SBR / sending service provider adapter for production.
"""

from __future__ import annotations

import asyncio
import datetime
import random
from typing import Any

from au_payroll.stp.providers.base import AuthorityResponse, AuthorityUnavailableError


class AuthorityStubProvider:
    """Stub authority for development.

    In production, this would:
    - Build the STP Phase 2 message and sign it
    - Lodge through the SBR gateway or a sending service provider
    - Poll for the lodgement receipt and validation responses
    """

    provider_name = "authority_stub"

    def __init__(
        self,
        delay_seconds: float = 0.0,
        reject_reason: str | None = None,
        unavailable: bool = False,
    ):
        """Initialize stub provider.

        Args:
            delay_seconds: Simulated network latency per submission.
            reject_reason: If set, every submission is rejected with it.
            unavailable: If True, every submission fails in transport.
        """
        self.delay_seconds = delay_seconds
        self.reject_reason = reject_reason
        self.unavailable = unavailable
        # In-memory record of what reached the authority
        self.received: dict[str, dict[str, Any]] = {}

    async def submit(self, payload: dict[str, Any]) -> AuthorityResponse:
        """Lodge a pay event (stub implementation)."""
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

        if self.unavailable:
            raise AuthorityUnavailableError(self.provider_name, "service unavailable")

        received_at = datetime.datetime.now(datetime.timezone.utc)
        transaction_id = payload.get("transactionId", "")

        if self.reject_reason:
            return AuthorityResponse(
                accepted=False,
                message=self.reject_reason,
                received_at=received_at,
            )

        # Real receipts are issued by the authority; stub uses 9 digits
        receipt_id = f"{random.randint(0, 999_999_999):09d}"
        self.received[transaction_id] = {
            "payload": payload,
            "receipt_id": receipt_id,
            "received_at": received_at,
        }
        return AuthorityResponse(
            accepted=True,
            message=f"Success: Received by ATO with Receipt #{receipt_id}",
            receipt_id=receipt_id,
            received_at=received_at,
        )

    def simulate_outage(self, unavailable: bool = True) -> None:
        """Toggle transport failures (for testing)."""
        self.unavailable = unavailable

    def simulate_rejection(self, reason: str | None) -> None:
        """Reject subsequent submissions with ``reason`` (None to stop)."""
        self.reject_reason = reason
