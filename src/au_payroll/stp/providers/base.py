"""Base protocol and types for tax authority submission providers.

All authority adapters must implement the AuthorityProvider protocol.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Protocol


class AuthorityUnavailableError(Exception):
    """Raised by a provider when the authority cannot be reached.

    Distinct from a rejection: the event itself may be fine and the same
    event can be sent again.
    """

    def __init__(self, provider_name: str, reason: str):
        self.provider_name = provider_name
        self.reason = reason
        super().__init__(f"{provider_name} unavailable: {reason}")


@dataclass(frozen=True)
class AuthorityResponse:
    """The authority's answer to one submission."""

    accepted: bool
    message: str = ""
    receipt_id: str | None = None
    received_at: datetime.datetime | None = None


class AuthorityProvider(Protocol):
    """Protocol for tax authority submission adapters.

    Each authority channel (SBR gateway, sending service provider, sandbox)
    has its own adapter implementing this protocol. The gateway uses these
    adapters without knowing channel-specific details.
    """

    provider_name: str

    async def submit(self, payload: dict[str, Any]) -> AuthorityResponse:
        """Send a serialised pay event to the authority.

        Args:
            payload: Output of STPPayEvent.to_submission_payload(), including:
                - id, transactionId, payRunId
                - reportingYear
                - totalGross/totalTax/totalSuper (strings)
                - payees: list of period and YTD figures

        Returns:
            AuthorityResponse with acceptance and receipt id.

        Raises:
            AuthorityUnavailableError, ConnectionError, OSError: when the
                authority could not be reached (retryable).
        """
        ...
