"""Submission gateway: validates and delivers pay events to the authority."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from au_payroll.stp.providers.base import AuthorityProvider, AuthorityUnavailableError
from au_payroll.stp.state_machine import PayEventStateMachine
from au_payroll.stp.types import STPPayEvent

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of one submission attempt."""

    @property
    def success(self) -> bool:
        return False

    @property
    def retryable(self) -> bool:
        return False

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        raise NotImplementedError

    def as_dict(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message}


@dataclass(frozen=True)
class Accepted(SubmissionResult):
    """The authority accepted the event."""

    receipt: str
    detail: str = ""

    @property
    def success(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return self.detail or f"Accepted with receipt #{self.receipt}"


@dataclass(frozen=True)
class Rejected(SubmissionResult):
    """The authority rejected the event. Terminal for this event."""

    reason: str

    @property
    def message(self) -> str:
        return self.reason


@dataclass(frozen=True)
class TransportError(SubmissionResult):
    """The authority could not be reached. The same event may be retried."""

    cause: str

    @property
    def retryable(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return f"Transport failure: {self.cause}"


@dataclass(frozen=True)
class ValidationFailed(SubmissionResult):
    """Rejected locally before any remote call."""

    reasons: tuple[str, ...]

    @property
    def message(self) -> str:
        return "; ".join(self.reasons)


class SubmissionGateway:
    """Delivers pay events to the tax authority.

    Submission order:
    1. Local validation (negative gross, already submitted, rejected) -
       failures return ValidationFailed and the provider is never called
    2. One provider call bounded by a timeout
    3. Provider outcome mapped to Accepted / Rejected
    4. Timeouts and connection failures mapped to TransportError (retryable)

    Cancelling the awaiting task cancels the provider call; cancellation is
    not converted into a result.
    """

    def __init__(
        self,
        provider: AuthorityProvider,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.provider = provider
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def validate(event: STPPayEvent) -> list[str]:
        """Local checks run before transmission."""
        return PayEventStateMachine.validate_event_for_submission(event)

    async def submit(
        self, event: STPPayEvent, timeout: float | None = None
    ) -> SubmissionResult:
        """Submit an event and return a typed outcome."""
        errors = self.validate(event)
        if errors:
            logger.warning("Pay event %s failed validation: %s", event.id, errors)
            return ValidationFailed(reasons=tuple(errors))

        timeout = self.timeout_seconds if timeout is None else timeout
        payload = event.to_submission_payload()

        try:
            response = await asyncio.wait_for(self.provider.submit(payload), timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Submission of %s to %s timed out after %ss",
                event.id,
                self.provider.provider_name,
                timeout,
            )
            return TransportError(cause=f"timed out after {timeout}s")
        except (AuthorityUnavailableError, ConnectionError, OSError) as e:
            logger.warning(
                "Submission of %s to %s failed: %s", event.id, self.provider.provider_name, e
            )
            return TransportError(cause=str(e))

        if response.accepted:
            logger.info(
                "Pay event %s accepted by %s (receipt %s)",
                event.id,
                self.provider.provider_name,
                response.receipt_id,
            )
            return Accepted(receipt=response.receipt_id or "", detail=response.message)

        logger.warning(
            "Pay event %s rejected by %s: %s",
            event.id,
            self.provider.provider_name,
            response.message,
        )
        return Rejected(reason=response.message or "Rejected by authority")
