"""Pay event service: generation with YTD locking, submission reconciliation."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Sequence

from au_payroll.calculators.types import Payslip
from au_payroll.stp.aggregator import PayEventAggregator
from au_payroll.stp.gateway import Accepted, Rejected, SubmissionGateway, SubmissionResult
from au_payroll.stp.repository import PayEventRepository
from au_payroll.stp.state_machine import PayEventStateMachine
from au_payroll.stp.types import PayEventStatus, STPPayEvent

logger = logging.getLogger(__name__)


class PayEventService:
    """Coordinates pay event generation and submission.

    Generation holds a lock per financial year for the whole
    read-aggregate-append sequence. Two pay runs in the same year are
    therefore aggregated one after the other, each seeing the other's event
    in its YTD history.

    Submission outcomes are written back through the repository:
    - Accepted: Draft → Submitted, receipt stored as the response message
    - Rejected: stays Draft, flagged rejected, reason stored
    - TransportError / ValidationFailed: event left untouched

    Submissions of one event hold a lock per event id and reload the event
    under it, so a second concurrent submit sees the first outcome and never
    reaches the authority.
    """

    def __init__(
        self,
        repository: PayEventRepository,
        gateway: SubmissionGateway,
        aggregator: PayEventAggregator | None = None,
    ):
        self.repository = repository
        self.gateway = gateway
        self.aggregator = aggregator or PayEventAggregator()
        self._year_locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._event_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def year_lock(self, reporting_year: int) -> asyncio.Lock:
        """Lock serialising event generation for one financial year."""
        return self._year_locks[reporting_year]

    def event_lock(self, event_id: str) -> asyncio.Lock:
        """Lock serialising submissions of one event."""
        return self._event_locks[event_id]

    async def generate(
        self,
        pay_run_id: str,
        payslips: Sequence[Payslip],
        reporting_year: int | None = None,
    ) -> STPPayEvent:
        """Generate and store a Draft pay event for a pay run.

        Raises:
            ReportingYearError: If the payslips span financial years or miss
                an explicit ``reporting_year``
            DuplicateEventError: If the event id or transaction id is taken
        """
        year = reporting_year or self.aggregator.reporting_year_for(
            payslips, self.aggregator.now().date()
        )

        async with self.year_lock(year):
            previous = await self.repository.list_events_for_year(year)
            event = self.aggregator.generate_event(
                pay_run_id, payslips, previous, reporting_year=year
            )
            await self.repository.append_event(event)

        return event

    async def submit(
        self, event_id: str, timeout: float | None = None
    ) -> SubmissionResult:
        """Submit a stored event and record the outcome.

        Raises:
            PayEventNotFoundError: If the event id is unknown
            InvalidTransitionError: If the stored event is already final
        """
        async with self.event_lock(event_id):
            # Reloaded under the lock so a concurrent outcome is seen
            event = await self.repository.get_event(event_id)
            result = await self.gateway.submit(event, timeout=timeout)

            if isinstance(result, Accepted):
                PayEventStateMachine.validate_transition(
                    event.status, PayEventStatus.SUBMITTED
                )
                await self.repository.update_status(
                    event_id, PayEventStatus.SUBMITTED, message=result.message
                )
            elif isinstance(result, Rejected):
                await self.repository.update_status(
                    event_id, PayEventStatus.DRAFT, message=result.reason, rejected=True
                )
            else:
                logger.info(
                    "Pay event %s left as %s after %s (retryable=%s)",
                    event_id,
                    event.status.value,
                    result.kind,
                    result.retryable,
                )

        return result
