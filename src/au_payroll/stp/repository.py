"""Pay event persistence boundary.

The engine never owns storage. It talks to a PayEventRepository, which a
host application backs with its own database (see sql_repository) or,
for tests and local runs, with InMemoryPayEventRepository.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from au_payroll.stp.state_machine import InvalidTransitionError, PayEventStateMachine
from au_payroll.stp.types import PayEventStatus, STPPayEvent


class PayEventNotFoundError(Exception):
    """Raised when a pay event id is unknown."""

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Pay event {event_id} not found")


class DuplicateEventError(Exception):
    """Raised when appending an event whose id or transaction id exists."""

    def __init__(self, event_id: str, transaction_id: str):
        self.event_id = event_id
        self.transaction_id = transaction_id
        super().__init__(
            f"Pay event {event_id} (transaction {transaction_id}) already stored"
        )


class PayEventRepository(Protocol):
    """Store of pay events, queried by financial year."""

    async def list_events_for_year(self, year: int) -> list[STPPayEvent]:
        """All events in a financial year, oldest first."""
        ...

    async def list_events(self) -> list[STPPayEvent]:
        """All events, oldest first."""
        ...

    async def get_event(self, event_id: str) -> STPPayEvent:
        """Load one event.

        Raises:
            PayEventNotFoundError: If the id is unknown
        """
        ...

    async def append_event(self, event: STPPayEvent) -> None:
        """Store a new event.

        Raises:
            DuplicateEventError: If the id or transaction id is taken
        """
        ...

    async def update_status(
        self,
        event_id: str,
        status: PayEventStatus,
        message: str | None = None,
        rejected: bool = False,
    ) -> STPPayEvent:
        """Record a submission outcome and return the updated event.

        Raises:
            PayEventNotFoundError: If the id is unknown
            InvalidTransitionError: If the stored event is already Submitted
        """
        ...


class InMemoryPayEventRepository:
    """Dict-backed repository for tests and local development."""

    def __init__(self, events: list[STPPayEvent] | None = None) -> None:
        self._events: dict[str, STPPayEvent] = {}
        self._lock = asyncio.Lock()
        for event in events or []:
            self._events[event.id] = event

    async def list_events_for_year(self, year: int) -> list[STPPayEvent]:
        return [e for e in self._events.values() if e.reporting_year == year]

    async def list_events(self) -> list[STPPayEvent]:
        return list(self._events.values())

    async def get_event(self, event_id: str) -> STPPayEvent:
        try:
            return self._events[event_id]
        except KeyError:
            raise PayEventNotFoundError(event_id) from None

    async def append_event(self, event: STPPayEvent) -> None:
        async with self._lock:
            taken = event.id in self._events or any(
                e.transaction_id == event.transaction_id for e in self._events.values()
            )
            if taken:
                raise DuplicateEventError(event.id, event.transaction_id)
            self._events[event.id] = event

    async def update_status(
        self,
        event_id: str,
        status: PayEventStatus,
        message: str | None = None,
        rejected: bool = False,
    ) -> STPPayEvent:
        async with self._lock:
            event = await self.get_event(event_id)
            ensure_writable(event.id, event.status, status)
            updated = event.with_outcome(status, message, rejected)
            self._events[event_id] = updated
            return updated


def ensure_writable(event_id: str, current: PayEventStatus | str, requested: PayEventStatus) -> None:
    """Refuse outcome writes to an event in a terminal status."""
    if PayEventStateMachine.is_terminal(current):
        raise InvalidTransitionError(
            PayEventStatus(current).value,
            requested.value,
            f"event {event_id} is final",
        )
