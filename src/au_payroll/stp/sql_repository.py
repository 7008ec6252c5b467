"""SQL-backed pay event repository."""

from __future__ import annotations

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from au_payroll.models import PayEventRecord
from au_payroll.stp.repository import (
    DuplicateEventError,
    PayEventNotFoundError,
    ensure_writable,
)
from au_payroll.stp.types import PayEventStatus, STPPayEvent


class SqlPayEventRepository:
    """Pay event repository backed by SQLAlchemy.

    Each call runs in its own session and commits on success, so the
    repository can be shared across requests.

    Usage:
        repo = SqlPayEventRepository(session_factory)
        await repo.append_event(event)
        events = await repo.list_events_for_year(2025)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_events_for_year(self, year: int) -> list[STPPayEvent]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(PayEventRecord)
                .where(PayEventRecord.reporting_year == year)
                .order_by(PayEventRecord.submission_date, PayEventRecord.pay_event_id)
            )
            return [record.to_event() for record in result.scalars().all()]

    async def list_events(self) -> list[STPPayEvent]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(PayEventRecord).order_by(
                    PayEventRecord.submission_date, PayEventRecord.pay_event_id
                )
            )
            return [record.to_event() for record in result.scalars().all()]

    async def get_event(self, event_id: str) -> STPPayEvent:
        async with self._session_factory() as session:
            record = await session.get(PayEventRecord, event_id)
            if record is None:
                raise PayEventNotFoundError(event_id)
            return record.to_event()

    async def append_event(self, event: STPPayEvent) -> None:
        async with self._session_factory() as session:
            existing = await session.scalar(
                select(PayEventRecord.pay_event_id).where(
                    or_(
                        PayEventRecord.pay_event_id == event.id,
                        PayEventRecord.transaction_id == event.transaction_id,
                    )
                )
            )
            if existing is not None:
                raise DuplicateEventError(event.id, event.transaction_id)

            session.add(PayEventRecord.from_event(event))
            await session.commit()

    async def update_status(
        self,
        event_id: str,
        status: PayEventStatus,
        message: str | None = None,
        rejected: bool = False,
    ) -> STPPayEvent:
        async with self._session_factory() as session:
            # Only Draft rows are writable; Submitted rows are final
            result = await session.execute(
                update(PayEventRecord)
                .where(
                    PayEventRecord.pay_event_id == event_id,
                    PayEventRecord.status == PayEventStatus.DRAFT.value,
                )
                .values(status=status.value, response_message=message, rejected=rejected)
            )
            if result.rowcount == 0:
                current = await session.scalar(
                    select(PayEventRecord.status).where(
                        PayEventRecord.pay_event_id == event_id
                    )
                )
                if current is None:
                    raise PayEventNotFoundError(event_id)
                ensure_writable(event_id, current, status)
            await session.commit()

        return await self.get_event(event_id)
