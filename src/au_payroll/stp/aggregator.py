"""Pay event aggregation with year-to-date bookkeeping."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Callable, Iterable, Sequence

from au_payroll.calculators.rounding import round_to_cents, sum_money
from au_payroll.calculators.types import Payslip
from au_payroll.stp.types import (
    PayEventStatus,
    STPPayEvent,
    STPPayeePayload,
    YtdLedger,
    financial_year_for,
)

logger = logging.getLogger(__name__)


class ReportingYearError(ValueError):
    """Raised when a pay run's payslips do not belong to one financial year."""

    def __init__(self, pay_run_id: str, years: list[int], reporting_year: int | None = None):
        self.pay_run_id = pay_run_id
        self.years = years
        self.reporting_year = reporting_year
        if reporting_year is None:
            msg = f"Pay run {pay_run_id} spans financial years {years}"
        else:
            msg = (
                f"Pay run {pay_run_id} is paid in financial year(s) {years}, "
                f"not reporting year {reporting_year}"
            )
        super().__init__(msg)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PayEventAggregator:
    """Builds draft STP pay events from a pay run's payslips.

    YTD rules:
    1. YTD = sum of *period* figures from prior events + this payslip
    2. Only prior events in the same financial year are counted (resets 1 July)
    3. Events the authority rejected are skipped (a corrected event replaces them)
    4. Several payslips for one employee in a run accumulate in payslip order

    Period figures are rounded to cents before they feed YTD or the event
    totals, so YTD always equals the sum of reported period figures.
    Prior YTD figures are never read back or subtracted.

    A run must be paid within one financial year; runs crossing 30 June are
    split by the caller.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def generate_event(
        self,
        pay_run_id: str,
        payslips: Sequence[Payslip],
        previous_events: Iterable[STPPayEvent] = (),
        reporting_year: int | None = None,
    ) -> STPPayEvent:
        """Generate a Draft pay event for a pay run.

        Raises:
            ReportingYearError: If the payslips span financial years or do
                not fall in an explicit ``reporting_year``
        """
        now = self.now()
        self.check_reporting_year(pay_run_id, payslips, reporting_year)
        year = reporting_year or self.reporting_year_for(payslips, now.date())

        ledger = self.build_ytd_ledger(year, previous_events)

        payees: list[STPPayeePayload] = []
        for slip in payslips:
            gross = round_to_cents(slip.gross_pay)
            tax = round_to_cents(slip.payg_tax)
            superannuation = round_to_cents(slip.superannuation)

            ytd = ledger.for_employee(slip.employee_id)
            ytd.add(gross, tax, superannuation)
            payees.append(
                STPPayeePayload(
                    employee_id=slip.employee_id,
                    pay_period_gross=gross,
                    pay_period_tax=tax,
                    pay_period_super=superannuation,
                    ytd_gross=ytd.gross,
                    ytd_tax=ytd.tax,
                    ytd_super=ytd.superannuation,
                )
            )

        event = STPPayEvent(
            id=f"STP-{pay_run_id}-{int(now.timestamp() * 1000)}",
            pay_run_id=pay_run_id,
            transaction_id=str(uuid.uuid4()),
            submission_date=now,
            run_date=now.date(),
            reporting_year=year,
            total_gross=sum_money(p.pay_period_gross for p in payees),
            total_tax=sum_money(p.pay_period_tax for p in payees),
            total_super=sum_money(p.pay_period_super for p in payees),
            employee_count=len(payslips),
            payees=tuple(payees),
            status=PayEventStatus.DRAFT,
        )

        logger.info(
            "Generated pay event %s for run %s (FY%s): %s payees, gross %s",
            event.id,
            pay_run_id,
            year,
            event.employee_count,
            event.total_gross,
        )
        return event

    @staticmethod
    def check_reporting_year(
        pay_run_id: str,
        payslips: Sequence[Payslip],
        reporting_year: int | None = None,
    ) -> None:
        """Refuse runs paid across financial years or outside ``reporting_year``."""
        years = sorted({financial_year_for(s.payment_date) for s in payslips})
        if len(years) > 1:
            raise ReportingYearError(pay_run_id, years)
        if reporting_year is not None and years and years != [reporting_year]:
            raise ReportingYearError(pay_run_id, years, reporting_year)

    @staticmethod
    def reporting_year_for(payslips: Sequence[Payslip], run_date: date) -> int:
        """Financial year of the latest payment date, else of the run date."""
        if payslips:
            return financial_year_for(max(s.payment_date for s in payslips))
        return financial_year_for(run_date)

    @staticmethod
    def build_ytd_ledger(
        reporting_year: int, previous_events: Iterable[STPPayEvent]
    ) -> YtdLedger:
        """Sum prior period figures per employee for one financial year."""
        ledger = YtdLedger(reporting_year=reporting_year)
        for event in previous_events:
            if event.reporting_year != reporting_year:
                continue
            if not event.counts_towards_ytd:
                logger.debug("Skipping rejected event %s in YTD scan", event.id)
                continue
            for payee in event.payees:
                ledger.for_employee(payee.employee_id).add(
                    payee.pay_period_gross,
                    payee.pay_period_tax,
                    payee.pay_period_super,
                )
        return ledger
