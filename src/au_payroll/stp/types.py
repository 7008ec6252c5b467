"""STP pay event types.

Events are immutable records. The only change an event ever sees after
creation is its submission outcome (status, response message, rejection
flag), applied by producing an updated copy.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

FINANCIAL_YEAR_START_MONTH = 7  # Australian financial year starts 1 July


class PayEventStatus(str, Enum):
    """Pay event status values."""

    DRAFT = "Draft"
    SUBMITTED = "Submitted"


def financial_year_for(on: date) -> int:
    """Financial year containing ``on``, named by the calendar year it ends in.

    2024-07-01 through 2025-06-30 is financial year 2025.
    """
    if on.month >= FINANCIAL_YEAR_START_MONTH:
        return on.year + 1
    return on.year


@dataclass(frozen=True)
class STPPayeePayload:
    """One employee's period and year-to-date figures in a pay event."""

    employee_id: str
    pay_period_gross: Decimal
    pay_period_tax: Decimal
    pay_period_super: Decimal
    ytd_gross: Decimal
    ytd_tax: Decimal
    ytd_super: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "employeeId": self.employee_id,
            "payPeriodGross": str(self.pay_period_gross),
            "payPeriodTax": str(self.pay_period_tax),
            "payPeriodSuper": str(self.pay_period_super),
            "ytdGross": str(self.ytd_gross),
            "ytdTax": str(self.ytd_tax),
            "ytdSuper": str(self.ytd_super),
        }


@dataclass(frozen=True)
class STPPayEvent:
    """A pay event reporting one pay run to the tax authority."""

    id: str
    pay_run_id: str
    transaction_id: str
    submission_date: datetime
    run_date: date
    reporting_year: int
    total_gross: Decimal
    total_tax: Decimal
    total_super: Decimal
    employee_count: int
    payees: tuple[STPPayeePayload, ...] = ()
    status: PayEventStatus = PayEventStatus.DRAFT
    response_message: str | None = None
    rejected: bool = False

    @property
    def is_submitted(self) -> bool:
        return self.status == PayEventStatus.SUBMITTED

    @property
    def counts_towards_ytd(self) -> bool:
        """Authority-rejected events are superseded by a corrected event."""
        return not self.rejected

    def with_outcome(
        self,
        status: PayEventStatus,
        message: str | None = None,
        rejected: bool = False,
    ) -> STPPayEvent:
        """Copy carrying a submission outcome."""
        return replace(self, status=status, response_message=message, rejected=rejected)

    def to_submission_payload(self) -> dict[str, Any]:
        """Serialise to the authority's submission format."""
        return {
            "id": self.id,
            "payRunId": self.pay_run_id,
            "transactionId": self.transaction_id,
            "submissionDate": self.submission_date.isoformat(),
            "runDate": self.run_date.isoformat(),
            "reportingYear": self.reporting_year,
            "status": self.status.value,
            "employeeCount": self.employee_count,
            "totalGross": str(self.total_gross),
            "totalTax": str(self.total_tax),
            "totalSuper": str(self.total_super),
            "payees": [p.to_dict() for p in self.payees],
        }


@dataclass
class YtdTotals:
    """Running year-to-date figures for one employee."""

    gross: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    superannuation: Decimal = Decimal("0")

    def add(self, gross: Decimal, tax: Decimal, superannuation: Decimal) -> None:
        self.gross += gross
        self.tax += tax
        self.superannuation += superannuation


@dataclass
class YtdLedger:
    """Year-to-date totals keyed by employee id."""

    reporting_year: int
    totals: dict[str, YtdTotals] = field(default_factory=dict)

    def for_employee(self, employee_id: str) -> YtdTotals:
        return self.totals.setdefault(employee_id, YtdTotals())
