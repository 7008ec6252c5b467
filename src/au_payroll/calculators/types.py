"""Type definitions for the award, super and leave calculators."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Union


class RuleKind(str, Enum):
    """Award rule kinds."""

    OVERTIME = "Overtime"
    PENALTY = "Penalty"


class ComponentType(str, Enum):
    """Pay component types."""

    ORDINARY = "Ordinary"
    OVERTIME = "Overtime"


class LeaveType(str, Enum):
    """Accruing leave types."""

    ANNUAL = "Annual"
    SICK = "Sick"
    LONG_SERVICE = "LongService"


class AccrualMethod(str, Enum):
    """How a leave accrual rule earns leave."""

    PER_HOUR_WORKED = "PerHourWorked"
    PER_PAY_PERIOD = "PerPayPeriod"


class PayslipStatus(str, Enum):
    """Payslip lifecycle status."""

    DRAFT = "Draft"
    PUBLISHED = "Published"
    PAID = "Paid"


class ImmutablePayslipError(Exception):
    """Raised when a paid payslip would be changed."""

    def __init__(self, payslip_id: str):
        self.payslip_id = payslip_id
        super().__init__(f"Payslip {payslip_id} is paid and can no longer change")


# ===== Attendance =====


@dataclass(frozen=True)
class BreakInterval:
    """An unpaid break taken during a shift."""

    start: datetime
    end: datetime | None = None


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance on one calendar day."""

    record_id: str
    employee_id: str
    work_date: date
    clock_in: datetime | None = None
    clock_out: datetime | None = None
    breaks: tuple[BreakInterval, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.clock_in is not None and self.clock_out is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttendanceRecord:
        """Build a record from its JSON form (ISO dates and timestamps)."""
        breaks = tuple(
            BreakInterval(
                start=_parse_timestamp(b["start"]),
                end=_parse_timestamp(b.get("end")),
            )
            for b in data.get("breaks") or []
        )
        metadata = {
            key: data[key]
            for key in ("location", "projectCode", "notes")
            if data.get(key) is not None
        }
        metadata.update(data.get("metadata") or {})
        return cls(
            record_id=str(data.get("id", "")),
            employee_id=str(data.get("employeeId", "")),
            work_date=date.fromisoformat(data["date"]),
            clock_in=_parse_timestamp(data.get("clockIn")),
            clock_out=_parse_timestamp(data.get("clockOut")),
            breaks=breaks,
            metadata=metadata,
        )


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


# ===== Award rules =====


@dataclass(frozen=True)
class HoursWorkedAbove:
    """Matches when the hours worked on a day exceed ``hours``."""

    hours: int

    def matches(self, work_date: date, total_hours: int) -> bool:
        return total_hours > self.hours


@dataclass(frozen=True)
class DayOfWeekEquals:
    """Matches a weekday, numbered as ``date.weekday()`` (Monday=0, Sunday=6)."""

    weekday: int

    def matches(self, work_date: date, total_hours: int) -> bool:
        return work_date.weekday() == self.weekday


RuleCondition = Union[HoursWorkedAbove, DayOfWeekEquals]


@dataclass(frozen=True)
class AwardRule:
    """A named overtime or penalty rule from an award."""

    rule_id: str
    name: str
    kind: RuleKind
    condition: RuleCondition
    multiplier: Decimal | None = None


@dataclass(frozen=True)
class PayComponent:
    """A line item produced by award interpretation."""

    code: str
    description: str
    units: Decimal
    rate: Decimal
    amount: Decimal
    component_type: ComponentType

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "description": self.description,
            "units": str(self.units),
            "rate": str(self.rate),
            "amount": str(self.amount),
            "type": self.component_type.value,
        }


# ===== Superannuation =====


@dataclass(frozen=True)
class SuperRateSchedule:
    """Superannuation guarantee rate effective from a date (percent)."""

    effective_date: date
    rate: Decimal


# ===== Leave =====


@dataclass(frozen=True)
class LeaveAccrualRule:
    """How one leave type accrues."""

    leave_type: LeaveType
    method: AccrualMethod
    rate: Decimal  # hours per hour worked, or hours per pay period
    accrue_on_overtime: bool = False
    cap: Decimal | None = None  # maximum balance in hours


@dataclass(frozen=True)
class AccrualResult:
    """Hours of leave accrued for one leave type."""

    leave_type: LeaveType
    accrued_amount: Decimal


# ===== Payslips =====


@dataclass(frozen=True)
class Payslip:
    """Per-employee summary of one pay period."""

    payslip_id: str
    employee_id: str
    period_start: date
    period_end: date
    gross_pay: Decimal
    payg_tax: Decimal
    superannuation: Decimal
    net_pay: Decimal
    payment_date: date
    allowances: Decimal = Decimal("0")
    overtime: Decimal = Decimal("0")
    status: PayslipStatus = PayslipStatus.DRAFT

    @property
    def is_paid(self) -> bool:
        return self.status == PayslipStatus.PAID

    def with_status(self, status: PayslipStatus) -> Payslip:
        """Return a copy in ``status``. Paid payslips cannot change."""
        if self.is_paid and status != PayslipStatus.PAID:
            raise ImmutablePayslipError(self.payslip_id)
        return replace(self, status=status)
