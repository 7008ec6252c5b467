"""Builders shared by the test modules."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from au_payroll.calculators.types import AttendanceRecord, Payslip, PayslipStatus

# 2024-07-03 is a Wednesday, 2024-07-06 a Saturday and 2024-07-07 a Sunday
WEDNESDAY = date(2024, 7, 3)
SATURDAY = date(2024, 7, 6)
SUNDAY = date(2024, 7, 7)


class SteppingClock:
    """Clock that advances one second per reading."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


def make_record(
    work_date: date,
    start_hour: int | None,
    end_hour: int | None,
    record_id: str = "att-1",
    employee_id: str = "emp-1",
) -> AttendanceRecord:
    """Attendance record on ``work_date`` clocked at whole UTC hours."""
    midnight = datetime(work_date.year, work_date.month, work_date.day, tzinfo=timezone.utc)
    return AttendanceRecord(
        record_id=record_id,
        employee_id=employee_id,
        work_date=work_date,
        clock_in=None if start_hour is None else midnight + timedelta(hours=start_hour),
        clock_out=None if end_hour is None else midnight + timedelta(hours=end_hour),
    )


def make_payslip(
    employee_id: str = "emp-1",
    gross: str = "1000.00",
    tax: str = "200.00",
    superannuation: str = "115.00",
    payment_date: date = date(2024, 8, 15),
    payslip_id: str | None = None,
) -> Payslip:
    gross_pay = Decimal(gross)
    payg_tax = Decimal(tax)
    return Payslip(
        payslip_id=payslip_id or f"ps-{employee_id}-{payment_date.isoformat()}",
        employee_id=employee_id,
        period_start=payment_date - timedelta(days=13),
        period_end=payment_date,
        gross_pay=gross_pay,
        payg_tax=payg_tax,
        superannuation=Decimal(superannuation),
        net_pay=gross_pay - payg_tax,
        payment_date=payment_date,
        status=PayslipStatus.PUBLISHED,
    )
