"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from au_payroll.calculators.types import (
    AccrualResult,
    AttendanceRecord,
    BreakInterval,
    PayComponent,
    Payslip,
    PayslipStatus,
)
from au_payroll.stp.types import STPPayEvent, STPPayeePayload


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Award interpretation schemas
# ============================================================================


class BreakIn(CamelModel):
    start: datetime
    end: datetime | None = None


class AttendanceRecordIn(CamelModel):
    """Attendance record as sent by the attendance subsystem."""

    id: str
    employee_id: str
    work_date: date = Field(alias="date")
    clock_in: datetime | None = None
    clock_out: datetime | None = None
    breaks: list[BreakIn] = Field(default_factory=list)
    location: dict[str, Any] | None = None
    project_code: str | None = None

    def to_domain(self) -> AttendanceRecord:
        metadata: dict[str, Any] = {}
        if self.location is not None:
            metadata["location"] = self.location
        if self.project_code is not None:
            metadata["projectCode"] = self.project_code
        return AttendanceRecord(
            record_id=self.id,
            employee_id=self.employee_id,
            work_date=self.work_date,
            clock_in=self.clock_in,
            clock_out=self.clock_out,
            breaks=tuple(BreakInterval(start=b.start, end=b.end) for b in self.breaks),
            metadata=metadata,
        )


class InterpretRequest(CamelModel):
    records: list[AttendanceRecordIn]
    hourly_rate: Decimal | None = Field(default=None, ge=0)


class PayComponentOut(CamelModel):
    code: str
    description: str
    units: Decimal
    rate: Decimal
    amount: Decimal
    type: str

    @classmethod
    def from_domain(cls, component: PayComponent) -> "PayComponentOut":
        return cls(
            code=component.code,
            description=component.description,
            units=component.units,
            rate=component.rate,
            amount=component.amount,
            type=component.component_type.value,
        )


class RecordInterpretationOut(CamelModel):
    record_id: str
    work_date: date = Field(alias="date")
    components: list[PayComponentOut]
    gross: Decimal


# ============================================================================
# Superannuation schemas
# ============================================================================


class SuperRateResponse(CamelModel):
    on: date = Field(alias="date")
    rate: Decimal
    ote: Decimal | None = None
    contribution: Decimal | None = None


# ============================================================================
# Leave schemas
# ============================================================================


class AccrueRequest(CamelModel):
    ordinary_hours: Decimal = Field(ge=0)
    overtime_hours: Decimal = Field(default=Decimal("0"), ge=0)


class AccrualOut(CamelModel):
    leave_type: str
    accrued_amount: Decimal

    @classmethod
    def from_domain(cls, result: AccrualResult) -> "AccrualOut":
        return cls(leave_type=result.leave_type.value, accrued_amount=result.accrued_amount)


# ============================================================================
# STP schemas
# ============================================================================


class PayslipIn(CamelModel):
    id: str
    employee_id: str
    period_start: date
    period_end: date
    gross_pay: Decimal
    allowances: Decimal = Decimal("0")
    overtime: Decimal = Decimal("0")
    payg_tax: Decimal
    superannuation: Decimal
    net_pay: Decimal
    payment_date: date
    status: PayslipStatus = PayslipStatus.DRAFT

    def to_domain(self) -> Payslip:
        return Payslip(
            payslip_id=self.id,
            employee_id=self.employee_id,
            period_start=self.period_start,
            period_end=self.period_end,
            gross_pay=self.gross_pay,
            allowances=self.allowances,
            overtime=self.overtime,
            payg_tax=self.payg_tax,
            superannuation=self.superannuation,
            net_pay=self.net_pay,
            payment_date=self.payment_date,
            status=self.status,
        )


class GenerateEventRequest(CamelModel):
    pay_run_id: str = Field(min_length=1)
    payslips: list[PayslipIn]
    reporting_year: int | None = None


class PayeeOut(CamelModel):
    employee_id: str
    pay_period_gross: Decimal
    pay_period_tax: Decimal
    pay_period_super: Decimal
    ytd_gross: Decimal
    ytd_tax: Decimal
    ytd_super: Decimal

    @classmethod
    def from_domain(cls, payee: STPPayeePayload) -> "PayeeOut":
        return cls(
            employee_id=payee.employee_id,
            pay_period_gross=payee.pay_period_gross,
            pay_period_tax=payee.pay_period_tax,
            pay_period_super=payee.pay_period_super,
            ytd_gross=payee.ytd_gross,
            ytd_tax=payee.ytd_tax,
            ytd_super=payee.ytd_super,
        )


class PayEventResponse(CamelModel):
    id: str
    pay_run_id: str
    transaction_id: str
    submission_date: datetime
    run_date: date
    reporting_year: int
    status: str
    employee_count: int
    total_gross: Decimal
    total_tax: Decimal
    total_super: Decimal
    payees: list[PayeeOut]
    response_message: str | None = None
    rejected: bool = False

    @classmethod
    def from_domain(cls, event: STPPayEvent) -> "PayEventResponse":
        return cls(
            id=event.id,
            pay_run_id=event.pay_run_id,
            transaction_id=event.transaction_id,
            submission_date=event.submission_date,
            run_date=event.run_date,
            reporting_year=event.reporting_year,
            status=event.status.value,
            employee_count=event.employee_count,
            total_gross=event.total_gross,
            total_tax=event.total_tax,
            total_super=event.total_super,
            payees=[PayeeOut.from_domain(p) for p in event.payees],
            response_message=event.response_message,
            rejected=event.rejected,
        )


class SubmissionResponse(CamelModel):
    success: bool
    message: str
    outcome: str
    retryable: bool


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str | None = None
