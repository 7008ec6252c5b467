"""STP pay event and payee tables."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from au_payroll.models.base import Base, TimestampMixin
from au_payroll.stp.types import PayEventStatus, STPPayEvent, STPPayeePayload

MONEY = Numeric(14, 2)


class PayEventRecord(Base, TimestampMixin):
    """Persisted STP pay event."""

    __tablename__ = "stp_pay_event"

    pay_event_id: Mapped[str] = mapped_column(String, primary_key=True)
    pay_run_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    transaction_id: Mapped[str] = mapped_column(String, nullable=False)
    submission_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    run_date: Mapped[date] = mapped_column(Date, nullable=False)
    reporting_year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default=PayEventStatus.DRAFT.value)
    total_gross: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    total_tax: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    total_super: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    employee_count: Mapped[int] = mapped_column(Integer, nullable=False)
    response_message: Mapped[str | None] = mapped_column(Text)
    rejected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("transaction_id", name="stp_pay_event_transaction_unique"),
        CheckConstraint(
            "status IN ('Draft', 'Submitted')",
            name="stp_pay_event_status_check",
        ),
    )

    # Relationships
    payees: Mapped[list[PayeeRecord]] = relationship(
        back_populates="pay_event",
        order_by="PayeeRecord.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @classmethod
    def from_event(cls, event: STPPayEvent) -> PayEventRecord:
        return cls(
            pay_event_id=event.id,
            pay_run_id=event.pay_run_id,
            transaction_id=event.transaction_id,
            submission_date=event.submission_date,
            run_date=event.run_date,
            reporting_year=event.reporting_year,
            status=event.status.value,
            total_gross=event.total_gross,
            total_tax=event.total_tax,
            total_super=event.total_super,
            employee_count=event.employee_count,
            response_message=event.response_message,
            rejected=event.rejected,
            payees=[
                PayeeRecord.from_payload(position, payee)
                for position, payee in enumerate(event.payees)
            ],
        )

    def to_event(self) -> STPPayEvent:
        return STPPayEvent(
            id=self.pay_event_id,
            pay_run_id=self.pay_run_id,
            transaction_id=self.transaction_id,
            submission_date=self.submission_date,
            run_date=self.run_date,
            reporting_year=self.reporting_year,
            total_gross=self.total_gross,
            total_tax=self.total_tax,
            total_super=self.total_super,
            employee_count=self.employee_count,
            payees=tuple(p.to_payload() for p in self.payees),
            status=PayEventStatus(self.status),
            response_message=self.response_message,
            rejected=self.rejected,
        )


class PayeeRecord(Base):
    """One payee line of a persisted pay event."""

    __tablename__ = "stp_payee"

    pay_event_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("stp_pay_event.pay_event_id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    pay_period_gross: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    pay_period_tax: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    pay_period_super: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    ytd_gross: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    ytd_tax: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    ytd_super: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    pay_event: Mapped[PayEventRecord] = relationship(back_populates="payees")

    @classmethod
    def from_payload(cls, position: int, payee: STPPayeePayload) -> PayeeRecord:
        return cls(
            position=position,
            employee_id=payee.employee_id,
            pay_period_gross=payee.pay_period_gross,
            pay_period_tax=payee.pay_period_tax,
            pay_period_super=payee.pay_period_super,
            ytd_gross=payee.ytd_gross,
            ytd_tax=payee.ytd_tax,
            ytd_super=payee.ytd_super,
        )

    def to_payload(self) -> STPPayeePayload:
        return STPPayeePayload(
            employee_id=self.employee_id,
            pay_period_gross=self.pay_period_gross,
            pay_period_tax=self.pay_period_tax,
            pay_period_super=self.pay_period_super,
            ytd_gross=self.ytd_gross,
            ytd_tax=self.ytd_tax,
            ytd_super=self.ytd_super,
        )
