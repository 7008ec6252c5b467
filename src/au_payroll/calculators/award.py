"""Award interpretation: attendance records into pay components."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from au_payroll.calculators.rounding import (
    ZERO,
    round_precise,
    round_to_cents,
    sum_money,
    to_decimal,
)
from au_payroll.calculators.types import (
    AttendanceRecord,
    AwardRule,
    ComponentType,
    DayOfWeekEquals,
    HoursWorkedAbove,
    PayComponent,
    RuleKind,
)

logger = logging.getLogger(__name__)

DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")

# Standard award (e.g. Clerks Private Sector)
STANDARD_AWARD_RULES: tuple[AwardRule, ...] = (
    AwardRule(
        rule_id="OT-1",
        name="Overtime > 8h",
        kind=RuleKind.OVERTIME,
        condition=HoursWorkedAbove(8),
        multiplier=Decimal("1.5"),
    ),
    AwardRule(
        rule_id="PEN-SAT",
        name="Saturday Loading",
        kind=RuleKind.PENALTY,
        condition=DayOfWeekEquals(calendar.SATURDAY),
        multiplier=Decimal("1.25"),
    ),
    AwardRule(
        rule_id="PEN-SUN",
        name="Sunday Loading",
        kind=RuleKind.PENALTY,
        condition=DayOfWeekEquals(calendar.SUNDAY),
        multiplier=Decimal("2.0"),
    ),
)


@dataclass(frozen=True)
class HoursSplit:
    """Whole hours on a record split at the overtime threshold."""

    total: int
    ordinary: int
    overtime: int


@dataclass(frozen=True)
class RecordInterpretation:
    """Components produced for one attendance record."""

    record_id: str
    work_date: date
    components: list[PayComponent]

    @property
    def gross(self) -> Decimal:
        return calculate_gross_pay(self.components)


class AwardInterpreter:
    """Applies award rules to attendance records.

    Interpretation pipeline (per record):
    1) Incomplete records (no clock in or out) produce nothing
    2) Whole hours worked, floored at zero
    3) Split at the first HoursWorked overtime rule's threshold
    4) Ordinary multiplier = highest matching penalty loading (never stacked)
    5) Emit ordinary and overtime components for non-zero hours

    Malformed hours never raise; the worst case is an empty list.
    """

    def __init__(self, rules: Iterable[AwardRule] = STANDARD_AWARD_RULES):
        self.rules: tuple[AwardRule, ...] = tuple(rules)

    def interpret(
        self,
        record: AttendanceRecord,
        base_hourly_rate: Decimal | int | float | str,
        rules: Sequence[AwardRule] | None = None,
    ) -> list[PayComponent]:
        """Convert one attendance record into pay components."""
        active_rules = self.rules if rules is None else tuple(rules)
        if not record.is_complete:
            return []

        total_hours = self.total_hours(record)
        if total_hours is None:
            return []

        base_rate = to_decimal(base_hourly_rate)
        overtime_rule = self.find_overtime_rule(active_rules)
        split = self.split_hours(total_hours, overtime_rule)
        multiplier = self.ordinary_multiplier(record.work_date, total_hours, active_rules)

        components: list[PayComponent] = []
        if split.ordinary > 0:
            components.append(
                self._component(
                    code="ORD",
                    description="Ordinary Hours",
                    hours=split.ordinary,
                    base_rate=base_rate,
                    multiplier=multiplier,
                    component_type=ComponentType.ORDINARY,
                )
            )

        if split.overtime > 0:
            ot_multiplier = DEFAULT_OVERTIME_MULTIPLIER
            if overtime_rule is not None and overtime_rule.multiplier:
                ot_multiplier = overtime_rule.multiplier
            components.append(
                self._component(
                    code="OT",
                    description=f"Overtime ({ot_multiplier.normalize()}x)",
                    hours=split.overtime,
                    base_rate=base_rate,
                    multiplier=ot_multiplier,
                    component_type=ComponentType.OVERTIME,
                )
            )

        return components

    def interpret_many(
        self,
        records: Iterable[AttendanceRecord],
        base_hourly_rate: Decimal | int | float | str,
        rules: Sequence[AwardRule] | None = None,
    ) -> list[RecordInterpretation]:
        """Interpret a batch of records with one base rate."""
        return [
            RecordInterpretation(
                record_id=record.record_id,
                work_date=record.work_date,
                components=self.interpret(record, base_hourly_rate, rules),
            )
            for record in records
        ]

    @staticmethod
    def total_hours(record: AttendanceRecord) -> int | None:
        """Whole hours between clock in and clock out, never negative.

        Returns None when the timestamps cannot be compared (naive vs aware).
        """
        try:
            span = record.clock_out - record.clock_in  # type: ignore[operator]
        except TypeError:
            logger.warning(
                "Record %s has incomparable clock times, skipping", record.record_id
            )
            return None
        # Truncate partial hours; negative spans count as zero
        return max(0, int(span.total_seconds() // 3600))

    @staticmethod
    def find_overtime_rule(rules: Sequence[AwardRule]) -> AwardRule | None:
        """First overtime rule keyed on hours worked."""
        for rule in rules:
            if rule.kind == RuleKind.OVERTIME and isinstance(rule.condition, HoursWorkedAbove):
                return rule
        return None

    @staticmethod
    def split_hours(total_hours: int, overtime_rule: AwardRule | None) -> HoursSplit:
        """Split hours into ordinary and overtime at the rule threshold."""
        if overtime_rule is None:
            return HoursSplit(total=total_hours, ordinary=total_hours, overtime=0)

        threshold = overtime_rule.condition.hours  # type: ignore[union-attr]
        if total_hours > threshold:
            return HoursSplit(
                total=total_hours,
                ordinary=threshold,
                overtime=total_hours - threshold,
            )
        return HoursSplit(total=total_hours, ordinary=total_hours, overtime=0)

    @staticmethod
    def ordinary_multiplier(
        work_date: date, total_hours: int, rules: Sequence[AwardRule]
    ) -> Decimal:
        """Highest matching penalty loading for ordinary hours (1.0 if none)."""
        multiplier = Decimal("1.0")
        for rule in rules:
            if rule.kind != RuleKind.PENALTY or not rule.multiplier:
                continue
            if rule.condition.matches(work_date, total_hours):
                multiplier = max(multiplier, rule.multiplier)
        return multiplier

    @staticmethod
    def _component(
        code: str,
        description: str,
        hours: int,
        base_rate: Decimal,
        multiplier: Decimal,
        component_type: ComponentType,
    ) -> PayComponent:
        loaded_rate = base_rate * multiplier
        return PayComponent(
            code=code,
            description=description,
            units=Decimal(hours),
            rate=round_precise(loaded_rate),
            amount=round_to_cents(Decimal(hours) * loaded_rate),
            component_type=component_type,
        )


def calculate_gross_pay(components: Iterable[PayComponent]) -> Decimal:
    """Gross pay is the sum of component amounts."""
    return sum_money(c.amount for c in components)


def interpret(
    record: AttendanceRecord,
    base_hourly_rate: Decimal | int | float | str,
    rules: Sequence[AwardRule] = STANDARD_AWARD_RULES,
) -> list[PayComponent]:
    """Interpret one record against ``rules`` (standard award by default)."""
    return AwardInterpreter(rules).interpret(record, base_hourly_rate)


def component_hours(components: Iterable[PayComponent]) -> tuple[Decimal, Decimal]:
    """Ordinary and overtime units across components."""
    ordinary = ZERO
    overtime = ZERO
    for component in components:
        if component.component_type == ComponentType.OVERTIME:
            overtime += component.units
        else:
            ordinary += component.units
    return ordinary, overtime
