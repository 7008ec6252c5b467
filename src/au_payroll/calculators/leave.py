"""Leave accrual from hours worked."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from au_payroll.calculators.rounding import ZERO, round_precise, to_decimal
from au_payroll.calculators.types import (
    AccrualMethod,
    AccrualResult,
    LeaveAccrualRule,
    LeaveType,
)

STANDARD_ACCRUAL_RULES: tuple[LeaveAccrualRule, ...] = (
    LeaveAccrualRule(
        leave_type=LeaveType.ANNUAL,
        method=AccrualMethod.PER_HOUR_WORKED,
        rate=Decimal("0.0769"),  # 4 weeks / 52 weeks, ~1/13
        accrue_on_overtime=False,
    ),
    LeaveAccrualRule(
        leave_type=LeaveType.SICK,
        method=AccrualMethod.PER_HOUR_WORKED,
        rate=Decimal("0.0385"),  # 10 days / 260 days, ~1/26
        accrue_on_overtime=False,
    ),
)


class LeaveAccrualCalculator:
    """Computes leave accrued per leave type.

    PER_HOUR_WORKED rules accrue ``rate`` hours per hour worked (overtime
    only counts when the rule says so). PER_PAY_PERIOD rules accrue ``rate``
    hours per call, so callers invoke this once per employee per period.
    """

    def __init__(self, rules: Iterable[LeaveAccrualRule] = STANDARD_ACCRUAL_RULES):
        self.rules: tuple[LeaveAccrualRule, ...] = tuple(rules)

    def accrue(
        self,
        ordinary_hours: Decimal | int | float | str,
        overtime_hours: Decimal | int | float | str = ZERO,
        rules: Sequence[LeaveAccrualRule] | None = None,
        balances: Mapping[LeaveType, Decimal] | None = None,
    ) -> list[AccrualResult]:
        """Accrue leave for one pay period.

        Args:
            ordinary_hours: Ordinary hours worked in the period
            overtime_hours: Overtime hours worked in the period
            rules: Overrides the calculator's rules for this call
            balances: Current balances, only consulted for capped rules

        Returns:
            One AccrualResult per rule, in rule order
        """
        active_rules = self.rules if rules is None else rules
        ordinary = to_decimal(ordinary_hours)
        overtime = to_decimal(overtime_hours)

        results: list[AccrualResult] = []
        for rule in active_rules:
            amount = self._accrue_one(rule, ordinary, overtime)
            if rule.cap is not None and balances is not None:
                amount = self._apply_cap(amount, rule.cap, balances.get(rule.leave_type, ZERO))
            results.append(AccrualResult(leave_type=rule.leave_type, accrued_amount=amount))
        return results

    @staticmethod
    def _accrue_one(
        rule: LeaveAccrualRule, ordinary: Decimal, overtime: Decimal
    ) -> Decimal:
        if rule.method == AccrualMethod.PER_PAY_PERIOD:
            return rule.rate

        basis = ordinary
        if rule.accrue_on_overtime:
            basis += overtime
        return round_precise(basis * rule.rate)

    @staticmethod
    def _apply_cap(amount: Decimal, cap: Decimal, balance: Decimal) -> Decimal:
        headroom = max(ZERO, cap - balance)
        return min(amount, headroom)


def accrue(
    ordinary_hours: Decimal | int | float | str,
    overtime_hours: Decimal | int | float | str = ZERO,
    rules: Sequence[LeaveAccrualRule] = STANDARD_ACCRUAL_RULES,
) -> list[AccrualResult]:
    """Accrue leave with ``rules`` (standard annual and sick leave by default)."""
    return LeaveAccrualCalculator(rules).accrue(ordinary_hours, overtime_hours)
