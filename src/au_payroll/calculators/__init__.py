"""Award, superannuation and leave calculators."""

from au_payroll.calculators.award import (
    STANDARD_AWARD_RULES,
    AwardInterpreter,
    RecordInterpretation,
    calculate_gross_pay,
    component_hours,
)
from au_payroll.calculators.leave import STANDARD_ACCRUAL_RULES, LeaveAccrualCalculator
from au_payroll.calculators.super_rate import (
    DEFAULT_FALLBACK_RATE,
    DEFAULT_SUPER_SCHEDULE,
    SuperRateResolver,
)

__all__ = [
    "AwardInterpreter",
    "RecordInterpretation",
    "STANDARD_AWARD_RULES",
    "calculate_gross_pay",
    "component_hours",
    "LeaveAccrualCalculator",
    "STANDARD_ACCRUAL_RULES",
    "SuperRateResolver",
    "DEFAULT_SUPER_SCHEDULE",
    "DEFAULT_FALLBACK_RATE",
]
