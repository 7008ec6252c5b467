"""Superannuation guarantee rate resolution with effective dating."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable

from au_payroll.calculators.rounding import ZERO, round_to_cents, to_decimal
from au_payroll.calculators.types import SuperRateSchedule

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_RATE = Decimal("11.0")

DEFAULT_SUPER_SCHEDULE: tuple[SuperRateSchedule, ...] = (
    SuperRateSchedule(effective_date=date(2023, 7, 1), rate=Decimal("11.0")),
    SuperRateSchedule(effective_date=date(2024, 7, 1), rate=Decimal("11.5")),
    SuperRateSchedule(effective_date=date(2025, 7, 1), rate=Decimal("12.0")),
)

# Maximum super contribution base per quarter (2024-25 income year)
MAX_CONTRIBUTION_BASE_QUARTERLY = Decimal("65070")


class SuperRateResolver:
    """Resolves the superannuation guarantee percentage for a date.

    Rate selection:
    1. Entries are ordered newest first by effective date
    2. The first entry effective on or before the query date wins
    3. Entries sharing an effective date: the last one inserted wins
    4. Dates before every entry get the fallback rate (never an error)
    """

    def __init__(
        self,
        schedule: Iterable[SuperRateSchedule] = DEFAULT_SUPER_SCHEDULE,
        fallback_rate: Decimal | int | float | str = DEFAULT_FALLBACK_RATE,
    ):
        indexed = list(enumerate(schedule))
        # Insertion index breaks ties so later entries sort first
        indexed.sort(key=lambda pair: (pair[1].effective_date, pair[0]), reverse=True)
        self._ordered = [entry for _, entry in indexed]
        self.fallback_rate = to_decimal(fallback_rate)

    @property
    def schedule(self) -> list[SuperRateSchedule]:
        """Schedule entries, newest first."""
        return list(self._ordered)

    def resolve_rate(self, on: date) -> Decimal:
        """Return the guarantee rate (percent) applicable on a date."""
        for entry in self._ordered:
            if entry.effective_date <= on:
                return entry.rate

        logger.debug(
            "No super rate effective on %s, using fallback %s", on, self.fallback_rate
        )
        return self.fallback_rate

    def calculate_contribution(
        self, ote: Decimal | int | float | str, payment_date: date
    ) -> Decimal:
        """Super guarantee on ordinary time earnings paid on ``payment_date``."""
        rate = self.resolve_rate(payment_date)
        return round_to_cents(to_decimal(ote) * rate / 100)

    def calculate_capped_contribution(
        self,
        ote: Decimal | int | float | str,
        payment_date: date,
        quarter_ote_to_date: Decimal | int | float | str = ZERO,
        max_base: Decimal = MAX_CONTRIBUTION_BASE_QUARTERLY,
    ) -> Decimal:
        """Super guarantee limited by the quarterly maximum contribution base.

        Only the part of ``ote`` that still fits under the quarter's base
        (after ``quarter_ote_to_date`` already paid) attracts the guarantee.
        """
        ote = to_decimal(ote)
        remaining_base = max(ZERO, max_base - to_decimal(quarter_ote_to_date))
        contributable = min(ote, remaining_base)
        if contributable < ote:
            logger.info(
                "OTE %s capped to %s by quarterly contribution base %s",
                ote,
                contributable,
                max_base,
            )
        return self.calculate_contribution(contributable, payment_date)


def resolve_rate(
    on: date,
    schedule: Iterable[SuperRateSchedule] = DEFAULT_SUPER_SCHEDULE,
    fallback_rate: Decimal = DEFAULT_FALLBACK_RATE,
) -> Decimal:
    """Resolve the rate for ``on`` against a one-off schedule."""
    return SuperRateResolver(schedule, fallback_rate).resolve_rate(on)
