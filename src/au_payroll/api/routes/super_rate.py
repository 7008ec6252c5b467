"""Superannuation guarantee endpoints."""

from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Query

from au_payroll.api.dependencies import SuperRates
from au_payroll.api.schemas import SuperRateResponse

router = APIRouter(prefix="/super", tags=["super"])


@router.get("/rate", response_model=SuperRateResponse)
async def get_super_rate(
    resolver: SuperRates,
    on: Annotated[date, Query(alias="date")],
    ote: Annotated[Decimal | None, Query(ge=0)] = None,
) -> SuperRateResponse:
    """Guarantee rate on a date, plus the contribution on ``ote`` if given."""
    contribution = None
    if ote is not None:
        contribution = resolver.calculate_contribution(ote, on)

    return SuperRateResponse(
        on=on,
        rate=resolver.resolve_rate(on),
        ote=ote,
        contribution=contribution,
    )
