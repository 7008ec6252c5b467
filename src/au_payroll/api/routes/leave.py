"""Leave accrual endpoints."""

from fastapi import APIRouter

from au_payroll.api.dependencies import LeaveCalculator
from au_payroll.api.schemas import AccrualOut, AccrueRequest

router = APIRouter(prefix="/leave", tags=["leave"])


@router.post("/accrue", response_model=list[AccrualOut])
async def accrue_leave(
    payload: AccrueRequest,
    calculator: LeaveCalculator,
) -> list[AccrualOut]:
    """Leave accrued for one pay period's hours."""
    results = calculator.accrue(payload.ordinary_hours, payload.overtime_hours)
    return [AccrualOut.from_domain(r) for r in results]
