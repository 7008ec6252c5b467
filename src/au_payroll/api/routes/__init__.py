"""API routes."""

from au_payroll.api.routes.award import router as award_router
from au_payroll.api.routes.health import router as health_router
from au_payroll.api.routes.leave import router as leave_router
from au_payroll.api.routes.stp import router as stp_router
from au_payroll.api.routes.super_rate import router as super_router

__all__ = [
    "award_router",
    "health_router",
    "leave_router",
    "stp_router",
    "super_router",
]
