"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from au_payroll.calculators import AwardInterpreter, LeaveAccrualCalculator, SuperRateResolver
from au_payroll.config import Settings, get_settings
from au_payroll.stp import PayEventService


def get_pay_event_service(request: Request) -> PayEventService:
    """Pay event service built at application startup."""
    return request.app.state.pay_event_service


def get_super_rate_resolver(request: Request) -> SuperRateResolver:
    return request.app.state.super_rate_resolver


def get_award_interpreter(request: Request) -> AwardInterpreter:
    return request.app.state.award_interpreter


def get_leave_calculator(request: Request) -> LeaveAccrualCalculator:
    return request.app.state.leave_calculator


# Type aliases for cleaner dependency injection
PayEvents = Annotated[PayEventService, Depends(get_pay_event_service)]
SuperRates = Annotated[SuperRateResolver, Depends(get_super_rate_resolver)]
Interpreter = Annotated[AwardInterpreter, Depends(get_award_interpreter)]
LeaveCalculator = Annotated[LeaveAccrualCalculator, Depends(get_leave_calculator)]
AppSettings = Annotated[Settings, Depends(get_settings)]
