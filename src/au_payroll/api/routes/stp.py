"""STP pay event endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status
from fastapi.responses import JSONResponse

from au_payroll.api.dependencies import PayEvents
from au_payroll.api.schemas import (
    ErrorResponse,
    GenerateEventRequest,
    PayEventResponse,
    SubmissionResponse,
)
from au_payroll.stp.aggregator import ReportingYearError
from au_payroll.stp.gateway import TransportError, ValidationFailed
from au_payroll.stp.repository import DuplicateEventError, PayEventNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stp/events", tags=["stp"])


@router.post(
    "",
    response_model=PayEventResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def generate_pay_event(
    payload: GenerateEventRequest,
    service: PayEvents,
) -> PayEventResponse:
    """Generate a Draft pay event for a pay run."""
    try:
        event = await service.generate(
            payload.pay_run_id,
            [slip.to_domain() for slip in payload.payslips],
            reporting_year=payload.reporting_year,
        )
    except DuplicateEventError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ReportingYearError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PayEventResponse.from_domain(event)


@router.get("", response_model=list[PayEventResponse])
async def list_pay_events(
    service: PayEvents,
    year: Annotated[int | None, Query(ge=2000, le=2100)] = None,
) -> list[PayEventResponse]:
    """List pay events, optionally for one financial year."""
    if year is None:
        events = await service.repository.list_events()
    else:
        events = await service.repository.list_events_for_year(year)
    return [PayEventResponse.from_domain(e) for e in events]


@router.get(
    "/{event_id}",
    response_model=PayEventResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_pay_event(
    service: PayEvents,
    event_id: Annotated[str, Path()],
) -> PayEventResponse:
    """Get a pay event by ID."""
    try:
        event = await service.repository.get_event(event_id)
    except PayEventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return PayEventResponse.from_domain(event)


@router.post(
    "/{event_id}/submit",
    response_model=SubmissionResponse,
    responses={
        404: {"model": ErrorResponse},
        422: {"model": SubmissionResponse},
        503: {"model": SubmissionResponse},
    },
)
async def submit_pay_event(
    service: PayEvents,
    event_id: Annotated[str, Path()],
) -> SubmissionResponse | JSONResponse:
    """Submit a pay event to the tax authority.

    Rejections by the authority return 200 with success=false; local
    validation failures return 422 and transport failures 503.
    """
    try:
        result = await service.submit(event_id)
    except PayEventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    body = SubmissionResponse(
        success=result.success,
        message=result.message,
        outcome=result.kind,
        retryable=result.retryable,
    )
    if isinstance(result, ValidationFailed):
        return JSONResponse(
            status_code=422,
            content=body.model_dump(by_alias=True),
        )
    if isinstance(result, TransportError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(by_alias=True),
        )
    return body
