"""Award interpretation endpoints."""

from fastapi import APIRouter, status

from au_payroll.api.dependencies import AppSettings, Interpreter
from au_payroll.api.schemas import (
    InterpretRequest,
    PayComponentOut,
    RecordInterpretationOut,
)

router = APIRouter(prefix="/award", tags=["award"])


@router.post(
    "/interpret",
    response_model=list[RecordInterpretationOut],
    status_code=status.HTTP_200_OK,
)
async def interpret_timesheets(
    payload: InterpretRequest,
    interpreter: Interpreter,
    settings: AppSettings,
) -> list[RecordInterpretationOut]:
    """Interpret attendance records into pay components."""
    hourly_rate = payload.hourly_rate
    if hourly_rate is None:
        hourly_rate = settings.default_hourly_rate

    interpretations = interpreter.interpret_many(
        [record.to_domain() for record in payload.records], hourly_rate
    )
    return [
        RecordInterpretationOut(
            record_id=item.record_id,
            work_date=item.work_date,
            components=[PayComponentOut.from_domain(c) for c in item.components],
            gross=item.gross,
        )
        for item in interpretations
    ]
