"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from au_payroll.api.routes import (
    award_router,
    health_router,
    leave_router,
    stp_router,
    super_router,
)
from au_payroll.calculators import AwardInterpreter, LeaveAccrualCalculator, SuperRateResolver
from au_payroll.calculators.super_rate import DEFAULT_SUPER_SCHEDULE
from au_payroll.config import get_settings
from au_payroll.database import create_schema, dispose_db, init_db
from au_payroll.stp import PayEventService, SubmissionGateway
from au_payroll.stp.providers import AuthorityProvider, AuthorityStubProvider
from au_payroll.stp.repository import PayEventRepository
from au_payroll.stp.sql_repository import SqlPayEventRepository
from au_payroll.stp.state_machine import InvalidTransitionError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup: fall back to the SQL store when no repository was injected
    owns_db = getattr(app.state, "pay_event_service", None) is None
    if owns_db:
        engine, session_factory = init_db()
        await create_schema(engine)
        _install_services(app, SqlPayEventRepository(session_factory), AuthorityStubProvider())
    yield
    # Shutdown
    if owns_db:
        await dispose_db()


def _install_services(
    app: FastAPI,
    repository: PayEventRepository,
    provider: AuthorityProvider,
) -> None:
    settings = get_settings()
    gateway = SubmissionGateway(provider, timeout_seconds=settings.submission_timeout_seconds)
    app.state.pay_event_service = PayEventService(repository, gateway)
    app.state.super_rate_resolver = SuperRateResolver(
        DEFAULT_SUPER_SCHEDULE, settings.super_fallback_rate
    )
    app.state.award_interpreter = AwardInterpreter()
    app.state.leave_calculator = LeaveAccrualCalculator()


def create_app(
    repository: PayEventRepository | None = None,
    provider: AuthorityProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        repository: Pay event store. Defaults to the SQL store opened at startup.
        provider: Authority adapter. Defaults to the stub authority.
    """
    app = FastAPI(
        title="AU Payroll Core API",
        description="Award interpretation, superannuation, leave accrual and STP events",
        version="0.1.0",
        lifespan=lifespan,
    )

    if repository is not None:
        _install_services(app, repository, provider or AuthorityStubProvider())

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "code": "INVALID_TRANSITION"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(award_router, prefix="/api/v1")
    app.include_router(super_router, prefix="/api/v1")
    app.include_router(leave_router, prefix="/api/v1")
    app.include_router(stp_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
