"""STP pay event generation and submission.

The SQL repository lives in ``au_payroll.stp.sql_repository`` and is not
imported here so that the ORM models can depend on these types.
"""

from au_payroll.stp.aggregator import PayEventAggregator, ReportingYearError
from au_payroll.stp.gateway import (
    Accepted,
    Rejected,
    SubmissionGateway,
    SubmissionResult,
    TransportError,
    ValidationFailed,
)
from au_payroll.stp.repository import (
    DuplicateEventError,
    InMemoryPayEventRepository,
    PayEventNotFoundError,
    PayEventRepository,
)
from au_payroll.stp.service import PayEventService
from au_payroll.stp.state_machine import InvalidTransitionError, PayEventStateMachine
from au_payroll.stp.types import (
    PayEventStatus,
    STPPayEvent,
    STPPayeePayload,
    financial_year_for,
)

__all__ = [
    "PayEventAggregator",
    "ReportingYearError",
    "SubmissionGateway",
    "SubmissionResult",
    "Accepted",
    "Rejected",
    "TransportError",
    "ValidationFailed",
    "PayEventRepository",
    "InMemoryPayEventRepository",
    "PayEventNotFoundError",
    "DuplicateEventError",
    "PayEventService",
    "PayEventStateMachine",
    "InvalidTransitionError",
    "PayEventStatus",
    "STPPayEvent",
    "STPPayeePayload",
    "financial_year_for",
]
