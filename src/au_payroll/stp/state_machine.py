"""Pay event state machine with transition validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from au_payroll.stp.types import PayEventStatus

if TYPE_CHECKING:
    from au_payroll.stp.types import STPPayEvent


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PayEventStateMachine:
    """State machine for pay event status transitions.

    Allowed transitions:
    - Draft → Submitted (after the authority accepts the event)

    Submitted is terminal. An event the authority rejected stays Draft but
    is flagged rejected and can never be submitted again.
    """

    # Keyed by status value so plain strings and enum members both work
    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayEventStatus.DRAFT.value: [PayEventStatus.SUBMITTED.value],
        PayEventStatus.SUBMITTED.value: [],  # Terminal state
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(_value(from_status), [])
        return _value(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(_value(from_status), _value(to_status))

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(_value(status), [])

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(_value(current_status), [])

    @classmethod
    def validate_event_for_submission(cls, event: STPPayEvent) -> list[str]:
        """Check an event can be sent to the authority.

        Returns list of error messages (empty if valid).
        """
        errors: list[str] = []

        if not cls.can_transition(event.status, PayEventStatus.SUBMITTED):
            errors.append(f"Event {event.id} is already {event.status.value}")
            return errors

        if event.rejected:
            errors.append(
                f"Event {event.id} was rejected by the authority; generate a corrected event"
            )

        if event.total_gross < 0:
            errors.append("Total Gross cannot be negative.")

        return errors


def _value(status: str) -> str:
    if isinstance(status, PayEventStatus):
        return status.value
    return status
