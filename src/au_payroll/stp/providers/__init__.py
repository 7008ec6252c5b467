"""Tax authority provider adapters."""

from au_payroll.stp.providers.base import (
    AuthorityProvider,
    AuthorityResponse,
    AuthorityUnavailableError,
)
from au_payroll.stp.providers.stub import AuthorityStubProvider

__all__ = [
    "AuthorityProvider",
    "AuthorityResponse",
    "AuthorityUnavailableError",
    "AuthorityStubProvider",
]
