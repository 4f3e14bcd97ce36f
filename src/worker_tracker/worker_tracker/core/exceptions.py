from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a signed-in session no longer maps to an active account."""


class GatewayError(DomainError):
    """Raised when the database reports a failure.

    The message is the backend's own reason, passed through unchanged.
    """


class MonthCloseError(DomainError):
    """Raised when a month close stops partway.

    ``state`` is the workflow state the failure happened in; ``transitions``
    is the path the invocation took, ending in FAILED.
    """

    def __init__(self, message: str, *, state, cause: Optional[BaseException] = None, transitions=()):
        super().__init__(message)
        self.state = state
        self.cause = cause
        self.transitions = list(transitions)
