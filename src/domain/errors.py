"""Domain Errors

Every failure the ledger core can report. Use cases raise these internally
and convert them into ``libs.result.Error`` values at their boundary.
"""

from typing import Optional
from libs.result import Error


class LedgerError(Exception):
    """Base class for expected, structured ledger failures"""

    code = "LEDGER_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason

    def to_error(self) -> Error:
        return Error(code=self.code, message=self.message, reason=self.reason)


class AuthorizationError(LedgerError):
    """Caller lacks the privilege tier required for the operation"""

    code = "AUTHORIZATION_ERROR"


class ValidationError(LedgerError):
    """Missing or malformed input, or no period where one is required"""

    code = "VALIDATION_ERROR"


class InvalidStateError(LedgerError):
    """Lifecycle transition not permitted from the current state"""

    code = "INVALID_STATE"

    def __init__(self, current_state: str, requested_state: str, message: Optional[str] = None):
        self.current_state = current_state
        self.requested_state = requested_state
        super().__init__(
            message or f"Cannot move period from {current_state} to {requested_state}",
            reason=f"current={current_state}, requested={requested_state}",
        )


class ConflictError(LedgerError):
    """Operation collides with existing state (e.g. a second ACTIVE period)"""

    code = "CONFLICT"


class NotFoundError(LedgerError):
    """Room, user or period does not exist"""

    code = "NOT_FOUND"
