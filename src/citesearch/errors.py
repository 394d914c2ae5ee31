"""Error taxonomy for one evidence cycle.

FetchError and AggregateError are recoverable and stay inside retrieval.
EmptyEvidenceError, CompletionError and MalformedRequestError end the cycle
and are mapped to distinct responses at the HTTP boundary.
"""

from enum import Enum
from typing import List, Optional


class FetchFailure(str, Enum):
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    EMPTY_OR_MALFORMED = "empty_or_malformed"
    NO_RESULTS = "no_results"


class CitesearchError(Exception):
    """Base class. `user_message` is what the caller gets to see."""

    user_message = "An internal server error occurred."

    @property
    def details(self) -> str:
        return str(self)


class FetchError(CitesearchError):
    def __init__(self, origin: str, kind: FetchFailure, cause: Optional[str] = None):
        self.origin = origin
        self.kind = kind
        self.cause = cause
        msg = f"{origin}: {kind.value}"
        if cause:
            msg += f" ({cause})"
        super().__init__(msg)


class AggregateError(CitesearchError):
    def __init__(self, reason: str, last_error: Optional[FetchError] = None, attempts: Optional[List[FetchError]] = None):
        self.reason = reason
        self.last_error = last_error
        self.attempts = attempts or []
        msg = reason
        if last_error is not None:
            msg += f"; last error: {last_error}"
        super().__init__(msg)


class EmptyEvidenceError(CitesearchError):
    user_message = "Search engines are currently busy or found nothing for this query. Please try again in a moment."

    def __init__(self, message: str = "No usable evidence found", cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)

    @property
    def details(self) -> str:
        if self.cause is not None:
            return str(self.cause)
        return str(self)


class CompletionError(CitesearchError):
    user_message = "Evidence was found, but the answer could not be generated. Please try again."


class MalformedRequestError(CitesearchError):
    user_message = "Invalid request."


class ConfigurationError(CitesearchError):
    user_message = "The service is not configured correctly."
