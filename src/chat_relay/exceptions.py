"""
Error taxonomy for the relay.

Every failure a chat request can end in is a RelayError tagged with an
ErrorKind. The retry engine switches on the kind to decide whether to
try again, and the API layer switches on it to pick the HTTP response.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories with their default HTTP status."""
    
    INVALID_INPUT = "invalid_input"
    MISSING_CREDENTIAL = "missing_credential"
    OVERLOADED = "overloaded"
    UPSTREAM_ERROR = "upstream_error"
    TRANSPORT = "transport"
    EMPTY_UPSTREAM_RESPONSE = "empty_upstream_response"
    UNEXPECTED = "unexpected"
    
    @property
    def retryable(self) -> bool:
        """Whether another upstream attempt may succeed."""
        return self in (ErrorKind.OVERLOADED, ErrorKind.TRANSPORT)
    
    @property
    def default_status(self) -> int:
        return _DEFAULT_STATUS[self]


_DEFAULT_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.MISSING_CREDENTIAL: 500,
    ErrorKind.OVERLOADED: 503,
    ErrorKind.UPSTREAM_ERROR: 502,
    ErrorKind.TRANSPORT: 500,
    ErrorKind.EMPTY_UPSTREAM_RESPONSE: 502,
    ErrorKind.UNEXPECTED: 500,
}


class RelayError(Exception):
    """
    Tagged relay failure.
    
    Attributes:
        kind: Failure category
        message: Human-readable message (safe to return to clients except
            for UNEXPECTED, whose message is only logged)
        upstream_status: HTTP status returned by the upstream API, if any
        details: Extra context for logs
    """
    
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        upstream_status: Optional[int] = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.upstream_status = upstream_status
        self.details = details or {}
    
    @property
    def retryable(self) -> bool:
        return self.kind.retryable
    
    @property
    def status_code(self) -> int:
        """HTTP status for the client response."""
        if self.kind is ErrorKind.UPSTREAM_ERROR and self.upstream_status:
            return self.upstream_status
        return self.kind.default_status
    
    def __repr__(self) -> str:
        return (
            f"RelayError(kind={self.kind.value}, "
            f"upstream_status={self.upstream_status}, "
            f"message={self.message!r})"
        )


def classify_upstream_failure(status_code: int, message: str) -> RelayError:
    """
    Build the RelayError for a non-2xx upstream response.
    
    429, 503 and any message mentioning "overloaded" are capacity
    problems; everything else is passed through as-is.
    """
    if status_code in (429, 503) or "overloaded" in (message or "").lower():
        return RelayError(ErrorKind.OVERLOADED, message, upstream_status=status_code)
    return RelayError(ErrorKind.UPSTREAM_ERROR, message, upstream_status=status_code)
