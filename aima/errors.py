"""
Error taxonomy for the content engine.

ValidationError never reaches the network. CompletionError subclasses are
raised by the completion client and caught at the session boundary, where
they become an apology turn (chat) or an alert (lessons).
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classification of a failed completion."""
    NETWORK_FAILURE = "network_failure"  # DNS, timeout, connection reset
    SERVICE_ERROR = "service_error"      # Endpoint reachable, non-success response


class AimaError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(AimaError):
    """A configuration value could not be parsed."""


class ValidationError(AimaError):
    """User text was empty or whitespace-only."""


class CompletionError(AimaError):
    """A completion request did not produce a reply."""

    kind: ErrorKind = ErrorKind.SERVICE_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class NetworkFailure(CompletionError):
    kind = ErrorKind.NETWORK_FAILURE


class ServiceError(CompletionError):
    """Non-success response. `message` is the upstream error message when one was sent."""

    kind = ErrorKind.SERVICE_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
