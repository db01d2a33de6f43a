"""
Pipeline errors - typed failures raised by the provider clients.

Clients raise these; the fetcher and the analysis generator convert them into
Failure values on their results. Cancellation of a superseded cycle is not part
of this hierarchy: it travels as asyncio.CancelledError and is absorbed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class FailureKind(str, Enum):
    NETWORK = "network"
    UPSTREAM_STATUS = "upstream_status"
    MALFORMED_RESPONSE = "malformed_response"
    CONFIGURATION = "configuration"
    NO_DATA = "no_data"


@dataclass(frozen=True, slots=True)
class Failure:
    """User-visible failure reason attached to a fetch or analysis result."""
    kind: FailureKind
    reason: str

    def __str__(self) -> str:
        return self.reason


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    kind: FailureKind = FailureKind.NETWORK

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_failure(self) -> Failure:
        return Failure(kind=self.kind, reason=self.message)


class NetworkFailure(PipelineError):
    """Transport-level failure: connection error, DNS error or timeout."""

    kind = FailureKind.NETWORK

    def __init__(self, message: str, timed_out: bool = False, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)
        self.timed_out = timed_out


class UpstreamStatusFailure(PipelineError):
    """Provider answered with a non-success status."""

    kind = FailureKind.UPSTREAM_STATUS

    def __init__(self, message: str, status: Optional[int] = None, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)
        self.status = status


class MalformedResponse(PipelineError):
    """Provider body could not be decoded or did not match the expected shape."""

    kind = FailureKind.MALFORMED_RESPONSE


class ConfigurationError(PipelineError):
    """Required configuration, such as an API credential, is missing."""

    kind = FailureKind.CONFIGURATION


class NoData(PipelineError):
    """Precondition unmet: nothing to analyze."""

    kind = FailureKind.NO_DATA
