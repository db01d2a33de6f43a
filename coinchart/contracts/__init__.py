from coinchart.contracts.config import ConfigProtocol
from coinchart.contracts.errors import (
    ConfigurationError,
    Failure,
    FailureKind,
    MalformedResponse,
    NetworkFailure,
    NoData,
    PipelineError,
    UpstreamStatusFailure,
)

__all__ = [
    'ConfigProtocol',
    'ConfigurationError',
    'Failure',
    'FailureKind',
    'MalformedResponse',
    'NetworkFailure',
    'NoData',
    'PipelineError',
    'UpstreamStatusFailure',
]
