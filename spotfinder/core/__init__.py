"""
Core error taxonomy, logging, metrics and dependency wiring for the spot finder.
"""

from .exceptions import (
    ErrorCode,
    Stage,
    SpotFinderException,
    ResolutionError,
    ResolutionReason,
    SearchError,
    SearchReason,
    PipelineError,
    PipelineReason,
    TransportFailureError,
)

__all__ = [
    "ErrorCode",
    "Stage",
    "SpotFinderException",
    "ResolutionError",
    "ResolutionReason",
    "SearchError",
    "SearchReason",
    "PipelineError",
    "PipelineReason",
    "TransportFailureError",
]
