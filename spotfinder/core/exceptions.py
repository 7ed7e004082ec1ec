"""
Custom exceptions for the nearest spot finder.

Every failure the pipeline can report derives from SpotFinderException and
carries a machine-readable reason plus the pipeline stage it came from.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Origin resolution errors
    LOOKUP_FAILED = "LOOKUP_FAILED"
    LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"

    # Proximity search errors
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"

    # Ranking outcome
    NO_MATCH = "NO_MATCH"

    # Catch-all for unexpected failures at a network boundary
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"

    # Generic errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class Stage(str, Enum):
    """Pipeline stage a failure is attributed to."""
    RESOLVE = "resolve"
    SEARCH = "search"
    RANK = "rank"


class ResolutionReason(str, Enum):
    LOOKUP_FAILED = "lookup_failed"
    NOT_FOUND = "not_found"


class SearchReason(str, Enum):
    SERVICE_UNAVAILABLE = "service_unavailable"
    MALFORMED_RESPONSE = "malformed_response"


class PipelineReason(str, Enum):
    NO_MATCH = "no_match"
    TRANSPORT_FAILURE = "transport_failure"


class SpotFinderException(Exception):
    """Base exception for the spot finder."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        reason: Enum,
        stage: Optional[Stage] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.reason = reason
        self.stage = stage
        self.details = details or {}
        self.status_code = status_code

    def with_stage(self, stage: Stage) -> "SpotFinderException":
        """Annotate the error with the stage it surfaced in and return it."""
        self.stage = stage
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "reason": self.reason.value,
            "stage": self.stage.value if self.stage else None,
            "message": self.message,
            "details": self.details,
        }


class ResolutionError(SpotFinderException):
    """Raised when an origin cannot be turned into a coordinate."""

    _CODES = {
        ResolutionReason.LOOKUP_FAILED: (ErrorCode.LOOKUP_FAILED, "Geocoding failed", 502),
        ResolutionReason.NOT_FOUND: (ErrorCode.LOCATION_NOT_FOUND, "Location not found", 404),
    }

    def __init__(
        self,
        reason: ResolutionReason,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_code, default_message, status_code = self._CODES[reason]
        super().__init__(
            message=message or default_message,
            error_code=error_code,
            reason=reason,
            stage=Stage.RESOLVE,
            details=details,
            status_code=status_code
        )


class SearchError(SpotFinderException):
    """Raised when the proximity search service fails or answers garbage."""

    _CODES = {
        SearchReason.SERVICE_UNAVAILABLE: (ErrorCode.SERVICE_UNAVAILABLE, 502),
        SearchReason.MALFORMED_RESPONSE: (ErrorCode.MALFORMED_RESPONSE, 502),
    }

    def __init__(
        self,
        reason: SearchReason,
        message: str = "Menu lookup failed",
        details: Optional[Dict[str, Any]] = None
    ):
        error_code, status_code = self._CODES[reason]
        super().__init__(
            message=message,
            error_code=error_code,
            reason=reason,
            stage=Stage.SEARCH,
            details=details,
            status_code=status_code
        )


class PipelineError(SpotFinderException):
    """Raised when the pipeline completes without a winning candidate."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.NO_MATCH,
            reason=PipelineReason.NO_MATCH,
            stage=Stage.RANK,
            details=details,
            status_code=404
        )


class TransportFailureError(SpotFinderException):
    """Raised for unexpected failures that escape a stage unclassified."""

    def __init__(self, stage: Stage, cause: BaseException):
        super().__init__(
            message="Unexpected failure while contacting a location service",
            error_code=ErrorCode.TRANSPORT_FAILURE,
            reason=PipelineReason.TRANSPORT_FAILURE,
            stage=stage,
            details={"exception_type": type(cause).__name__, "exception_message": str(cause)},
            status_code=502
        )
        self.__cause__ = cause
