from pydantic import BaseModel
from typing import Optional, Generic, TypeVar

T = TypeVar('T')


class Envelope(BaseModel, Generic[T]):
    status: str
    data: Optional[T] = None
    error: Optional[str] = None


class ErrorEnvelope(Envelope[None]):
    """Envelope returned for every failed request."""
    status: str = "error"
    error_code: str
    reason: Optional[str] = None
    stage: Optional[str] = None
    request_id: Optional[str] = None
