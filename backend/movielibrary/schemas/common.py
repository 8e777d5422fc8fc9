"""
MovieLibrary Backend: Shared Schema Types
==========================================

What:  Field types and response models shared by the movie and rental schemas.

VersionToken:
    The opaque row_version travels as raw bytes inside the application and
    as a standard base64 string over JSON. Validation accepts either form;
    JSON serialization always emits base64.

UtcDatetime:
    Naive datetimes (from callers, or read back from SQLite, which does not
    keep the zone) are taken to be UTC. Every datetime leaving validation is
    timezone-aware, so rental/return comparisons never mix naive and aware.
"""

import base64
import binascii
from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, PlainSerializer


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def encode_version_token(token: bytes) -> str:
    return base64.b64encode(token).decode("ascii")


def decode_version_token(value: Any) -> Any:
    """Decode a base64 string into token bytes; other inputs pass through."""
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("row_version must be a base64-encoded version token") from exc
    return value


VersionToken = Annotated[
    bytes,
    BeforeValidator(decode_version_token),
    PlainSerializer(encode_version_token, return_type=str, when_used="json"),
]

UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "concurrency_conflict",
            "message": "The movie was modified by another request. ...",
            "details": {"resource": "movie", "resource_id": "..."},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
