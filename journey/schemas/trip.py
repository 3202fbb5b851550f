"""
Journey Backend — Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the HTTP contract of the trip API.
Why:   FastAPI decodes and validates request bodies against these models
       before any service code runs, so bad input never reaches the store.
"""

import uuid
from typing import List, Optional

from pydantic import AwareDatetime, BaseModel, EmailStr, Field, model_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateTripRequest(BaseModel):
    """
    Body of POST /trips.

    Validation rules:
        - destination / owner_name: non-empty after trimming
        - owner_email and every invitee: valid email addresses
        - starts_at / ends_at: ISO 8601 with a UTC offset; naive values are
          rejected, so the two are always comparable
        - ends_at must not be earlier than starts_at
    """

    destination: str = Field(min_length=1, max_length=255, description="Where the trip goes")
    owner_name: str = Field(min_length=1, max_length=255, description="Trip owner's name")
    owner_email: EmailStr = Field(description="Trip owner's email; receives the confirmation")
    starts_at: AwareDatetime = Field(description="Trip start (ISO 8601 with offset)")
    ends_at: AwareDatetime = Field(description="Trip end (ISO 8601 with offset), not before starts_at")
    emails_to_invite: List[EmailStr] = Field(
        default_factory=list,
        description="One participant row is created per address",
    )

    model_config = {"str_strip_whitespace": True}

    @model_validator(mode="after")
    def check_dates(self) -> "CreateTripRequest":
        if self.ends_at < self.starts_at:
            raise ValueError("ends_at must not be earlier than starts_at")
        return self


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CreateTripResponse(BaseModel):
    """Returned by POST /trips with HTTP 201; serialized as `{"tripId": ...}`."""

    trip_id: uuid.UUID = Field(serialization_alias="tripId", description="New trip identifier")


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Fields:
        error: Machine-readable error code (e.g. "not_found", "already_confirmed")
        message: Human-readable description for display to users
        request_id: Correlation ID for tracing this error in server logs
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
