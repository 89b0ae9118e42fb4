"""Common DTOs for API responses and error handling."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str = Field(..., description="Error message describing what went wrong")


class BlockedResponse(ErrorResponse):
    """Returned when a session resolves to a blocked decision."""
    reason: str = Field(..., description="Why access was denied", examples=["PENDING_APPROVAL"])


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Health status", examples=["healthy"])
    profile_store: str = Field(..., description="Active profile store backend", examples=["supabase"])


class RootResponse(BaseModel):
    """Root endpoint response model."""
    status: str = Field(..., description="API status", examples=["ok"])
    service: str = Field(..., description="Service name", examples=["alumni-hub"])
    version: str = Field(..., description="API version", examples=["0.1.0"])
