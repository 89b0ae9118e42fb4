from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from alumni_hub.domain.entities.profile import ProfileEntity


class EnsureProfileBody(BaseModel):
    """Request body for ensuring a profile exists for an auth user."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str | None = Field(None, alias="userId", description="Auth user id")
    email: str | None = Field(None, description="Email of the auth user", examples=["jane@example.com"])
    role: Any = Field(None, description="Requested role; unrecognized values are ignored", examples=["STUDENT"])
    status: Any = Field(
        None, description="Initial status for a new profile; honored for trusted callers only"
    )


class ProfileResponse(BaseModel):
    """A resolved profile row."""
    id: str = Field(..., description="Auth user id, primary key of the profile")
    name: str = Field(..., description="Display name", examples=["jane"])
    email: str | None = Field(None, description="Email address of the user")
    role: str = Field(..., description="Canonical role", examples=["STUDENT"])
    status: str = Field(..., description="Approval status", examples=["APPROVED"])
    created_at: datetime | None = Field(None, description="When the profile was created")

    @classmethod
    def from_entity(cls, profile: ProfileEntity) -> "ProfileResponse":
        return cls(**profile.to_dict())


class CurrentProfileResponse(ProfileResponse):
    fallback: bool = Field(
        False, description="True when the store was unavailable and placeholder data is shown"
    )


class SessionResponse(BaseModel):
    """Outcome of a successful sign-in or session check."""
    profile: ProfileResponse
    outcome: str = Field(..., description="CREATED, UPDATED or UNCHANGED")
    destination: str = Field(..., description="Area the user is sent to", examples=["student-area"])
    path: str = Field(..., description="Application path of the destination", examples=["/student/dashboard"])


class PendingProfilesResponse(BaseModel):
    profiles: list[ProfileResponse] = Field(..., description="Profiles awaiting admin approval")
