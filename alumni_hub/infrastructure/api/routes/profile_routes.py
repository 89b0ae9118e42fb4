from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from alumni_hub.application.dtos.common_dto import ErrorResponse
from alumni_hub.application.dtos.profile_dto import (
    CurrentProfileResponse,
    EnsureProfileBody,
    ProfileResponse,
)
from alumni_hub.application.use_cases.resolve_profile import ResolutionOutcome, ResolveProfileUseCase
from alumni_hub.domain.entities.profile import Identity
from alumni_hub.domain.errors import InvalidIdentity
from alumni_hub.infrastructure.api.dependencies import get_current_user, get_resolver, is_trusted_caller
from alumni_hub.infrastructure.database.supabase_client import UserInfo

router = APIRouter(
    prefix="/api/profile",
    tags=["Profiles"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - userId and email are required"},
        500: {"model": ErrorResponse, "description": "Profile store unavailable"},
    },
)


@router.post(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Ensure Profile",
    description="""
    Ensure a profile row exists for an auth user and reconcile its role.

    This endpoint:
    - Creates the profile on first sight (201), deriving the name from the email
    - Applies a requested role that differs from the stored one (200), subject
      to the role claim policy
    - Returns the existing profile unchanged otherwise (200)

    Callers presenting the service key in `X-Service-Key` are trusted: any
    canonical role may be requested and `status` sets the initial status.
    """,
    response_description="The resolved profile",
    responses={201: {"model": ProfileResponse, "description": "Profile created"}},
)
def ensure_profile(
    body: EnsureProfileBody,
    response: Response,
    trusted: bool = Depends(is_trusted_caller),
    resolver: ResolveProfileUseCase = Depends(get_resolver),
):
    """Create or reconcile the profile for the given user."""
    identity = Identity(user_id=body.user_id or "", email=body.email or "", claimed_role=body.role)
    profile, outcome = resolver.execute(identity, trusted=trusted, status_override=body.status)
    if outcome == ResolutionOutcome.CREATED:
        response.status_code = status.HTTP_201_CREATED
    return ProfileResponse.from_entity(profile)


@router.get(
    "/me",
    response_model=CurrentProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Get Current Profile",
    description="""
    Profile of the authenticated user for display purposes.

    If the profile store is unavailable a placeholder profile is returned with
    `fallback: true`. A placeholder never grants access to gated areas.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={401: {"description": "Unauthorized - Invalid or missing authentication token"}},
)
def get_current_profile(
    user: UserInfo = Depends(get_current_user),
    resolver: ResolveProfileUseCase = Depends(get_resolver),
):
    """Get the current user's profile, degrading to a placeholder."""
    identity = Identity(user_id=user.id, email=user.email or "", full_name=user.full_name)
    result = resolver.try_resolve(identity)
    if isinstance(result.error, InvalidIdentity):
        raise result.error
    profile = result.profile_or_fallback(user.id)
    return CurrentProfileResponse(**profile.to_dict(), fallback=profile.is_fallback)
