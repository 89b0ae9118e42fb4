from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from alumni_hub.application.dtos.common_dto import BlockedResponse, ErrorResponse
from alumni_hub.application.dtos.profile_dto import ProfileResponse, SessionResponse
from alumni_hub.application.use_cases.start_session import StartSessionUseCase
from alumni_hub.domain.services.redirect_policy import Blocked
from alumni_hub.infrastructure.api.dependencies import (
    get_bearer_token,
    get_current_user,
    get_start_session,
)
from alumni_hub.infrastructure.database.supabase_client import UserInfo

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        500: {"model": ErrorResponse, "description": "Profile store unavailable"},
    },
)


@router.post(
    "/session",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Start Session",
    description="""
    Resolve the signed-in user's profile and decide where they go next.

    This endpoint:
    - Verifies the JWT token in the Authorization header
    - Creates the profile on first sign-in, using the `role` hint from the
      user metadata
    - Returns the destination area for the user's role
    - Rejects accounts awaiting admin approval with 403 and revokes the session

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="Resolved profile and redirect destination",
    responses={403: {"model": BlockedResponse, "description": "Account pending admin approval"}},
)
def start_session(
    token: str = Depends(get_bearer_token),
    user: UserInfo = Depends(get_current_user),
    sessions: StartSessionUseCase = Depends(get_start_session),
):
    """Sign in: resolve profile, then allow or block."""
    result = sessions.execute(user, token)
    if isinstance(result.decision, Blocked):
        reason = result.decision.reason
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": reason.message, "reason": reason.value},
        )
    destination = result.decision.destination
    return SessionResponse(
        profile=ProfileResponse.from_entity(result.profile),
        outcome=result.outcome.value,
        destination=destination.value,
        path=destination.path,
    )
