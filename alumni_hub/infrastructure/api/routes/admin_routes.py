from __future__ import annotations

from fastapi import APIRouter, Depends, status

from alumni_hub.application.dtos.common_dto import ErrorResponse
from alumni_hub.application.dtos.profile_dto import PendingProfilesResponse, ProfileResponse
from alumni_hub.application.use_cases.approve_profile import ApproveProfileUseCase
from alumni_hub.domain.entities.profile import ProfileEntity
from alumni_hub.infrastructure.api.dependencies import get_approve_profile, require_admin

router = APIRouter(
    prefix="/admin/profiles",
    tags=["Administration"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        403: {"description": "Forbidden - Caller is not an approved administrator"},
        500: {"model": ErrorResponse, "description": "Profile store unavailable"},
    },
)


@router.get(
    "/pending",
    response_model=PendingProfilesResponse,
    status_code=status.HTTP_200_OK,
    summary="List Pending Profiles",
    description="Profiles awaiting admin verification, oldest registration first.",
)
def list_pending(
    admin: ProfileEntity = Depends(require_admin),
    approvals: ApproveProfileUseCase = Depends(get_approve_profile),
):
    return {"profiles": [ProfileResponse.from_entity(p) for p in approvals.list_pending()]}


@router.post(
    "/{user_id}/approve",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Approve Profile",
    description="""
    Mark a pending profile as APPROVED. Approving an already approved profile
    returns it unchanged.
    """,
    responses={404: {"model": ErrorResponse, "description": "Profile does not exist"}},
)
def approve_profile(
    user_id: str,
    admin: ProfileEntity = Depends(require_admin),
    approvals: ApproveProfileUseCase = Depends(get_approve_profile),
):
    return ProfileResponse.from_entity(approvals.execute(user_id, approved_by=admin.id))
