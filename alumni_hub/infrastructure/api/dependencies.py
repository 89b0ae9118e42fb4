from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from alumni_hub.application.use_cases.approve_profile import ApproveProfileUseCase
from alumni_hub.application.use_cases.resolve_profile import ResolveProfileUseCase
from alumni_hub.application.use_cases.start_session import StartSessionUseCase
from alumni_hub.domain.entities.profile import ProfileEntity, Role
from alumni_hub.domain.services.role_policy import get_policy
from alumni_hub.infrastructure.config import Settings
from alumni_hub.infrastructure.database.repositories.profile_repository import ProfileRepository
from alumni_hub.infrastructure.database.supabase_client import SupabaseAuthAdapter, UserInfo

_bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_adapter(request: Request) -> SupabaseAuthAdapter:
    return request.app.state.auth


def get_profile_repo(request: Request) -> ProfileRepository:
    return request.app.state.profiles


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
) -> str:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    if not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    return credentials.credentials


def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)],
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)],
) -> UserInfo:
    try:
        return auth.validate_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))


def is_trusted_caller(
    settings: Annotated[Settings, Depends(get_settings)],
    x_service_key: Annotated[str | None, Header()] = None,
) -> bool:
    """True when the request carries the service role key."""
    expected = settings.supabase_service_role_key
    if not expected or not x_service_key:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), x_service_key.encode("utf-8"))


def get_resolver(
    settings: Annotated[Settings, Depends(get_settings)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repo)],
) -> ResolveProfileUseCase:
    return ResolveProfileUseCase(profiles, policy=get_policy(settings.role_claim_policy))


def get_start_session(
    settings: Annotated[Settings, Depends(get_settings)],
    resolver: Annotated[ResolveProfileUseCase, Depends(get_resolver)],
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)],
) -> StartSessionUseCase:
    return StartSessionUseCase(resolver, auth, revoke_blocked=settings.revoke_blocked_sessions)


def get_approve_profile(
    profiles: Annotated[ProfileRepository, Depends(get_profile_repo)],
) -> ApproveProfileUseCase:
    return ApproveProfileUseCase(profiles)


def require_admin(
    user: Annotated[UserInfo, Depends(get_current_user)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repo)],
) -> ProfileEntity:
    profile = profiles.get(user.id)
    if profile is None or profile.canonical_role != Role.ADMIN or not profile.is_approved:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return profile
