from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from alumni_hub.application.use_cases.resolve_profile import ResolutionOutcome, ResolveProfileUseCase
from alumni_hub.domain.entities.profile import Identity, ProfileEntity
from alumni_hub.domain.services.redirect_policy import Blocked, Decision, decide
from alumni_hub.infrastructure.database.supabase_client import SupabaseAuthAdapter, UserInfo


@dataclass(frozen=True)
class SessionResult:
    profile: ProfileEntity
    outcome: ResolutionOutcome
    decision: Decision
    revoked: bool = False


@dataclass
class StartSessionUseCase:
    """Sign-in and session check: identity -> profile -> where to go."""

    resolver: ResolveProfileUseCase
    auth: SupabaseAuthAdapter
    revoke_blocked: bool = True

    def execute(self, user: UserInfo, token: str) -> SessionResult:
        identity = Identity(
            user_id=user.id,
            email=user.email or "",
            claimed_role=user.role_hint,
            full_name=user.full_name,
            metadata=user.metadata,
        )
        profile, outcome = self.resolver.execute(identity)
        decision = decide(profile)

        revoked = False
        if isinstance(decision, Blocked):
            logger.info("Session for {} blocked: {}", user.id, decision.reason.value)
            if self.revoke_blocked:
                revoked = self.auth.revoke_session(token)
        return SessionResult(profile=profile, outcome=outcome, decision=decision, revoked=revoked)
