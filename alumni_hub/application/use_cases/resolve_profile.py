from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from alumni_hub.domain.entities.profile import (
    AUTO_APPROVED_ROLES,
    DEFAULT_ROLE,
    ApprovalStatus,
    Identity,
    ProfileEntity,
    Role,
    display_name_from,
    fallback_profile,
    initial_status,
    normalize_role,
    normalize_status,
)
from alumni_hub.domain.errors import (
    DuplicateProfileError,
    InvalidIdentity,
    ResolutionError,
    StoreUnavailable,
)
from alumni_hub.domain.services.role_policy import UNRESTRICTED, RoleTransitionPolicy
from alumni_hub.infrastructure.database.repositories.profile_repository import ProfileRepository


class ResolutionOutcome(str, Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    UNCHANGED = "UNCHANGED"


@dataclass(frozen=True)
class ResolutionResult:
    """Either a resolved profile with its outcome, or the error that prevented it."""

    profile: ProfileEntity | None = None
    outcome: ResolutionOutcome | None = None
    error: ResolutionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def profile_or_fallback(self, user_id: str) -> ProfileEntity:
        """Profile for read-only display. A fallback never passes the redirect policy."""
        if self.profile is not None:
            return self.profile
        return fallback_profile(user_id)


@dataclass
class ResolveProfileUseCase:
    """
    Turn an authenticated identity into its canonical profile row.

    The row is created on first sight, and a claimed role that differs from
    the stored one is applied when the transition policy permits it.
    """

    profiles: ProfileRepository
    policy: RoleTransitionPolicy = UNRESTRICTED

    def execute(
        self,
        identity: Identity,
        *,
        trusted: bool = False,
        status_override: str | ApprovalStatus | None = None,
    ) -> tuple[ProfileEntity, ResolutionOutcome]:
        """
        Resolve ``identity`` to a profile.

        Args:
            identity: Who is signing in, with an optional claimed role.
            trusted: Caller is an administrator or holds the service key. Trusted
                callers bypass the configured policy and may override status.
            status_override: Initial status for a newly created row; honored
                for trusted callers only
                and only for roles that are not auto-approved.

        Raises:
            InvalidIdentity: user id or email missing.
            StoreUnavailable: the profile store could not be queried.
        """
        user_id = (identity.user_id or "").strip()
        email = (identity.email or "").strip()
        if not user_id or not email:
            raise InvalidIdentity("userId and email required")

        claimed = normalize_role(identity.claimed_role)
        policy = UNRESTRICTED if trusted else self.policy

        existing = self.profiles.get(user_id)
        if existing is None:
            try:
                return self._create(user_id, email, identity, claimed, policy, trusted, status_override)
            except DuplicateProfileError:
                logger.info("Profile {} was created concurrently, re-reading", user_id)
                existing = self.profiles.get(user_id)
                if existing is None:
                    raise StoreUnavailable(f"Profile {user_id} vanished after insert conflict")

        return self._reconcile(existing, claimed, policy)

    def try_resolve(
        self,
        identity: Identity,
        *,
        trusted: bool = False,
        status_override: str | ApprovalStatus | None = None,
    ) -> ResolutionResult:
        try:
            profile, outcome = self.execute(identity, trusted=trusted, status_override=status_override)
        except ResolutionError as exc:
            logger.warning("Profile resolution failed for {}: {}", identity.user_id, exc.__class__.__name__)
            return ResolutionResult(error=exc)
        return ResolutionResult(profile=profile, outcome=outcome)

    def _create(
        self,
        user_id: str,
        email: str,
        identity: Identity,
        claimed: Role | None,
        policy: RoleTransitionPolicy,
        trusted: bool,
        status_override: str | ApprovalStatus | None,
    ) -> tuple[ProfileEntity, ResolutionOutcome]:
        role = DEFAULT_ROLE
        if claimed is not None:
            if policy.permits(None, claimed):
                role = claimed
            else:
                logger.warning("Denied initial role {} for {} under {} policy", claimed.value, user_id, policy.name)

        status = initial_status(role)
        # students and admins are always created approved
        if trusted and status_override is not None and role not in AUTO_APPROVED_ROLES:
            status = normalize_status(status_override)

        created = self.profiles.insert(
            user_id,
            name=display_name_from(email, identity.full_name),
            email=email,
            role=role,
            status=status,
        )
        logger.info("Created profile {} as {} ({})", user_id, role.value, status.value)
        return created, ResolutionOutcome.CREATED

    def _reconcile(
        self,
        existing: ProfileEntity,
        claimed: Role | None,
        policy: RoleTransitionPolicy,
    ) -> tuple[ProfileEntity, ResolutionOutcome]:
        current = existing.canonical_role
        if claimed is None or claimed == current:
            return existing, ResolutionOutcome.UNCHANGED

        if not policy.permits(current, claimed):
            logger.warning(
                "Denied role change {} -> {} for {} under {} policy",
                current.value if current else existing.role,
                claimed.value,
                existing.id,
                policy.name,
            )
            return existing, ResolutionOutcome.UNCHANGED

        updated = self.profiles.update_role(existing.id, claimed)
        if updated is None:
            raise StoreUnavailable(f"Profile {existing.id} disappeared during role update")
        logger.info("Updated profile {} role to {}", existing.id, claimed.value)
        return updated, ResolutionOutcome.UPDATED
