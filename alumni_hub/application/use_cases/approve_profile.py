from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from alumni_hub.domain.entities.profile import ApprovalStatus, ProfileEntity
from alumni_hub.domain.errors import ProfileNotFound
from alumni_hub.infrastructure.database.repositories.profile_repository import ProfileRepository


@dataclass
class ApproveProfileUseCase:
    """Admin verification: the only path from PENDING to APPROVED."""

    profiles: ProfileRepository

    def execute(self, user_id: str, *, approved_by: str) -> ProfileEntity:
        profile = self.profiles.get(user_id)
        if profile is None:
            raise ProfileNotFound(user_id)
        if profile.is_approved:
            return profile

        updated = self.profiles.update_status(user_id, ApprovalStatus.APPROVED)
        if updated is None:
            raise ProfileNotFound(user_id)
        logger.info("Profile {} approved by {}", user_id, approved_by)
        return updated

    def list_pending(self) -> list[ProfileEntity]:
        return self.profiles.list_by_status(ApprovalStatus.PENDING)
