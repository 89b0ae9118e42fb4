"""Maps a resolved profile to where the user may go next.

The decision is pure: callers act on ``Blocked`` by denying access and, when
they hold a live session, revoking it.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from alumni_hub.domain.entities.profile import ApprovalStatus, ProfileEntity, Role, normalize_role


class Destination(str, Enum):
    ADMIN_AREA = "admin-area"
    RECRUITER_AREA = "recruiter-area"
    STUDENT_AREA = "student-area"
    GENERAL_AREA = "general-area"

    @property
    def path(self) -> str:
        return _PATHS[self]


_PATHS = {
    Destination.ADMIN_AREA: "/admin",
    Destination.RECRUITER_AREA: "/recruiter",
    Destination.STUDENT_AREA: "/student/dashboard",
    Destination.GENERAL_AREA: "/portal",
}

ROLE_DESTINATIONS: dict[Role, Destination] = {
    Role.ADMIN: Destination.ADMIN_AREA,
    Role.RECRUITER: Destination.RECRUITER_AREA,
    Role.STUDENT: Destination.STUDENT_AREA,
}


class BlockReason(str, Enum):
    PENDING_APPROVAL = "PENDING_APPROVAL"
    PROFILE_UNAVAILABLE = "PROFILE_UNAVAILABLE"

    @property
    def message(self) -> str:
        if self is BlockReason.PENDING_APPROVAL:
            return "Your account is pending admin approval"
        return "Your profile could not be loaded, please try again later"


@dataclass(frozen=True)
class Allowed:
    destination: Destination

    @property
    def allowed(self) -> bool:
        return True


@dataclass(frozen=True)
class Blocked:
    reason: BlockReason

    @property
    def allowed(self) -> bool:
        return False


Decision = Union[Allowed, Blocked]


def destination_for(role: Role | str | None) -> Destination:
    canonical = normalize_role(role)
    if canonical is None:
        return Destination.GENERAL_AREA
    return ROLE_DESTINATIONS.get(canonical, Destination.GENERAL_AREA)


def decide(profile: ProfileEntity) -> Decision:
    if profile.is_fallback:
        return Blocked(BlockReason.PROFILE_UNAVAILABLE)
    # approval gating applies to every role except students
    if profile.status == ApprovalStatus.PENDING and profile.canonical_role != Role.STUDENT:
        return Blocked(BlockReason.PENDING_APPROVAL)
    return Allowed(destination_for(profile.role))
