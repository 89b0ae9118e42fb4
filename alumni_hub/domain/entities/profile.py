from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Role(str, Enum):
    STUDENT = "STUDENT"
    ALUMNI = "ALUMNI"
    RECRUITER = "RECRUITER"
    ADMIN = "ADMIN"


class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"


# Historical spellings still found in old rows and session metadata
LEGACY_ROLE_ALIASES: dict[str, Role] = {
    "ALUMNUS": Role.ALUMNI,
}

DEFAULT_ROLE = Role.ALUMNI
AUTO_APPROVED_ROLES = frozenset({Role.STUDENT, Role.ADMIN})


def normalize_role(value: Any) -> Role | None:
    """Map a raw role label to its canonical Role.

    Accepts Role members, canonical labels and legacy aliases in any case.
    Returns None for anything else.
    """
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    label = value.strip().upper()
    if not label:
        return None
    if label in LEGACY_ROLE_ALIASES:
        return LEGACY_ROLE_ALIASES[label]
    try:
        return Role(label)
    except ValueError:
        return None


def normalize_status(value: Any) -> ApprovalStatus:
    if isinstance(value, ApprovalStatus):
        return value
    if isinstance(value, str):
        try:
            return ApprovalStatus(value.strip().upper())
        except ValueError:
            pass
    # unknown or missing status never counts as approved
    return ApprovalStatus.PENDING


def initial_status(role: Role) -> ApprovalStatus:
    return ApprovalStatus.APPROVED if role in AUTO_APPROVED_ROLES else ApprovalStatus.PENDING


def display_name_from(email: str, full_name: str | None = None) -> str:
    if full_name and full_name.strip():
        return full_name.strip()
    local_part = email.split("@", 1)[0].strip()
    return local_part or "User"


@dataclass(frozen=True)
class Identity:
    user_id: str  # stable id from the auth provider
    email: str
    claimed_role: str | None = None
    full_name: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProfileEntity:
    id: str  # user id from Supabase auth
    display_name: str
    role: Role | str  # raw label only when the stored value is unrecognized
    status: ApprovalStatus
    email: str | None = None
    created_at: datetime | None = None
    is_fallback: bool = False

    @property
    def canonical_role(self) -> Role | None:
        return normalize_role(self.role)

    @property
    def is_approved(self) -> bool:
        return self.status == ApprovalStatus.APPROVED

    def to_dict(self) -> dict[str, Any]:
        role = self.role.value if isinstance(self.role, Role) else self.role
        return {
            "id": self.id,
            "name": self.display_name,
            "email": self.email,
            "role": role,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def fallback_profile(user_id: str) -> ProfileEntity:
    """Conservative stand-in for display paths when the store is unreachable."""
    return ProfileEntity(
        id=user_id,
        display_name="User",
        role=Role.ALUMNI,
        status=ApprovalStatus.APPROVED,
        is_fallback=True,
    )
