from __future__ import annotations

from dataclasses import dataclass
from itertools import product

from alumni_hub.domain.entities.profile import Role


@dataclass(frozen=True)
class RoleTransitionPolicy:
    """Allow-list of role claims a caller may have applied.

    Pairs are ``(current, requested)``; ``current`` is None when the claim is
    made while creating the profile.
    """

    name: str
    allowed: frozenset[tuple[Role | None, Role]]

    def permits(self, current: Role | None, requested: Role) -> bool:
        if current == requested:
            return True
        return (current, requested) in self.allowed


_ALL_ROLES = tuple(Role)
_GATED_ROLES = (Role.ALUMNI, Role.RECRUITER)

UNRESTRICTED = RoleTransitionPolicy(
    name="unrestricted",
    allowed=frozenset(product((None, *_ALL_ROLES), _ALL_ROLES)),
)

# Client claims never reach or leave ADMIN; an existing row only moves to STUDENT
SELF_SERVICE = RoleTransitionPolicy(
    name="self_service",
    allowed=frozenset(
        {
            *product((None,), (Role.STUDENT, *_GATED_ROLES)),
            *product(_GATED_ROLES, (Role.STUDENT,)),
        }
    ),
)

POLICIES = {p.name: p for p in (UNRESTRICTED, SELF_SERVICE)}


def get_policy(name: str) -> RoleTransitionPolicy:
    try:
        return POLICIES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown role claim policy: {name!r}") from None
