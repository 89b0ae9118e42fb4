"""Error taxonomy for profile resolution.

``InvalidIdentity`` is a caller error and is never retried. ``StoreUnavailable``
is an infrastructure error; callers may retry once or degrade to a fallback
profile for display, but never grant gated access on it.
"""
from __future__ import annotations


class ResolutionError(Exception):
    """Base class for errors raised while resolving a profile."""


class InvalidIdentity(ResolutionError):
    pass


class StoreUnavailable(ResolutionError):
    pass


class ProfileNotFound(ResolutionError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"Profile {user_id} not found")
        self.user_id = user_id


class DuplicateProfileError(Exception):
    """Primary key conflict on insert; another request created the row first."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Profile {user_id} already exists")
        self.user_id = user_id
