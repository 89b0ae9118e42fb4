from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from supabase import Client, ClientOptions, create_client

from alumni_hub.infrastructure.config import Settings


@dataclass(slots=True)
class UserInfo:
    id: str
    email: str | None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def role_hint(self) -> str | None:
        role = self.metadata.get("role")
        return role if isinstance(role, str) else None

    @property
    def full_name(self) -> str | None:
        name = self.metadata.get("full_name") or self.metadata.get("name")
        return name if isinstance(name, str) else None


def create_supabase_client(settings: Settings, *, service_role: bool = True) -> Client | None:
    """Build a Supabase client, or None when Supabase is disabled or unconfigured.

    Server-side profile access uses the service role key when one is configured.
    """
    if not settings.supabase_enabled:
        return None
    key = settings.supabase_anon_key
    if service_role and settings.supabase_service_role_key:
        key = settings.supabase_service_role_key
    options = ClientOptions(postgrest_client_timeout=settings.store_timeout)
    return create_client(settings.supabase_url, key, options=options)


class SupabaseAuthAdapter:
    """Small wrapper around Supabase Auth, the identity source.

    When Supabase is disabled, any token maps to a deterministic fake user.
    """

    def __init__(self, settings: Settings) -> None:
        self.disabled = not settings.supabase_enabled
        self._client: Client | None = None
        self._admin: Client | None = None
        if not self.disabled:
            self._client = create_supabase_client(settings, service_role=False)
            if settings.supabase_service_role_key:
                self._admin = create_supabase_client(settings, service_role=True)

    def validate_token(self, token: str) -> UserInfo:
        if not token:
            raise ValueError("Missing access token")
        if self.disabled or not self._client:
            fake_id = "fake-" + hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]
            return UserInfo(id=fake_id, email=f"{fake_id}@example.invalid")
        try:  # pragma: no cover - network path
            res = self._client.auth.get_user(token)
            user = res.user if res else None
            if not user:
                raise ValueError("Invalid access token")
            return UserInfo(id=user.id, email=user.email, metadata=dict(user.user_metadata or {}))
        except ValueError:
            raise
        except Exception as exc:  # pragma: no cover - network path
            raise ValueError(f"Invalid access token: {exc}") from exc

    def revoke_session(self, token: str) -> bool:
        """Sign the session out everywhere. Returns False when revocation is unavailable."""
        if self.disabled or self._admin is None:
            return False
        try:  # pragma: no cover - network path
            self._admin.auth.admin.sign_out(token)
            return True
        except Exception as exc:  # pragma: no cover - network path
            logger.warning("Session revocation failed: {}", exc.__class__.__name__)
            return False
