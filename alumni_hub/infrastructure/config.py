from __future__ import annotations

import os
from dataclasses import dataclass, field

from loguru import logger

_PLACEHOLDERS = {
    "your_supabase_project_url_here",
    "https://your-project-id.supabase.co",
    "your_supabase_anon_key_here",
    "your_supabase_service_role_key_here",
}


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip() == "1"


def _credential(name: str) -> str | None:
    value = (os.getenv(name) or "").strip()
    if not value:
        return None
    if value in _PLACEHOLDERS:
        logger.warning("{} is set to a placeholder value and will be ignored", name)
        return None
    return value


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    supabase_disabled: bool = False
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_role_key: str | None = None
    use_local_db: bool = False
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "alumni_hub"
    postgres_user: str = "alumni_hub"
    postgres_password: str = "alumni_hub_dev_password"
    store_timeout: float = 10.0
    role_claim_policy: str = "self_service"
    revoke_blocked_sessions: bool = True
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))

    @classmethod
    def from_env(cls) -> "Settings":
        origins = tuple(
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        )
        return cls(
            env=os.getenv("ENV", "development"),
            supabase_disabled=_flag("SUPABASE_DISABLED"),
            supabase_url=_credential("SUPABASE_URL"),
            supabase_anon_key=_credential("SUPABASE_ANON_KEY"),
            supabase_service_role_key=_credential("SUPABASE_SERVICE_ROLE_KEY"),
            use_local_db=_flag("USE_LOCAL_DB"),
            postgres_host=os.getenv("POSTGRES_HOST", "localhost"),
            postgres_port=int(os.getenv("POSTGRES_PORT", "5432")),
            postgres_db=os.getenv("POSTGRES_DB", "alumni_hub"),
            postgres_user=os.getenv("POSTGRES_USER", "alumni_hub"),
            postgres_password=os.getenv("POSTGRES_PASSWORD", "alumni_hub_dev_password"),
            store_timeout=float(os.getenv("PROFILE_STORE_TIMEOUT", "10")),
            role_claim_policy=os.getenv("ROLE_CLAIM_POLICY", "self_service"),
            revoke_blocked_sessions=_flag("REVOKE_BLOCKED_SESSIONS", "1"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=origins or ("*",),
        )

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def supabase_enabled(self) -> bool:
        return not self.supabase_disabled and bool(self.supabase_url and self.supabase_anon_key)


def ensure_secure_config_on_startup(settings: Settings) -> None:
    """Refuse to start a production process that would accept any bearer token."""
    if not settings.is_production:
        return
    if not settings.supabase_enabled:
        raise SystemExit(
            "Refusing to start: Supabase auth is disabled or unconfigured in production. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY and unset SUPABASE_DISABLED."
        )
