import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'alumni_hub' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")
os.environ.setdefault("USE_LOCAL_DB", "0")

SERVICE_KEY = "test-service-key"


class StubAuthAdapter:
    """Maps known tokens to users and records revoked sessions."""

    def __init__(self, users):
        self.users = users
        self.revoked: list[str] = []

    def validate_token(self, token):
        if token not in self.users:
            raise ValueError("Invalid access token")
        return self.users[token]

    def revoke_session(self, token):
        self.revoked.append(token)
        return True


@pytest.fixture()
def settings():
    from alumni_hub.infrastructure.config import Settings

    return Settings(supabase_disabled=True, supabase_service_role_key=SERVICE_KEY)


@pytest.fixture()
def app(settings):
    # lazy import after env configured
    from alumni_hub.main import create_app

    return create_app(settings)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def auth_header() -> dict[str, str]:
    # any token is accepted in disabled mode
    return {"Authorization": "Bearer test-token"}


@pytest.fixture()
def repo():
    from alumni_hub.infrastructure.database.repositories.profile_repository import ProfileRepository

    return ProfileRepository(None)


@pytest.fixture()
def resolver(repo):
    from alumni_hub.application.use_cases.resolve_profile import ResolveProfileUseCase

    return ResolveProfileUseCase(repo)


@pytest.fixture()
def stub_auth_adapter():
    return StubAuthAdapter
