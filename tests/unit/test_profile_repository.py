"""
Tests for the PostgreSQL and Supabase modes of the profile repository.
"""
from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

import psycopg2
import pytest
from postgrest.exceptions import APIError

from alumni_hub.domain.entities.profile import ApprovalStatus, Role
from alumni_hub.domain.errors import DuplicateProfileError, StoreUnavailable
from alumni_hub.infrastructure.database.repositories.profile_repository import ProfileRepository

ROW = {
    "id": "u1",
    "name": "jane",
    "email": "jane@x.com",
    "role": "STUDENT",
    "status": "APPROVED",
    "created_at": "2026-01-05T10:00:00Z",
}


def insert(repo, role=Role.STUDENT, status=ApprovalStatus.APPROVED):
    return repo.insert("u1", name="jane", email="jane@x.com", role=role, status=status)


class TestPostgresMode:
    @pytest.fixture()
    def pg(self):
        return MagicMock()

    @pytest.fixture()
    def repo(self, pg):
        return ProfileRepository(None, pg)

    def test_insert_returns_created_row(self, repo, pg):
        pg.execute_one.return_value = dict(ROW, created_at=datetime(2026, 1, 5, 10))

        profile = insert(repo)

        assert repo.backend == "postgres"
        assert profile.role is Role.STUDENT
        assert profile.status is ApprovalStatus.APPROVED
        query, params = pg.execute_one.call_args[0]
        assert "ON CONFLICT (id) DO NOTHING" in query
        assert params == ("u1", "jane", "jane@x.com", "STUDENT", "APPROVED")

    def test_conflicting_insert_raises_duplicate(self, repo, pg):
        # ON CONFLICT DO NOTHING returns no row when the id is taken
        pg.execute_one.return_value = None

        with pytest.raises(DuplicateProfileError):
            insert(repo)

    def test_driver_errors_become_store_unavailable(self, repo, pg):
        pg.execute_one.side_effect = psycopg2.OperationalError("server closed the connection")

        with pytest.raises(StoreUnavailable):
            insert(repo)
        with pytest.raises(StoreUnavailable):
            repo.get("u1")

    def test_get_normalizes_legacy_role(self, repo, pg):
        pg.execute_one.return_value = dict(ROW, role="ALUMNUS", status="PENDING")

        profile = repo.get("u1")

        assert profile.role is Role.ALUMNI
        assert profile.created_at == datetime.fromisoformat("2026-01-05T10:00:00+00:00")

    def test_get_missing_row(self, repo, pg):
        pg.execute_one.return_value = None
        assert repo.get("u1") is None

    def test_update_of_missing_row_returns_none(self, repo, pg):
        pg.execute_one.return_value = None
        assert repo.update_status("u1", ApprovalStatus.APPROVED) is None


class TestSupabaseMode:
    @pytest.fixture()
    def client(self):
        return MagicMock()

    @pytest.fixture()
    def repo(self, client):
        return ProfileRepository(client)

    @staticmethod
    def _get_chain(client):
        return client.table.return_value.select.return_value.eq.return_value.maybe_single.return_value

    def test_insert_unique_violation_raises_duplicate(self, repo, client):
        client.table.return_value.insert.return_value.execute.side_effect = APIError(
            {"code": "23505", "message": "duplicate key value violates unique constraint"}
        )

        with pytest.raises(DuplicateProfileError):
            insert(repo)

    def test_insert_other_api_error_is_store_unavailable(self, repo, client):
        client.table.return_value.insert.return_value.execute.side_effect = APIError(
            {"code": "42501", "message": "permission denied for table profiles"}
        )

        with pytest.raises(StoreUnavailable):
            insert(repo)

    def test_insert_network_error_is_store_unavailable(self, repo, client):
        client.table.return_value.insert.return_value.execute.side_effect = ConnectionError("timed out")

        with pytest.raises(StoreUnavailable):
            insert(repo)

    def test_insert_returns_created_row(self, repo, client):
        client.table.return_value.insert.return_value.execute.return_value = MagicMock(data=[ROW])

        profile = insert(repo)

        assert repo.backend == "supabase"
        assert profile.id == "u1"
        client.table.assert_called_with("profiles")

    def test_get_no_rows_code_returns_none(self, repo, client):
        self._get_chain(client).execute.side_effect = APIError({"code": "PGRST116", "message": "no rows"})
        assert repo.get("u1") is None

    def test_get_empty_response_returns_none(self, repo, client):
        self._get_chain(client).execute.return_value = None
        assert repo.get("u1") is None

    def test_get_api_error_is_store_unavailable(self, repo, client):
        self._get_chain(client).execute.side_effect = APIError({"code": "500", "message": "boom"})
        with pytest.raises(StoreUnavailable):
            repo.get("u1")

    def test_get_existing_row(self, repo, client):
        self._get_chain(client).execute.return_value = MagicMock(data=ROW)
        assert repo.get("u1").display_name == "jane"

    def test_update_role(self, repo, client):
        chain = client.table.return_value.update.return_value.eq.return_value
        chain.execute.return_value = MagicMock(data=[dict(ROW, role="RECRUITER")])

        profile = repo.update_role("u1", Role.RECRUITER)

        assert profile.role is Role.RECRUITER
        client.table.return_value.update.assert_called_once_with({"role": "RECRUITER"})
