from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any

from loguru import logger
from postgrest.exceptions import APIError
from supabase import Client

from alumni_hub.domain.entities.profile import (
    ApprovalStatus,
    ProfileEntity,
    Role,
    normalize_role,
    normalize_status,
)
from alumni_hub.domain.errors import DuplicateProfileError, StoreUnavailable
from alumni_hub.infrastructure.database.postgres_client import PostgresClient

PROFILE_COLUMNS = "id, name, email, role, status, created_at"
UNIQUE_VIOLATION = "23505"
NO_ROWS = "PGRST116"


class ProfileRepository:
    """The ``profiles`` table, one row per auth user.

    Backed by PostgreSQL when ``pg_client`` is given, by Supabase when
    ``client`` is given, and by an in-process dict otherwise.
    """

    def __init__(self, client: Client | None, pg_client: PostgresClient | None = None) -> None:
        self.client = client
        self.pg_client = pg_client
        self._mem: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    @property
    def backend(self) -> str:
        if self.pg_client is not None:
            return "postgres"
        if self.client is not None:
            return "supabase"
        return "memory"

    def _row_to_entity(self, row: dict) -> ProfileEntity:
        """Convert database row to ProfileEntity."""
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))

        raw_role = row.get("role")
        role = normalize_role(raw_role)
        return ProfileEntity(
            id=row["id"],
            display_name=row.get("name") or "User",
            role=role if role is not None else str(raw_role or "").upper(),
            status=normalize_status(row.get("status")),
            email=row.get("email"),
            created_at=created_at,
        )

    def get(self, user_id: str) -> ProfileEntity | None:
        # PostgreSQL mode
        if self.pg_client is not None:
            try:
                row = self.pg_client.execute_one(
                    f"SELECT {PROFILE_COLUMNS} FROM profiles WHERE id = %s", (user_id,)
                )
            except Exception as exc:
                raise StoreUnavailable(f"PostgreSQL get profile failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        # In-memory mode
        if self.client is None:
            with self._lock:
                row = self._mem.get(user_id)
                return self._row_to_entity(dict(row)) if row else None

        # Supabase mode
        try:
            res = (
                self.client.table("profiles")
                .select(PROFILE_COLUMNS)
                .eq("id", user_id)
                .maybe_single()
                .execute()
            )
        except APIError as exc:
            if exc.code == NO_ROWS:
                return None
            raise StoreUnavailable(f"DB get profile failed: {exc.message}") from exc
        except Exception as exc:
            raise StoreUnavailable(f"DB get profile failed: {exc}") from exc
        if res is None or not res.data:
            return None
        return self._row_to_entity(res.data)

    def insert(
        self,
        user_id: str,
        *,
        name: str,
        email: str | None,
        role: Role,
        status: ApprovalStatus,
    ) -> ProfileEntity:
        """Insert a new row; raises DuplicateProfileError if ``user_id`` is taken."""
        # PostgreSQL mode
        if self.pg_client is not None:
            try:
                row = self.pg_client.execute_one(
                    f"""
                    INSERT INTO profiles (id, name, email, role, status, created_at)
                    VALUES (%s, %s, %s, %s, %s, CURRENT_TIMESTAMP)
                    ON CONFLICT (id) DO NOTHING
                    RETURNING {PROFILE_COLUMNS}
                    """,
                    (user_id, name, email, role.value, status.value),
                )
            except Exception as exc:
                raise StoreUnavailable(f"PostgreSQL insert profile failed: {exc}") from exc
            if row is None:
                raise DuplicateProfileError(user_id)
            return self._row_to_entity(row)

        # In-memory mode
        if self.client is None:
            with self._lock:
                if user_id in self._mem:
                    raise DuplicateProfileError(user_id)
                row = {
                    "id": user_id,
                    "name": name,
                    "email": email,
                    "role": role.value,
                    "status": status.value,
                    "created_at": datetime.now(timezone.utc),
                }
                self._mem[user_id] = row
                return self._row_to_entity(dict(row))

        # Supabase mode
        payload = {
            "id": user_id,
            "name": name,
            "email": email,
            "role": role.value,
            "status": status.value,
        }
        try:
            res = self.client.table("profiles").insert(payload).execute()
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateProfileError(user_id) from exc
            raise StoreUnavailable(f"DB insert profile failed: {exc.message}") from exc
        except Exception as exc:
            raise StoreUnavailable(f"DB insert profile failed: {exc}") from exc
        return self._row_to_entity(res.data[0])

    def update_role(self, user_id: str, role: Role) -> ProfileEntity | None:
        return self._update(user_id, "role", role.value)

    def update_status(self, user_id: str, status: ApprovalStatus) -> ProfileEntity | None:
        return self._update(user_id, "status", status.value)

    def _update(self, user_id: str, column: str, value: str) -> ProfileEntity | None:
        """Set one column; last write wins. Returns None if the row is gone."""
        # PostgreSQL mode
        if self.pg_client is not None:
            try:
                row = self.pg_client.execute_one(
                    f"UPDATE profiles SET {column} = %s "
                    f"WHERE id = %s RETURNING {PROFILE_COLUMNS}",
                    (value, user_id),
                )
            except Exception as exc:
                raise StoreUnavailable(f"PostgreSQL update profile failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        # In-memory mode
        if self.client is None:
            with self._lock:
                row = self._mem.get(user_id)
                if row is None:
                    return None
                row[column] = value
                return self._row_to_entity(dict(row))

        # Supabase mode
        try:
            res = (
                self.client.table("profiles")
                .update({column: value})
                .eq("id", user_id)
                .execute()
            )
        except Exception as exc:
            raise StoreUnavailable(f"DB update profile failed: {exc}") from exc
        if not res.data:
            return None
        return self._row_to_entity(res.data[0])

    def list_by_status(self, status: ApprovalStatus) -> list[ProfileEntity]:
        """Profiles with ``status``, oldest first."""
        # PostgreSQL mode
        if self.pg_client is not None:
            try:
                rows = self.pg_client.execute_many(
                    f"SELECT {PROFILE_COLUMNS} FROM profiles WHERE status = %s "
                    "ORDER BY created_at ASC",
                    (status.value,),
                )
            except Exception as exc:
                raise StoreUnavailable(f"PostgreSQL list profiles failed: {exc}") from exc
            return [self._row_to_entity(r) for r in rows]

        # In-memory mode
        if self.client is None:
            with self._lock:
                rows = [dict(r) for r in self._mem.values() if r["status"] == status.value]
            rows.sort(key=lambda r: r["created_at"])
            return [self._row_to_entity(r) for r in rows]

        # Supabase mode
        try:
            res = (
                self.client.table("profiles")
                .select(PROFILE_COLUMNS)
                .eq("status", status.value)
                .order("created_at")
                .execute()
            )
        except Exception as exc:
            raise StoreUnavailable(f"DB list profiles failed: {exc}") from exc
        return [self._row_to_entity(r) for r in res.data or []]

    def close(self) -> None:
        if self.pg_client is not None:
            self.pg_client.close()
        logger.debug("Profile repository ({}) closed", self.backend)
