# -*- coding: utf-8 -*-
"""Users — DB storage helpers (credential store)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

from ..app_db import db_conn, utc_now

_UPDATABLE_FIELDS = ("name", "email", "password")


def normalize_email(email: str) -> str:
    return email.lower().strip()


class UserStore:
    """Rows of the ``users`` table, returned as plain dicts."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def create(self, *, name: str, email: str, password_hash: str) -> Dict[str, Any]:
        """Insert a user. Raises ``sqlite3.IntegrityError`` on a duplicate email."""
        user_id = str(uuid4())
        now = utc_now()
        email_norm = normalize_email(email)
        with db_conn(self.db_path) as conn:
            conn.execute(
                "INSERT INTO users (id, name, email, password, created_at, updated_at) VALUES (?, ?, ?, ?, ?, NULL)",
                (user_id, name, email_norm, password_hash, now),
            )
        return {
            "id": user_id,
            "name": name,
            "email": email_norm,
            "password": password_hash,
            "created_at": now,
            "updated_at": None,
        }

    def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        with db_conn(self.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            return dict(row) if row else None

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        with db_conn(self.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (normalize_email(email),)).fetchone()
            return dict(row) if row else None

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Overwrite the given fields in one statement and refresh ``updated_at``.

        Returns the updated row, or None when the user does not exist.
        """
        unknown = set(fields) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update user fields: {sorted(unknown)}")
        values = dict(fields)
        if "email" in values:
            values["email"] = normalize_email(values["email"])
        columns = [c for c in _UPDATABLE_FIELDS if c in values]
        assignments = ", ".join([f"{c} = ?" for c in columns] + ["updated_at = ?"])
        params = [values[c] for c in columns] + [utc_now(), user_id]
        with db_conn(self.db_path) as conn:
            cur = conn.execute(f"UPDATE users SET {assignments} WHERE id = ?", params)
            if cur.rowcount == 0:
                return None
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            return dict(row) if row else None
