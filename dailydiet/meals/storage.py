# -*- coding: utf-8 -*-
"""Meals — DB storage helpers."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn, utc_now

_UPDATABLE_FIELDS = ("name", "description", "diet", "date")


def _row_to_meal(row: sqlite3.Row) -> Dict[str, Any]:
    meal = dict(row)
    meal["diet"] = bool(meal["diet"])
    return meal


class MealStore:
    """Rows of the ``meals`` table. Ownership checks belong to the caller."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def create(
        self,
        *,
        owner_id: str,
        name: str,
        description: str,
        diet: bool,
        date: str,
    ) -> Dict[str, Any]:
        meal_id = str(uuid4())
        now = utc_now()
        with db_conn(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO meals (id, name, description, diet, date, user_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, NULL)
                """,
                (meal_id, name, description, 1 if diet else 0, date, owner_id, now),
            )
        return {
            "id": meal_id,
            "user_id": owner_id,
            "name": name,
            "description": description,
            "diet": bool(diet),
            "date": date,
            "created_at": now,
            "updated_at": None,
        }

    def list_by_owner(self, owner_id: str, *, order_by_date: bool = False) -> List[Dict[str, Any]]:
        sql = "SELECT * FROM meals WHERE user_id = ?"
        if order_by_date:
            # rowid keeps equal dates in insertion order.
            sql += " ORDER BY date ASC, rowid ASC"
        with db_conn(self.db_path) as conn:
            rows = conn.execute(sql, (owner_id,)).fetchall()
            return [_row_to_meal(r) for r in rows]

    def count_by_owner(self, owner_id: str, *, diet: Optional[bool] = None) -> int:
        sql = "SELECT COUNT(*) FROM meals WHERE user_id = ?"
        params: list = [owner_id]
        if diet is not None:
            sql += " AND diet = ?"
            params.append(1 if diet else 0)
        with db_conn(self.db_path) as conn:
            return int(conn.execute(sql, params).fetchone()[0])

    def get_by_id(self, meal_id: str) -> Optional[Dict[str, Any]]:
        with db_conn(self.db_path) as conn:
            row = conn.execute("SELECT * FROM meals WHERE id = ?", (meal_id,)).fetchone()
            return _row_to_meal(row) if row else None

    def update(self, meal_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Overwrite only the supplied fields and refresh ``updated_at``.

        Returns the updated row, or None when the meal does not exist.
        """
        unknown = set(fields) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update meal fields: {sorted(unknown)}")
        values = dict(fields)
        if "diet" in values:
            values["diet"] = 1 if values["diet"] else 0
        columns = [c for c in _UPDATABLE_FIELDS if c in values]
        assignments = ", ".join([f"{c} = ?" for c in columns] + ["updated_at = ?"])
        params = [values[c] for c in columns] + [utc_now(), meal_id]
        with db_conn(self.db_path) as conn:
            cur = conn.execute(f"UPDATE meals SET {assignments} WHERE id = ?", params)
            if cur.rowcount == 0:
                return None
            row = conn.execute("SELECT * FROM meals WHERE id = ?", (meal_id,)).fetchone()
            return _row_to_meal(row) if row else None

    def delete(self, meal_id: str) -> bool:
        with db_conn(self.db_path) as conn:
            cur = conn.execute("DELETE FROM meals WHERE id = ?", (meal_id,))
            return cur.rowcount > 0
