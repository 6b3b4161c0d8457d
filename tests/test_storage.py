# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import sqlite3
import tempfile
import threading
import unittest
from pathlib import Path

from dailydiet.app_db import init_app_db
from dailydiet.meals.storage import MealStore
from dailydiet.users.storage import UserStore


class _StoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="dailydiet-store-"))
        self.db_path = self._tmp / "test.db"
        init_app_db(self.db_path)
        self.users = UserStore(self.db_path)
        self.meals = MealStore(self.db_path)

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)


class TestUserStore(_StoreTestCase):
    def test_create_and_find(self) -> None:
        user = self.users.create(name="John", email="John@Example.com ", password_hash="hash")
        self.assertEqual(user["email"], "john@example.com")
        self.assertEqual(self.users.find_by_id(user["id"]), user)
        self.assertEqual(self.users.find_by_email("JOHN@example.com"), user)
        self.assertIsNone(self.users.find_by_email("nobody@example.com"))
        self.assertIsNone(self.users.find_by_id("missing"))

    def test_duplicate_email(self) -> None:
        self.users.create(name="John", email="john@example.com", password_hash="hash")
        with self.assertRaises(sqlite3.IntegrityError):
            self.users.create(name="Other", email="john@example.com", password_hash="hash")

    def test_update(self) -> None:
        user = self.users.create(name="John", email="john@example.com", password_hash="hash")
        updated = self.users.update(user["id"], {"name": "Johnny"})
        assert updated is not None
        self.assertEqual(updated["name"], "Johnny")
        self.assertEqual(updated["email"], "john@example.com")
        self.assertEqual(updated["password"], "hash")
        self.assertIsNotNone(updated["updated_at"])
        self.assertIsNone(self.users.update("missing", {"name": "x"}))
        with self.assertRaises(ValueError):
            self.users.update(user["id"], {"id": "other"})


class TestMealStore(_StoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.users.create(name="A", email="a@example.com", password_hash="h")["id"]
        self.other = self.users.create(name="B", email="b@example.com", password_hash="h")["id"]

    def _meal(self, owner: str, **kw) -> dict:
        values = {"name": "Lunch", "description": "Salad", "diet": True, "date": "2024-06-17T12:00:00.000Z"}
        values.update(kw)
        return self.meals.create(owner_id=owner, **values)

    def test_create_requires_existing_owner(self) -> None:
        with self.assertRaises(sqlite3.IntegrityError):
            self._meal("no-such-user")

    def test_list_by_owner_is_isolated(self) -> None:
        mine = self._meal(self.owner)
        self._meal(self.other)
        self.assertEqual(self.meals.list_by_owner(self.owner), [mine])

    def test_list_by_owner_ordered(self) -> None:
        late = self._meal(self.owner, date="2024-06-18T12:00:00.000Z")
        early = self._meal(self.owner, date="2024-06-17T12:00:00.000Z")
        ordered = self.meals.list_by_owner(self.owner, order_by_date=True)
        self.assertEqual([m["id"] for m in ordered], [early["id"], late["id"]])

    def test_count_by_owner(self) -> None:
        self._meal(self.owner, diet=True)
        self._meal(self.owner, diet=False)
        self._meal(self.owner, diet=False)
        self.assertEqual(self.meals.count_by_owner(self.owner), 3)
        self.assertEqual(self.meals.count_by_owner(self.owner, diet=True), 1)
        self.assertEqual(self.meals.count_by_owner(self.owner, diet=False), 2)
        self.assertEqual(self.meals.count_by_owner(self.other), 0)

    def test_partial_update(self) -> None:
        meal = self._meal(self.owner)
        updated = self.meals.update(meal["id"], {"diet": False})
        assert updated is not None
        self.assertIs(updated["diet"], False)
        for key in ("name", "description", "date", "user_id", "created_at"):
            self.assertEqual(updated[key], meal[key])
        self.assertIsNotNone(updated["updated_at"])
        self.assertIsNone(self.meals.update("missing", {"name": "x"}))

    def test_delete(self) -> None:
        meal = self._meal(self.owner)
        self.assertTrue(self.meals.delete(meal["id"]))
        self.assertFalse(self.meals.delete(meal["id"]))
        self.assertIsNone(self.meals.get_by_id(meal["id"]))

    def test_concurrent_updates_last_write_wins(self) -> None:
        meal = self._meal(self.owner)
        names = [f"name-{i}" for i in range(8)]
        errors = []

        def worker(name: str) -> None:
            try:
                self.meals.update(meal["id"], {"name": name})
            except sqlite3.Error as exc:
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(n,)) for n in names]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        final = self.meals.get_by_id(meal["id"])
        assert final is not None
        self.assertIn(final["name"], names)
        self.assertEqual(final["description"], meal["description"])


if __name__ == "__main__":
    unittest.main()
