# -*- coding: utf-8 -*-
"""Shared fixtures for API tests: a throwaway app per test class."""

from __future__ import annotations

import shutil
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from fastapi.testclient import TestClient

from dailydiet.api import create_app
from dailydiet.config import Settings


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 6, 17, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def make_settings(tmp: Path, **overrides) -> Settings:
    values = {
        "data_root": tmp,
        "db_path": tmp / "dailydiet.db",
        "jwt_secret": "test-secret",
        "token_ttl_seconds": 3600,
        # Keep hashing cheap in tests.
        "password_iterations": 1000,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


class ApiTestCase(unittest.TestCase):
    """Fresh database for every test; ``self.client`` is anonymous."""

    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="dailydiet-test-"))
        self.clock = FakeClock()
        self.app = create_app(make_settings(self._tmp), clock=self.clock)
        self.client = TestClient(self.app)
        self._clients = [self.client]

    def tearDown(self) -> None:
        for client in self._clients:
            client.close()
        shutil.rmtree(self._tmp, ignore_errors=True)

    def new_client(self) -> TestClient:
        client = TestClient(self.app)
        self._clients.append(client)
        return client

    def register(self, client: TestClient, *, name: str = "John Doe", email: str = "johndoe@example.com",
                 password: str = "password") -> None:
        resp = client.post("/users", json={"name": name, "email": email, "password": password})
        self.assertEqual(resp.status_code, 201, resp.text)

    def login(self, client: TestClient, *, email: str = "johndoe@example.com", password: str = "password") -> str:
        resp = client.post("/sessions", json={"email": email, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        token = resp.cookies.get("token")
        self.assertTrue(token)
        return token

    def signed_in_client(self, *, name: str = "John Doe", email: str = "johndoe@example.com",
                         password: str = "password") -> TestClient:
        client = self.new_client()
        self.register(client, name=name, email=email, password=password)
        self.login(client, email=email, password=password)
        return client

    def create_meal(self, client: TestClient, **overrides) -> dict:
        body = {
            "name": "Meal 1",
            "description": "Meal 1 description",
            "diet": True,
            "date": "2024-06-17T12:15:05.123Z",
        }
        body.update(overrides)
        resp = client.post("/meals", json=body)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()
