"""Shared fixtures for the API tests."""

import unittest

from fastapi.testclient import TestClient

from devconnector.app import create_app
from devconnector.broadcast import InMemoryBroadcaster
from devconnector.db import InMemoryDocumentStore
from devconnector.dependencies import get_broadcaster, get_document_store


class ApiTestCase(unittest.TestCase):
    """Runs the app against in-memory backends."""

    def setUp(self):
        self.db = InMemoryDocumentStore()
        self.broadcaster = InMemoryBroadcaster()
        self.app = create_app()
        self.app.dependency_overrides[get_document_store] = lambda: self.db
        self.app.dependency_overrides[get_broadcaster] = lambda: self.broadcaster
        self.client = TestClient(self.app)

    def register(self, name="Ann", email="ann@example.com", password="secret1"):
        response = self.client.post(
            "/api/users",
            json={"name": name, "email": email, "password": password},
        )
        self.assertEqual(response.status_code, 200, response.text)
        token = response.json()["token"]
        headers = {"Authorization": f"Bearer {token}"}
        user = self.client.get("/api/auth", headers=headers).json()
        return user["id"], headers
