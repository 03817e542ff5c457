"""
Shared fixtures.

MongoDB is replaced by mongomock-motor and the app is driven in-process
through httpx's ASGI transport. Settings are read once at import time, so
the environment is prepared before anything from ``pinboard`` is imported.
"""
import os
import tempfile

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MONGODB_USE_TRANSACTIONS"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="pinboard-uploads-")

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from pinboard.db.mongodb import get_database
from pinboard.main import app

API = "/api"


@pytest.fixture
def db():
    return AsyncMongoMockClient()["pinboard_test"]


@pytest.fixture
async def client(db):
    app.dependency_overrides[get_database] = lambda: db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class Api:
    """Small helpers for setting up users, boards and pins over HTTP."""

    def __init__(self, client: AsyncClient):
        self.client = client

    @staticmethod
    def headers(user: dict) -> dict:
        return {"Authorization": f"Bearer {user['token']}"}

    async def register(self, username: str, password: str = "secret123", **extra) -> dict:
        payload = {
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
            **extra,
        }
        resp = await self.client.post(f"{API}/auth/register", json=payload)
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return {"id": body["user"]["_id"], "token": body["token"], **body["user"]}

    async def board(self, user: dict, name: str = "Inspiration", **fields) -> dict:
        resp = await self.client.post(
            f"{API}/boards", json={"name": name, **fields}, headers=self.headers(user)
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    async def pin(self, user: dict, board: dict, title: str = "A pin", **fields) -> dict:
        payload = {
            "title": title,
            "image_url": "https://images.example.com/pin.jpg",
            "board_id": board["_id"],
            **fields,
        }
        resp = await self.client.post(f"{API}/pins", json=payload, headers=self.headers(user))
        assert resp.status_code == 201, resp.text
        return resp.json()

    async def follow(self, follower: dict, target: dict) -> None:
        resp = await self.client.post(
            f"{API}/profile/{target['username']}/follow", headers=self.headers(follower)
        )
        assert resp.status_code == 200, resp.text

    async def me(self, user: dict) -> dict:
        resp = await self.client.get(f"{API}/auth/me", headers=self.headers(user))
        assert resp.status_code == 200, resp.text
        return resp.json()


@pytest.fixture
def api(client):
    return Api(client)
