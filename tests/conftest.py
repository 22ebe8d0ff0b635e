from __future__ import annotations

from collections.abc import Generator

import fakeredis
import pytest
from fastapi.testclient import TestClient

from fitquest.api.models import PlayerRecord
from fitquest.player_store import new_player


@pytest.fixture(scope="session", autouse=True)
def _init_catalog_for_tests() -> None:
    """Install the compiled-in catalog once for the whole session."""

    from fitquest.catalog import init_catalog, reset_catalog_for_tests

    reset_catalog_for_tests()
    init_catalog()


@pytest.fixture()
def player() -> PlayerRecord:
    return new_player(email="hero@example.com", hero_name="Hero", player_id="p1")


@pytest.fixture()
def r() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def client_and_redis() -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    """FastAPI TestClient wired to a private fakeredis instance."""

    from fitquest.api.deps import get_redis
    from fitquest.main import app

    fake = fakeredis.FakeRedis(decode_responses=True)

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield fake

    app.dependency_overrides[get_redis] = _override
    with TestClient(app) as c:
        yield c, fake
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> dict[str, str]:
    client, _ = client_and_redis
    resp = client.post("/register", json={"email": "hero@example.com", "password": "hunter22", "heroName": "Hero"})
    assert resp.status_code == 200
    login = client.post("/login", json={"email": "hero@example.com", "password": "hunter22"})
    assert login.status_code == 200
    return {"Authorization": f"Bearer {login.json()['token']}"}
