"""Fixture condivise: DB SQLite su file temporaneo e client HTTP di test."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from prenotazioni.api_main import create_app
from prenotazioni.config import Settings
from prenotazioni.gateway import SqlAlchemyGateway


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        db_url=f"sqlite:///{tmp_path / 'test.sqlite'}",
        static_dir=tmp_path / "static",
    )


@pytest.fixture
def gateway(settings):
    gw = SqlAlchemyGateway.from_url(settings.db_url)
    gw.create_schema()
    yield gw
    gw.close()


@pytest.fixture
def client(settings, gateway) -> TestClient:
    return TestClient(create_app(settings, gateway))


@pytest.fixture
def registra(client):
    """Factory: POST /api/register."""
    def _registra(username: str = "alice", password: str = "segreta"):
        return client.post("/api/register", json={"username": username, "password": password})
    return _registra


@pytest.fixture
def prenota(client):
    """Factory: POST /api/appointments con valori di default sovrascrivibili."""
    def _prenota(**overrides):
        payload = {
            "patient": "Alice Rossi",
            "doctor": "Dr. A",
            "date": "2024-01-01",
            "slot": "10:00",
            "username": "alice",
        }
        payload.update(overrides)
        return client.post("/api/appointments", json=payload)
    return _prenota
