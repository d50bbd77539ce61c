from collections.abc import Iterator
from pathlib import Path

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

from patient_ticketing.core import database
from patient_ticketing.main import app
from tests.helpers.world import TicketingWorld, build_world

load_dotenv(Path(__file__).resolve().parents[1] / ".env")


@pytest.fixture
def client() -> Iterator[TestClient]:
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def world(monkeypatch: pytest.MonkeyPatch) -> TicketingWorld:
    built = build_world()
    monkeypatch.setattr(database, "get_connection", built.database.connection_factory())
    return built
