"""Scenario 4: TTL Expiry

This module tests record lifetime:
- Within the TTL a retry is replayed
- After the TTL the record is ignored and the handler runs again
"""

import pytest
from fastapi.testclient import TestClient

from lms_core.app import create_app
from lms_core.catalog import StudentCatalog
from lms_core.config import IdempotencyConfig
from lms_core.storage.memory import MemoryCacheStore

PAYLOAD = {"name": "Grace Hopper", "email": "grace@example.com"}
HEADERS = {"Idempotency-Key": "create-grace"}


@pytest.fixture
def students() -> StudentCatalog:
    return StudentCatalog()


@pytest.fixture
def client(store: MemoryCacheStore, students: StudentCatalog) -> TestClient:
    app = create_app(store=store, config=IdempotencyConfig(ttl_seconds=60), students=students)
    return TestClient(app)


def test_replayed_within_ttl(client: TestClient, clock, students: StudentCatalog):
    first = client.post("/api/students", json=PAYLOAD, headers=HEADERS)
    clock.advance(seconds=59)
    second = client.post("/api/students", json=PAYLOAD, headers=HEADERS)

    assert second.json() == first.json()
    assert len(students) == 1


def test_handler_runs_again_after_ttl(client: TestClient, clock, students: StudentCatalog):
    first = client.post("/api/students", json=PAYLOAD, headers=HEADERS)
    clock.advance(seconds=60)
    second = client.post("/api/students", json=PAYLOAD, headers=HEADERS)

    assert second.status_code == 201
    assert second.json()["id"] != first.json()["id"]
    assert len(students) == 2


def test_new_result_is_cached_after_expiry(client: TestClient, clock, students: StudentCatalog):
    client.post("/api/students", json=PAYLOAD, headers=HEADERS)
    clock.advance(seconds=61)
    second = client.post("/api/students", json=PAYLOAD, headers=HEADERS)
    third = client.post("/api/students", json=PAYLOAD, headers=HEADERS)

    assert third.json() == second.json()
    assert len(students) == 2
