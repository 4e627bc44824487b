"""Tests for the structured log events emitted by the gate and catalogs."""

import pytest
from structlog.testing import capture_logs

from lms_core.catalog import CourseCatalog, CourseCreate
from lms_core.core.capture import CapturedResponse
from lms_core.core.gate import IdempotencyGate, Request
from lms_core.models import IdempotencyPolicy


async def created(request: Request) -> CapturedResponse:
    return CapturedResponse(status=201, headers={}, body=b"{}")


@pytest.mark.asyncio
async def test_gate_events(store, config):
    gate = IdempotencyGate(store, config)
    request = Request("POST", "/api/courses", headers={"Idempotency-Key": "abc"})

    with capture_logs() as logs:
        await gate.process(request, IdempotencyPolicy.REQUIRED, created)
        await gate.process(request, IdempotencyPolicy.REQUIRED, created)
        await gate.process(
            Request("POST", "/api/courses", headers={}),
            IdempotencyPolicy.REQUIRED,
            created,
        )

    assert [entry["event"] for entry in logs] == [
        "idempotency.stored",
        "idempotency.replayed",
        "idempotency.rejected",
    ]
    assert logs[0]["key"] == "abc"
    assert logs[2]["reason"] == "missing"
    assert logs[2]["log_level"] == "warning"


def test_logs_never_carry_bodies():
    with capture_logs() as logs:
        CourseCatalog().create(CourseCreate(code="PY101", title="Secret title"))

    assert logs[0]["event"] == "catalog.course_created"
    assert "Secret title" not in str(logs)
