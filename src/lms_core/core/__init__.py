"""Core logic of the idempotency gate.

This package contains:
- Capture: buffering a handler's response in memory
- Replay: snapshotting 2xx responses and rebuilding them from the cache
- Gate: key validation and the replay-or-execute decision

The core logic is framework-agnostic and is wrapped by the ASGI adapter.
"""

from lms_core.core.capture import CapturedResponse, capture_response
from lms_core.core.gate import IdempotencyGate, Request, problem_response
from lms_core.core.replay import replay_response, snapshot_response

__all__ = [
    "CapturedResponse",
    "capture_response",
    "IdempotencyGate",
    "Request",
    "problem_response",
    "replay_response",
    "snapshot_response",
]
