"""Demo LMS API with idempotent creates and paged lists.

Run with: python demo_app.py

Then try:
    curl -X POST localhost:8000/api/courses \\
        -H 'Content-Type: application/json' \\
        -H 'Idempotency-Key: create-py101' \\
        -d '{"code": "PY101", "title": "Python basics"}'
    curl 'localhost:8000/api/courses?sort=-code&pageSize=10'
"""

import os

import uvicorn

from lms_core.app import create_app
from lms_core.config import IdempotencyConfig
from lms_core.observability.logging import configure_logging

configure_logging(
    level=os.environ.get("LMS_LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LMS_LOG_JSON", "true").lower() == "true",
)

app = create_app(config=IdempotencyConfig.from_env())


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
