"""End-to-end scenario tests for the LMS demo API.

Each module drives the full FastAPI application (or a small inline app)
through TestClient and checks one aspect of idempotency handling or paged
queries.
"""
