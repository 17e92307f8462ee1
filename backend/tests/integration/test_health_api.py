"""GET /api/v1/health."""

from __future__ import annotations

from tests.helpers.assertions import assert_ok, assert_problem
from tests.helpers.http import API


def test_health_reports_database_and_sweep(client):
    data = assert_ok(client.get(f"{API}/health"))

    assert data["status"] == "ok"
    assert data["db"] == "ok"
    # The scheduler is disabled under test
    assert data["blacklist_sweep"] == "off"


def test_health_sets_request_id_header(client):
    resp = client.get(f"{API}/health", headers={"X-Request-ID": "req-123"})

    assert resp.headers.get("X-Request-ID") == "req-123"


def test_unknown_route_is_a_problem_document(client):
    assert_problem(client.get(f"{API}/nope"), 404, code="not_found")
