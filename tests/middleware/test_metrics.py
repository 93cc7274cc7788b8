"""Prometheus counters are process-global and never reset, so every
assertion here compares a before/after delta."""

from __future__ import annotations

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from tests.conftest import HOLDER, mint_body


def _sample(name: str, labels: dict | None = None) -> float:
    value = REGISTRY.get_sample_value(name, labels=labels or {})
    return value if value is not None else 0.0


def test_request_counter_uses_route_template(client: TestClient) -> None:
    labels = {
        "method": "GET",
        "endpoint": "/user/certificates/{wallet}",
        "status_code": "200",
    }
    before = _sample("http_requests_total", labels)
    client.get(f"/user/certificates/{HOLDER}")
    assert _sample("http_requests_total", labels) - before >= 1


def test_raw_path_is_never_a_label(client: TestClient) -> None:
    path = f"/user/certificates/{HOLDER}"
    client.get(path)
    labels = {"method": "GET", "endpoint": path, "status_code": "200"}
    assert REGISTRY.get_sample_value("http_requests_total", labels=labels) is None


def test_unmatched_paths_share_one_label(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "unmatched", "status_code": "404"}
    before = _sample("http_requests_total", labels)
    client.get("/no/such/route")
    assert _sample("http_requests_total", labels) - before >= 1


def test_request_duration_histogram_observes(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/health"}
    before = _sample("http_request_duration_seconds_count", labels)
    client.get("/health")
    assert _sample("http_request_duration_seconds_count", labels) - before >= 1


def test_issuance_counters(client: TestClient) -> None:
    issued = {"variant": "simulated"}
    rejected = {"reason": "authorization"}
    issued_before = _sample("certificates_issued_total", issued)
    rejected_before = _sample("issuance_rejections_total", rejected)

    client.post("/issuer/mintCertificate", json=mint_body())
    client.post(
        "/issuer/mintCertificate",
        json=mint_body(issuerPublicKey="Unknown11111111111111111111"),
    )

    assert _sample("certificates_issued_total", issued) - issued_before == 1
    assert _sample("issuance_rejections_total", rejected) - rejected_before == 1


def test_metrics_endpoint_returns_prometheus_format(client: TestClient) -> None:
    client.get("/health")
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "http_requests_total" in resp.text
    assert "certificates_issued_total" in resp.text


def test_metrics_endpoint_not_self_instrumented(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/metrics", "status_code": "200"}
    before = _sample("http_requests_total", labels)
    client.get("/metrics")
    client.get("/metrics")
    assert _sample("http_requests_total", labels) == before
