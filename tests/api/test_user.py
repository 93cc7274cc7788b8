from __future__ import annotations

from fastapi.testclient import TestClient

from tests.conftest import HOLDER, mint_body


def _mint(client: TestClient, **overrides: str) -> str:
    resp = client.post("/issuer/mintCertificate", json=mint_body(**overrides))
    assert resp.status_code == 200
    return resp.json()["mint"]


def test_certificates_empty_wallet(client: TestClient) -> None:
    resp = client.get(f"/user/certificates/{HOLDER}")
    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "wallet": HOLDER,
        "certificates": [],
        "total": 0,
    }


def test_certificates_in_issuance_order(client: TestClient) -> None:
    first = _mint(client, courseName="Blockchain 101")
    second = _mint(client, courseName="Rust for Solana")
    data = client.get(f"/user/certificates/{HOLDER}").json()
    assert data["total"] == 2
    assert [c["mint"] for c in data["certificates"]] == [first, second]
    assert data["certificates"][1]["courseName"] == "Rust for Solana"
    assert all(c["verified"] for c in data["certificates"])


def test_certificates_rejects_short_wallet(client: TestClient) -> None:
    resp = client.get("/user/certificates/short")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid wallet address"


def test_certificate_by_mint(client: TestClient) -> None:
    mint = _mint(client)
    resp = client.get(f"/user/certificate/{mint}")
    assert resp.status_code == 200
    cert = resp.json()["certificate"]
    assert cert["mint"] == mint
    assert cert["studentName"] == "Aidar Nazarbayev"
    assert cert["metadataUri"]


def test_certificate_unknown_mint(client: TestClient) -> None:
    resp = client.get("/user/certificate/11111111111111111111111111111111")
    assert resp.status_code == 404
    assert resp.json() == {
        "error": "Certificate not found",
        "message": "No certificate found with this mint address",
    }


def test_certificate_malformed_mint(client: TestClient) -> None:
    resp = client.get("/user/certificate/0OIl-not-base58")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid mint address"


def test_verify_with_certificates(client: TestClient) -> None:
    _mint(client)
    data = client.get(f"/user/verify/{HOLDER}").json()
    assert data["verified"] is True
    assert data["total"] == 1
    assert data["message"] == "Verified certificates found"


def test_verify_without_certificates(client: TestClient) -> None:
    data = client.get(f"/user/verify/{HOLDER}").json()
    assert data["verified"] is False
    assert data["certificates"] == []
    assert data["message"] == "No verified certificates found for this wallet"


def test_db_status_counts_certificates(client: TestClient) -> None:
    _mint(client)
    _mint(client)
    assert client.get("/user/db-status").json() == {
        "success": True,
        "database": {"mode": "memory", "certificateCount": 2},
    }
