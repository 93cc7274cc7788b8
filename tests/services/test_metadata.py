from __future__ import annotations

from datetime import date

from app.services.metadata import (
    CERTIFICATE_CATEGORY,
    build_certificate_metadata,
    certificate_document_name,
)


def test_metadata_describes_certificate() -> None:
    doc = build_certificate_metadata(
        "Aidar", "Blockchain 101", "Nazarbayev University", date(2026, 3, 14)
    )
    assert doc["name"] == "Blockchain 101 Certificate"
    assert "issued to Aidar by Nazarbayev University" in doc["description"]
    assert doc["properties"]["category"] == CERTIFICATE_CATEGORY
    traits = {a["trait_type"]: a["value"] for a in doc["attributes"]}
    assert traits["Student Name"] == "Aidar"
    assert traits["Issue Date"] == "2026-03-14"


def test_image_url_is_escaped() -> None:
    doc = build_certificate_metadata("A", "C# & .NET", "I", date(2026, 1, 1))
    assert " " not in doc["image"]
    assert "&" not in doc["image"].split("?text=", 1)[1]


def test_document_name() -> None:
    assert certificate_document_name("S1", "Course") == "S1_Course_Certificate"
