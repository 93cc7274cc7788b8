from __future__ import annotations

from datetime import date
from urllib.parse import quote

CERTIFICATE_CATEGORY = "Education Certificate"
_IMAGE_BASE = "https://via.placeholder.com/400x300/4F46E5/FFFFFF?text="


def certificate_document_name(holder_name: str, course_name: str) -> str:
    return f"{holder_name}_{course_name}_Certificate"


def build_certificate_metadata(
    holder_name: str,
    course_name: str,
    issuer_name: str,
    issue_date: date,
) -> dict:
    """NFT metadata document (Metaplex-style JSON) for one certificate."""
    title = f"{course_name} Certificate"
    return {
        "name": title,
        "description": (
            f"Certificate of completion for {course_name} "
            f"issued to {holder_name} by {issuer_name}"
        ),
        "image": _IMAGE_BASE + quote(title),
        "attributes": [
            {"trait_type": "Student Name", "value": holder_name},
            {"trait_type": "Course Name", "value": course_name},
            {"trait_type": "Issuer Name", "value": issuer_name},
            {"trait_type": "Issue Date", "value": issue_date.isoformat()},
            {"trait_type": "Certificate Type", "value": "Education"},
        ],
        "properties": {
            "category": CERTIFICATE_CATEGORY,
            "country": "Kazakhstan",
        },
    }
