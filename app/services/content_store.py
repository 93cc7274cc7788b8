"""Content store client for certificate metadata.

`upload(document, name)` never raises. When Pinata credentials are missing,
or the pin request fails for any reason, the caller still gets a URI: a
locally synthesized placeholder under the same gateway. The issuance
service relies on this and does not retry uploads itself.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol, runtime_checkable

import httpx

from app.core.metrics import METADATA_UPLOADS

logger = logging.getLogger(__name__)


@runtime_checkable
class ContentStore(Protocol):
    async def upload(self, document: dict, name: str) -> str:
        """Store `document` and return its retrieval URI. Never raises."""
        ...


def placeholder_uri(gateway_url: str) -> str:
    return f"{gateway_url}/QmMockHash{int(time.time() * 1000)}"


class PlaceholderContentStore:
    """Used when no Pinata credentials are configured."""

    def __init__(self, gateway_url: str) -> None:
        self._gateway_url = gateway_url.rstrip("/")

    async def upload(self, document: dict, name: str) -> str:
        logger.info("Content store not configured, using placeholder for %s", name)
        METADATA_UPLOADS.labels(result="placeholder").inc()
        return placeholder_uri(self._gateway_url)


class PinataContentStore:
    """Pins JSON documents through the Pinata pinning API."""

    def __init__(
        self,
        *,
        api_key: str,
        secret_api_key: str,
        base_url: str,
        gateway_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._secret_api_key = secret_api_key
        self._base_url = base_url.rstrip("/")
        self._gateway_url = gateway_url.rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                transport=self._transport,
                headers={
                    "pinata_api_key": self._api_key,
                    "pinata_secret_api_key": self._secret_api_key,
                },
            )
        return self._client

    async def upload(self, document: dict, name: str) -> str:
        payload = {"pinataContent": document, "pinataMetadata": {"name": name}}
        try:
            response = await self._get_client().post(
                "/pinning/pinJSONToIPFS", json=payload
            )
            response.raise_for_status()
            body = response.json()
            ipfs_hash = body.get("IpfsHash") if isinstance(body, dict) else None
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Metadata upload failed for %s: %s", name, exc)
            METADATA_UPLOADS.labels(result="placeholder").inc()
            return placeholder_uri(self._gateway_url)

        if not ipfs_hash:
            logger.warning("Metadata upload for %s returned no IpfsHash", name)
            METADATA_UPLOADS.labels(result="placeholder").inc()
            return placeholder_uri(self._gateway_url)

        METADATA_UPLOADS.labels(result="pinned").inc()
        logger.info("Metadata pinned name=%s hash=%s", name, ipfs_hash)
        return f"{self._gateway_url}/{ipfs_hash}"

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def build_content_store(settings) -> ContentStore:
    if settings.pinata_configured:
        return PinataContentStore(
            api_key=settings.pinata_api_key,
            secret_api_key=settings.pinata_secret_api_key,
            base_url=settings.pinata_base_url,
            gateway_url=settings.ipfs_gateway_url,
        )
    return PlaceholderContentStore(settings.ipfs_gateway_url)
