"""
Sequential download of render assets (logo, QR image, font files).
Callers catch AssetFetchError and continue with a fallback.
"""

from __future__ import annotations

import logging

import httpx

from crm_documents.core.errors import AssetFetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def fetch_bytes(url: str, timeout: float = DEFAULT_TIMEOUT, client: httpx.Client | None = None) -> bytes:
    if not url:
        raise AssetFetchError("empty asset URL")
    try:
        if client is not None:
            response = client.get(url, timeout=timeout, follow_redirects=True)
        else:
            response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise AssetFetchError(f"{url} answered {exc.response.status_code}") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise AssetFetchError(f"{url} could not be fetched: {exc}") from exc
    logger.debug("Fetched asset %s (%d bytes)", url, len(response.content))
    return response.content
