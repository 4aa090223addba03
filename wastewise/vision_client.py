from __future__ import annotations

from typing import List, Optional

import httpx
from loguru import logger

from .config import (
    HTTP_CONNECT_TIMEOUT,
    HTTP_MAX_IMAGE_BYTES,
    HTTP_READ_TIMEOUT,
    HTTP_USER_AGENT,
    VISION_API_URL,
    VISION_MAX_LABELS,
)
from .utils.text_clean import clean_query_text


def _parse_labels(payload) -> List[str]:
    """Accept either ``{"labels": [...]}`` or a bare JSON list of strings."""
    raw = payload.get("labels", []) if isinstance(payload, dict) else payload
    if not isinstance(raw, list):
        return []
    labels: List[str] = []
    for item in raw:
        text = clean_query_text(item if isinstance(item, str) else None)
        if text and text not in labels:
            labels.append(text)
    return labels[:VISION_MAX_LABELS]


def fetch_labels(
    image: bytes,
    url: str = VISION_API_URL,
    content_type: str = "image/jpeg",
    client: Optional[httpx.Client] = None,
) -> List[str]:
    """
    Send an image to the image-recognition service and return its labels.

    Hardening:
      - httpx with connect/read timeouts
      - image size cap before upload
      - any transport, HTTP or JSON failure -> [] (logged), so callers
        simply classify without a vision boost
    """
    if not image:
        return []
    if len(image) > HTTP_MAX_IMAGE_BYTES:
        logger.warning("Vision upload skipped: {} bytes > {} limit", len(image), HTTP_MAX_IMAGE_BYTES)
        return []

    headers = {"User-Agent": HTTP_USER_AGENT, "Content-Type": content_type}
    own_client = client is None
    if own_client:
        client = httpx.Client(
            timeout=httpx.Timeout(HTTP_READ_TIMEOUT, connect=HTTP_CONNECT_TIMEOUT),
        )
    try:
        r = client.post(url, content=image, headers=headers)
        if r.status_code >= 400:
            logger.warning("Vision service: HTTP {} from {}", r.status_code, url)
            return []
        labels = _parse_labels(r.json())
        logger.info("Vision service returned {} labels", len(labels))
        return labels
    except httpx.TimeoutException:
        logger.warning("Vision service timeout for {}", url)
        return []
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Vision service exception for {}: {}", url, e)
        return []
    finally:
        if own_client:
            client.close()
