"""One JSON POST against the extension backend.

``post_json`` sends the request on a shared ``httpx.AsyncClient`` (or a
short-lived one) and turns timeouts, transport errors, non-2xx statuses
and undecodable bodies into ``BackendError``. The message prefers the
``error`` field of a JSON error body.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from vsynx.config import DEFAULT_HTTP_TIMEOUT
from vsynx.exceptions import BackendError

logger = logging.getLogger(__name__)

# User-Agent sent with every request.
USER_AGENT: str = "vsynx-orchestrator/0.1"


def _error_message(response: httpx.Response) -> str:
    """Extract the backend's error text from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    text = response.text.strip()
    return text or f"HTTP {response.status_code}"


async def post_json(
    url: str,
    payload: Any,
    *,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
    client: httpx.AsyncClient | None = None,
) -> Any:
    """POST a JSON payload and decode the JSON response.

    Args:
        url: The URL to post to.
        payload: JSON-serialisable request body.
        timeout: Request timeout in seconds.
        client: Optional shared client; a short-lived one is created
            when omitted.

    Returns:
        Decoded JSON body (``None`` for an empty body).

    Raises:
        BackendError: On timeouts, transport errors, non-2xx statuses or
            invalid JSON.
    """
    try:
        if client is not None:
            resp = await client.post(url, json=payload, timeout=timeout)
        else:
            async with httpx.AsyncClient(
                timeout=timeout,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
            ) as owned:
                resp = await owned.post(url, json=payload)
    except httpx.TimeoutException as exc:
        logger.warning("Timeout calling %s", url)
        raise BackendError(f"Request to {url} timed out") from exc
    except httpx.RequestError as exc:
        logger.warning("Request error for %s: %s", url, exc)
        raise BackendError(f"Cannot reach backend at {url}: {exc}") from exc

    if resp.is_error:
        message = _error_message(resp)
        logger.warning("HTTP %d from %s: %s", resp.status_code, url, message)
        raise BackendError(message)

    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError as exc:
        logger.warning("Invalid JSON from %s", url)
        raise BackendError(f"Invalid JSON from {url}") from exc
