import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """An upstream API call failed at the network, HTTP status or decode level."""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message


async def get_json(
    client: httpx.AsyncClient,
    service: str,
    url: str,
    params: Optional[dict[str, Any]] = None,
) -> Any:
    """GET ``url`` and return the decoded JSON body. No retries."""
    try:
        response = await client.get(url, params=params)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as exc:
        raise UpstreamError(service, f"HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise UpstreamError(service, f"{type(exc).__name__}: {exc}") from exc
    except ValueError as exc:
        raise UpstreamError(service, "invalid JSON body") from exc
