import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from models import SecondaryRatings
from upstream import UpstreamError, get_json

OMDB_BASE = "http://www.omdbapi.com/"
SERVICE = "omdb"

logger = logging.getLogger(__name__)


async def get_ratings(
    client: httpx.AsyncClient, api_key: str, title: str, year: str = ""
) -> Optional[SecondaryRatings]:
    """Look up OMDb ratings by title and year.

    Best effort: any failure, including OMDb's own "not found" body, returns
    None so the caller can serve the primary payload without it.
    """
    params = {"t": title, "apikey": api_key}
    if year:
        params["y"] = year
    try:
        data = await get_json(client, SERVICE, OMDB_BASE, params)
    except UpstreamError as exc:
        logger.warning("OMDb lookup failed for %r (%s): %s", title, year, exc)
        return None

    if not isinstance(data, dict) or data.get("Response") == "False":
        logger.info("No OMDb match for %r (%s)", title, year)
        return None
    try:
        return SecondaryRatings.model_validate(data)
    except ValidationError:
        logger.warning("Malformed OMDb body for %r (%s)", title, year)
        return None
