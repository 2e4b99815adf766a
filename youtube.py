import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from models import YouTubeSearch
from upstream import UpstreamError, get_json

YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
SERVICE = "youtube"

logger = logging.getLogger(__name__)


async def search_trailer(
    client: httpx.AsyncClient, api_key: str, query: str
) -> Optional[str]:
    """Return the video id of the first search hit, or None if there is none.

    Raises UpstreamError when the search itself fails.
    """
    data = await get_json(
        client,
        SERVICE,
        YOUTUBE_SEARCH_URL,
        {
            "part": "snippet",
            "q": query,
            "type": "video",
            "key": api_key,
            "maxResults": 1,
        },
    )
    try:
        search = YouTubeSearch.model_validate(data)
    except ValidationError:
        logger.info("Unexpected YouTube search shape for %r", query)
        return None
    return search.items[0].id.videoId if search.items else None


async def find_trailer(
    client: httpx.AsyncClient, api_key: str, query: str
) -> Optional[str]:
    """Like search_trailer, but a failed search yields None instead of raising."""
    try:
        return await search_trailer(client, api_key, query)
    except UpstreamError as exc:
        logger.warning("Trailer lookup failed for %r: %s", query, exc)
        return None
