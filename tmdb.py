from typing import Any, Optional

import httpx
from pydantic import BaseModel, ValidationError

from models import MediaType, MovieDetail, TMDBListing
from upstream import UpstreamError, get_json

TMDB_BASE = "https://api.themoviedb.org/3"
SERVICE = "tmdb"


async def _get(
    client: httpx.AsyncClient,
    api_key: str,
    path: str,
    model: type[BaseModel],
    params: Optional[dict[str, Any]] = None,
):
    data = await get_json(
        client, SERVICE, f"{TMDB_BASE}{path}", {"api_key": api_key, **(params or {})}
    )
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise UpstreamError(SERVICE, f"unexpected response shape for {path}") from exc


async def search_multi(
    client: httpx.AsyncClient, api_key: str, query: str, page: int = 1
) -> TMDBListing:
    """Search movies and TV shows in one listing."""
    return await _get(
        client, api_key, "/search/multi", TMDBListing, {"query": query, "page": page}
    )


async def get_trending(
    client: httpx.AsyncClient, api_key: str, media_type: MediaType, page: int = 1
) -> TMDBListing:
    return await _get(
        client, api_key, f"/trending/{media_type}/week", TMDBListing, {"page": page}
    )


async def get_movie_details(
    client: httpx.AsyncClient, api_key: str, movie_id: int
) -> MovieDetail:
    """Fetch the full detail payload for a movie, including credits."""
    return await _get(
        client,
        api_key,
        f"/movie/{movie_id}",
        MovieDetail,
        {"append_to_response": "credits"},
    )


async def get_recommendations(
    client: httpx.AsyncClient, api_key: str, movie_id: int
) -> TMDBListing:
    return await _get(client, api_key, f"/movie/{movie_id}/recommendations", TMDBListing)
