import httpx
import pytest
import respx

from tmdb import get_movie_details, get_recommendations, get_trending, search_multi
from upstream import UpstreamError

TMDB_SEARCH_RESPONSE = {
    "page": 1,
    "total_pages": 3,
    "results": [
        {
            "id": 438631,
            "media_type": "movie",
            "title": "Dune",
            "release_date": "2021-09-15",
            "vote_average": 7.8,
            "poster_path": "/dune.jpg",
        },
        {
            "id": 90228,
            "media_type": "tv",
            "name": "Dune: Prophecy",
            "first_air_date": "2024-11-17",
            "vote_average": 7.1,
            "poster_path": None,
        },
    ],
}

TMDB_MOVIE_DETAILS_RESPONSE = {
    "id": 438631,
    "title": "Dune",
    "release_date": "2021-09-15",
    "runtime": 155,
    "genres": [{"id": 878, "name": "Science Fiction"}],
    "credits": {"cast": [{"name": "Timothée Chalamet", "character": "Paul Atreides"}]},
}


@respx.mock
async def test_search_multi_parses_listing():
    route = respx.get("https://api.themoviedb.org/3/search/multi").mock(
        return_value=httpx.Response(200, json=TMDB_SEARCH_RESPONSE)
    )
    async with httpx.AsyncClient() as client:
        listing = await search_multi(client, "fake_key", "dune", 2)

    assert listing.total_pages == 3
    assert [r.id for r in listing.results] == [438631, 90228]
    params = route.calls.last.request.url.params
    assert params["query"] == "dune"
    assert params["page"] == "2"
    assert params["api_key"] == "fake_key"


@respx.mock
async def test_get_trending_uses_media_type_in_path():
    route = respx.get("https://api.themoviedb.org/3/trending/tv/week").mock(
        return_value=httpx.Response(200, json={"results": []})
    )
    async with httpx.AsyncClient() as client:
        listing = await get_trending(client, "fake_key", "tv")

    assert route.called
    assert listing.results == []


@respx.mock
async def test_get_movie_details_requests_credits():
    route = respx.get("https://api.themoviedb.org/3/movie/438631").mock(
        return_value=httpx.Response(200, json=TMDB_MOVIE_DETAILS_RESPONSE)
    )
    async with httpx.AsyncClient() as client:
        detail = await get_movie_details(client, "fake_key", 438631)

    assert route.calls.last.request.url.params["append_to_response"] == "credits"
    assert detail.title == "Dune"
    assert detail.credits.cast[0].character == "Paul Atreides"
    assert detail.model_dump(by_alias=True, exclude_unset=True)["runtime"] == 155


@respx.mock
async def test_get_recommendations():
    respx.get("https://api.themoviedb.org/3/movie/438631/recommendations").mock(
        return_value=httpx.Response(200, json={"results": [{"id": 693134, "title": "Dune: Part Two"}]})
    )
    async with httpx.AsyncClient() as client:
        listing = await get_recommendations(client, "fake_key", 438631)

    assert listing.results[0].title == "Dune: Part Two"


@respx.mock
async def test_http_error_becomes_upstream_error():
    respx.get("https://api.themoviedb.org/3/movie/1").mock(
        return_value=httpx.Response(404, json={"status_message": "not found"})
    )
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamError) as excinfo:
            await get_movie_details(client, "fake_key", 1)
    assert excinfo.value.service == "tmdb"


@respx.mock
async def test_network_error_becomes_upstream_error():
    respx.get("https://api.themoviedb.org/3/search/multi").mock(side_effect=httpx.ConnectError)
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamError):
            await search_multi(client, "fake_key", "dune")


@respx.mock
async def test_malformed_body_becomes_upstream_error():
    respx.get("https://api.themoviedb.org/3/trending/movie/week").mock(
        return_value=httpx.Response(200, text="<html>oops</html>")
    )
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamError):
            await get_trending(client, "fake_key", "movie")


@respx.mock
async def test_unexpected_shape_becomes_upstream_error():
    respx.get("https://api.themoviedb.org/3/trending/movie/week").mock(
        return_value=httpx.Response(200, json={"results": [{"title": "no id"}]})
    )
    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamError):
            await get_trending(client, "fake_key", "movie")
