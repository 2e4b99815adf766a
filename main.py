import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import aiosqlite
import httpx
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse

import database
import omdb
import tmdb
import youtube
from config import Settings
from models import (
    ContentItem,
    MediaType,
    SearchPage,
    TMDBResult,
    TrendingTrailer,
    WatchedUpdate,
    WatchlistCreate,
    WatchlistEntry,
)
from normalize import (
    normalize_results,
    release_year,
    resolve_release_date,
    resolve_title,
    to_trending_trailer,
    trailer_query,
)
from upstream import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


@router.get("/search", response_model=SearchPage)
async def search(
    q: str = "",
    page: int = Query(1, ge=1),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not q:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Query parameter 'q' is required")
    listing = await tmdb.search_multi(client, settings.tmdb_api_key, q, page)
    return SearchPage(
        results=normalize_results(listing),
        total_pages=listing.total_pages,
        page=page,
    )


@router.get("/trending", response_model=list[ContentItem])
async def trending(
    media_type: MediaType = Query("movie", alias="type"),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    listing = await tmdb.get_trending(client, settings.tmdb_api_key, media_type)
    return normalize_results(listing, media_type=media_type)


@router.get("/movie/{movie_id}")
async def movie_detail(
    movie_id: int,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    detail = await tmdb.get_movie_details(client, settings.tmdb_api_key, movie_id)
    if detail.title:
        ratings = await omdb.get_ratings(
            client, settings.omdb_api_key, detail.title, release_year(detail.release_date)
        )
        if ratings is not None:
            detail.secondary_ratings = ratings
    return detail.model_dump(by_alias=True, exclude_unset=True)


@router.get("/watchlist", response_model=list[WatchlistEntry])
async def list_watchlist(settings: Settings = Depends(get_settings)):
    return await database.list_watchlist(settings.db_path)


@router.post("/watchlist", response_model=WatchlistEntry, status_code=status.HTTP_201_CREATED)
async def add_to_watchlist(
    item: WatchlistCreate, settings: Settings = Depends(get_settings)
):
    return await database.add_to_watchlist(
        item.movie_id, item.title, item.poster_path or "", settings.db_path
    )


@router.delete("/watchlist", status_code=status.HTTP_204_NO_CONTENT)
async def clear_watchlist(settings: Settings = Depends(get_settings)):
    await database.clear_watchlist(settings.db_path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/watchlist/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def set_watched(
    entry_id: int, update: WatchedUpdate, settings: Settings = Depends(get_settings)
):
    if not await database.set_watched(entry_id, update.watched, settings.db_path):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Watchlist entry not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/watchlist/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_watchlist(entry_id: int, settings: Settings = Depends(get_settings)):
    await database.remove_from_watchlist(entry_id, settings.db_path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/recommendations", response_model=list[ContentItem])
async def recommendations(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    seed = await database.get_seed_movie_id(settings.db_path)
    if seed is None:
        listing = await tmdb.get_trending(client, settings.tmdb_api_key, "movie")
    else:
        listing = await tmdb.get_recommendations(client, settings.tmdb_api_key, seed)
    return normalize_results(listing, media_type="movie")


@router.get("/trailer")
async def trailer(
    title: str = "",
    year: str = "",
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not title:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "title is required")
    video_id = await youtube.search_trailer(
        client, settings.youtube_api_key, trailer_query(title, year)
    )
    if video_id is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return {"videoId": video_id}


@router.get("/trending-trailers", response_model=list[TrendingTrailer])
async def trending_trailers(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    listing = await tmdb.get_trending(client, settings.tmdb_api_key, "movie")
    batch = listing.results[: settings.trailer_batch_size]
    semaphore = asyncio.Semaphore(settings.trailer_concurrency)

    async def lookup(raw: TMDBResult) -> Optional[str]:
        query = trailer_query(resolve_title(raw), release_year(resolve_release_date(raw)))
        async with semaphore:
            return await youtube.find_trailer(client, settings.youtube_api_key, query)

    video_ids = await asyncio.gather(*(lookup(raw) for raw in batch))
    return [to_trending_trailer(raw, video_id) for raw, video_id in zip(batch, video_ids)]


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error("Upstream failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": f"{exc.service} request failed"},
    )


async def database_error_handler(request: Request, exc: aiosqlite.Error) -> JSONResponse:
    logger.exception("Database failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "database error"},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Raises ValidationError when an API key is missing."""
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.init_db(settings.db_path)
        async with httpx.AsyncClient(timeout=settings.upstream_timeout) as client:
            app.state.http_client = client
            logger.info("MovieLab started, database at %s", settings.db_path)
            yield

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    app.add_exception_handler(aiosqlite.Error, database_error_handler)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(router)
    return app


if __name__ == "__main__":
    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
