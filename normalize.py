from typing import Optional

from models import ContentItem, MediaType, TMDBListing, TMDBResult, TrendingTrailer


def resolve_title(raw: TMDBResult) -> str:
    return raw.title or raw.name or ""


def resolve_release_date(raw: TMDBResult) -> str:
    return raw.release_date or raw.first_air_date or ""


def resolve_media_type(raw: TMDBResult) -> MediaType:
    return "tv" if raw.media_type == "tv" else "movie"


def normalize_result(raw: TMDBResult, media_type: Optional[MediaType] = None) -> ContentItem:
    """Map one TMDB listing record to a ContentItem.

    ``media_type`` is passed by single-type endpoints and overrides the
    per-item ``media_type`` field.
    """
    return ContentItem(
        id=raw.id,
        title=resolve_title(raw),
        overview=raw.overview or "",
        poster_path=raw.poster_path or "",
        release_date=resolve_release_date(raw),
        rating=raw.vote_average or 0.0,
        type=media_type or resolve_media_type(raw),
    )


def normalize_results(
    listing: TMDBListing, media_type: Optional[MediaType] = None
) -> list[ContentItem]:
    return [normalize_result(raw, media_type) for raw in listing.results]


def release_year(date: Optional[str]) -> str:
    """Four-character year prefix of a date string, or "" if it is too short."""
    if not date or len(date) < 4:
        return ""
    return date[:4]


def trailer_query(title: str, year: str = "") -> str:
    return " ".join(part for part in (title, year, "official trailer") if part)


def to_trending_trailer(raw: TMDBResult, video_id: Optional[str]) -> TrendingTrailer:
    return TrendingTrailer(
        title=resolve_title(raw),
        poster_path=raw.poster_path or "",
        videoId=video_id or "",
        release_date=resolve_release_date(raw),
        overview=raw.overview or "",
    )
