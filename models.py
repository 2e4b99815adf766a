from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MediaType = Literal["movie", "tv"]


class ContentItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    overview: str = ""
    poster_path: str = ""
    release_date: str = ""
    rating: float = 0.0
    genre: str = ""
    type: MediaType = "movie"


class SearchPage(BaseModel):
    results: list[ContentItem] = Field(default_factory=list)
    total_pages: int = 0
    page: int = 1


class TrendingTrailer(BaseModel):
    title: str
    poster_path: str = ""
    videoId: str = ""
    release_date: str = ""
    overview: str = ""


class WatchlistEntry(BaseModel):
    id: int
    movie_id: int
    title: str
    watched: bool = False
    added_at: str  # ISO timestamp string
    poster_path: str = ""


class WatchlistCreate(BaseModel):
    movie_id: int
    title: str
    poster_path: Optional[str] = ""

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be empty")
        return value


class WatchedUpdate(BaseModel):
    watched: bool


# Upstream payloads. Only the fields we read are typed; everything else is
# kept so detail payloads pass through untouched.


class TMDBResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    title: Optional[str] = None
    name: Optional[str] = None
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    first_air_date: Optional[str] = None
    vote_average: Optional[float] = None
    media_type: Optional[str] = None


class TMDBListing(BaseModel):
    model_config = ConfigDict(extra="allow")

    results: list[TMDBResult] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 0


class Genre(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str


class CastMember(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    character: Optional[str] = None


class Credits(BaseModel):
    model_config = ConfigDict(extra="allow")

    cast: list[CastMember] = Field(default_factory=list)


class Rating(BaseModel):
    model_config = ConfigDict(extra="allow")

    Source: str
    Value: str


class SecondaryRatings(BaseModel):
    model_config = ConfigDict(extra="allow")

    Title: Optional[str] = None
    Year: Optional[str] = None
    imdbRating: Optional[str] = None
    Ratings: list[Rating] = Field(default_factory=list)


class MovieDetail(BaseModel):
    """TMDB movie detail, optionally merged with OMDb ratings.

    Serialize with ``exclude_unset=True`` so that only keys present upstream
    (plus ``secondaryRatings`` when attached) appear in the response.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int
    title: Optional[str] = None
    release_date: Optional[str] = None
    genres: list[Genre] = Field(default_factory=list)
    credits: Optional[Credits] = None
    secondary_ratings: Optional[SecondaryRatings] = Field(
        default=None, alias="secondaryRatings"
    )


class YouTubeVideoId(BaseModel):
    videoId: str


class YouTubeItem(BaseModel):
    id: YouTubeVideoId


class YouTubeSearch(BaseModel):
    items: list[YouTubeItem] = Field(default_factory=list)
