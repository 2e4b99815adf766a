from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    tmdb_api_key: str
    omdb_api_key: str
    youtube_api_key: str
    db_path: Path = Path("data/movielab.db")
    upstream_timeout: float = 30.0
    trailer_batch_size: int = 4
    trailer_concurrency: int = 4
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )
