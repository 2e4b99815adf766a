from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from config import Settings


@pytest.fixture
def tmp_db(tmp_path) -> Path:
    """Returns path to a temporary SQLite database file."""
    return tmp_path / "test.db"


@pytest.fixture
def settings(tmp_db) -> Settings:
    return Settings(
        tmdb_api_key="tmdb-key",
        omdb_api_key="omdb-key",
        youtube_api_key="youtube-key",
        db_path=tmp_db,
        _env_file=None,
    )


@pytest.fixture
def client(settings):
    from main import create_app

    with TestClient(create_app(settings)) as test_client:
        yield test_client
