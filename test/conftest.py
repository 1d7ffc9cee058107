from collections.abc import Generator
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient
from pytest_socket import disable_socket
from requests_mock import Mocker, adapter

from billboard.app import create_app
from billboard.database import KeyValueStore
from billboard.refresh import RefreshPipeline
from billboard.songs import SongStore
from billboard.source import SourceClient

FAKE_SOURCE_URL = "http://fake-source"


def pytest_runtest_setup() -> None:
    disable_socket()


@pytest.fixture(autouse=True)
def set_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOG_FILE", "/dev/null")  # DEBUG logs still written to stdout
    monkeypatch.setenv("SOURCE_API_URL", FAKE_SOURCE_URL)
    monkeypatch.setenv("SONG_DB_FILE", str(tmp_path / "songs.db"))
    # Config is cached per process, drop it so each test sees its own env
    monkeypatch.setattr("billboard.config._config", None)


@pytest.fixture
def source_url() -> str:
    return FAKE_SOURCE_URL


@pytest.fixture
def kv_store(tmp_path: Path) -> Generator[KeyValueStore, None, None]:
    store = KeyValueStore(str(tmp_path / "songs.db"))
    yield store
    store.close()


@pytest.fixture
def song_store(kv_store: KeyValueStore) -> SongStore:
    return SongStore(kv_store)


@pytest.fixture
def source_client() -> SourceClient:
    return SourceClient(FAKE_SOURCE_URL, timeout=5)


@pytest.fixture
def pipeline(source_client: SourceClient, song_store: SongStore) -> RefreshPipeline:
    return RefreshPipeline(source_client, song_store, max_workers=4)


@pytest.fixture
def app(song_store: SongStore) -> Flask:
    flask_app = create_app(song_store)
    flask_app.config.update({"TESTING": True})  # pyright: ignore[reportUnknownMemberType]
    return flask_app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


def top_song(i: int) -> dict[str, str]:
    return {"name": f"song-{i}", "artist": f"#{i} this week\n  artist-{i}  \n"}


@pytest.fixture
def mock_top_songs(requests_mock: Mocker) -> adapter._Matcher:
    return requests_mock.get(
        f"{FAKE_SOURCE_URL}/getTopSongs",
        json=[top_song(i) for i in range(3)],
    )


@pytest.fixture
def mock_downloads(requests_mock: Mocker) -> list[adapter._Matcher]:
    return [
        requests_mock.get(
            f"{FAKE_SOURCE_URL}/v2/download/song-{i}artist-{i}",
            json={"success": True, "url": f"https://fake-bucket/song-{i}.mp3"},
        )
        for i in range(3)
    ]
