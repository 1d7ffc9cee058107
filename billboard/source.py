from typing import Any
from urllib.parse import quote

import requests
from loguru import logger
from requests import RequestException

from billboard.errors import (
    DecodeError,
    MalformedArtistFieldError,
    SourceUnavailableError,
)
from billboard.models import ResolveResult, TrendingEntry


def clean_artist(artist: str) -> str:
    """Pull the artist out of the chart API's multi-line artist blob.

    The chart API sends something like ``"Header\\n  Artist Name  \\n"``, the
    artist is always the second line.
    """
    lines = artist.split("\n")
    if len(lines) < 2:  # noqa: PLR2004
        raise MalformedArtistFieldError(artist)
    return lines[1].strip()


class SourceClient:
    def __init__(self, base_url: str, timeout: float = 30) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _get_json(self, url: str) -> Any:  # noqa: ANN401
        try:
            response = requests.get(url, timeout=self._timeout)
            response.raise_for_status()
        except RequestException as error:
            logger.warning("Request to {} failed: {}", url, error)
            raise SourceUnavailableError(url) from error

        try:
            return response.json()
        except requests.JSONDecodeError as error:
            logger.warning("Response from {} is not JSON: {!r}", url, response.text)
            raise DecodeError(f"Malformed JSON from {url}") from error

    def fetch_trending(self) -> list[TrendingEntry]:
        logger.info("Retrieving top billboard songs")
        url = f"{self._base_url}/getTopSongs"
        body = self._get_json(url)

        if not isinstance(body, list):
            raise DecodeError(f"Expected a list of songs from {url}")

        entries = []
        for item in body:
            if not (
                isinstance(item, dict)
                and isinstance(item.get("name"), str)
                and isinstance(item.get("artist"), str)
            ):
                raise DecodeError(f"Unexpected song from {url}: {item!r}")
            entries.append(TrendingEntry(name=item["name"], artist=item["artist"]))

        logger.debug("  {} top songs retrieved", len(entries))
        return entries

    def resolve(self, name: str, artist: str) -> ResolveResult:
        """Resolve a song to a downloadable URL.

        ``artist`` must already be cleaned. Check ``success`` on the result
        before using ``url``.
        """
        logger.info("Initiate search and download for {}", name)
        try:
            query = quote(name + artist, safe="")
        except UnicodeEncodeError as error:
            raise DecodeError(f"Can't encode download query for {name!r}") from error

        url = f"{self._base_url}/v2/download/{query}"
        body = self._get_json(url)

        if not isinstance(body, dict):
            raise DecodeError(f"Expected an object from {url}")

        if body.get("success") is not True:
            return ResolveResult(success=False, url=str(body.get("url") or ""))

        song_url = body.get("url")
        if not isinstance(song_url, str) or not song_url:
            raise DecodeError(f"Successful download for {name!r} has no url")

        return ResolveResult(success=True, url=song_url)
