import json
from dataclasses import asdict

from loguru import logger

from billboard.database import KeyValueStore
from billboard.errors import DecodeError
from billboard.models import SongRecord

SONG_BUCKET = "songs"


def encode_song(song: SongRecord) -> bytes:
    return json.dumps(asdict(song)).encode("utf8")


def decode_song(value: bytes) -> SongRecord:
    try:
        raw_song = json.loads(value)
        fields = {field: raw_song[field] for field in ("name", "artist", "url")}
    except (ValueError, KeyError, TypeError) as error:
        raise DecodeError(f"Malformed song record: {value!r}") from error

    if not all(isinstance(field, str) for field in fields.values()):
        raise DecodeError(f"Malformed song record: {value!r}")
    return SongRecord(**fields)


class SongStore:
    def __init__(self, store: KeyValueStore, bucket: str = SONG_BUCKET) -> None:
        self._store = store
        self._bucket = bucket
        self._store.create_bucket_if_not_exists(bucket)

    def reset(self) -> None:
        self._store.reset_bucket(self._bucket)

    def save(self, song: SongRecord) -> None:
        logger.debug("Saving the song in db {}", song.name)
        self._store.put(self._bucket, song.name.encode("utf8"), encode_song(song))

    def list_songs(self) -> list[SongRecord]:
        songs = []
        for key, value in self._store.items(self._bucket):
            try:
                songs.append(decode_song(value))
            except DecodeError:
                logger.exception("Error decoding db value for key {!r}", key)
        return songs
