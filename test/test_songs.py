import json

import pytest

from billboard.database import KeyValueStore
from billboard.errors import DecodeError
from billboard.models import SongRecord
from billboard.songs import SONG_BUCKET, SongStore, decode_song, encode_song


def test_save_and_list(song_store: SongStore) -> None:
    song = SongRecord(name="X", artist="Y", url="http://z")
    song_store.save(song)

    assert song_store.list_songs() == [song]


def test_stored_format(song_store: SongStore, kv_store: KeyValueStore) -> None:
    song_store.save(SongRecord(name="Song A", artist="Artist A", url="http://a"))

    [(key, value)] = kv_store.items(SONG_BUCKET)
    assert key == b"Song A"
    assert json.loads(value) == {
        "name": "Song A",
        "artist": "Artist A",
        "url": "http://a",
    }


def test_save_same_name_overwrites(song_store: SongStore) -> None:
    song_store.save(SongRecord(name="X", artist="Y", url="http://old"))
    song_store.save(SongRecord(name="X", artist="Y", url="http://new"))

    assert song_store.list_songs() == [SongRecord(name="X", artist="Y", url="http://new")]


def test_list_empty(song_store: SongStore) -> None:
    assert song_store.list_songs() == []


def test_list_skips_undecodable(song_store: SongStore, kv_store: KeyValueStore) -> None:
    song_store.save(SongRecord(name="a", artist="Artist A", url="http://a"))
    kv_store.put(SONG_BUCKET, b"b", b"{not json")
    kv_store.put(SONG_BUCKET, b"c", b'{"name": "c"}')
    song_store.save(SongRecord(name="d", artist="Artist D", url="http://d"))

    assert [song.name for song in song_store.list_songs()] == ["a", "d"]


def test_reset(song_store: SongStore) -> None:
    song_store.save(SongRecord(name="X", artist="Y", url="http://z"))
    song_store.reset()

    assert song_store.list_songs() == []


def test_unicode_names(song_store: SongStore) -> None:
    song = SongRecord(name="Despacito (ft. Bieber) ñ", artist="Luis Fonsi", url="u")
    song_store.save(song)

    assert song_store.list_songs() == [song]


def test_decode_song_round_trip() -> None:
    song = SongRecord(name="X", artist="Y", url="http://z")
    assert decode_song(encode_song(song)) == song


@pytest.mark.parametrize(
    "value",
    [
        b"",
        b"[]",
        b'"X"',
        b"\xff\xfe",
        b'{"url": "u"}',
        b'{"name": 1, "artist": null, "url": []}',
        b'{"name": "X", "artist": "Y", "url": 7}',
    ],
)
def test_decode_song_malformed(value: bytes) -> None:
    with pytest.raises(DecodeError):
        decode_song(value)
