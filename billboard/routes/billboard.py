from dataclasses import asdict

from flask import Blueprint, Response, current_app, g, jsonify

from billboard.songs import SongStore

billboard = Blueprint("billboard", __name__)


@billboard.route("/billboard", methods=["GET"])
def list_billboard() -> Response:
    songs: SongStore = current_app.extensions["songs"]
    song_records = songs.list_songs()
    g.logger.debug("Serving {} songs", len(song_records))
    return jsonify([asdict(song) for song in song_records])
