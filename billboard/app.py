from uuid import uuid4

import flask
import sentry_sdk
from flask import Flask, g
from loguru import logger
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound

from billboard.config import get_config
from billboard.error_handlers import (
    handle_404_not_found,
    handle_generic_errors,
    handle_http_exception,
    handle_method_not_allowed,
    handle_store_unavailable,
)
from billboard.errors import StoreUnavailableError
from billboard.logsetup import add_file_sink, setup_logger
from billboard.songs import SongStore

setup_logger()


def create_app(songs: SongStore) -> Flask:
    config = get_config()  # Loads environment variables
    add_file_sink(config.log_file)

    sentry_sdk.init(
        sample_rate=0.5,
        traces_sample_rate=0.1,
        profiles_sample_rate=0.1,
    )

    flask_app = flask.Flask(__name__)
    flask_app.extensions["songs"] = songs

    @flask_app.before_request
    def before_request() -> None:
        g.logger = logger.bind(request_id=str(uuid4())[24:])

    from billboard.routes.billboard import billboard

    flask_app.register_blueprint(billboard)

    flask_app.register_error_handler(StoreUnavailableError, handle_store_unavailable)
    flask_app.register_error_handler(NotFound, handle_404_not_found)
    flask_app.register_error_handler(MethodNotAllowed, handle_method_not_allowed)
    flask_app.register_error_handler(HTTPException, handle_http_exception)
    flask_app.register_error_handler(Exception, handle_generic_errors)

    return flask_app
