from http import HTTPStatus
from uuid import uuid4

from flask import Response, jsonify, request
from loguru import logger
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound

from billboard.errors import StoreUnavailableError


def _error_response(
    message: str, error_code: str, status: HTTPStatus
) -> tuple[Response, int]:
    return jsonify({"error": message, "error_code": error_code}), status


def handle_generic_errors(error: Exception) -> tuple[Response, int]:
    error_code = str(uuid4())[24:]
    try:
        error.add_note(f"Error code: {error_code}")
        logger.exception(error)
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected exception while handling generic error")
    finally:
        return _error_response(  # noqa: B012
            "Internal server error", error_code, HTTPStatus.INTERNAL_SERVER_ERROR
        )


def handle_store_unavailable(error: StoreUnavailableError) -> tuple[Response, int]:
    error_code = str(uuid4())[24:]
    try:
        error.add_note(f"Error code: {error_code}")
        logger.exception(error)
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected exception while handling store error")
    finally:
        return _error_response(  # noqa: B012
            "Song store unavailable", error_code, HTTPStatus.SERVICE_UNAVAILABLE
        )


def handle_404_not_found(_: NotFound) -> tuple[Response, int]:
    error_code = str(uuid4())[24:]
    logger.debug("Unknown page requested: {}", request.path)
    return _error_response("Not found", error_code, HTTPStatus.NOT_FOUND)


def handle_method_not_allowed(_: MethodNotAllowed) -> tuple[Response, int]:
    error_code = str(uuid4())[24:]
    logger.debug("{} not allowed on {}", request.method, request.path)
    return _error_response(
        "Method not allowed", error_code, HTTPStatus.METHOD_NOT_ALLOWED
    )


def handle_http_exception(error: HTTPException) -> tuple[Response, int]:
    error_code = str(uuid4())[24:]
    logger.debug("{} on {}: {}", error.code, request.path, error.description)
    status = HTTPStatus(error.code or HTTPStatus.INTERNAL_SERVER_ERROR)
    return _error_response(error.name, error_code, status)
