import calendar
import os
from datetime import time

from loguru import logger

DEFAULT_SOURCE_API_URL = "http://torpedo.servegame.com:3000"
WEEKDAYS = {name.lower(): number for number, name in enumerate(calendar.day_name)}


class InvalidEnvironmentVariableError(Exception):
    def __init__(self, variable_name: str, value: str) -> None:
        super().__init__(f"Invalid {variable_name} environment variable: {value!r}")


def _positive_number(variable_name: str, default: str, cast: type) -> float | int:
    raw_value = os.environ.get(variable_name, default)
    try:
        value = cast(raw_value)
    except ValueError as error:
        raise InvalidEnvironmentVariableError(variable_name, raw_value) from error
    if value <= 0:
        raise InvalidEnvironmentVariableError(variable_name, raw_value)
    return value


class Config:
    def __init__(self) -> None:
        self._log_file: str = os.environ.get("LOG_FILE", "/opt/billboard/billboard.log")
        logger.debug("logfile={}", self._log_file)

        self._source_api_url: str = os.environ.get(
            "SOURCE_API_URL", DEFAULT_SOURCE_API_URL
        ).rstrip("/")
        logger.debug("source_api_url={}", self._source_api_url)

        self._song_db_file: str = os.environ.get("SONG_DB_FILE", "songs.db")
        logger.debug("song_db_file={}", self._song_db_file)

        self._store_timeout: float = _positive_number(
            "STORE_TIMEOUT_SECONDS", "1", float
        )
        self._http_timeout: float = _positive_number(
            "HTTP_TIMEOUT_SECONDS", "30", float
        )
        logger.debug(
            "store_timeout={} http_timeout={}", self._store_timeout, self._http_timeout
        )

        self._port: int = _positive_number("FLASK_SERVER_PORT", "8000", int)
        logger.debug("port={}", self._port)

        weekday_name = os.environ.get("REFRESH_WEEKDAY", "wednesday")
        if weekday_name.lower() not in WEEKDAYS:
            raise InvalidEnvironmentVariableError("REFRESH_WEEKDAY", weekday_name)
        self._refresh_weekday: int = WEEKDAYS[weekday_name.lower()]

        refresh_time = os.environ.get("REFRESH_TIME", "00:00")
        try:
            self._refresh_time: time = time.fromisoformat(refresh_time)
        except ValueError as error:
            raise InvalidEnvironmentVariableError(
                "REFRESH_TIME", refresh_time
            ) from error
        # Schedule runs on naive local time
        if self._refresh_time.tzinfo is not None:
            raise InvalidEnvironmentVariableError("REFRESH_TIME", refresh_time)

        self._refresh_interval_weeks: int = _positive_number(
            "REFRESH_INTERVAL_WEEKS", "1", int
        )
        logger.debug(
            "refresh every {} week(s) on {} at {}",
            self._refresh_interval_weeks,
            weekday_name,
            self._refresh_time,
        )

        self._refresh_workers: int = _positive_number("REFRESH_WORKERS", "8", int)
        logger.debug("refresh_workers={}", self._refresh_workers)

    @property
    def log_file(self) -> str:
        return self._log_file

    @property
    def source_api_url(self) -> str:
        return self._source_api_url

    @property
    def song_db_file(self) -> str:
        return self._song_db_file

    @property
    def store_timeout(self) -> float:
        return self._store_timeout

    @property
    def http_timeout(self) -> float:
        return self._http_timeout

    @property
    def port(self) -> int:
        return self._port

    @property
    def refresh_weekday(self) -> int:
        return self._refresh_weekday

    @property
    def refresh_time(self) -> time:
        return self._refresh_time

    @property
    def refresh_interval_weeks(self) -> int:
        return self._refresh_interval_weeks

    @property
    def refresh_workers(self) -> int:
        return self._refresh_workers


_config: Config | None = None


def get_config() -> Config:
    global _config  # noqa: PLW0603
    if not _config:
        _config = Config()
    return _config
