import inspect
import logging
import sys

from loguru import logger


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists.
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message.
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logger() -> None:
    # https://loguru.readthedocs.io/en/stable/api/logger.html#record
    logger.remove()
    logger.configure(extra={"request_id": "-"})
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.add(
        sys.stdout,
        colorize=True,
        format="<level>{level: <8}</level> "
        "| <light-blue>{extra[request_id]}</light-blue> "
        "| <light-green>{thread.name}</light-green> "
        "| <yellow>{name}:{line}</yellow> "
        "| <level>{message}</level>",
    )

    requests_logger = logging.getLogger("requests.packages.urllib3")
    requests_logger.setLevel(logging.DEBUG)
    requests_logger.propagate = True

    sqlalchemy_logger = logging.getLogger("sqlalchemy.engine")
    sqlalchemy_logger.setLevel(logging.INFO)
    sqlalchemy_logger.propagate = True


def add_file_sink(log_file: str) -> None:
    logger.add(
        log_file,
        level=logging.INFO,
        colorize=False,
        rotation="500 MB",
        retention=10,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} "
        "| {extra[request_id]} | {thread.name} "
        "| {level: <8} | {name}:{line} | {message}",
    )
