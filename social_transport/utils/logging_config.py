"""
Central logging configuration.

Log directory layout::

    logs/
    ├── app.log       application log, size rotated
    ├── error.log     ERROR and above only
    └── access.log    one line per HTTP request, rotated at midnight
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path(__file__).resolve().parents[2] / "logs"
LOG_DIR = Path(os.getenv("SOCIAL_TRANSPORT_LOG_DIR", DEFAULT_LOG_DIR))

ACCESS_LOGGER_NAME = "social_transport.access"

FILE_FORMAT = (
    "%(asctime)s | PID:%(process)d | %(threadName)s | %(levelname)-8s | "
    "%(name)s | [%(filename)s:%(lineno)d:%(funcName)s] | %(message)s"
)
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# third-party loggers that are too chatty at INFO
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def _rotating_file(path: Path, level: int, max_mb: int, backups: int) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=max_mb * 1024 * 1024, backupCount=backups, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
    return handler


def _reset_handlers(target: logging.Logger) -> None:
    for handler in target.handlers[:]:
        target.removeHandler(handler)
        handler.close()


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    enable_console: bool = True,
    enable_file: bool = True,
) -> None:
    """Configure the root logger. Safe to call again; old handlers are replaced."""
    log_directory = Path(log_dir or LOG_DIR)
    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    _reset_handlers(root)
    root.setLevel(level)

    if enable_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
        root.addHandler(console)
    if enable_file:
        log_directory.mkdir(parents=True, exist_ok=True)
        root.addHandler(_rotating_file(log_directory / "app.log", level, max_mb=20, backups=10))
        root.addHandler(_rotating_file(log_directory / "error.log", logging.ERROR, max_mb=10, backups=5))

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger(__name__).info(f"Logging initialized: dir={log_directory}, level={log_level}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def setup_access_logging(log_dir: Optional[Path] = None, enable_file: bool = True) -> logging.Logger:
    """Access log kept apart from the application log (does not propagate to root)."""
    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)
    access_logger.setLevel(logging.INFO)
    access_logger.propagate = False
    _reset_handlers(access_logger)

    if not enable_file:
        access_logger.addHandler(logging.NullHandler())
        return access_logger

    log_directory = Path(log_dir or LOG_DIR)
    log_directory.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        log_directory / "access.log",
        when="midnight",
        backupCount=30,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s | %(message)s", DATE_FORMAT))
    access_logger.addHandler(handler)
    return access_logger
