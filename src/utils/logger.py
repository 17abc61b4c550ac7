"""
src/utils/logger.py
Named loggers for the stats service: Rich console + optional rotating file.
"""
import logging
import os
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler

_loggers: dict[str, logging.Logger] = {}

LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _file_logging_enabled() -> bool:
    return os.getenv("LOG_TO_FILE", "1").lower() not in ("0", "false", "no")


def get_logger(name: str = "lotostats") -> logging.Logger:
    """
    Return the cached logger for `name` ("stats.anomaly", "pipeline.evaluator", ...).
    Level comes from LOG_LEVEL; set LOG_TO_FILE=0 to keep output on the console only.
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))

    if not logger.handlers:
        console = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
        console.setLevel(logging.DEBUG)
        logger.addHandler(console)

        if _file_logging_enabled():
            os.makedirs(LOG_DIR, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(LOG_DIR, f"{name}.log"),
                maxBytes=5 * 1024 * 1024,  # 5 MB
                backupCount=3,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(file_handler)

    _loggers[name] = logger
    return logger
