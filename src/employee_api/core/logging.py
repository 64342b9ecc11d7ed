"""Loguru logging configuration.

Console output is human-readable; a JSON sink picks up records logged with
``json_output=True``.  Export job processing binds ``reference_id`` via
``logger.contextualize`` so every line of a job, including those emitted from
worker threads, carries the job it belongs to.  Records outside a job show
``-``.
"""

import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {extra[reference_id]} | {name}:{function}:{line} | {message}"
)
LOG_FILE_NAME = "employee-api.log"


def _json_only(record: dict) -> bool:
    return bool(record["extra"].get("json_output", False))


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Configure Loguru sinks.

    Args:
        log_level: Minimum log level to emit.
        log_dir: Optional directory for ``employee-api.log``, rotated every
            24 hours and retained 7 days.
    """
    level = log_level.upper()
    logger.remove()
    logger.configure(extra={"reference_id": "-"})
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, serialize=False)
    logger.add(sys.stderr, level=level, serialize=True, filter=_json_only)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / LOG_FILE_NAME,
            level=level,
            format=LOG_FORMAT,
            rotation="24h",
            retention="7 days",
        )
