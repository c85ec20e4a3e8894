"""Loguru setup for the ingest service.

Every record carries the area ``name`` plus ``run_id`` and ``sport`` extras,
so one ingest invocation can be followed across sources in a single log.
ERROR records are also forwarded to Slack when a webhook is configured.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
from loguru import logger

from rankings.core.config import settings

LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[name]}:{function}:{line} "
    "| run={extra[run_id]} sport={extra[sport]} | {message}"
)

DEFAULT_EXTRA = {"name": "rankings", "run_id": "-", "sport": "-"}

LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}
KNOWN_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

# Third-party loggers routed through Loguru instead of their own handlers
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine", "alembic")

_logging_configured = False


class InterceptHandler(logging.Handler):
    """Redirect stdlib logs to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_name == "emit":
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _slack_text(record: Any) -> str:
    extra = record["extra"]
    context = ""
    if extra.get("run_id", "-") != "-":
        context = f" (run {extra['run_id']}, {extra.get('sport', '-')})"
    return (
        f"[{record['level'].name}] rankings-ingest {extra.get('name', 'rankings')}"
        f":{record['function']}{context}\n{record['message']}"
    )


def _slack_sink(message: Any) -> None:
    if not settings.SLACK_WEBHOOK_URL:
        return
    try:
        httpx.post(settings.SLACK_WEBHOOK_URL, json={"text": _slack_text(message.record)}, timeout=5.0)
    except httpx.HTTPError:
        # Logging from inside a sink would recurse
        pass


def _resolve_level() -> str:
    level = (settings.effective_log_level or "INFO").strip().upper()
    level = LEVEL_ALIASES.get(level, level)
    return level if level in KNOWN_LEVELS else "INFO"


def configure_logging() -> None:
    global _logging_configured

    if _logging_configured:
        return
    _logging_configured = True

    level = _resolve_level()

    logger.remove()
    logger.configure(extra=DEFAULT_EXTRA)
    logger.add(sys.stdout, level=level, format=LOG_FORMAT, backtrace=False, diagnose=False)

    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "ingest.log",
            level=level,
            format=LOG_FORMAT,
            rotation="10 MB",
            retention="14 days",
            enqueue=True,
            backtrace=False,
            diagnose=False,
        )

    if settings.SLACK_WEBHOOK_URL:
        logger.add(_slack_sink, level="ERROR", enqueue=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for logger_name in INTERCEPTED_LOGGERS:
        logging.getLogger(logger_name).handlers = [InterceptHandler()]
        logging.getLogger(logger_name).propagate = False


def get_logger(name: str) -> logger.__class__:
    return logger.bind(name=name)


def run_logger(name: str, run_id: Optional[object], sport: str) -> logger.__class__:
    """Logger bound to one ingest invocation."""
    return logger.bind(name=name, run_id=str(run_id) if run_id else "-", sport=sport)


configure_logging()
