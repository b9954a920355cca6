"""
Logging configuration for the combo builder.

Every log line carries the wizard session it was written for, so the steps
of one combo (open, selections, finish) can be followed in a busy log:

    2026-10-16 18:02:11 - combo_builder.combo.sequencer - INFO - [3f9c...] Combo pizza-pop finished: ...

Lines written outside a wizard request show "-" instead of a session id.

Usage:
    from combo_builder.logging_config import setup_logging
    setup_logging()  # Call once at application startup

    with log_session(adapter.session_id):
        ...  # records logged here carry the session id

Environment variables:
    LOG_LEVEL: Set to DEBUG, INFO, WARNING, ERROR, or CRITICAL (default: INFO)
"""
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional


VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
NO_SESSION = "-"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(combo_session)s] %(message)s"

# Wizard session of the request being handled (per thread / task)
_current_session: ContextVar[str] = ContextVar("combo_session", default=NO_SESSION)


def current_log_session() -> str:
    return _current_session.get()


@contextmanager
def log_session(session_id: Optional[str]) -> Iterator[None]:
    """Tag records logged inside the block with a wizard session id."""
    token = _current_session.set(session_id or NO_SESSION)
    try:
        yield
    finally:
        _current_session.reset(token)


class SessionContextFilter(logging.Filter):
    """Adds `combo_session` to every record passing through a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "combo_session"):
            record.combo_session = _current_session.get()
        return True


def setup_logging(level: str = None) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If not provided, reads from LOG_LEVEL env var, defaults to INFO.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()

    if level not in VALID_LEVELS:
        level = "INFO"

    numeric_level = getattr(logging, level)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(SessionContextFilter())
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
    )

    logging.getLogger("combo_builder").setLevel(numeric_level)

    # Request lines and SQL echo drown out wizard events below DEBUG
    if level != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured at %s level", level)
