"""Structured logging helpers with editor-session correlation context."""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

_SESSION_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "session_id", default="-"
)
_PHASE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "phase", default="-"
)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | session=%(session_id)s | phase=%(phase)s | "
    "%(name)s | %(message)s"
)


class _SessionContextFilter(logging.Filter):
    """Inject session and phase fields into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _SESSION_ID_VAR.get("-")
        record.phase = _PHASE_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if not any(isinstance(f, _SessionContextFilter) for f in handler.filters):
            handler.addFilter(_SessionContextFilter())


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Configure root logging format with session/phase context."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    _ensure_filter_on_root_handlers()


def set_session_id(session_id: str | None = None) -> str:
    """Set or generate the editor session ID."""
    value = session_id or uuid.uuid4().hex[:12]
    _SESSION_ID_VAR.set(value)
    return value


def get_session_id() -> str:
    """Get the current editor session ID."""
    return _SESSION_ID_VAR.get("-")


def get_phase() -> str:
    """Get the phase currently tagged on log records."""
    return _PHASE_VAR.get("-")


@contextmanager
def phase_scope(phase: str) -> Iterator[None]:
    """Tag log records emitted inside the block with ``phase``."""
    token = _PHASE_VAR.set(phase)
    try:
        yield
    finally:
        _PHASE_VAR.reset(token)
