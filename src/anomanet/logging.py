"""Logging utilities.

Every record carries the player, the action being served and, inside a case
workflow, the case id. Unbound fields render as `-`.
"""

from __future__ import annotations

import contextlib
import contextvars
import logging
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from rich.logging import RichHandler

CONTEXT_FIELDS = ("user_id", "action", "case_id")

_EMPTY: Mapping[str, str] = MappingProxyType({})
_log_context: contextvars.ContextVar[Mapping[str, str]] = contextvars.ContextVar(
    "anomanet_log_context", default=_EMPTY
)


class _ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        bound = _log_context.get()
        for name in CONTEXT_FIELDS:
            setattr(record, name, bound.get(name, "-"))
        return True


def current_context() -> Mapping[str, str]:
    """The fields bound for the running task."""

    return _log_context.get()


@contextlib.contextmanager
def request_context(**fields: str | None) -> Iterator[None]:
    """Bind log fields for the duration of the block.

    Fields given as None keep whatever an outer block bound, so a case workflow can
    add `case_id` without repeating the player.

    Args:
        **fields: Any of `user_id`, `action`, `case_id`.
    """

    unknown = set(fields) - set(CONTEXT_FIELDS)
    if unknown:
        raise TypeError(f"Unknown log context fields: {sorted(unknown)}")

    merged = {**_log_context.get(), **{k: v for k, v in fields.items() if v is not None}}
    token = _log_context.set(MappingProxyType(merged))
    try:
        yield
    finally:
        _log_context.reset(token)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s user=%(user_id)s action=%(action)s case=%(case_id)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root = logging.getLogger()
    root.setLevel(level)
    handlers = [h for h in root.handlers if isinstance(h, RichHandler)]
    if not handlers:
        handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
        root.addHandler(handler)
        handlers = [handler]

    # configure_logging runs once per app; keep a single context filter per handler
    for handler in handlers:
        if not any(isinstance(f, _ContextFilter) for f in handler.filters):
            handler.addFilter(_ContextFilter())
        handler.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log an exception with the bound context plus any extra fields."""

    extra = {**current_context(), **context}
    if extra:
        logger.exception("%s | context=%s", msg, extra)
    else:
        logger.exception("%s", msg)
