"""Logging for resolution passes: one package logger and flat event payloads.

Every event names the source that was consulted (``document``, ``env``,
``flag``, ``default``) and the lookup key. Looked-up values are not event
fields: environment variables and flags routinely hold tokens and passwords,
so :func:`make_event` drops any ``value`` or ``raw`` field handed to it. Error
messages of failed conversions still quote the offending text.

The logger ships with a :class:`logging.NullHandler`; a host application that
wants the events attaches its own handler to :func:`get_logger`. Each record
carries its fields under ``record.context`` together with the trace identifier
bound through :func:`bind_trace_id`, which lets a service tie the settings read
during start-up to the request or job that triggered them.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_layered_settings_trace_id", default=None)
"""Trace identifier attached to every event emitted in the current context."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_layered_settings")
_LOGGER.addHandler(logging.NullHandler())

_REDACTED_FIELDS: Final[frozenset[str]] = frozenset({"value", "raw"})


def get_logger() -> logging.Logger:
    """Return the ``lib_layered_settings`` logger for handler configuration."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Tag subsequent events in this context with *trace_id*; ``None`` removes the tag.

    Examples
    --------
    >>> bind_trace_id('abc123')
    >>> TRACE_ID.get()
    'abc123'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    _emit(logging.ERROR, message, fields)


def make_event(
    source: str | None,
    key: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the keyword fields for one of the ``log_*`` helpers.

    *source* is ``None`` for events about the pass or the setting as a whole.
    Payload entries named ``value`` or ``raw`` are left out.

    Examples
    --------
    >>> make_event('env', 'APP_PORT', {'kind': 'integer'})
    {'source': 'env', 'key': 'APP_PORT', 'kind': 'integer'}
    >>> make_event('flag', 'token', {'raw': 's3cret', 'kind': 'text'})
    {'source': 'flag', 'key': 'token', 'kind': 'text'}
    """

    event: dict[str, Any] = {"source": source, "key": key}
    if payload:
        event.update((name, item) for name, item in payload.items() if name not in _REDACTED_FIELDS)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    if not _LOGGER.isEnabledFor(level):
        return
    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    _LOGGER.log(level, message, extra={"context": context})
