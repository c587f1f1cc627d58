"""String coercion into the supported scalar kinds.

Purpose
-------
Turn raw strings found in the environment, the argument list, or string nodes
of a document into typed values, and validate native document scalars against
the destination kind. The module is pure: no I/O, no logging.

Contents
    - ``coerce``: raw string to typed value, dispatching on :class:`Kind`.
    - ``accept_native``: validate a non-string document scalar.
    - ``parse_duration``: compound unit-suffixed durations (``1h30m``).

Rules
    - integer: optional sign plus ASCII digits, base 10, signed 64-bit range.
    - float: decimal or exponential notation; no underscores or padding.
    - boolean: ``true``/``false``, case-insensitive, nothing else.
    - duration: terms ``<number><unit>`` summed left to right with units
      ``ns``, ``us``/``µs``, ``ms``, ``s``, ``m``, ``h``; ``0`` alone is allowed.
      Values are truncated to microseconds, the resolution of ``timedelta``.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Any, Callable

from ..domain.errors import SettingTypeError, UnsupportedTypeError
from ..domain.values import INT64_MAX, INT64_MIN, Kind

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DURATION_TERM = re.compile(r"([0-9]*)(?:\.([0-9]*))?(ns|us|µs|μs|ms|s|m|h)")
_BOOLEANS = {"true": True, "false": False}

_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}


def coerce(raw: str, kind: Kind) -> Any:
    """Convert *raw* to a value of *kind*.

    Examples
    --------
    >>> coerce("42", Kind.INTEGER), coerce("3.14", Kind.FLOAT), coerce("TRUE", Kind.BOOLEAN)
    (42, 3.14, True)
    >>> coerce("1h30m", Kind.DURATION)
    datetime.timedelta(seconds=5400)
    >>> coerce("forty", Kind.INTEGER)
    Traceback (most recent call last):
    ...
    lib_layered_settings.domain.errors.SettingTypeError: cannot convert 'forty' to integer: not a base-10 integer
    """

    try:
        parser = _PARSERS[kind]
    except (KeyError, TypeError):
        raise UnsupportedTypeError(f"unsupported destination kind {kind!r}") from None
    return parser(raw)


def accept_native(value: Any, kind: Kind) -> Any:
    """Validate a non-string scalar produced by a document parser.

    Strings go through :func:`coerce`; ``int`` widens to ``float``; ``bool``
    never counts as a number; anything else of the wrong kind is a type error.

    Examples
    --------
    >>> accept_native(3, Kind.FLOAT)
    3.0
    >>> accept_native("2m", Kind.DURATION)
    datetime.timedelta(seconds=120)
    """

    if isinstance(value, str):
        return coerce(value, kind)
    if kind is Kind.BOOLEAN and isinstance(value, bool):
        return value
    if not isinstance(value, bool):
        if kind is Kind.INTEGER and isinstance(value, int):
            return _check_range(value, value)
        if kind is Kind.FLOAT and isinstance(value, (int, float)):
            return float(value)
    if not isinstance(kind, Kind):
        raise UnsupportedTypeError(f"unsupported destination kind {kind!r}")
    raise SettingTypeError(kind.value, value, reason=f"document value has type {type(value).__name__}")


def parse_duration(raw: str) -> timedelta:
    """Parse a compound duration such as ``1h30m`` or ``-1.5s``.

    Examples
    --------
    >>> parse_duration("1h1m")
    datetime.timedelta(seconds=3660)
    >>> parse_duration("1.5ms")
    datetime.timedelta(microseconds=1500)
    >>> parse_duration("0")
    datetime.timedelta(0)
    """

    text = raw
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise SettingTypeError(Kind.DURATION.value, raw, reason="empty duration")

    total = 0
    position = 0
    while position < len(text):
        match = _DURATION_TERM.match(text, position)
        if match is None:
            raise SettingTypeError(Kind.DURATION.value, raw, reason="expected <number><unit> terms")
        whole, fraction, unit = match.groups()
        if not whole and not fraction:
            raise SettingTypeError(Kind.DURATION.value, raw, reason="missing number before unit")
        scale = _NANOSECONDS[unit]
        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        position = match.end()

    # The negative side of the nanosecond range is one wider.
    if total > INT64_MAX + (1 if sign < 0 else 0):
        raise SettingTypeError(Kind.DURATION.value, raw, reason="duration out of range")
    return timedelta(microseconds=sign * (total // 1_000))


def _parse_text(raw: str) -> str:
    return raw


def _parse_integer(raw: str) -> int:
    if not _INTEGER.fullmatch(raw):
        raise SettingTypeError(Kind.INTEGER.value, raw, reason="not a base-10 integer")
    return _check_range(int(raw), raw)


def _check_range(value: int, raw: Any) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        raise SettingTypeError(Kind.INTEGER.value, raw, reason="out of 64-bit range")
    return value


def _parse_float(raw: str) -> float:
    if "_" in raw or raw != raw.strip():
        raise SettingTypeError(Kind.FLOAT.value, raw, reason="not a decimal number")
    try:
        return float(raw)
    except ValueError:
        raise SettingTypeError(Kind.FLOAT.value, raw, reason="not a decimal number") from None


def _parse_boolean(raw: str) -> bool:
    try:
        return _BOOLEANS[raw.lower()]
    except KeyError:
        raise SettingTypeError(Kind.BOOLEAN.value, raw, reason="expected true or false") from None


_PARSERS: dict[Kind, Callable[[str], Any]] = {
    Kind.TEXT: _parse_text,
    Kind.INTEGER: _parse_integer,
    Kind.FLOAT: _parse_float,
    Kind.BOOLEAN: _parse_boolean,
    Kind.DURATION: parse_duration,
}
