"""Command-line flag adapter.

Purpose
-------
Find the value of a long flag in a raw argument list. Only the engine's needs
are covered: long flags, each consuming exactly one value token.

Syntax
    - ``--name=value`` and ``--name value`` are equivalent.
    - The last occurrence of a flag wins.
    - Scanning stops at ``--`` or at the first positional token.
    - ``-x``, ``--=value``, ``---x`` and a trailing ``--name`` without a value
      are malformed and raise :class:`InvalidArguments`.
    - An absent flag or an empty value counts as not found.
"""

from __future__ import annotations

from typing import Iterator, Sequence

from ...application.coercion import coerce
from ...application.ports import Found
from ...domain.errors import InvalidArguments, SettingTypeError
from ...domain.setting import SourceKind
from ...domain.values import Kind
from ...observability import log_debug, make_event

TERMINATOR = "--"


class FlagSource:
    """Look up ``--name`` values in an argument list."""

    source = SourceKind.FLAG

    def __init__(self, args: Sequence[str] | None = None) -> None:
        self._args = list(args or [])

    def lookup(self, key: str, kind: Kind) -> Found | None:
        """Return the coerced value of ``--key`` or ``None`` when absent or empty.

        Examples
        --------
        >>> flags = FlagSource(["--port", "8080", "--debug=true"])
        >>> flags.lookup("port", Kind.INTEGER).value
        8080
        >>> flags.lookup("debug", Kind.BOOLEAN).value
        True
        >>> flags.lookup("host", Kind.TEXT) is None
        True
        """

        raw = find_flag(self._args, key)
        if not raw:
            log_debug("flag_missing", **make_event("flag", key))
            return None
        try:
            value = coerce(raw, kind)
        except SettingTypeError as exc:
            raise exc.with_source("flag", key) from exc
        return Found(value, self.source, key)


def find_flag(args: Sequence[str], name: str) -> str | None:
    """Return the last value given for ``--name`` or ``None``.

    Examples
    --------
    >>> find_flag(["--level=1", "--level", "2"], "level")
    '2'
    >>> find_flag(["--level", "1", "run", "--level", "2"], "level")
    '1'
    >>> find_flag(["-v"], "level")
    Traceback (most recent call last):
    ...
    lib_layered_settings.domain.errors.InvalidArguments: flag: bad flag syntax: '-v'
    """

    found: str | None = None
    for flag, value in iter_flags(args):
        if flag == name:
            found = value
    return found


def iter_flags(args: Sequence[str]) -> Iterator[tuple[str, str]]:
    """Yield ``(name, value)`` pairs in argument order, validating the syntax."""

    index = 0
    while index < len(args):
        token = args[index]
        if token == TERMINATOR:
            return
        if not token.startswith("-") or token == "-":
            return
        if not token.startswith("--") or token.startswith("---"):
            raise InvalidArguments(f"bad flag syntax: {token!r}")
        body = token[2:]
        name, sep, value = body.partition("=")
        if not name:
            raise InvalidArguments(f"bad flag syntax: {token!r}")
        if not sep:
            if index + 1 >= len(args):
                raise InvalidArguments(f"flag needs an argument: {token}")
            index += 1
            value = args[index]
        yield name, value
        index += 1
