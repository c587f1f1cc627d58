"""Setting builder: one destination plus its ordered source lookups.

Purpose
-------
Capture what the caller registered for a single configuration value: where it
lands, which sources to consult in which order, the optional default, and
whether absence is an error. The builder methods chain, and the order of the
chain is the priority order used during resolution.

Contents
--------
* :class:`SourceKind` – the three source families.
* :class:`SourceLookup` – one ``(source, key)`` entry of the source list.
* :class:`Setting` – the fluent builder returned by ``Parser.add``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .values import Destination, check_default

ROOT_MARKER = "$"
_UNSET: Any = object()


class SourceKind(Enum):
    """Source families a setting can consult."""

    DOCUMENT = "document"
    ENV = "env"
    FLAG = "flag"


@dataclass(frozen=True, slots=True)
class SourceLookup:
    """A single entry in a setting's source list."""

    source: SourceKind
    key: str


class Setting:
    """Registered configuration value with its ordered source list.

    Why
    ----
    Resolution is imperative: callers state explicitly which sources feed each
    value and in which order, instead of annotating a schema.

    What
    ----
    Holds the destination, the list of :class:`SourceLookup` entries in chain
    order, the default value, and the required flag. Every builder method
    returns ``self``.

    Examples
    --------
    >>> from lib_layered_settings.domain.values import Kind, Value
    >>> setting = Setting(Value(Kind.INTEGER)).yaml("server.port").env("PORT").default(8080)
    >>> [(lookup.source.value, lookup.key) for lookup in setting.sources]
    [('document', '$.server.port'), ('env', 'PORT')]
    >>> setting.default_value
    8080
    """

    __slots__ = ("destination", "sources", "is_required", "_default")

    def __init__(self, destination: Destination | None) -> None:
        self.destination = destination
        self.sources: list[SourceLookup] = []
        self.is_required = False
        self._default: Any = _UNSET

    def yaml(self, path: str) -> Setting:
        """Append a document-path source; ``$.`` is prepended when *path* lacks the root marker."""

        if not path.startswith(ROOT_MARKER):
            path = f"{ROOT_MARKER}.{path}"
        return self._append(SourceKind.DOCUMENT, path)

    def env(self, name: str) -> Setting:
        """Append an environment-variable source; the session prefix is added at lookup time."""

        return self._append(SourceKind.ENV, name)

    def flag(self, name: str) -> Setting:
        """Append a long-flag source (``--name=value`` or ``--name value``)."""

        return self._append(SourceKind.FLAG, name.lstrip("-"))

    def required(self, is_required: bool = True) -> Setting:
        self.is_required = is_required
        return self

    def default(self, value: Any) -> Setting:
        """Set the fallback used when no source matches.

        The value kind is checked against the destination right away, so a
        mismatch raises here instead of during resolution.
        """

        if self.destination is not None:
            value = check_default(getattr(self.destination, "kind", None), value)
        self._default = value
        return self

    @property
    def has_default(self) -> bool:
        return self._default is not _UNSET

    @property
    def default_value(self) -> Any:
        return None if self._default is _UNSET else self._default

    def _append(self, source: SourceKind, key: str) -> Setting:
        self.sources.append(SourceLookup(source, key))
        return self

    def __repr__(self) -> str:
        chain = ", ".join(f"{lookup.source.value}:{lookup.key}" for lookup in self.sources)
        return f"Setting({self.destination!r}, [{chain}])"
