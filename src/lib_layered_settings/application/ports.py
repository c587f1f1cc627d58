"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contract every source adapter satisfies so the
resolution algorithm can dispatch on :class:`SourceKind` without depending on
concrete implementations.

Contents
--------
* :class:`Found` – result of a successful lookup.
* :class:`SourceAdapter` – lookup contract shared by the document, environment,
  and flag adapters.

System Role
-----------
Adapters return :class:`Found` or ``None`` (not found) and raise a
:class:`lib_layered_settings.domain.errors.SettingsError` subclass when the
source is configured but erroneous. Absence is never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from ..domain.setting import SourceKind
from ..domain.values import Kind


@dataclass(frozen=True, slots=True)
class Found:
    """A coerced value together with the source and key that produced it."""

    value: Any
    source: SourceKind
    key: str


@runtime_checkable
class SourceAdapter(Protocol):
    """Look up one key in one source and coerce it to a kind.

    Why
    ----
    Keep the three sources interchangeable so the resolver treats them as a
    uniform list of attempts.
    """

    source: SourceKind

    def lookup(self, key: str, kind: Kind) -> Found | None:
        """Return :class:`Found`, ``None`` when absent, or raise for malformed sources."""
