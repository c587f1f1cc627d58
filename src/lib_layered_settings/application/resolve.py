"""Application-layer resolution policy.

Purpose
-------
Fill each registered setting from the first source in its list that matches,
then apply the required/default rules. The module is free of I/O so it can be
driven by any composition root.

Contents
    - ``resolve_all``: resolves settings in registration order, fail-fast.
    - ``resolve_setting``: one setting, first-match-wins.
    - ``Resolution``: record describing how a setting was settled.

Per-setting flow
    1. a missing destination raises ``NilDestinationError``; a destination kind
       outside the supported set raises ``UnsupportedTypeError``.
    2. sources are tried in chain order; an adapter error aborts immediately;
       the first match is written and later sources are never consulted.
    3. with no match: required raises ``RequiredFieldNotFoundError``, a default
       is written as-is, otherwise the destination keeps its prior value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..domain.errors import NilDestinationError, RequiredFieldNotFoundError, SettingsError, UnsupportedTypeError
from ..domain.setting import Setting, SourceKind
from ..domain.values import Kind
from ..observability import log_debug, log_error, make_event
from .ports import SourceAdapter

RESOLVED = "resolved"
DEFAULTED = "defaulted"
NOT_FOUND = "not_found"


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of a single setting.

    ``state`` is ``"resolved"`` (a source matched), ``"defaulted"`` (the
    default was written), or ``"not_found"`` (destination left unchanged).
    ``source`` and ``key`` name the winning lookup when one matched.
    """

    setting: Setting
    state: str
    value: Any = None
    source: str | None = None
    key: str | None = None


def resolve_all(settings: Iterable[Setting], adapters: Mapping[SourceKind, SourceAdapter]) -> list[Resolution]:
    """Resolve *settings* in order and stop at the first failure.

    Settings after a failing one are left untouched.
    """

    return [resolve_setting(setting, adapters) for setting in settings]


def resolve_setting(setting: Setting, adapters: Mapping[SourceKind, SourceAdapter]) -> Resolution:
    """Fill ``setting.destination`` from its sources, default, or nothing.

    Examples
    --------
    >>> from lib_layered_settings.adapters.env.default import EnvSource
    >>> from lib_layered_settings.domain.values import Value
    >>> port = Value(Kind.INTEGER)
    >>> adapters = {SourceKind.ENV: EnvSource(environ={"PORT": "8080"})}
    >>> resolve_setting(Setting(port).env("MISSING").env("PORT"), adapters).state
    'resolved'
    >>> port.value
    8080
    """

    destination = setting.destination
    if destination is None:
        raise NilDestinationError(f"setting {setting!r} has no destination")
    kind = getattr(destination, "kind", None)
    if not isinstance(kind, Kind):
        raise UnsupportedTypeError(f"unsupported destination kind {kind!r}")

    for lookup in setting.sources:
        adapter = adapters[lookup.source]
        try:
            found = adapter.lookup(lookup.key, kind)
        except SettingsError as exc:
            log_error("setting_failed", **make_event(lookup.source.value, lookup.key, {"error": str(exc)}))
            raise
        if found is None:
            continue
        destination.assign(found.value)
        log_debug("setting_resolved", **make_event(found.source.value, found.key, {"kind": kind.value}))
        return Resolution(setting, RESOLVED, found.value, found.source.value, found.key)

    if setting.is_required:
        tried = ", ".join(f"{lookup.source.value}:{lookup.key}" for lookup in setting.sources) or "no sources"
        log_error("setting_failed", **make_event(None, None, {"error": "required", "tried": tried}))
        raise RequiredFieldNotFoundError(f"required {kind.value} setting not found (tried {tried})")

    if setting.has_default:
        destination.assign(setting.default_value)
        log_debug("setting_defaulted", **make_event("default", None, {"kind": kind.value}))
        return Resolution(setting, DEFAULTED, setting.default_value, "default")

    log_debug("setting_not_found", **make_event(None, None, {"kind": kind.value}))
    return Resolution(setting, NOT_FOUND)
