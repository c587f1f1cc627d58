"""Environment variable adapter.

Purpose
-------
Resolve a setting from the process environment. The session prefix is glued in
front of the requested name without a separator, so ``prefix="APP_"`` and
``env("PORT")`` read ``APP_PORT``.

Key behaviours
--------------
* Absent variables are "not found"; present values are always strings and go
  through :func:`lib_layered_settings.application.coercion.coerce`.
* The environment mapping is injectable for tests and defaults to
  :data:`os.environ`, read at lookup time.
"""

from __future__ import annotations

import os
from typing import Mapping

from ...application.coercion import coerce
from ...application.ports import Found
from ...domain.errors import SettingTypeError
from ...domain.setting import SourceKind
from ...domain.values import Kind
from ...observability import log_debug, make_event


def default_env_prefix(slug: str) -> str:
    """Return a conventional environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-layered-settings')
    'LIB_LAYERED_SETTINGS_'
    """

    return slug.replace("-", "_").upper() + "_"


class EnvSource:
    """Look up ``prefix + name`` in an environment mapping."""

    source = SourceKind.ENV

    def __init__(self, prefix: str = "", *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the adapter with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        prefix:
            Prepended verbatim to every requested name.
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._prefix = prefix
        self._environ = os.environ if environ is None else environ

    def lookup(self, key: str, kind: Kind) -> Found | None:
        """Return the coerced variable or ``None`` when it is not set.

        Examples
        --------
        >>> adapter = EnvSource("DEMO_", environ={"DEMO_RETRIES": "3"})
        >>> adapter.lookup("RETRIES", Kind.INTEGER).value
        3
        >>> adapter.lookup("TIMEOUT", Kind.DURATION) is None
        True
        """

        name = self._prefix + key
        raw = self._environ.get(name)
        if raw is None:
            log_debug("env_variable_missing", **make_event("env", name))
            return None
        try:
            value = coerce(raw, kind)
        except SettingTypeError as exc:
            raise exc.with_source("env", name) from exc
        return Found(value, self.source, name)
