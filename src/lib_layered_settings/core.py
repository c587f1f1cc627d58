"""Composition root for ``lib_layered_settings``.

Purpose
-------
Hold the source data for one resolution pass (document text, environment
prefix, argument list), collect registered settings, and wire the adapters into
the resolution policy.

Contents
--------
* :class:`Parser` – the session object callers configure and resolve.
* :func:`default_parser` – process-wide session seeded from ``sys.argv``.
* :func:`add` / :func:`parse` / :func:`must_parse` – free functions operating
  on the default session.

Session lifecycle
-----------------
Source data may be replaced any number of times. Every pass, successful or
not, clears the registered settings; source data is kept, so a session can be
reused with newly registered settings. :meth:`Parser.reset` drops everything.

Thread safety
-------------
A :class:`Parser` holds unsynchronised mutable state. Do not share one across
threads without external locking; independent parsers are fully isolated. The
default session is a single shared instance and follows the same rule.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Mapping, Sequence

from .adapters.document.yaml_path import YAMLDocumentSource
from .adapters.env.default import EnvSource
from .adapters.flags.default import FlagSource
from .application.ports import SourceAdapter
from .application.resolve import Resolution, resolve_all
from .domain.errors import DocumentFileError, SettingsError
from .domain.setting import Setting, SourceKind
from .domain.values import Destination
from .observability import log_debug, log_error, log_info, make_event


class Parser:
    """Resolution session: shared source data plus registered settings.

    Parameters
    ----------
    document:
        YAML text or bytes consulted by ``Setting.yaml`` lookups.
    env_prefix:
        Prepended verbatim to every ``Setting.env`` name.
    args:
        Raw argument list (without program name) consulted by ``Setting.flag``.
    environ:
        Environment mapping; defaults to :data:`os.environ`, read at lookup time.

    Examples
    --------
    >>> from lib_layered_settings.domain.values import Kind, Value
    >>> parser = Parser(document="name: demo", args=["--name", "cli"])
    >>> name = Value(Kind.TEXT)
    >>> _ = parser.add(name).flag("name").yaml("name")
    >>> _ = parser.parse()
    >>> name.value
    'cli'
    """

    def __init__(
        self,
        *,
        document: str | bytes | None = None,
        env_prefix: str = "",
        args: Sequence[str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.document = document
        self.env_prefix = env_prefix
        self.args: list[str] = list(args or [])
        self.environ = environ
        self.settings: list[Setting] = []

    def set_document(self, document: str | bytes | None) -> None:
        self.document = document

    def read_document_file(self, path: str | Path) -> None:
        """Replace the document with the contents of *path*.

        Raises
        ------
        DocumentFileError
            When the file does not exist or cannot be read.
        """

        file_path = Path(path)
        try:
            payload = file_path.read_bytes()
        except OSError as exc:
            log_error("document_file_error", **make_event("document", str(file_path), {"error": str(exc)}))
            raise DocumentFileError(f"cannot read {file_path}: {exc}") from exc
        log_debug("document_file_read", **make_event("document", str(file_path), {"size": len(payload)}))
        self.document = payload

    def set_env_prefix(self, prefix: str) -> None:
        self.env_prefix = prefix

    def append_env_prefix(self, part: str) -> None:
        """Extend the current prefix, e.g. ``APP_`` then ``DB_`` gives ``APP_DB_``."""

        self.env_prefix += part

    def set_args(self, args: Sequence[str] | None) -> None:
        self.args = list(args or [])

    def add(self, destination: Destination | None) -> Setting:
        """Register *destination* and return its :class:`Setting` builder."""

        setting = Setting(destination)
        self.settings.append(setting)
        return setting

    def reset(self) -> None:
        """Clear source data and registered settings."""

        self.document = None
        self.env_prefix = ""
        self.args = []
        self.settings = []

    def adapters(self) -> dict[SourceKind, SourceAdapter]:
        """Build fresh adapters over the current source data."""

        return {
            SourceKind.DOCUMENT: YAMLDocumentSource(self.document),
            SourceKind.ENV: EnvSource(self.env_prefix, environ=self.environ),
            SourceKind.FLAG: FlagSource(self.args),
        }

    def parse(self) -> list[Resolution]:
        """Resolve every registered setting in registration order.

        Returns
        -------
        list[Resolution]
            One record per setting.

        Raises
        ------
        SettingsError
            The first failure; later settings stay unresolved.
        """

        settings, self.settings = self.settings, []
        try:
            results = resolve_all(settings, self.adapters())
        except SettingsError as exc:
            log_error("resolution_failed", **make_event(None, None, {"error": str(exc), "settings": len(settings)}))
            raise
        log_info("resolution_complete", **make_event(None, None, {"settings": len(results)}))
        return results

    def must_parse(self) -> list[Resolution]:
        """Like :meth:`parse` but abort the process on any resolution error."""

        try:
            return self.parse()
        except SettingsError as exc:
            raise SystemExit(f"settings: {exc}") from exc


_DEFAULT_PARSER: Parser | None = None


def default_parser() -> Parser:
    """Return the process-wide session, creating it on first use.

    The argument list is seeded from ``sys.argv[1:]`` when the session is
    created, which always happens before the first resolution through it.
    """

    global _DEFAULT_PARSER
    if _DEFAULT_PARSER is None:
        _DEFAULT_PARSER = Parser(args=sys.argv[1:])
    return _DEFAULT_PARSER


def reset_default_parser() -> None:
    """Drop the process-wide session so the next use re-seeds it."""

    global _DEFAULT_PARSER
    _DEFAULT_PARSER = None


def add(destination: Destination | None) -> Setting:
    """Register *destination* on the default session."""

    return default_parser().add(destination)


def parse() -> list[Resolution]:
    """Resolve the settings registered on the default session."""

    return default_parser().parse()


def must_parse() -> list[Resolution]:
    """Resolve the default session, exiting the process on error."""

    return default_parser().must_parse()


__all__ = [
    "Parser",
    "default_parser",
    "reset_default_parser",
    "add",
    "parse",
    "must_parse",
]
