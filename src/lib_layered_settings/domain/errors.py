"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the resolution engine, and
consuming applications. The hierarchy lives in the domain layer so adapters and
the application layer can depend on it without depending on each other.

Contents
--------
* :class:`SettingsError` – umbrella base class for every resolution failure.
* :class:`NilDestinationError` – a setting was registered without a destination.
* :class:`UnsupportedTypeError` – destination or default outside the scalar kinds.
* :class:`SettingTypeError` – a matched value could not be coerced.
* :class:`RequiredFieldNotFoundError` – no source matched a required setting.
* :class:`SourceError` and subclasses – a configured source is malformed.

System Role
-----------
Adapters raise these exceptions for malformed sources only; absence is never an
exception. The session propagates the first error of a pass unchanged, so
callers catch :class:`SettingsError` to handle all library failures uniformly.
"""

from __future__ import annotations

from typing import Any


class SettingsError(Exception):
    """Base type for all exceptions emitted by ``lib_layered_settings``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class NilDestinationError(SettingsError):
    """Raised when a setting reaches resolution without a destination."""


class UnsupportedTypeError(SettingsError):
    """Raised when a destination or default value has a kind the engine cannot fill.

    Supported kinds are text, integer, float, boolean, and duration.
    """


class SettingTypeError(SettingsError, TypeError):
    """Raised when a matched value cannot be converted to the destination kind.

    Why
    ----
    Callers need to know which kind was expected, what raw input was rejected,
    and which source produced it.

    Attributes
    ----------
    kind:
        Name of the expected kind (``"integer"``, ``"duration"``, ...).
    raw:
        The offending input as found in the source.
    source:
        Source tag (``"document"``, ``"env"``, ``"flag"``, ``"default"``) or
        ``None`` when the failure happened outside a source lookup.

    Examples
    --------
    >>> err = SettingTypeError("integer", "abc")
    >>> str(err)
    "cannot convert 'abc' to integer"
    >>> err.with_source("env", "PORT").source
    'env'
    """

    def __init__(self, kind: str, raw: Any, *, source: str | None = None, key: str | None = None, reason: str | None = None) -> None:
        self.kind = kind
        self.raw = raw
        self.source = source
        self.key = key
        self.reason = reason
        super().__init__(self._describe())

    def with_source(self, source: str, key: str) -> SettingTypeError:
        """Return a copy tagged with the source and key that produced the value."""

        return SettingTypeError(self.kind, self.raw, source=source, key=key, reason=self.reason)

    def _describe(self) -> str:
        message = f"cannot convert {self.raw!r} to {self.kind}"
        if self.source is not None:
            origin = self.source if self.key is None else f"{self.source} {self.key!r}"
            message += f" (from {origin})"
        if self.reason:
            message += f": {self.reason}"
        return message


class RequiredFieldNotFoundError(SettingsError):
    """Raised when a required setting matched none of its sources and has no default."""


class SourceError(SettingsError):
    """Base class for malformed-source failures, tagged with the source name.

    Attributes
    ----------
    source:
        ``"document"`` or ``"flag"``.
    """

    source: str = "unknown"

    def __init__(self, message: str) -> None:
        super().__init__(f"{self.source}: {message}")


class DocumentPathError(SourceError):
    """A document path query could not be parsed."""

    source = "document"


class InvalidDocument(SourceError):
    """Non-empty document text is not valid YAML."""

    source = "document"


class DocumentFileError(SourceError):
    """The document file could not be read from disk."""

    source = "document"


class InvalidArguments(SourceError):
    """The raw argument list violates the long-flag syntax."""

    source = "flag"
