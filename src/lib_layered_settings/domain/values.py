"""Value destinations the resolution engine writes into.

Purpose
-------
Model the closed set of scalar kinds a setting can hold and the externally
owned locations that receive resolved values. The engine never stores results
itself; it calls :meth:`Destination.assign` on whatever the caller registered.

Contents
--------
* :class:`Kind` – enumeration of supported scalar kinds.
* :class:`Destination` – structural contract every destination satisfies.
* :class:`Value` – mutable cell destination.
* :class:`Attribute` – destination bound to an attribute of a caller object.
* :func:`check_default` – verifies a default value against a kind.

System Role
-----------
Shared by the setting builder, the coercion helpers, and the adapters so kind
dispatch happens against one enumeration rather than open-ended type checks.
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from .errors import SettingTypeError, UnsupportedTypeError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Kind(Enum):
    """Closed set of scalar kinds a destination may declare.

    Examples
    --------
    >>> Kind.DURATION.zero
    datetime.timedelta(0)
    >>> Kind.from_name("int") is Kind.INTEGER
    True
    """

    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DURATION = "duration"

    @property
    def zero(self) -> Any:
        """Return the zero value a fresh :class:`Value` starts with."""

        return _ZERO_VALUES[self]

    @classmethod
    def from_name(cls, name: str) -> Kind:
        """Look up a kind by its value or a common alias (``str``, ``int``, ``bool``...)."""

        lowered = name.strip().lower()
        try:
            return cls(_ALIASES.get(lowered, lowered))
        except ValueError as exc:
            raise UnsupportedTypeError(f"unsupported kind {name!r}") from exc


_ZERO_VALUES = {
    Kind.TEXT: "",
    Kind.INTEGER: 0,
    Kind.FLOAT: 0.0,
    Kind.BOOLEAN: False,
    Kind.DURATION: timedelta(0),
}

_ALIASES = {
    "str": "text",
    "string": "text",
    "int": "integer",
    "bool": "boolean",
    "double": "float",
    "timedelta": "duration",
}


@runtime_checkable
class Destination(Protocol):
    """Writable location holding a value of one :class:`Kind`."""

    kind: Any

    def assign(self, value: Any) -> None:
        """Store *value*, which already matches :attr:`kind`."""


class Value:
    """Mutable cell destination.

    Examples
    --------
    >>> port = Value(Kind.INTEGER)
    >>> port.value
    0
    >>> port.assign(8080)
    >>> port
    Value(Kind.INTEGER, 8080)
    """

    __slots__ = ("kind", "value")

    def __init__(self, kind: Kind, value: Any = None) -> None:
        self.kind = kind
        self.value = kind.zero if value is None and isinstance(kind, Kind) else value

    def assign(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Value({self.kind}, {self.value!r})"


class Attribute:
    """Destination that writes into ``setattr(target, name, value)``.

    Why
    ----
    Lets callers fill plain objects or dataclasses field by field without
    wrapping every field in a :class:`Value`.

    Examples
    --------
    >>> class Cfg:
    ...     port = 0
    >>> cfg = Cfg()
    >>> Attribute(cfg, "port", Kind.INTEGER).assign(9000)
    >>> cfg.port
    9000
    """

    __slots__ = ("target", "name", "kind")

    def __init__(self, target: Any, name: str, kind: Kind) -> None:
        self.target = target
        self.name = name
        self.kind = kind

    def assign(self, value: Any) -> None:
        setattr(self.target, self.name, value)

    def __repr__(self) -> str:
        return f"Attribute({type(self.target).__name__}.{self.name}, {self.kind})"


def check_default(kind: Any, value: Any) -> Any:
    """Return *value* normalised for *kind* or raise when the kinds disagree.

    ``bool`` never counts as a number and ``int`` widens to ``float``.

    Examples
    --------
    >>> check_default(Kind.FLOAT, 3)
    3.0
    >>> check_default(Kind.INTEGER, True)
    Traceback (most recent call last):
    ...
    lib_layered_settings.domain.errors.SettingTypeError: cannot convert True to integer (from default): default has kind boolean
    """

    if not isinstance(kind, Kind):
        raise UnsupportedTypeError(f"unsupported destination kind {kind!r}")
    actual = kind_of(value)
    if actual is kind:
        if kind is Kind.INTEGER and not INT64_MIN <= value <= INT64_MAX:
            raise SettingTypeError(kind.value, value, source="default", reason="out of 64-bit range")
        return value
    if kind is Kind.FLOAT and actual is Kind.INTEGER:
        return float(value)
    raise SettingTypeError(kind.value, value, source="default", reason=f"default has kind {actual.value}")


def kind_of(value: Any) -> Kind:
    """Classify a Python value into a :class:`Kind` or raise :class:`UnsupportedTypeError`."""

    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, int):
        return Kind.INTEGER
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, str):
        return Kind.TEXT
    if isinstance(value, timedelta):
        return Kind.DURATION
    raise UnsupportedTypeError(f"unsupported value type {type(value).__name__}")
