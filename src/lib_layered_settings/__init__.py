"""Public package surface for layered, per-value settings resolution.

Callers register each value with the ordered list of sources to consult
(YAML document path, environment variable, long command-line flag) and then
trigger a resolution pass. The first matching source wins; defaults and the
required flag apply when nothing matches.

>>> from lib_layered_settings import Kind, Parser, Value
>>> parser = Parser(document="port: 8080", environ={"PORT": "9090"})
>>> port = Value(Kind.INTEGER)
>>> _ = parser.add(port).yaml("port").env("PORT")
>>> _ = parser.parse()
>>> port.value
8080
"""

from __future__ import annotations

from .adapters.env.default import default_env_prefix
from .application.resolve import Resolution
from .core import Parser, add, default_parser, must_parse, parse, reset_default_parser
from .domain.errors import (
    DocumentFileError,
    DocumentPathError,
    InvalidArguments,
    InvalidDocument,
    NilDestinationError,
    RequiredFieldNotFoundError,
    SettingsError,
    SettingTypeError,
    SourceError,
    UnsupportedTypeError,
)
from .domain.setting import Setting, SourceKind
from .domain.values import Attribute, Destination, Kind, Value
from .observability import bind_trace_id, get_logger

__all__ = [
    "Attribute",
    "Destination",
    "DocumentFileError",
    "DocumentPathError",
    "InvalidArguments",
    "InvalidDocument",
    "Kind",
    "NilDestinationError",
    "Parser",
    "RequiredFieldNotFoundError",
    "Resolution",
    "Setting",
    "SettingTypeError",
    "SettingsError",
    "SourceError",
    "SourceKind",
    "UnsupportedTypeError",
    "Value",
    "add",
    "bind_trace_id",
    "default_env_prefix",
    "default_parser",
    "get_logger",
    "must_parse",
    "parse",
    "reset_default_parser",
]
