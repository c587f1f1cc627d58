"""Structured document adapter backed by PyYAML.

Purpose
-------
Evaluate path queries such as ``$.server.hosts[0]`` against an already-loaded
YAML document. Reading the document from disk is not this module's concern;
the session hands over text or bytes.

Contents
--------
* :func:`parse_path` – compile a path query into a tuple of steps.
* :func:`select` – walk a parsed document along compiled steps.
* :class:`YAMLDocumentSource` – the adapter; parses the text once per instance.

Path grammar
------------
``$`` root, then any sequence of ``.key``, ``.'quoted key'``, ``."quoted key"``,
``['key']`` and ``[index]`` (negative indexes count from the end).

Outcomes
--------
* empty or whitespace-only text: not found, never an error.
* unparseable non-empty text: :class:`InvalidDocument`.
* missing key, out-of-range index, or explicit ``null``: not found.
* a node of the wrong kind: :class:`SettingTypeError` tagged ``document``.
* only ``true`` and ``false`` (any case) load as booleans; ``yes``/``no``/``on``/``off``
  and dates load as strings.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Sequence, Union

import yaml

from ...application.coercion import accept_native
from ...application.ports import Found
from ...domain.errors import DocumentPathError, InvalidDocument, SettingTypeError
from ...domain.setting import ROOT_MARKER, SourceKind
from ...domain.values import Kind
from ...observability import log_debug, log_error, make_event

Step = Union[str, int]

_BARE_KEY = re.compile(r"[^.\[\]'\"]+")
_INDEX = re.compile(r"\[(-?[0-9]+)\]")
_QUOTED_INDEX = re.compile(r"\[(['\"])(.*?)\1\]")
_QUOTED_KEY = re.compile(r"(['\"])(.*?)\1")

_MISSING: Any = object()

_BOOL_TAG = "tag:yaml.org,2002:bool"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _DocumentLoader(yaml.SafeLoader):
    """Safe loader that reads only ``true``/``false`` as booleans and never builds dates.

    ``yes``, ``no``, ``on``, ``off`` and ISO dates stay plain strings, so they
    reach text settings unchanged and fail boolean settings the same way an
    environment value would.
    """


_DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (_BOOL_TAG, _TIMESTAMP_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_DocumentLoader.add_implicit_resolver(_BOOL_TAG, re.compile(r"^(?:true|false)$", re.IGNORECASE), list("tTfF"))


def parse_path(path: str) -> tuple[Step, ...]:
    """Compile *path* into mapping keys (``str``) and sequence indexes (``int``).

    Examples
    --------
    >>> parse_path("$.server.hosts[0]")
    ('server', 'hosts', 0)
    >>> parse_path("$['a.b'].'c d'")
    ('a.b', 'c d')
    >>> parse_path("server")
    Traceback (most recent call last):
    ...
    lib_layered_settings.domain.errors.DocumentPathError: document: path must start with '$': 'server'
    """

    if not path.startswith(ROOT_MARKER):
        raise DocumentPathError(f"path must start with {ROOT_MARKER!r}: {path!r}")
    steps: list[Step] = []
    position = len(ROOT_MARKER)
    while position < len(path):
        char = path[position]
        if char == ".":
            position += 1
            match = _QUOTED_KEY.match(path, position) or _BARE_KEY.match(path, position)
            if match is None:
                raise DocumentPathError(f"expected key at offset {position} in {path!r}")
            steps.append(match.group(2) if match.re is _QUOTED_KEY else match.group(0))
        elif char == "[":
            match = _INDEX.match(path, position)
            if match is not None:
                steps.append(int(match.group(1)))
            else:
                match = _QUOTED_INDEX.match(path, position)
                if match is None:
                    raise DocumentPathError(f"bad selector at offset {position} in {path!r}")
                steps.append(match.group(2))
        else:
            raise DocumentPathError(f"unexpected {char!r} at offset {position} in {path!r}")
        position = match.end()
    return tuple(steps)


def select(document: Any, steps: Sequence[Step]) -> Any:
    """Return the node at *steps* or a private sentinel when the path does not exist."""

    node = document
    for step in steps:
        if isinstance(step, int):
            if not isinstance(node, list) or not -len(node) <= step < len(node):
                return _MISSING
            node = node[step]
        else:
            if not isinstance(node, Mapping) or step not in node:
                return _MISSING
            node = node[step]
    return node


class YAMLDocumentSource:
    """Resolve document-path lookups against YAML text.

    Why
    ----
    Parsing happens lazily and at most once, so a pass with many document-backed
    settings costs a single YAML load.

    Examples
    --------
    >>> source = YAMLDocumentSource("server:\\n  port: 8080\\n  hosts: [a, b]\\n")
    >>> source.lookup("$.server.port", Kind.INTEGER).value
    8080
    >>> source.lookup("$.server.hosts[-1]", Kind.TEXT).value
    'b'
    >>> source.lookup("$.server.missing", Kind.TEXT) is None
    True
    """

    source = SourceKind.DOCUMENT

    def __init__(self, document: str | bytes | None = None) -> None:
        self._text = document
        self._parsed: Any = _MISSING

    @property
    def configured(self) -> bool:
        """``True`` when the document holds anything besides whitespace."""

        if self._text is None:
            return False
        return bool(self._text.strip())

    def lookup(self, key: str, kind: Kind) -> Found | None:
        if not self.configured:
            return None
        steps = parse_path(key)
        node = select(self._load(), steps)
        if node is _MISSING or node is None:
            log_debug("document_path_missing", **make_event("document", key))
            return None
        try:
            value = accept_native(node, kind)
        except SettingTypeError as exc:
            raise exc.with_source("document", key) from exc
        return Found(value, self.source, key)

    def _load(self) -> Any:
        if self._parsed is _MISSING:
            self._parsed = _parse_document(self._text)
        return self._parsed


def _parse_document(text: str | bytes | None) -> Any:
    """Parse YAML text, translating parser failures into :class:`InvalidDocument`."""

    try:
        data = yaml.load(text, Loader=_DocumentLoader)  # noqa: S506 - SafeLoader subclass
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        log_error("document_invalid", **make_event("document", None, {"error": str(exc)}))
        raise InvalidDocument(f"invalid YAML: {exc}") from exc
    log_debug("document_parsed", **make_event("document", None, {"root": type(data).__name__}))
    return data
