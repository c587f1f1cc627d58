"""YAML document adapter: path grammar, absence versus malformed input, kind checks."""

from __future__ import annotations

from datetime import timedelta

import pytest

from lib_layered_settings.adapters.document.yaml_path import YAMLDocumentSource, parse_path
from lib_layered_settings.domain.errors import DocumentPathError, InvalidDocument, SettingTypeError
from lib_layered_settings.domain.values import Kind

DOCUMENT = """
server:
  host: example.org
  port: 8080
  ratio: 0.5
  debug: true
  timeout: 1h30m
  hosts:
    - alpha
    - beta
  "dotted.key": dotted
empty:
"""


@pytest.mark.parametrize(
    ("path", "steps"),
    [
        ("$", ()),
        ("$.a", ("a",)),
        ("$.a.b[0]", ("a", "b", 0)),
        ("$.a[-1]", ("a", -1)),
        ("$['a.b']", ("a.b",)),
        ('$."a b".c', ("a b", "c")),
        ("$.a[0][1]", ("a", 0, 1)),
    ],
)
def test_parse_path(path: str, steps: tuple) -> None:
    assert parse_path(path) == steps


@pytest.mark.parametrize("path", ["a.b", "$.", "$..a", "$.a[", "$.a[x]", "$a", "$.a]"])
def test_parse_path_rejects_bad_syntax(path: str) -> None:
    with pytest.raises(DocumentPathError):
        parse_path(path)


@pytest.mark.parametrize(
    ("path", "kind", "expected"),
    [
        ("$.server.host", Kind.TEXT, "example.org"),
        ("$.server.port", Kind.INTEGER, 8080),
        ("$.server.port", Kind.FLOAT, 8080.0),
        ("$.server.ratio", Kind.FLOAT, 0.5),
        ("$.server.debug", Kind.BOOLEAN, True),
        ("$.server.timeout", Kind.DURATION, timedelta(hours=1, minutes=30)),
        ("$.server.hosts[1]", Kind.TEXT, "beta"),
        ("$.server['dotted.key']", Kind.TEXT, "dotted"),
    ],
)
def test_lookup_found(path: str, kind: Kind, expected: object) -> None:
    found = YAMLDocumentSource(DOCUMENT).lookup(path, kind)
    assert found is not None
    assert found.value == expected
    assert found.key == path


@pytest.mark.parametrize("path", ["$.missing", "$.server.hosts[5]", "$.server.host.deeper", "$.empty"])
def test_lookup_not_found(path: str) -> None:
    assert YAMLDocumentSource(DOCUMENT).lookup(path, Kind.TEXT) is None


@pytest.mark.parametrize("document", [None, "", "   \n", b""])
def test_empty_document_is_not_found_even_for_bad_paths(document) -> None:
    source = YAMLDocumentSource(document)
    assert not source.configured
    assert source.lookup("not a path", Kind.TEXT) is None


def test_malformed_document_raises() -> None:
    with pytest.raises(InvalidDocument) as excinfo:
        YAMLDocumentSource("key: [unclosed").lookup("$.key", Kind.TEXT)
    assert excinfo.value.source == "document"


def test_bad_path_on_configured_document_raises() -> None:
    with pytest.raises(DocumentPathError):
        YAMLDocumentSource(DOCUMENT).lookup("$.server..port", Kind.INTEGER)


@pytest.mark.parametrize(
    ("path", "kind"),
    [
        ("$.server", Kind.TEXT),
        ("$.server.hosts", Kind.TEXT),
        ("$.server.port", Kind.TEXT),
        ("$.server.debug", Kind.INTEGER),
        ("$.server.host", Kind.INTEGER),
    ],
)
def test_wrong_kind_raises_tagged_type_error(path: str, kind: Kind) -> None:
    with pytest.raises(SettingTypeError) as excinfo:
        YAMLDocumentSource(DOCUMENT).lookup(path, kind)
    assert excinfo.value.source == "document"
    assert excinfo.value.key == path


def test_bytes_document() -> None:
    found = YAMLDocumentSource("name: démo".encode("utf-8")).lookup("$.name", Kind.TEXT)
    assert found is not None and found.value == "démo"


def test_document_parsed_once(monkeypatch: pytest.MonkeyPatch) -> None:
    from lib_layered_settings.adapters.document import yaml_path

    calls: list[object] = []
    original = yaml_path.yaml.load

    def counting_load(stream, Loader):
        calls.append(stream)
        return original(stream, Loader=Loader)

    monkeypatch.setattr(yaml_path.yaml, "load", counting_load)
    source = YAMLDocumentSource(DOCUMENT)
    source.lookup("$.server.host", Kind.TEXT)
    source.lookup("$.server.port", Kind.INTEGER)
    assert len(calls) == 1


@pytest.mark.parametrize("word", ["no", "yes", "on", "off", "No", "OFF"])
def test_yes_no_on_off_stay_text(word: str) -> None:
    found = YAMLDocumentSource(f"country: {word}").lookup("$.country", Kind.TEXT)
    assert found is not None and found.value == word


@pytest.mark.parametrize("word", ["on", "yes", "off"])
def test_yes_no_on_off_are_not_booleans(word: str) -> None:
    with pytest.raises(SettingTypeError) as excinfo:
        YAMLDocumentSource(f"enabled: {word}").lookup("$.enabled", Kind.BOOLEAN)
    assert excinfo.value.source == "document"


@pytest.mark.parametrize(("word", "expected"), [("true", True), ("False", False), ("TRUE", True)])
def test_true_false_still_load_as_booleans(word: str, expected: bool) -> None:
    found = YAMLDocumentSource(f"enabled: {word}").lookup("$.enabled", Kind.BOOLEAN)
    assert found is not None and found.value is expected


@pytest.mark.parametrize("stamp", ["2024-01-01", "2024-01-01 10:30:00"])
def test_date_scalars_stay_text(stamp: str) -> None:
    found = YAMLDocumentSource(f"released: {stamp}").lookup("$.released", Kind.TEXT)
    assert found is not None and found.value == stamp
