"""Flag adapter tests: long-flag syntax, absence, and malformed argument lists."""

from __future__ import annotations

from datetime import timedelta

import pytest

from lib_layered_settings.adapters.flags.default import FlagSource, find_flag, iter_flags
from lib_layered_settings.domain.errors import InvalidArguments, SettingTypeError
from lib_layered_settings.domain.values import Kind


@pytest.mark.parametrize(
    "args",
    [
        ["--option1=test"],
        ["--option1", "test"],
        ["--other", "x", "--option1", "test"],
        ["--option1=first", "--option1=test"],
    ],
)
def test_flag_forms(args: list[str]) -> None:
    assert find_flag(args, "option1") == "test"


def test_value_may_look_like_a_flag() -> None:
    assert find_flag(["--offset", "-5"], "offset") == "-5"


def test_value_may_contain_equals() -> None:
    assert find_flag(["--query=a=b"], "query") == "a=b"


def test_scanning_stops_at_terminator_and_positionals() -> None:
    assert find_flag(["--", "--name=x"], "name") is None
    assert find_flag(["run", "--name=x"], "name") is None
    assert find_flag(["-", "--name=x"], "name") is None


def test_iter_flags_pairs() -> None:
    assert list(iter_flags(["--a=1", "--b", "2", "--", "--c=3"])) == [("a", "1"), ("b", "2")]


@pytest.mark.parametrize("args", [["-v"], ["--=x"], ["---name=x"], ["--name"], ["--ok=1", "--name"]])
def test_malformed_arguments(args: list[str]) -> None:
    with pytest.raises(InvalidArguments):
        find_flag(args, "name")


def test_absent_or_empty_flag_is_not_found() -> None:
    assert FlagSource([]).lookup("port", Kind.INTEGER) is None
    assert FlagSource(["--port="]).lookup("port", Kind.INTEGER) is None
    assert FlagSource(["--port", ""]).lookup("port", Kind.TEXT) is None


def test_lookup_coerces() -> None:
    found = FlagSource(["--timeout=1h"]).lookup("timeout", Kind.DURATION)
    assert found is not None and found.value == timedelta(hours=1)


def test_coercion_failure_is_tagged_with_flag() -> None:
    with pytest.raises(SettingTypeError) as excinfo:
        FlagSource(["--debug=maybe"]).lookup("debug", Kind.BOOLEAN)
    assert excinfo.value.source == "flag"
    assert excinfo.value.key == "debug"
