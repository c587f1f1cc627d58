"""String coercion rules for every supported kind."""

from __future__ import annotations

from datetime import timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_layered_settings.application.coercion import accept_native, coerce, parse_duration
from lib_layered_settings.domain.errors import SettingTypeError, UnsupportedTypeError
from lib_layered_settings.domain.values import INT64_MAX, INT64_MIN, Kind


@pytest.mark.parametrize(
    ("raw", "kind", "expected"),
    [
        ("test", Kind.TEXT, "test"),
        ("", Kind.TEXT, ""),
        ("42", Kind.INTEGER, 42),
        ("-7", Kind.INTEGER, -7),
        ("+7", Kind.INTEGER, 7),
        ("3.14", Kind.FLOAT, 3.14),
        ("1e3", Kind.FLOAT, 1000.0),
        ("true", Kind.BOOLEAN, True),
        ("False", Kind.BOOLEAN, False),
        ("TRUE", Kind.BOOLEAN, True),
        ("1h", Kind.DURATION, timedelta(hours=1)),
        ("1h30m", Kind.DURATION, timedelta(hours=1, minutes=30)),
    ],
)
def test_canonical_representations(raw: str, kind: Kind, expected: object) -> None:
    assert coerce(raw, kind) == expected


@pytest.mark.parametrize(
    ("raw", "kind"),
    [
        ("4 2", Kind.INTEGER),
        ("1_000", Kind.INTEGER),
        ("0x10", Kind.INTEGER),
        ("3.0", Kind.INTEGER),
        ("", Kind.INTEGER),
        ("abc", Kind.FLOAT),
        ("1_0.5", Kind.FLOAT),
        (" 1.5", Kind.FLOAT),
        ("yes", Kind.BOOLEAN),
        ("1", Kind.BOOLEAN),
        ("", Kind.BOOLEAN),
        ("10", Kind.DURATION),
        ("1d", Kind.DURATION),
        ("h", Kind.DURATION),
        ("", Kind.DURATION),
    ],
)
def test_rejected_inputs_raise_type_error(raw: str, kind: Kind) -> None:
    with pytest.raises(SettingTypeError) as excinfo:
        coerce(raw, kind)
    assert excinfo.value.kind == kind.value
    assert excinfo.value.raw == raw


def test_integer_range_is_signed_64_bit() -> None:
    assert coerce(str(INT64_MAX), Kind.INTEGER) == INT64_MAX
    assert coerce(str(INT64_MIN), Kind.INTEGER) == INT64_MIN
    with pytest.raises(SettingTypeError):
        coerce(str(INT64_MAX + 1), Kind.INTEGER)
    with pytest.raises(SettingTypeError):
        coerce(str(INT64_MIN - 1), Kind.INTEGER)


def test_unsupported_kind() -> None:
    with pytest.raises(UnsupportedTypeError):
        coerce("1", "list")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0", timedelta(0)),
        ("-1h", -timedelta(hours=1)),
        ("+5s", timedelta(seconds=5)),
        ("1.5h", timedelta(minutes=90)),
        (".5s", timedelta(milliseconds=500)),
        ("2h45m10s", timedelta(hours=2, minutes=45, seconds=10)),
        ("300ms", timedelta(milliseconds=300)),
        ("10us", timedelta(microseconds=10)),
        ("10µs", timedelta(microseconds=10)),
        ("1500ns", timedelta(microseconds=1)),
        ("1m1m", timedelta(minutes=2)),
    ],
)
def test_duration_terms(raw: str, expected: timedelta) -> None:
    assert parse_duration(raw) == expected


def test_duration_out_of_range() -> None:
    with pytest.raises(SettingTypeError):
        parse_duration("3000000h")


def test_duration_range_edges() -> None:
    assert parse_duration("-9223372036854775808ns") == timedelta(microseconds=-(9223372036854775808 // 1_000))
    with pytest.raises(SettingTypeError):
        parse_duration("9223372036854775808ns")
    with pytest.raises(SettingTypeError):
        parse_duration("-9223372036854775809ns")


@given(st.integers(min_value=INT64_MIN, max_value=INT64_MAX))
def test_integer_text_round_trip(value: int) -> None:
    assert coerce(str(value), Kind.INTEGER) == value


@given(st.floats(allow_nan=False))
def test_float_repr_round_trip(value: float) -> None:
    assert coerce(repr(value), Kind.FLOAT) == value


@given(st.integers(min_value=0, max_value=99), st.integers(min_value=0, max_value=59), st.integers(min_value=0, max_value=59))
def test_compound_duration_sums_terms(hours: int, minutes: int, seconds: int) -> None:
    raw = f"{hours}h{minutes}m{seconds}s"
    assert parse_duration(raw) == timedelta(hours=hours, minutes=minutes, seconds=seconds)


def test_accept_native_scalars() -> None:
    assert accept_native(42, Kind.INTEGER) == 42
    assert accept_native(42, Kind.FLOAT) == 42.0
    assert accept_native(True, Kind.BOOLEAN) is True
    assert accept_native("1h1m", Kind.DURATION) == timedelta(hours=1, minutes=1)
    assert accept_native("42", Kind.INTEGER) == 42


@pytest.mark.parametrize(
    ("value", "kind"),
    [
        (True, Kind.INTEGER),
        (False, Kind.FLOAT),
        (42, Kind.TEXT),
        (3.5, Kind.INTEGER),
        (1, Kind.BOOLEAN),
        ({"a": 1}, Kind.TEXT),
        ([1, 2], Kind.INTEGER),
        (3600, Kind.DURATION),
        (2**64, Kind.INTEGER),
    ],
)
def test_accept_native_rejects_wrong_kind(value: object, kind: Kind) -> None:
    with pytest.raises(SettingTypeError):
        accept_native(value, kind)
