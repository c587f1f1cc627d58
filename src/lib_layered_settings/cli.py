"""CLI adapter for ``lib_layered_settings`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators check how a single value resolves against a YAML file, the
current environment, and an argument list without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_resolve` – registers one setting from ``--source`` options and
  prints the resolved value as JSON.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It builds a :class:`Parser` and never
reaches into adapter details. ``lib_cli_exit_tools`` centralises the exit code
strategy so resolution errors surface consistently across shells and CI.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from datetime import timedelta
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Iterator, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .application.coercion import coerce
from .core import Parser
from .domain.errors import SettingTypeError
from .domain.setting import Setting
from .domain.values import Kind, Value

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

KIND_CHOICES: Final[tuple[str, ...]] = tuple(kind.value for kind in Kind)
SOURCE_PREFIXES: Final[tuple[str, ...]] = ("yaml", "env", "flag")


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_layered_settings")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Per-value layered settings resolver",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_layered_settings",
    message="lib_layered_settings version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_layered_settings")
    except metadata.PackageNotFoundError:
        click.echo("lib_layered_settings (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_layered_settings')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("resolve", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--kind",
    type=click.Choice(KIND_CHOICES, case_sensitive=False),
    default="text",
    show_default=True,
    help="Kind of the value to resolve",
)
@click.option(
    "--source",
    "sources",
    multiple=True,
    help="Ordered source lookup: yaml:PATH, env:NAME or flag:NAME (repeatable, first match wins)",
)
@click.option(
    "--document",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
    default=None,
    help="YAML file consulted by yaml: sources",
)
@click.option("--env-prefix", default="", help="Prefix prepended to env: names")
@click.option("--default", "default", default=None, help="Fallback value, parsed with the same rules as env values")
@click.option("--required/--optional", default=False, help="Fail when no source matches")
@click.option(
    "--show-source/--no-show-source",
    default=False,
    help="Print a JSON object with the winning source instead of the bare value",
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli_resolve(
    kind: str,
    sources: Sequence[str],
    document: Optional[Path],
    env_prefix: str,
    default: Optional[str],
    required: bool,
    show_source: bool,
    args: Sequence[str],
) -> None:
    """Resolve a single value and print it as JSON.

    Arguments after ``--`` form the argument list searched by flag: sources.
    Durations print as seconds.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> runner = CliRunner()
    >>> result = runner.invoke(cli, ["resolve", "--kind", "integer", "--source", "flag:port", "--", "--port", "8080"])
    >>> result.output.strip()
    '8080'
    """

    target_kind = Kind.from_name(kind)
    parser = Parser(env_prefix=env_prefix, args=list(args))
    if document is not None:
        parser.read_document_file(document)
    destination = Value(target_kind)
    setting = parser.add(destination)
    for spec in sources:
        _apply_source(setting, spec)
    if default is not None:
        setting.default(_parse_default(default, target_kind))
    setting.required(required)

    (resolution,) = parser.parse()
    value = _jsonable(destination.value)
    if show_source:
        payload = {"value": value, "state": resolution.state, "source": resolution.source, "key": resolution.key}
        click.echo(json.dumps(payload))
        return
    click.echo(json.dumps(value))


def _apply_source(setting: Setting, spec: str) -> None:
    """Append the lookup described by ``prefix:key`` to *setting*."""

    prefix, sep, key = spec.partition(":")
    prefix = prefix.strip().lower()
    if not sep or not key or prefix not in SOURCE_PREFIXES:
        raise click.BadParameter(
            "Source must look like yaml:PATH, env:NAME or flag:NAME.",
            param_hint="--source",
        )
    getattr(setting, prefix)(key)


def _parse_default(raw: str, kind: Kind) -> Any:
    try:
        return coerce(raw, kind)
    except SettingTypeError as exc:
        raise click.BadParameter(str(exc), param_hint="--default") from exc


def _jsonable(value: Any) -> Any:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return value


@contextmanager
def _preserved_traceback_settings(restore: bool) -> Iterator[None]:
    """Put back the ``lib_cli_exit_tools`` traceback flags that ``--traceback`` flips."""

    saved = (
        getattr(lib_cli_exit_tools.config, "traceback", False),
        getattr(lib_cli_exit_tools.config, "traceback_force_color", False),
    )
    try:
        yield
    finally:
        if restore:
            lib_cli_exit_tools.config.traceback, lib_cli_exit_tools.config.traceback_force_color = saved


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Run the ``lib_layered_settings`` command line and return its exit code.

    A failed resolution (missing required value, bad conversion, unreadable
    document) prints a one-line summary, or the full traceback when
    ``--traceback`` was given, and maps to a non-zero code instead of raising.
    Pass ``restore_traceback=False`` to keep the ``--traceback`` choice in
    ``lib_cli_exit_tools.config`` after the call returns.
    """

    with _preserved_traceback_settings(restore_traceback):
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_layered_settings",
            )
        except BaseException as exc:  # noqa: BLE001 - every failure becomes an exit code
            verbose = lib_cli_exit_tools.config.traceback
            lib_cli_exit_tools.print_exception_message(
                trace_back=verbose,
                length_limit=_TRACEBACK_VERBOSE_LIMIT if verbose else _TRACEBACK_SUMMARY_LIMIT,
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
