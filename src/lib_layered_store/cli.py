"""CLI adapter for ``lib_layered_store`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect how a layered store resolves keys without writing
Python: look a key up, list the visible key space, or dump the effective
configuration with the winning layer of every key.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling into ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_env_prefix` – exposes :func:`lib_layered_store.core.default_env_prefix`.
* :func:`cli_get` / :func:`cli_keys` / :func:`cli_dump` – store queries.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer. Stores are assembled through
:func:`lib_layered_store.core.build_store` only, and closed after each command.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Callable, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .application.snapshot import provenance, snapshot
from .application.store import LayeredStore
from .core import build_store
from .core import default_env_prefix as _default_env_prefix

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_DIST_NAME: Final[str] = "lib_layered_store"


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version(_DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _store_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by every command that assembles a store."""

    options = [
        click.option(
            "--file",
            "files",
            multiple=True,
            type=click.Path(path_type=Path, dir_okay=False),
            help="Configuration file layer (repeatable; later files win)",
        ),
        click.option("--slug", default=None, help="Read environment variables under the slug's prefix"),
        click.option(
            "--dotenv/--no-dotenv",
            default=False,
            help="Include the first .env file found upwards from --start-dir",
        ),
        click.option(
            "--start-dir",
            type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True),
            default=None,
            help="Starting directory for the .env search (defaults to CWD)",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _open_store(files: Sequence[Path], slug: Optional[str], dotenv: bool, start_dir: Optional[Path]) -> LayeredStore:
    return build_store(
        files=tuple(files),
        slug=slug,
        dotenv=dotenv,
        start_dir=str(start_dir) if start_dir is not None else None,
    )


@click.group(
    help="Layered configuration store inspector",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=_DIST_NAME,
    message="lib_layered_store version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for ``lib_cli_exit_tools``."""

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(_DIST_NAME)
    except metadata.PackageNotFoundError:
        click.echo(f"{_DIST_NAME} (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', _DIST_NAME)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.11')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("env-prefix", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("slug")
def cli_env_prefix(slug: str) -> None:
    """Compute the canonical environment prefix for *slug*.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["env-prefix", "config-kit"])
    >>> result.output.strip()
    'CONFIG_KIT'
    """

    click.echo(_default_env_prefix(slug))


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@_store_options
def cli_get(key: str, files: Sequence[Path], slug: Optional[str], dotenv: bool, start_dir: Optional[Path]) -> None:
    """Print the value the assembled store resolves for KEY."""

    with _open_store(files, slug, dotenv, start_dir) as store:
        value = store.get_raw(key)
    if value is None:
        raise click.ClickException(f"Key not found: {key}")
    click.echo(value)


@cli.command("keys", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("prefix", default="")
@_store_options
def cli_keys(prefix: str, files: Sequence[Path], slug: Optional[str], dotenv: bool, start_dir: Optional[Path]) -> None:
    """List the child keys below PREFIX across all layers, one per line."""

    with _open_store(files, slug, dotenv, start_dir) as store:
        keys = store.enumerate(prefix)
    for key in keys:
        click.echo(key)


@cli.command("dump", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("prefix", default="")
@_store_options
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
@click.option(
    "--provenance/--no-provenance",
    "with_provenance",
    default=False,
    help="Include the winning layer of every key in the output",
)
def cli_dump(
    prefix: str,
    files: Sequence[Path],
    slug: Optional[str],
    dotenv: bool,
    start_dir: Optional[Path],
    indent: Optional[int],
    with_provenance: bool,
) -> None:
    """Print every resolved key below PREFIX as flat dotted JSON."""

    with _open_store(files, slug, dotenv, start_dir) as store:
        data = snapshot(store, prefix)
        payload: dict[str, Any] = data
        if with_provenance:
            payload = {"config": data, "provenance": provenance(store, data)}
    click.echo(json.dumps(payload, indent=indent, separators=(",", ":"), ensure_ascii=False))


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=_DIST_NAME,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
