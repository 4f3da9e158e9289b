"""Command-line interface for sending and inspecting syslog traffic.

Purpose
-------
Give operators a quick way to check a collector from the shell: send one
record, preview the exact bytes a record renders to, or probe which local
syslog sockets are reachable.

Contents
--------
* :func:`cli` - Click group carrying the ``.env`` and traceback toggles.
* ``info`` / ``send`` / ``probe`` subcommands.
* :func:`main` - entry point wrapping :func:`lib_cli_exit_tools.run_cli`.

System Role
-----------
Presentation layer. Configuration flows through
:func:`lib_log_syslog.config.load_config`, sending through the runtime façade,
so the CLI exercises the same paths host applications use.
"""

from __future__ import annotations

import errno
import os
from typing import Any, Sequence

import click
import lib_cli_exit_tools
from rich.console import Console
from rich.table import Table

from . import __init__conf__
from . import config as log_config
from . import runtime
from .adapters.transports import RECOMMENDED_SOCKET_PATHS, UnixDatagramTransport, UnixStreamTransport
from .domain.levels import LogLevel
from .runtime._composition import build_writer

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_LEVEL_CHOICES = [level.name.lower() for level in LogLevel]


@click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.version_option(__init__conf__.version, "--version", "-V", prog_name=__init__conf__.shell_command)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load the nearest .env before reading configuration (default: ${log_config.DOTENV_ENV_VAR}).",
)
@click.option(
    "--traceback/--no-traceback",
    default=None,
    help="Show full Python tracebacks on errors.",
)
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool | None, traceback: bool | None) -> None:
    """Send records to syslog and inspect local syslog endpoints."""

    if log_config.should_use_dotenv(use_dotenv, os.environ.get(log_config.DOTENV_ENV_VAR)):
        log_config.enable_dotenv()
    if traceback is not None:
        lib_cli_exit_tools.config.traceback = traceback
        lib_cli_exit_tools.config.traceback_force_color = traceback
    if ctx.invoked_subcommand is None:
        __init__conf__.print_info(writer=lambda text: click.echo(text, nl=False))


@cli.command("info", context_settings=CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    __init__conf__.print_info(writer=lambda text: click.echo(text, nl=False))


@cli.command("send", context_settings=CONTEXT_SETTINGS)
@click.argument("message")
@click.option("--level", type=click.Choice(_LEVEL_CHOICES, case_sensitive=False), default="info", show_default=True)
@click.option("--transport", "transport_kind", default=None, help="auto, unix, unix-stream, udp or tcp.")
@click.option("--address", default=None, help="Socket path or HOST:PORT of the collector.")
@click.option("--facility", default=None, help="Syslog facility, e.g. user or local0.")
@click.option("--app-name", default=None, help="APP-NAME header field (default: program name).")
@click.option("--max-bytes", type=int, default=None, help="Per-message byte budget.")
@click.option("--overflow", type=click.Choice(["ignore", "fail"], case_sensitive=False), default=None)
@click.option("--dry-run", is_flag=True, help="Print the rendered message instead of sending it.")
def cli_send(
    message: str,
    level: str,
    transport_kind: str | None,
    address: str | None,
    facility: str | None,
    app_name: str | None,
    max_bytes: int | None,
    overflow: str | None,
    dry_run: bool,
) -> None:
    """Send MESSAGE as one syslog record."""

    overrides: dict[str, Any] = {
        "transport": transport_kind,
        "address": address,
        "facility": facility,
        "app_name": app_name,
        "max_bytes": max_bytes,
        "overflow": overflow,
        "level": level,
    }
    try:
        config = log_config.load_config(**overrides)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    if dry_run:
        writer = build_writer(config, connect=False)
        rendered = writer.render(level, message)
        console = Console()
        console.print(rendered.decode("utf-8"), markup=False, highlight=False, soft_wrap=True)
        console.print(f"[dim]{len(rendered)} bytes, budget {writer.capacity}[/dim]")
        return

    runtime.init(config)
    try:
        result = runtime.get("lib_log_syslog.cli").log(level, message)
    finally:
        runtime.shutdown()
    if not result["ok"]:
        raise click.ClickException(f"syslog send failed: {result.get('error', result['reason'])}")
    suffix = " (truncated)" if result["truncated"] else ""
    click.echo(f"sent {result['bytes']} bytes to {config.to_dict()['address'] or 'local syslog socket'}{suffix}")


def _probe_path(path: str) -> str:
    try:
        UnixDatagramTransport.connect(path, timeout=1.0).close()
        return "datagram"
    except OSError as exc:
        if exc.errno != errno.EPROTOTYPE:
            return f"unavailable ({exc.strerror or exc})"
    try:
        UnixStreamTransport.connect(path, timeout=1.0).close()
        return "stream"
    except OSError as exc:
        return f"unavailable ({exc.strerror or exc})"


@cli.command("probe", context_settings=CONTEXT_SETTINGS)
def cli_probe() -> None:
    """Show which well-known local syslog sockets accept connections."""

    table = Table(title="Local syslog sockets")
    table.add_column("Path")
    table.add_column("Exists")
    table.add_column("Status")
    for path in RECOMMENDED_SOCKET_PATHS:
        exists = os.path.exists(path)
        status = _probe_path(path) if exists else "missing"
        table.add_row(path, "yes" if exists else "no", status)
    Console().print(table)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return its exit code, restoring traceback preferences afterwards.

    ``argv`` defaults to ``sys.argv[1:]``. Exceptions are rendered by
    :mod:`lib_cli_exit_tools`, honouring ``--traceback``.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        lib_cli_exit_tools.config.traceback = previous_traceback
        lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
