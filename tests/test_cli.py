"""CLI behaviour coverage for the click adapter."""

from __future__ import annotations

import os
import socket
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Callable

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner

from lib_log_syslog import __init__conf__
from lib_log_syslog import cli as cli_mod
from lib_log_syslog import runtime
from lib_log_syslog.domain.errors import BufferOverflowError
from tests.os_markers import OS_AGNOSTIC, POSIX_ONLY


def summary_info() -> str:
    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


def run_cli(args: list[str] | None = None) -> tuple[int, str, BaseException | None]:
    """Invoke the click command with ``CliRunner`` and capture output."""

    runner = CliRunner()
    original_argv = sys.argv
    sys.argv = [__init__conf__.shell_command]
    try:
        result = runner.invoke(
            cli_mod.cli,
            args or [],
            prog_name=__init__conf__.shell_command,
        )
    finally:
        sys.argv = original_argv
    return result.exit_code, result.output, result.exception


@pytest.fixture(autouse=True)
def _no_leftover_runtime() -> Iterator[None]:
    yield
    if runtime.is_initialised():
        runtime.shutdown()


@pytest.fixture(autouse=True)
def _clean_syslog_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TRANSPORT", "ADDRESS", "MAX_BYTES", "OVERFLOW", "USE_DOTENV", "FORMAT"):
        monkeypatch.delenv(f"LOG_SYSLOG_{name}", raising=False)


@OS_AGNOSTIC
def test_cli_without_subcommand_prints_summary() -> None:
    exit_code, stdout, _ = run_cli()

    assert exit_code == 0
    assert stdout == summary_info()


@OS_AGNOSTIC
def test_cli_info_command_matches_summary() -> None:
    result = CliRunner().invoke(cli_mod.cli, ["info"])

    assert result.exit_code == 0
    assert result.output == summary_info()
    assert result.output.startswith("Info for lib_log_syslog:")


@OS_AGNOSTIC
def test_cli_version_option() -> None:
    exit_code, stdout, _ = run_cli(["--version"])

    assert exit_code == 0
    assert __init__conf__.version in stdout


@OS_AGNOSTIC
def test_cli_no_traceback_option(monkeypatch: pytest.MonkeyPatch) -> None:
    """`--no-traceback` should disable verbose tracebacks for subsequent commands."""

    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", True, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", True, raising=False)

    exit_code, _stdout, _exception = run_cli(["--no-traceback", "info"])

    assert exit_code == 0
    assert lib_cli_exit_tools.config.traceback is False
    assert lib_cli_exit_tools.config.traceback_force_color is False


@OS_AGNOSTIC
def test_send_dry_run_prints_rendered_message() -> None:
    exit_code, stdout, exception = run_cli(
        ["send", "hello collector", "--dry-run", "--address", "collector.invalid:1514", "--app-name", "demo", "--facility", "local0"],
    )

    assert exception is None
    assert exit_code == 0
    first_line, budget_line = stdout.strip().splitlines()
    assert first_line.startswith("<134>1 ")
    assert first_line.endswith(f" demo {os.getpid()} - - hello collector")
    assert budget_line == f"{len(first_line.encode())} bytes, budget 1024"


@OS_AGNOSTIC
def test_send_dry_run_truncates_to_max_bytes() -> None:
    exit_code, stdout, _ = run_cli(["send", "x" * 200, "--dry-run", "--address", "collector.invalid:514", "--max-bytes", "80"])

    assert exit_code == 0
    first_line, budget_line = stdout.strip().splitlines()
    assert len(first_line.encode()) == 80
    assert budget_line == "80 bytes, budget 80"


@OS_AGNOSTIC
def test_send_dry_run_with_fail_overflow_raises() -> None:
    exit_code, _stdout, exception = run_cli(
        ["send", "x" * 200, "--dry-run", "--address", "collector.invalid:514", "--max-bytes", "80", "--overflow", "fail"],
    )

    assert exit_code != 0
    assert isinstance(exception, BufferOverflowError)


@OS_AGNOSTIC
def test_send_rejects_inet_transport_without_address() -> None:
    exit_code, stdout, _ = run_cli(["send", "hi", "--transport", "tcp"])

    assert exit_code == 2
    assert "HOST:PORT" in stdout


@OS_AGNOSTIC
def test_send_delivers_over_udp() -> None:
    receiver = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    receiver.bind(("127.0.0.1", 0))
    receiver.settimeout(5)
    host, port = receiver.getsockname()
    try:
        exit_code, stdout, exception = run_cli(
            ["send", "over the wire", "--level", "error", "--address", f"{host}:{port}", "--app-name", "demo"],
        )
        datagram = receiver.recv(4096)
    finally:
        receiver.close()

    assert exception is None
    assert exit_code == 0
    assert datagram.startswith(b"<11>1 ")
    assert datagram.endswith(b" - - over the wire")
    assert stdout.strip() == f"sent {len(datagram)} bytes to udp://{host}:{port}"
    assert not runtime.is_initialised()


@OS_AGNOSTIC
def test_send_reports_unreachable_collector() -> None:
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    host, port = listener.getsockname()
    listener.close()

    exit_code, stdout, _ = run_cli(["send", "nobody listens", "--transport", "tcp", "--address", f"{host}:{port}"])

    assert exit_code == 1
    assert "syslog send failed" in stdout
    assert not runtime.is_initialised()


@POSIX_ONLY
def test_probe_lists_socket_status(monkeypatch: pytest.MonkeyPatch, socket_dir: Path) -> None:
    live = str(socket_dir / "live.sock")
    missing = str(socket_dir / "gone.sock")
    receiver = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
    receiver.bind(live)
    monkeypatch.setattr(cli_mod, "RECOMMENDED_SOCKET_PATHS", (live, missing))
    try:
        exit_code, stdout, _ = run_cli(["probe"])
    finally:
        receiver.close()

    assert exit_code == 0
    assert "Local syslog sockets" in stdout
    assert "datagram" in stdout
    assert "missing" in stdout


@OS_AGNOSTIC
def test_main_restores_traceback_preferences(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", True, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", True, raising=False)

    recorded: dict[str, bool] = {}

    def fake_run_cli(command: Callable[..., int], argv: list[str] | None = None, *, prog_name: str | None = None, **_: object) -> int:
        result = CliRunner().invoke(command, ["--no-traceback", "info"] if argv is None else argv)
        if result.exception is not None:
            raise result.exception
        recorded["traceback"] = lib_cli_exit_tools.config.traceback
        recorded["traceback_force_color"] = lib_cli_exit_tools.config.traceback_force_color
        return result.exit_code

    monkeypatch.setattr(lib_cli_exit_tools, "run_cli", fake_run_cli)

    exit_code = cli_mod.main(["--no-traceback", "info"])

    assert exit_code == 0
    assert recorded == {"traceback": False, "traceback_force_color": False}
    assert lib_cli_exit_tools.config.traceback is True
    assert lib_cli_exit_tools.config.traceback_force_color is True


@OS_AGNOSTIC
def test_main_consumes_sys_argv(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", False, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", False, raising=False)
    monkeypatch.setattr(sys, "argv", [__init__conf__.shell_command, "info"], raising=False)

    exit_code = cli_mod.main()
    captured = capsys.readouterr()

    assert exit_code == 0
    assert "Info for lib_log_syslog" in captured.out
