from __future__ import annotations

import errno
import socket
from collections.abc import Iterator
from pathlib import Path

import pytest

from lib_log_syslog.adapters.transports import (
    TcpFraming,
    TcpTransport,
    UdpTransport,
    UnixDatagramTransport,
    UnixStreamTransport,
    connect_recommended,
    connect_transport,
)
from lib_log_syslog.domain.address import TransportAddress, TransportKind
from tests.os_markers import OS_AGNOSTIC, POSIX_ONLY


def recv_until(conn: socket.socket, terminator: bytes, limit: int = 4096) -> bytes:
    data = b""
    while terminator not in data and len(data) < limit:
        chunk = conn.recv(limit)
        if not chunk:
            break
        data += chunk
    return data


@pytest.fixture
def dgram_receiver(socket_dir: Path) -> Iterator[tuple[socket.socket, str]]:
    path = str(socket_dir / "dgram.sock")
    receiver = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
    receiver.bind(path)
    receiver.settimeout(5)
    try:
        yield receiver, path
    finally:
        receiver.close()


@pytest.fixture
def stream_listener(socket_dir: Path) -> Iterator[tuple[socket.socket, str]]:
    path = str(socket_dir / "stream.sock")
    listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    listener.bind(path)
    listener.listen(1)
    listener.settimeout(5)
    try:
        yield listener, path
    finally:
        listener.close()


@pytest.fixture
def udp_receiver() -> Iterator[socket.socket]:
    receiver = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    receiver.bind(("127.0.0.1", 0))
    receiver.settimeout(5)
    try:
        yield receiver
    finally:
        receiver.close()


@pytest.fixture
def tcp_listener() -> Iterator[socket.socket]:
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    listener.settimeout(5)
    try:
        yield listener
    finally:
        listener.close()


@POSIX_ONLY
def test_unix_datagram_sends_one_datagram_per_message(dgram_receiver: tuple[socket.socket, str]) -> None:
    receiver, path = dgram_receiver
    transport = UnixDatagramTransport.connect(path, timeout=5)
    try:
        assert transport.send(b"<14>1 first") == 11
        transport.send(b"<14>1 second")
        transport.flush()
    finally:
        transport.close()

    assert receiver.recv(4096) == b"<14>1 first"
    assert receiver.recv(4096) == b"<14>1 second"
    assert transport.address == TransportAddress(kind=TransportKind.UNIX_DATAGRAM, path=path)


@POSIX_ONLY
def test_unix_datagram_wraps_a_socketpair() -> None:
    left, right = socket.socketpair(socket.AF_UNIX, socket.SOCK_DGRAM)
    transport = UnixDatagramTransport(left)
    try:
        transport.send(b"paired")
        assert right.recv(64) == b"paired"
        assert transport.address is None
    finally:
        transport.close()
        right.close()


@POSIX_ONLY
def test_unix_datagram_send_to_vanished_receiver_raises_oserror(socket_dir: Path) -> None:
    path = str(socket_dir / "gone.sock")
    receiver = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
    receiver.bind(path)
    transport = UnixDatagramTransport.connect(path)
    receiver.close()
    Path(path).unlink()
    try:
        with pytest.raises(OSError):
            transport.send(b"lost")
    finally:
        transport.close()


@POSIX_ONLY
def test_unix_datagram_connect_to_missing_path_raises(socket_dir: Path) -> None:
    with pytest.raises(FileNotFoundError):
        UnixDatagramTransport.connect(str(socket_dir / "missing.sock"))


@POSIX_ONLY
def test_unix_stream_terminates_messages_with_nul(stream_listener: tuple[socket.socket, str]) -> None:
    listener, path = stream_listener
    transport = UnixStreamTransport.connect(path, timeout=5)
    conn, _ = listener.accept()
    try:
        assert transport.send(b"<14>1 one") == 9
        transport.send(b"<14>1 two")
        conn.settimeout(5)
        data = recv_until(conn, b"two\x00")
    finally:
        transport.close()
        conn.close()

    assert data == b"<14>1 one\x00<14>1 two\x00"


@OS_AGNOSTIC
def test_udp_transport_delivers_datagrams(udp_receiver: socket.socket) -> None:
    host, port = udp_receiver.getsockname()
    transport = UdpTransport.connect(host, port, timeout=5)
    try:
        assert transport.send(b"<14>1 over udp") == 14
    finally:
        transport.close()

    assert udp_receiver.recv(4096) == b"<14>1 over udp"
    assert str(transport.address) == f"udp://{host}:{port}"


@OS_AGNOSTIC
@pytest.mark.parametrize(
    "framing, expected",
    [
        (TcpFraming.OCTET_COUNTING, b"9 <14>1 one10 <14>1 two!"),
        (TcpFraming.NON_TRANSPARENT, b"<14>1 one\n<14>1 two!\n"),
    ],
)
def test_tcp_transport_frames_messages(tcp_listener: socket.socket, framing: TcpFraming, expected: bytes) -> None:
    host, port = tcp_listener.getsockname()
    transport = TcpTransport.connect(host, port, timeout=5, framing=framing)
    conn, _ = tcp_listener.accept()
    try:
        assert transport.send(b"<14>1 one") == 9
        transport.send(b"<14>1 two!")
        transport.close()
        conn.settimeout(5)
        data = recv_until(conn, b"\x00", limit=len(expected))
    finally:
        conn.close()

    assert data == expected


@OS_AGNOSTIC
def test_tcp_connect_refused_raises(tcp_listener: socket.socket) -> None:
    host, port = tcp_listener.getsockname()
    tcp_listener.close()

    with pytest.raises(OSError):
        TcpTransport.connect(host, port, timeout=2)


@pytest.mark.parametrize("name", ["newline", "non_transparent", "NON-TRANSPARENT"])
def test_tcp_framing_names(name: str) -> None:
    assert TcpFraming.from_name(name) is TcpFraming.NON_TRANSPARENT


def test_tcp_framing_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="tcp framing"):
        TcpFraming.from_name("lengthy")


@OS_AGNOSTIC
def test_connect_transport_dispatches_inet_kinds(udp_receiver: socket.socket, tcp_listener: socket.socket) -> None:
    udp_host, udp_port = udp_receiver.getsockname()
    tcp_host, tcp_port = tcp_listener.getsockname()

    udp = connect_transport(TransportAddress(kind=TransportKind.UDP, host=udp_host, port=udp_port))
    tcp = connect_transport(
        TransportAddress(kind=TransportKind.TCP, host=tcp_host, port=tcp_port),
        tcp_framing="non-transparent",
    )
    try:
        assert isinstance(udp, UdpTransport)
        assert isinstance(tcp, TcpTransport)
        assert tcp.framing is TcpFraming.NON_TRANSPARENT
    finally:
        udp.close()
        tcp.close()


@POSIX_ONLY
def test_connect_transport_dispatches_unix_kinds(
    dgram_receiver: tuple[socket.socket, str],
    stream_listener: tuple[socket.socket, str],
) -> None:
    dgram = connect_transport(TransportAddress(kind=TransportKind.UNIX_DATAGRAM, path=dgram_receiver[1]))
    stream = connect_transport(TransportAddress(kind=TransportKind.UNIX_STREAM, path=stream_listener[1]))
    try:
        assert isinstance(dgram, UnixDatagramTransport)
        assert isinstance(stream, UnixStreamTransport)
    finally:
        dgram.close()
        stream.close()


@POSIX_ONLY
def test_connect_recommended_returns_first_reachable_datagram_socket(
    socket_dir: Path,
    dgram_receiver: tuple[socket.socket, str],
) -> None:
    receiver, path = dgram_receiver
    transport = connect_recommended(paths=(str(socket_dir / "missing.sock"), path))
    try:
        assert isinstance(transport, UnixDatagramTransport)
        transport.send(b"probe")
    finally:
        transport.close()

    assert receiver.recv(64) == b"probe"


@POSIX_ONLY
def test_connect_recommended_falls_back_to_stream(stream_listener: tuple[socket.socket, str]) -> None:
    _listener, path = stream_listener
    transport = connect_recommended(paths=(path,))
    try:
        assert isinstance(transport, UnixStreamTransport)
        assert transport.address is not None
        assert transport.address.kind is TransportKind.UNIX_STREAM
    finally:
        transport.close()


@POSIX_ONLY
def test_connect_recommended_datagram_only_skips_stream_sockets(stream_listener: tuple[socket.socket, str]) -> None:
    with pytest.raises(OSError) as excinfo:
        connect_recommended(paths=(stream_listener[1],), datagram_only=True)

    assert excinfo.value.errno == errno.EPROTOTYPE


@POSIX_ONLY
def test_connect_recommended_raises_last_error_when_nothing_answers(socket_dir: Path) -> None:
    with pytest.raises(FileNotFoundError):
        connect_recommended(paths=(str(socket_dir / "a.sock"), str(socket_dir / "b.sock")))


def test_connect_recommended_requires_candidates() -> None:
    with pytest.raises(FileNotFoundError, match="no syslog socket paths"):
        connect_recommended(paths=())


@POSIX_ONLY
def test_connect_recommended_reports_the_final_candidate_error(socket_dir: Path) -> None:
    not_a_socket = socket_dir / "plain-file"
    not_a_socket.write_text("")

    with pytest.raises(ConnectionRefusedError):
        connect_recommended(paths=(str(socket_dir / "missing.sock"), str(not_a_socket)))
