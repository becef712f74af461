import io
import threading

import pytest

from adbkit.tcpusb.packet import Command, assemble, create_packet, parse
from adbkit.tcpusb.service import Service, ServiceError


class RecordingSocket:
    def __init__(self):
        self.writes = []
        self._cond = threading.Condition()

    def write(self, data):
        with self._cond:
            self.writes.append(bytes(data))
            self._cond.notify_all()
        return len(data)

    def wait_for(self, count, timeout=5):
        with self._cond:
            assert self._cond.wait_for(lambda: len(self.writes) >= count, timeout)
            return [parse(w) for w in self.writes]


class FailingTransport:
    def read(self, size=-1):
        raise OSError("boom")

    def write(self, data):
        return len(data)


def test_end_before_open_sends_close_with_zero_local_id():
    sock = RecordingSocket()
    service = Service(None, "serial", 5, 9, sock)
    ended = []
    service.on("end", ended.append)
    service.end()
    service.end()
    assert sock.writes == [assemble(Command.CLSE, 0, 9)]
    assert ended == [None]
    assert service.is_ended is True


def test_loopback_echo_and_close():
    sock = RecordingSocket()
    service = Service(None, "serial", 5, 9, sock)
    service.handle(create_packet(Command.OPEN, 9, 0, b"shell:\0"))
    first = sock.wait_for(1)[0]
    assert (first.command, first.arg0, first.arg1) == (Command.OKAY, 5, 9)
    assert service.is_opened is True

    service.handle(create_packet(Command.WRTE, 9, 5, b"hello"))
    packets = sock.wait_for(3)
    later = packets[1:]
    assert sorted(p.command for p in later) == sorted([Command.OKAY, Command.WRTE])
    echoed = next(p for p in later if p.command == Command.WRTE)
    assert echoed.data == b"hello"
    assert (echoed.arg0, echoed.arg1) == (5, 9)

    service.handle(create_packet(Command.OKAY, 9, 5))
    service.handle(create_packet(Command.CLSE, 9, 5))
    last = sock.wait_for(4)[3]
    assert (last.command, last.arg0, last.arg1) == (Command.CLSE, 5, 9)
    assert service.is_ended is True


def test_transport_factory_receives_service_name():
    sock = RecordingSocket()
    names = []

    def factory(name):
        names.append(name)
        return io.BytesIO(b"payload")

    service = Service(None, "serial", 2, 3, sock, transport_factory=factory)
    service.handle(create_packet(Command.OPEN, 3, 0, b"sync:\0"))
    packets = sock.wait_for(2)
    assert names == ["sync:"]
    assert packets[1].command == Command.WRTE
    assert packets[1].data == b"payload"

    service.handle(create_packet(Command.OKAY, 3, 2))
    packets = sock.wait_for(3)
    assert packets[2].command == Command.CLSE


def test_transport_read_error_is_reported():
    sock = RecordingSocket()
    errors = []
    service = Service(None, "serial", 1, 4, sock, transport_factory=lambda n: FailingTransport())
    service.on("error", errors.append)
    service.handle(create_packet(Command.OPEN, 4, 0, b"tcp:80\0"))
    packets = sock.wait_for(2)
    assert packets[1].command == Command.CLSE
    assert len(errors) == 1
    assert str(errors[0]) == "boom"


@pytest.mark.parametrize("command", [Command.OKAY, Command.WRTE, Command.CLSE])
def test_premature_packets_rejected(command):
    service = Service(None, "serial", 1, 2, RecordingSocket())
    with pytest.raises(ServiceError, match="Premature"):
        service.handle(create_packet(command, 2, 1))


def test_unexpected_packet_rejected():
    service = Service(None, "serial", 1, 2, RecordingSocket())
    with pytest.raises(ServiceError, match="Unexpected packet"):
        service.handle(create_packet(Command.SYNC, 1, 1))


def test_empty_service_name_rejected():
    service = Service(None, "serial", 1, 2, RecordingSocket())
    with pytest.raises(ServiceError, match="empty service name"):
        service.handle(create_packet(Command.OPEN, 2, 0, b""))


def test_packets_after_end_are_ignored():
    sock = RecordingSocket()
    service = Service(None, "serial", 1, 2, sock)
    service.end()
    service.handle(create_packet(Command.SYNC, 1, 1))
    assert len(sock.writes) == 1