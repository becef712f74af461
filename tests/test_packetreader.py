import io

from adbkit.tcpusb.packet import Command, assemble, parse
from adbkit.tcpusb.packetreader import ChecksumError, MagicError, PacketReader


class TrickleStream:
    def __init__(self, data, step):
        self._data = data
        self._step = step
        self.closed = False

    def read(self, size=-1):
        chunk, self._data = self._data[: self._step], self._data[self._step :]
        return chunk

    def close(self):
        self.closed = True


def collect(stream):
    reader = PacketReader(stream)
    events = []
    reader.on("packet", lambda p: events.append(("packet", p)))
    reader.on("end", lambda _: events.append(("end", None)))
    reader.on("error", lambda e: events.append(("error", e)))
    reader.run()
    return events


def test_reads_packets_and_end():
    first = assemble(Command.CNXN, 1, 4096, b"host::\0")
    second = assemble(Command.OKAY, 3, 4)
    events = collect(io.BytesIO(first + second))
    assert events == [
        ("packet", parse(first)),
        ("packet", parse(second)),
        ("end", None),
    ]


def test_packets_split_across_reads():
    raw = assemble(Command.WRTE, 5, 6, b"abcdefghij") + assemble(Command.CLSE, 5, 6)
    events = collect(TrickleStream(raw, 5))
    packets = [p for kind, p in events if kind == "packet"]
    assert [p.data for p in packets] == [b"abcdefghij", None]
    assert events[-1] == ("end", None)


def test_empty_stream_only_ends():
    assert collect(io.BytesIO(b"")) == [("end", None)]


def test_checksum_mismatch_reports_error():
    raw = bytearray(assemble(Command.WRTE, 1, 2, b"abc"))
    raw[24] ^= 1
    events = collect(io.BytesIO(bytes(raw)))
    assert len(events) == 1
    kind, error = events[0]
    assert kind == "error"
    assert isinstance(error, ChecksumError)
    assert str(error) == "Checksum mismatch"
    assert error.packet.arg0 == 1


def test_magic_mismatch_reports_error():
    raw = bytearray(assemble(Command.OKAY, 1, 2))
    raw[20] ^= 0xFF
    events = collect(io.BytesIO(bytes(raw)))
    kind, error = events[0]
    assert kind == "error"
    assert isinstance(error, MagicError)
    assert str(error) == "Magic value mismatch"


def test_close_closes_stream():
    stream = TrickleStream(b"", 1)
    PacketReader(stream).close()
    assert stream.closed is True