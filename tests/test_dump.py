import io

import pytest

from adbkit.dump import (
    DumpReader,
    DumpWriter,
    close_dump,
    dump,
    dump_to_writer,
    is_dump_enabled,
    set_dump_file,
)


@pytest.fixture(autouse=True)
def _reset_dump():
    close_dump()
    yield
    close_dump()


def test_dump_to_writer_records_data():
    sink = io.BytesIO()
    dump_to_writer(sink)
    dump(b"OKAY")
    assert is_dump_enabled() is True
    assert sink.getvalue() == b"OKAY"


def test_dump_to_writer_none_disables():
    sink = io.BytesIO()
    dump_to_writer(sink)
    dump_to_writer(None)
    dump(b"ignored")
    assert is_dump_enabled() is False
    assert sink.getvalue() == b""


def test_nothing_recorded_when_disabled():
    sink = io.BytesIO()
    dump_to_writer(sink)
    close_dump()
    dump(b"data")
    assert sink.getvalue() == b""


def test_set_dump_file_appends(tmp_path):
    path = tmp_path / "traffic.dump"
    path.write_bytes(b"old")
    set_dump_file(path)
    dump(b"new")
    close_dump()
    assert path.read_bytes() == b"oldnew"


def test_set_dump_file_failure_disables(tmp_path):
    with pytest.raises(OSError):
        set_dump_file(tmp_path / "missing" / "traffic.dump")
    assert is_dump_enabled() is False


def test_dump_reader_passes_through_and_records():
    sink = io.BytesIO()
    dump_to_writer(sink)
    reader = DumpReader(io.BytesIO(b"abcdef"))
    assert reader.read(4) == b"abcd"
    assert reader.read() == b"ef"
    assert sink.getvalue() == b"abcdef"


def test_dump_writer_forwards_and_records():
    sink = io.BytesIO()
    target = io.BytesIO()
    dump_to_writer(sink)
    writer = DumpWriter(target)
    assert writer.write(b"host:version") == len(b"host:version")
    assert target.getvalue() == b"host:version"
    assert sink.getvalue() == b"host:version"