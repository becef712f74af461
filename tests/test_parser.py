import io
import re

import pytest

from adbkit.parser import FailError, Parser, PrematureEOFError, UnexpectedDataError
from adbkit.protocol import ProtocolError, encode_data


def make(data: bytes) -> Parser:
    return Parser(io.BytesIO(data))


def test_read_bytes_exact():
    parser = make(b"abcdef")
    assert parser.read_bytes(3) == b"abc"
    assert parser.read_bytes(3) == b"def"


def test_read_bytes_zero():
    assert make(b"").read_bytes(0) == b""


def test_read_bytes_premature_eof_reports_missing():
    payload = b"abc"
    requested = 5
    with pytest.raises(PrematureEOFError) as info:
        make(payload).read_bytes(requested)
    assert info.value.missing_bytes == requested - len(payload)


def test_read_ascii():
    assert make(b"OKAYrest").read_ascii(4) == "OKAY"


def test_read_value():
    assert make(encode_data(b"abc")).read_value() == b"abc"


def test_read_value_bad_length():
    with pytest.raises(ProtocolError):
        make(b"zzzzabc").read_value()


def test_read_error_builds_fail_error():
    error = make(encode_data(b"boom")).read_error()
    assert isinstance(error, FailError)
    assert error.message == "boom"
    assert str(error) == "Failure: 'boom'"


def test_read_line_strips_carriage_return():
    parser = make(b"one\r\ntwo\n")
    assert parser.read_line() == b"one"
    assert parser.read_line() == b"two"
    with pytest.raises(PrematureEOFError):
        parser.read_line()


def test_read_until():
    parser = make(b"key=value")
    assert parser.read_until(ord("=")) == b"key"
    assert parser.read_bytes(5) == b"value"


def test_search_line_returns_match():
    parser = make(b"noise\nSuccess\nmore\n")
    match = parser.search_line(re.compile(r"^(Success|Failed)$"))
    assert match.group(1) == "Success"
    assert parser.read_line() == b"more"


def test_search_line_accepts_string_pattern():
    match = make(b"x\nFailure [CODE]\n").search_line(r"Failure \[(.*?)\]")
    assert match.group(1) == "CODE"


def test_search_line_eof():
    with pytest.raises(PrematureEOFError):
        make(b"a\nb\n").search_line("zzz")


def test_read_byte_flow_copies():
    target = io.BytesIO()
    make(b"0123456789").read_byte_flow(6, target)
    assert target.getvalue() == b"012345"


def test_read_byte_flow_premature():
    with pytest.raises(PrematureEOFError):
        make(b"abc").read_byte_flow(10, io.BytesIO())


def test_read_all_marks_ended():
    parser = make(b"everything")
    assert parser.read_all() == b"everything"
    assert parser.ended


def test_end_closes_stream_once():
    stream = io.BytesIO(b"data")
    parser = Parser(stream)
    parser.end()
    parser.end()
    assert stream.closed
    assert parser.raw() is stream


def test_unexpected():
    error = make(b"").unexpected(b"XXXX", "OKAY or FAIL")
    assert isinstance(error, UnexpectedDataError)
    assert str(error) == "Unexpected 'XXXX', was expecting OKAY or FAIL"