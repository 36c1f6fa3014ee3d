import os
import threading

import pytest

from labbench.rio import RIO_BUFSIZE, Rio, ltoa, readn, sio_putl, sio_puts, writen


@pytest.fixture
def pipe():
    r, w = os.pipe()
    yield r, w
    for fd in (r, w):
        try:
            os.close(fd)
        except OSError:
            pass


def _feed(pipe, data):
    r, w = pipe
    os.write(w, data)
    os.close(w)
    return r


def test_readlineb_splits_lines(pipe):
    r = _feed(pipe, b"abc\ndef\n")
    rio = Rio(r)
    assert rio.readlineb(100) == b"abc\n"
    assert rio.readlineb(100) == b"def\n"
    assert rio.readlineb(100) == b""


def test_readlineb_respects_maxlen(pipe):
    r = _feed(pipe, b"abcdef\n")
    rio = Rio(r)
    assert rio.readlineb(3) == b"ab"
    assert rio.readlineb(100) == b"cdef\n"


def test_readlineb_maxlen_one_reads_nothing(pipe):
    r = _feed(pipe, b"xyz\n")
    rio = Rio(r)
    assert rio.readlineb(1) == b""
    assert rio.readlineb(10) == b"xyz\n"


def test_readlineb_partial_line_at_eof(pipe):
    r = _feed(pipe, b"no newline")
    rio = Rio(r)
    assert rio.readlineb(100) == b"no newline"
    assert rio.readlineb(100) == b""


def test_readnb_and_readlineb_share_buffer(pipe):
    r = _feed(pipe, b"GET / HTTP/1.0\r\nbody-bytes")
    rio = Rio(r)
    assert rio.readlineb() == b"GET / HTTP/1.0\r\n"
    assert rio.readnb(4) == b"body"
    assert rio.readnb(100) == b"-bytes"
    assert rio.readnb(5) == b""


def test_iteration_yields_all_lines(pipe):
    data = b"one\r\ntwo\r\n\r\n"
    r = _feed(pipe, data)
    lines = list(Rio(r))
    assert b"".join(lines) == data
    assert lines[-1] == b"\r\n"


def test_readnb_negative_count(pipe):
    r = _feed(pipe, b"")
    with pytest.raises(ValueError):
        Rio(r).readnb(-1)


def test_readn_stops_at_eof(pipe):
    r = _feed(pipe, b"hello")
    assert readn(r, 3) == b"hel"
    assert readn(r, 100) == b"lo"
    assert readn(r, 10) == b""


def test_writen_large_round_trip(pipe):
    r, w = pipe
    data = bytes(range(256)) * (4 * RIO_BUFSIZE // 256 + 3)
    received = []

    def reader():
        received.append(readn(r, len(data) + 10))

    t = threading.Thread(target=reader)
    t.start()
    assert writen(w, data) == len(data)
    os.close(w)
    t.join(timeout=10)
    assert received == [data]


def test_writen_accepts_str(pipe):
    r, w = pipe
    assert writen(w, "line\r\n") == 6
    os.close(w)
    assert Rio(r).readlineb() == b"line\r\n"


def test_ltoa_values():
    assert ltoa(0, 10) == "0"
    assert ltoa(255, 16) == "ff"
    assert ltoa(-42) == "-42"


@pytest.mark.parametrize("value", [0, 1, 7, 1000, 123456789, -99])
@pytest.mark.parametrize("base", [2, 8, 10, 16, 36])
def test_ltoa_round_trip(value, base):
    assert int(ltoa(value, base), base) == value


def test_ltoa_bad_base():
    with pytest.raises(ValueError):
        ltoa(5, 1)
    with pytest.raises(ValueError):
        ltoa(5, 37)


def test_sio_puts_writes_stdout(capfd):
    assert sio_puts("hello\n") == 6
    assert capfd.readouterr().out == "hello\n"


def test_sio_putl_writes_decimal(capfd):
    assert sio_putl(12345) == 5
    assert capfd.readouterr().out == "12345"