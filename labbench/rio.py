"""Robust I/O: reads and writes that survive short counts, plus signal-safe output."""

from __future__ import annotations

import os
import string

RIO_BUFSIZE = 8192
"""Size of the internal buffer of a Rio reader."""

MAXLINE = 8192
"""Maximum text line length."""

MAXBUF = 8192
"""Maximum I/O buffer size."""

_DIGITS = string.digits + string.ascii_lowercase


def readn(fd: int, n: int) -> bytes:
    """Read up to ``n`` bytes from ``fd``, stopping early only at end of file."""
    if n < 0:
        raise ValueError(f"byte count must not be negative: {n}")
    chunks: list[bytes] = []
    nleft = n
    while nleft > 0:
        chunk = os.read(fd, nleft)
        if not chunk:
            break
        chunks.append(chunk)
        nleft -= len(chunk)
    return b"".join(chunks)


def writen(fd: int, data: bytes | str) -> int:
    """Write all of ``data`` to ``fd`` and return the number of bytes written."""
    if isinstance(data, str):
        data = data.encode()
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        if written <= 0:
            raise OSError(f"write to descriptor {fd} made no progress")
        view = view[written:]
    return len(data)


class Rio:
    """A buffered reader over a file descriptor."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._buf = b""
        self._pos = 0

    def _read(self, n: int) -> bytes:
        """Return up to ``n`` buffered bytes, refilling once if empty; b"" at EOF."""
        if self._pos >= len(self._buf):
            self._buf = os.read(self.fd, RIO_BUFSIZE)
            self._pos = 0
            if not self._buf:
                return b""
        chunk = self._buf[self._pos:self._pos + n]
        self._pos += len(chunk)
        return chunk

    def readnb(self, n: int) -> bytes:
        """Read up to ``n`` bytes, stopping early only at end of file."""
        if n < 0:
            raise ValueError(f"byte count must not be negative: {n}")
        chunks: list[bytes] = []
        nleft = n
        while nleft > 0:
            chunk = self._read(nleft)
            if not chunk:
                break
            chunks.append(chunk)
            nleft -= len(chunk)
        return b"".join(chunks)

    def readlineb(self, maxlen: int = MAXLINE) -> bytes:
        """Read one line, newline included, of at most ``maxlen - 1`` bytes.

        Returns b"" at end of file.
        """
        line = bytearray()
        while len(line) < maxlen - 1:
            c = self._read(1)
            if not c:
                break
            line += c
            if c == b"\n":
                break
        return bytes(line)

    def __iter__(self):
        """Yield lines until end of file."""
        while line := self.readlineb():
            yield line


def ltoa(value: int, base: int = 10) -> str:
    """Format an integer in ``base`` (2 to 36) with lower-case digits."""
    if not 2 <= base <= len(_DIGITS):
        raise ValueError(f"base must be between 2 and {len(_DIGITS)}: {base}")
    sign = "-" if value < 0 else ""
    v = abs(value)
    digits: list[str] = []
    while True:
        v, c = divmod(v, base)
        digits.append(_DIGITS[c])
        if v == 0:
            break
    return sign + "".join(reversed(digits))


def sio_puts(s: str | bytes) -> int:
    """Write a string straight to standard output and return the bytes written."""
    return os.write(1, s.encode() if isinstance(s, str) else s)


def sio_putl(value: int) -> int:
    """Write an integer in decimal straight to standard output."""
    return sio_puts(ltoa(value, 10))