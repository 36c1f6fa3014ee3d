"""Open client and listening TCP sockets on any address family."""

from __future__ import annotations

import socket

LISTENQ = 1024
"""Backlog passed to listen()."""


class AddressLookupError(OSError):
    """Raised when a host name or port number cannot be resolved."""


def _lookup(host: str | None, port: str | int, flags: int) -> list:
    try:
        return socket.getaddrinfo(host, str(port), type=socket.SOCK_STREAM, flags=flags)
    except socket.gaierror as exc:
        where = f"{host}:{port}" if host is not None else f"port {port}"
        raise AddressLookupError(f"getaddrinfo failed ({where}): {exc.strerror}") from exc


def open_clientfd(hostname: str, port: str | int) -> socket.socket:
    """Connect to ``hostname`` on the numeric ``port`` and return the socket.

    Every address the name resolves to is tried in turn; the error of the
    last failed attempt is raised if none of them connects.
    """
    infos = _lookup(hostname, port, socket.AI_NUMERICSERV | socket.AI_ADDRCONFIG)
    last_error: OSError | None = None
    for family, socktype, proto, _, address in infos:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        try:
            sock.connect(address)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        return sock
    if last_error is not None:
        raise last_error
    raise OSError(f"no usable address for {hostname}:{port}")


def open_listenfd(port: str | int) -> socket.socket:
    """Return a socket listening on the numeric ``port`` on every local address."""
    flags = socket.AI_PASSIVE | socket.AI_ADDRCONFIG | socket.AI_NUMERICSERV
    infos = _lookup(None, port, flags)
    last_error: OSError | None = None
    for family, socktype, proto, _, address in infos:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind(address)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        try:
            sock.listen(LISTENQ)
        except OSError:
            sock.close()
            raise
        return sock
    if last_error is not None:
        raise last_error
    raise OSError(f"no usable address for port {port}")