"""Remote addresses: either a socket address or a free-form string such as a URL."""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass
from typing import Tuple, Union

__all__ = ["SocketAddr", "parse_socket_addr", "RemoteAddr", "to_remote_addr"]

#: A socket address as ``(ip, port)``, the ip in its canonical text form.
SocketAddr = Tuple[str, int]

_MAX_PORT = 0xFFFF


def _check_port(port: int) -> int:
    if isinstance(port, bool) or not isinstance(port, int):
        raise TypeError(f"Port must be an integer, not {type(port).__name__}")
    if not 0 <= port <= _MAX_PORT:
        raise ValueError(f"Port {port} is out of range")
    return port


def parse_socket_addr(text: str) -> SocketAddr:
    """Parse ``'ip:port'`` or ``'[ipv6]:port'`` into a socket address.

    Raises ``ValueError`` if ``text`` does not have that form.
    """
    host, sep, port_text = text.rpartition(":")
    if not sep or not port_text or not (port_text.isascii() and port_text.isdigit()):
        raise ValueError(f"Invalid socket address: {text!r}")
    port = int(port_text)
    if port > _MAX_PORT:
        raise ValueError(f"Invalid socket address: {text!r}")

    ip: ipaddress.IPv4Address | ipaddress.IPv6Address
    try:
        if host.startswith("[") and host.endswith("]"):
            ip = ipaddress.IPv6Address(host[1:-1])
        else:
            ip = ipaddress.IPv4Address(host)
    except ValueError as error:
        raise ValueError(f"Invalid socket address: {text!r}") from error
    return str(ip), port


def _format_socket_addr(addr: SocketAddr) -> str:
    host, port = addr
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


@dataclass(frozen=True)
class RemoteAddr:
    """A remote address: a socket address ``(ip, port)`` or a string.

    Strings serve protocols that need more than a socket address to connect,
    such as a WebSocket URL.
    """

    value: Union[SocketAddr, str]

    def __post_init__(self) -> None:
        if isinstance(self.value, str):
            return
        if (
            isinstance(self.value, tuple)
            and len(self.value) == 2
            and isinstance(self.value[0], str)
        ):
            _check_port(self.value[1])
            return
        raise TypeError(f"Unsupported remote address value: {self.value!r}")

    def is_socket_addr(self) -> bool:
        """True if this holds a socket address."""
        return isinstance(self.value, tuple)

    def is_string(self) -> bool:
        """True if this holds a string."""
        return isinstance(self.value, str)

    def socket_addr(self) -> SocketAddr:
        """The socket address; raises ``ValueError`` if this holds a string."""
        if isinstance(self.value, tuple):
            return self.value
        raise ValueError("The RemoteAddr must be a SocketAddr")

    def string(self) -> str:
        """The string; raises ``ValueError`` if this holds a socket address."""
        if isinstance(self.value, str):
            return self.value
        raise ValueError("The RemoteAddr must be a String")

    def to_socket_addrs(self) -> list[SocketAddr]:
        """The socket addresses this resolves to; raises ``ValueError`` for strings."""
        if isinstance(self.value, tuple):
            return [self.value]
        raise ValueError("The RemoteAddr is not a SocketAddr")

    def __str__(self) -> str:
        if isinstance(self.value, tuple):
            return _format_socket_addr(self.value)
        return self.value


def _resolve(host: object, port: int) -> SocketAddr:
    _check_port(port)
    if isinstance(host, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return str(host), port
    if not isinstance(host, str):
        raise TypeError(f"Unsupported host: {host!r}")
    try:
        return str(ipaddress.ip_address(host)), port
    except ValueError:
        pass
    infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    if not infos:
        raise OSError(f"Could not resolve {host!r}")
    sockaddr = infos[0][4]
    return str(ipaddress.ip_address(sockaddr[0])), int(sockaddr[1])


def to_remote_addr(value: object) -> RemoteAddr:
    """Turn ``value`` into a :class:`RemoteAddr`.

    A string in ``'ip:port'`` form becomes a socket address, any other string
    is kept as a string. A ``(host, port)`` tuple is resolved to a socket
    address; the host may be an ip text, an ``ipaddress`` object or a name.
    """
    if isinstance(value, RemoteAddr):
        return value
    if isinstance(value, str):
        try:
            return RemoteAddr(parse_socket_addr(value))
        except ValueError:
            return RemoteAddr(value)
    if isinstance(value, tuple) and len(value) == 2:
        host, port = value
        return RemoteAddr(_resolve(host, port))
    raise TypeError(f"Cannot convert {value!r} to a RemoteAddr")