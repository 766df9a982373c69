"""Network addresses: packed host/port records, a bounded address list and text forms."""

from __future__ import annotations

import ipaddress
import socket
import sys
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from enum import IntEnum

ADDRESS_LIFE_TIME_TS_SEC = 120

_MASK64 = 0xFFFFFFFFFFFFFFFF
_IN_CLASSA_NET = 0xFF000000
_IN_CLASSB_NET = 0xFFFF0000
_IN_CLASSC_NET = 0xFFFFFF00
_SOCKADDR_IN_LEN = 16
_SOCKADDR_IN6_LEN = 28

_IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


class Protocol(IntEnum):
    """Transport protocol of a socket address."""

    UDP = 0x1
    TCP = 0x2


def _swap64(val: int) -> int:
    val &= _MASK64
    if sys.byteorder == "big":
        return val
    return int.from_bytes(val.to_bytes(8, "little"), "big")


def htonll(val: int) -> int:
    """Convert a 64-bit value from host to network byte order."""
    return _swap64(val)


def ntohll(val: int) -> int:
    """Convert a 64-bit value from network to host byte order."""
    return _swap64(val)


def _to_ip(value: object, version: int | None = None) -> _IPAddress:
    if isinstance(value, (bytes, bytearray, memoryview)):
        ip = ipaddress.ip_address(bytes(value))
    elif isinstance(value, (str, ipaddress.IPv4Address, ipaddress.IPv6Address)):
        ip = ipaddress.ip_address(value)
    else:
        raise TypeError(f"cannot read an IP address from {type(value).__name__}")
    if version is not None and ip.version != version:
        raise ValueError(f"expected an IPv{version} address, got {ip}")
    return ip


def get_netmask_class(addr4: object) -> str:
    """Return 'a', 'b' or 'c' when ``addr4`` is a classful network address, else 'n'."""
    value = int(_to_ip(addr4, 4))
    if not (~_IN_CLASSA_NET & value):
        return "a"
    if not (~_IN_CLASSB_NET & value):
        return "b"
    if not (~_IN_CLASSC_NET & value):
        return "c"
    return "n"


def _mask(text: str, start: int, stops: str) -> str:
    chars = list(text)
    pos = start
    while pos < len(chars) and chars[pos] not in stops:
        chars[pos] = "*"
        pos += 1
    return "".join(chars)


@dataclass
class Address:
    """A host address with a port (host byte order) and the time it was last seen."""

    type: int = 0
    port: int = 0
    addr: bytes = b""
    ts_sec: int = 0


class AddressList:
    """Up to ``size`` addresses; when full, the one seen longest ago is replaced."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("size must be at least 1")
        self.size = size
        self.num = 0
        self._array: list[Address] = [Address() for _ in range(size)]

    def __getitem__(self, index: int) -> Address:
        return self._array[index]

    def find(self, address: Address) -> int | None:
        """Return the index of an entry with the same family and host, or ``None``."""
        for idx, entry in enumerate(self._array[: self.num]):
            if entry.type != address.type:
                continue
            if address.type == socket.AF_INET and entry.addr[:4] == address.addr[:4]:
                return idx
            if address.type == socket.AF_INET6 and entry.addr[:16] == address.addr[:16]:
                return idx
        return None

    def get_free_idx(self) -> int:
        """Return the first unused slot, or else the slot with the oldest timestamp."""
        free_idx = 0
        min_ts_sec = self._array[0].ts_sec
        for idx, entry in enumerate(self._array):
            if entry.port == 0:
                return idx
            if entry.ts_sec <= min_ts_sec:
                min_ts_sec = entry.ts_sec
                free_idx = idx
        return free_idx

    def update(self, address: Address) -> int:
        """Store a copy of ``address`` over its match or a free slot; return the slot."""
        idx = self.find(address)
        if idx is None:
            idx = self.get_free_idx()
        if self._array[idx].port == 0:
            if self.num < self.size:
                self.num += 1
            elif self.num > self.size:
                self.num = self.size
        self._array[idx] = replace(address)
        return idx

    def fifo3(self, address: Address) -> None:
        """Make ``address`` the only entry of the list."""
        self._array[0] = replace(address)
        self.num = 1

    def __len__(self) -> int:
        return self.num

    def __iter__(self) -> Iterator[Address]:
        return iter(self._array[: self.num])


@dataclass(frozen=True)
class SockAddress:
    """A socket endpoint: family, socket type, host text and port."""

    addr_type: int
    protocol: int
    host: str
    port: int
    socklen: int = field(default=0)

    @staticmethod
    def _sock_type(protocol: int) -> int:
        return socket.SOCK_STREAM if protocol == Protocol.TCP else socket.SOCK_DGRAM

    @staticmethod
    def _check_port(port: int) -> int:
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port {port} out of range")
        return port

    @classmethod
    def ipv4(cls, protocol: int, host: str | None, port: int) -> SockAddress:
        """Build an IPv4 endpoint; ``host`` None means any address."""
        ip = _to_ip("0.0.0.0" if host is None else host, 4)
        return cls(socket.AF_INET, cls._sock_type(protocol), str(ip),
                   cls._check_port(port), _SOCKADDR_IN_LEN)

    @classmethod
    def ipv6(cls, protocol: int, host: str | None, port: int) -> SockAddress:
        """Build an IPv6 endpoint; ``host`` None means any address."""
        ip = _to_ip("::" if host is None else host, 6)
        return cls(socket.AF_INET6, cls._sock_type(protocol), str(ip),
                   cls._check_port(port), _SOCKADDR_IN6_LEN)


def address4_string(byte4: object, addr_secure: bool = False) -> str:
    """Dotted form of an IPv4 address; secure mode hides the first octet."""
    text = str(_to_ip(byte4, 4))
    return _mask(text, 0, ".") if addr_secure else text


def address6_string(byte16: object, addr_secure: bool = False) -> str:
    """Text form of an IPv6 address; secure mode hides the first group."""
    text = str(_to_ip(byte16, 6))
    return _mask(text, 0, ":") if addr_secure else text


def socket4_string(host: object, port: int, addr_secure: bool = False) -> str:
    """``host:port`` for an IPv4 endpoint."""
    text = f"{_to_ip(host, 4)}:{port}"
    return _mask(text, 0, ".") if addr_secure else text


def socket6_string(host: object, port: int, addr_secure: bool = False) -> str:
    """``[host:port]`` for an IPv6 endpoint."""
    text = f"[{_to_ip(host, 6)}:{port}]"
    return _mask(text, 1, ":") if addr_secure else text


def sockaddress_string(sockaddress: SockAddress, addr_secure: bool = False) -> str:
    """Text form of a :class:`SockAddress`."""
    if sockaddress.addr_type == socket.AF_INET6:
        return socket6_string(sockaddress.host, sockaddress.port, addr_secure)
    if sockaddress.addr_type == socket.AF_INET:
        return socket4_string(sockaddress.host, sockaddress.port, addr_secure)
    raise ValueError(f"unknown address family {sockaddress.addr_type}")


def ip_port_string(address: Address, addr_secure: bool = False) -> str:
    """Text form of an :class:`Address`, or ``NONE_ADDRESS`` for an empty one."""
    start = 0
    if address.type == socket.AF_INET6:
        text = f"[{_to_ip(address.addr[:16], 6)}:{address.port}]"
        start = 1
    elif address.type == socket.AF_INET:
        text = f"{_to_ip(address.addr[:4], 4)}:{address.port}"
    else:
        text = "NONE_ADDRESS"
    return _mask(text, start, ".:") if addr_secure else text


def cmp_sockaddr(addr1: SockAddress, addr2: SockAddress) -> int:
    """Return 0 when equal, 1 when the ports differ, 2 when only the hosts differ."""
    if addr1.addr_type != addr2.addr_type:
        raise ValueError("cannot compare addresses of different families")
    if addr1.port != addr2.port:
        return 1
    if _to_ip(addr1.host).packed != _to_ip(addr2.host).packed:
        return 2
    return 0


def address4_from_string(text: str) -> Address:
    """Parse ``a.b.c.d:port`` into an IPv4 :class:`Address`."""
    host, sep, port_text = text.partition(":")
    if not sep:
        raise ValueError(f"missing port in {text!r}")
    if not port_text.isdigit():
        raise ValueError(f"invalid port in {text!r}")
    port = int(port_text)
    if port > 0xFFFF:
        raise ValueError(f"port {port} out of range")
    return Address(socket.AF_INET, port, _to_ip(host, 4).packed)


def hide_address_string(text: str) -> str:
    """Replace everything before the first '.' or ':' with '*'."""
    return _mask(text, 0, ".:")