"""Tagged log lines sent to the console, to daily-rotated files and over UDP."""

from __future__ import annotations

import os
import socket
import struct
import sys
import time
from contextlib import suppress
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import BinaryIO

LOG_LINE_MAX = 1024 * 4
PAYLOAD_HEADER_SIZE = 4
DEFAULT_UDP_PORT = 9000

LOG_LEVEL_UNSET = 0xFF
LOG_LEVEL0 = 0
LOG_LEVEL1 = 1
LOG_LEVEL2 = 2
LOG_LEVEL3 = 3

_MAX_SOCKADDRESS_STRING = 16 + 1 + len("65535") + 1
_TIME_FORMAT = "%y-%m-%d %H:%M:%S"
_ARCHIVE_DATE_FORMAT = "%Y_%m_%d"
_FILE_NAMES = ("std", "debug", "error")


class LogType(IntEnum):
    """The built-in tag of a log line; it picks the file and console stream."""

    STD = 0
    DEBUG = 1
    ERROR = 2


class LogOutput(IntFlag):
    """Where log lines go."""

    NONE = 0x0
    STDOUT = 0x1
    FILE = 0x2
    UDP = 0x4


class LogUdpType(IntEnum):
    """How lines are sent over UDP: as plain text or behind a payload header."""

    TEXT = 0
    BINARY = 1


@dataclass
class LogConfig:
    """Name and output levels of one log id; a higher level means more detail."""

    log_name: str = ""
    console_level: int = LOG_LEVEL0
    file_level: int = LOG_LEVEL0
    udp_level: int = LOG_LEVEL0

    def wants(self, level: int) -> bool:
        return (
            self.console_level >= level
            or self.file_level >= level
            or self.udp_level >= level
        )


def _file_opener(path: str, flags: int) -> int:
    return os.open(path, flags, 0o600)


class LogContext:
    """Log settings and the open files and sockets that lines are written to."""

    def __init__(self) -> None:
        self.output_type = LogOutput.NONE
        self.log_udp_type = LogUdpType.TEXT
        self.log_payload_type = 0
        self.config_table: dict[int, LogConfig] = {}

        self.log_file_path: str | None = None
        self._files: dict[LogType, BinaryIO] = {}
        self._pre_files: dict[LogType, BinaryIO] = {}
        self.pre_mday = 0

        self.socket4: socket.socket | None = None
        self.socket6: socket.socket | None = None
        self.addr4 = bytes(4)
        self.port4 = 0
        self.addr6 = bytes(16)
        self.port6 = 0

    # -- formatting and dispatch -------------------------------------------

    def logf(self, log_type: LogType, log_id: int, level: int, fmt: str, *args: object) -> None:
        """Format a line and send it to every configured output.

        Lines longer than the line limit are dropped.
        """
        config = self.config_table[log_id]
        now = time.strftime(_TIME_FORMAT, time.localtime())
        prefix = f"{now} {config.log_name} ".encode()
        if len(prefix) > LOG_LINE_MAX:
            return
        line = prefix + (fmt % args).encode()
        if len(line) > LOG_LINE_MAX:
            return

        if self.output_type & LogOutput.STDOUT:
            self._console_output(log_type, line)
        if self.output_type & LogOutput.FILE:
            self._file_output(log_type, line)
        if self.output_type & LogOutput.UDP:
            if self.log_udp_type == LogUdpType.BINARY:
                self._udp_send(self._payload(log_id, line))
            else:
                self._udp_send(line)

    def _gated(self, log_type: LogType, log_id: int, level: int, fmt: str, args: tuple) -> None:
        if self.output_type == LogOutput.NONE:
            return
        if self.config_table[log_id].wants(level):
            self.logf(log_type, log_id, level, fmt, *args)

    def log(self, log_id: int, level: int, fmt: str, *args: object) -> None:
        """Log a standard line if any output of ``log_id`` is at ``level`` or above."""
        self._gated(LogType.STD, log_id, level, fmt, args)

    def debug(self, log_id: int, level: int, fmt: str, *args: object) -> None:
        """Log a debug line if any output of ``log_id`` is at ``level`` or above."""
        self._gated(LogType.DEBUG, log_id, level, fmt, args)

    def error(self, log_id: int, level: int, fmt: str, *args: object) -> None:
        """Log an error line if any output of ``log_id`` is at ``level`` or above."""
        self._gated(LogType.ERROR, log_id, level, fmt, args)

    @staticmethod
    def _console_output(log_type: LogType, line: bytes) -> None:
        stream = sys.stderr if log_type == LogType.ERROR else sys.stdout
        stream.write(line.decode(errors="replace"))
        stream.flush()

    def _file_output(self, log_type: LogType, line: bytes) -> None:
        file = self._files.get(LogType(log_type))
        if file is not None:
            file.write(line)

    def _payload(self, log_id: int, line: bytes) -> bytes:
        header = struct.pack(
            "!HBB",
            (len(line) + PAYLOAD_HEADER_SIZE) & 0xFFFF,
            self.log_payload_type & 0xFF,
            log_id & 0xFF,
        )
        return header + line

    def _udp_send(self, data: bytes) -> None:
        if self.socket6 is not None:
            with suppress(OSError):
                self.socket6.sendto(data, (socket.inet_ntop(socket.AF_INET6, self.addr6), self.port6))
        if self.socket4 is not None:
            with suppress(OSError):
                self.socket4.sendto(data, (socket.inet_ntop(socket.AF_INET, self.addr4), self.port4))

    # -- files ------------------------------------------------------------

    def _file_name(self, log_type: LogType) -> str:
        return os.path.join(self.log_file_path or ".", f"{_FILE_NAMES[log_type]}.log")

    def _open_log_files(self) -> None:
        for log_type in LogType:
            self._files[log_type] = open(
                self._file_name(log_type), "ab", buffering=0, opener=_file_opener
            )

    def open_files(self, path: str | os.PathLike[str]) -> None:
        """Open ``std.log``, ``debug.log`` and ``error.log`` for appending under ``path``."""
        self._close_files(self._files)
        self.log_file_path = os.fspath(path)
        self._open_log_files()
        self.pre_mday = time.localtime().tm_mday

    @staticmethod
    def _close_files(files: dict[LogType, BinaryIO]) -> None:
        for file in files.values():
            file.close()
        files.clear()

    def file_rotate(self) -> bool:
        """Archive the log files once the day of month changes.

        Returns True when the files were archived and reopened.
        """
        mday = time.localtime().tm_mday
        if mday == self.pre_mday:
            self._close_files(self._pre_files)
            return False
        if not self.output_type & LogOutput.FILE:
            return False

        self.pre_mday = mday
        date = time.strftime(_ARCHIVE_DATE_FORMAT, time.localtime())
        base = self.log_file_path or "."
        self._close_files(self._pre_files)
        for log_type in LogType:
            archive = os.path.join(base, f"{_FILE_NAMES[log_type]}_{date}.log.arc")
            with suppress(OSError):
                os.rename(self._file_name(log_type), archive)
            if log_type in self._files:
                self._pre_files[log_type] = self._files.pop(log_type)
        self._open_log_files()
        return True

    # -- UDP --------------------------------------------------------------

    def udp_open(self) -> None:
        """Open the UDP sockets and aim both at loopback port 9000."""
        self._close_sockets()
        with suppress(OSError):
            sock6 = socket.socket(socket.AF_INET6, socket.SOCK_DGRAM)
            try:
                sock6.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock6.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 1)
                sock6.bind(("::", 0))
            except OSError:
                sock6.close()
                raise
            self.socket6 = sock6

        sock4 = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock4.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock4.bind(("0.0.0.0", 0))
        self.socket4 = sock4

        self.addr6 = socket.inet_pton(socket.AF_INET6, "::1")
        self.port6 = DEFAULT_UDP_PORT
        self.addr4 = socket.inet_pton(socket.AF_INET, "127.0.0.1")
        self.port4 = DEFAULT_UDP_PORT

    @staticmethod
    def _check_port(port: int) -> int:
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port {port} out of range")
        return port

    def udp_set_addr4(self, ip: str, port: int) -> None:
        """Send IPv4 log lines to ``ip``:``port``."""
        try:
            addr = socket.inet_pton(socket.AF_INET, ip)
        except OSError as exc:
            raise ValueError(f"invalid IPv4 address {ip!r}") from exc
        self.port4 = self._check_port(port)
        self.addr4 = addr

    def udp_set_addr6(self, ip: str, port: int) -> None:
        """Send IPv6 log lines to ``ip``:``port``."""
        try:
            addr = socket.inet_pton(socket.AF_INET6, ip)
        except OSError as exc:
            raise ValueError(f"invalid IPv6 address {ip!r}") from exc
        self.port6 = self._check_port(port)
        self.addr6 = addr

    def udp_set_addr4_string(self, text: str) -> None:
        """Send IPv4 log lines to the ``a.b.c.d:port`` endpoint in ``text``."""
        if len(text) > _MAX_SOCKADDRESS_STRING:
            raise ValueError(f"address string too long: {text!r}")
        host, sep, port_text = text.partition(":")
        if not sep or not port_text.isdigit():
            raise ValueError(f"invalid address string {text!r}")
        self.udp_set_addr4(host, int(port_text))

    # -- lifetime ---------------------------------------------------------

    def _close_sockets(self) -> None:
        for sock in (self.socket4, self.socket6):
            if sock is not None:
                sock.close()
        self.socket4 = None
        self.socket6 = None

    def close(self) -> None:
        """Close every open log file and socket."""
        self._close_files(self._files)
        self._close_files(self._pre_files)
        self._close_sockets()

    def __enter__(self) -> LogContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()