import re
import socket
import struct

import pytest

from gnbcore.log import (
    LOG_LINE_MAX,
    LogConfig,
    LogContext,
    LogOutput,
    LogType,
    LogUdpType,
)

LINE_RE = re.compile(r"^\d\d-\d\d-\d\d \d\d:\d\d:\d\d core (.*)$", re.S)


def _ctx(output, level=1):
    ctx = LogContext()
    ctx.output_type = output
    ctx.config_table[3] = LogConfig("core", level, level, level)
    return ctx


def test_logf_console_format(capsys):
    with _ctx(LogOutput.STDOUT) as ctx:
        ctx.logf(LogType.STD, 3, 1, "hello %s %d\n", "world", 7)
    out = capsys.readouterr().out
    match = LINE_RE.match(out)
    assert match is not None
    assert match.group(1) == "hello world 7\n"


def test_error_goes_to_stderr(capsys):
    with _ctx(LogOutput.STDOUT) as ctx:
        ctx.error(3, 1, "boom\n")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.endswith("core boom\n")


def test_level_gating(capsys):
    with _ctx(LogOutput.STDOUT, level=1) as ctx:
        ctx.log(3, 2, "too detailed\n")
        ctx.debug(3, 1, "shown\n")
    out = capsys.readouterr().out
    assert "too detailed" not in out
    assert out.endswith("core shown\n")


def test_output_none_writes_nothing(capsys):
    with _ctx(LogOutput.NONE, level=3) as ctx:
        ctx.log(3, 1, "hidden\n")
    assert capsys.readouterr().out == ""


def test_overlong_line_dropped(capsys):
    with _ctx(LogOutput.STDOUT) as ctx:
        ctx.logf(LogType.STD, 3, 1, "%s", "x" * LOG_LINE_MAX)
    assert capsys.readouterr().out == ""


def test_unknown_log_id_raises():
    with _ctx(LogOutput.STDOUT) as ctx:
        with pytest.raises(KeyError):
            ctx.logf(LogType.STD, 99, 1, "x")


def test_file_output_by_type(tmp_path):
    with _ctx(LogOutput.FILE) as ctx:
        ctx.open_files(tmp_path)
        ctx.log(3, 1, "std line\n")
        ctx.debug(3, 1, "debug line\n")
        ctx.error(3, 1, "error line\n")
    assert (tmp_path / "std.log").read_text().endswith("core std line\n")
    assert (tmp_path / "debug.log").read_text().endswith("core debug line\n")
    assert (tmp_path / "error.log").read_text().endswith("core error line\n")


def test_file_rotate_same_day(tmp_path):
    with _ctx(LogOutput.FILE) as ctx:
        ctx.open_files(tmp_path)
        assert ctx.file_rotate() is False
    assert not list(tmp_path.glob("*.arc"))


def test_file_rotate_new_day(tmp_path):
    with _ctx(LogOutput.FILE) as ctx:
        ctx.open_files(tmp_path)
        ctx.log(3, 1, "old\n")
        ctx.pre_mday = 0
        assert ctx.file_rotate() is True
        ctx.log(3, 1, "new\n")
    archives = sorted(p.name for p in tmp_path.glob("*.log.arc"))
    assert len(archives) == 3
    assert any(name.startswith("std_") for name in archives)
    std_archive = next(tmp_path.glob("std_*.log.arc"))
    assert std_archive.read_text().endswith("core old\n")
    assert (tmp_path / "std.log").read_text().endswith("core new\n")
    assert "old" not in (tmp_path / "std.log").read_text()


def test_file_rotate_without_file_output(tmp_path):
    with _ctx(LogOutput.STDOUT) as ctx:
        ctx.pre_mday = 0
        assert ctx.file_rotate() is False


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(3)
    yield sock
    sock.close()


def test_udp_text(receiver):
    with _ctx(LogOutput.UDP) as ctx:
        ctx.udp_open()
        ctx.udp_set_addr4("127.0.0.1", receiver.getsockname()[1])
        ctx.log(3, 1, "over udp")
        data, _ = receiver.recvfrom(8192)
    assert LINE_RE.match(data.decode()).group(1) == "over udp"


def test_udp_binary(receiver):
    with _ctx(LogOutput.UDP) as ctx:
        ctx.log_udp_type = LogUdpType.BINARY
        ctx.log_payload_type = 0x44
        ctx.udp_open()
        ctx.udp_set_addr4("127.0.0.1", receiver.getsockname()[1])
        ctx.log(3, 1, "binary")
        data, _ = receiver.recvfrom(8192)
    size, payload_type, sub_type = struct.unpack("!HBB", data[:4])
    assert size == len(data)
    assert payload_type == 0x44
    assert sub_type == 3
    assert data[4:].decode().endswith("core binary")


def test_udp_open_defaults():
    with LogContext() as ctx:
        ctx.udp_open()
        assert ctx.port4 == 9000
        assert ctx.addr4 == socket.inet_aton("127.0.0.1")
        assert ctx.socket4 is not None and ctx.socket4.getsockname()[1] > 0


def test_set_addr4_string():
    ctx = LogContext()
    ctx.udp_set_addr4_string("10.1.2.3:5000")
    assert ctx.addr4 == socket.inet_aton("10.1.2.3")
    assert ctx.port4 == 5000


@pytest.mark.parametrize(
    "text", ["10.1.2.3", "10.1.2.3:abc", "300.1.2.3:80", "255.255.255.255:655350000"]
)
def test_set_addr4_string_invalid(text):
    with pytest.raises(ValueError):
        LogContext().udp_set_addr4_string(text)


def test_set_addr6():
    ctx = LogContext()
    ctx.udp_set_addr6("::1", 7000)
    assert ctx.addr6 == socket.inet_pton(socket.AF_INET6, "::1")
    assert ctx.port6 == 7000


def test_set_addr_invalid():
    ctx = LogContext()
    with pytest.raises(ValueError):
        ctx.udp_set_addr4("not-an-ip", 80)
    with pytest.raises(ValueError):
        ctx.udp_set_addr6("1.2.3.4", 80)
    with pytest.raises(ValueError):
        ctx.udp_set_addr4("1.2.3.4", 70000)