# tests/ui/test_terminal.py
"""Unit tests for `kilo.ui.Terminal`.

Reads and writes go through real pipes; `termios` and `fcntl` calls are patched
so no controlling TTY is needed.
"""

import os
import termios
from typing import Generator
from unittest.mock import patch

import pytest

from kilo.core.errors import TerminalError
from kilo.ui.Terminal import Terminal


@pytest.fixture
def pipes() -> Generator[tuple[int, int, int, int], None, None]:
    """Input pipe (non-blocking read end) and output pipe for a Terminal."""
    in_r, in_w = os.pipe()
    out_r, out_w = os.pipe()
    os.set_blocking(in_r, False)
    yield in_r, in_w, out_r, out_w
    for fd in (in_r, in_w, out_r, out_w):
        try:
            os.close(fd)
        except OSError:
            pass


@pytest.fixture
def term(pipes) -> Terminal:
    in_r, _, _, out_w = pipes
    return Terminal(fd_in=in_r, fd_out=out_w)


def test_read_byte_returns_bytes_then_none(term: Terminal, pipes) -> None:
    os.write(pipes[1], b"a\x1b")
    assert term.read_byte() == ord("a")
    assert term.read_byte() == 27
    assert term.read_byte() is None


def test_read_byte_eof_is_idle(term: Terminal, pipes) -> None:
    os.close(pipes[1])
    assert term.read_byte() is None


def test_read_failure_raises(term: Terminal) -> None:
    with patch("kilo.ui.Terminal.os.read", side_effect=OSError(5, "Input/output error")):
        with pytest.raises(TerminalError) as exc_info:
            term.read_byte()
    assert exc_info.value.context == "read"


def test_write_str_and_bytes(term: Terminal, pipes) -> None:
    term.write("héllo ")
    term.write(b"\x1b[H")
    term.clear_screen()
    assert os.read(pipes[2], 100) == "héllo ".encode("utf-8") + b"\x1b[H\x1b[2J\x1b[H"


def test_write_failure_raises(term: Terminal) -> None:
    with patch("kilo.ui.Terminal.os.write", side_effect=BrokenPipeError(32, "Broken pipe")):
        with pytest.raises(TerminalError, match="write"):
            term.write("x")


def test_cursor_position_report(term: Terminal, pipes) -> None:
    os.write(pipes[1], b"\x1b[24;80R")
    assert term.get_cursor_position() == (24, 80)
    assert os.read(pipes[2], 100) == b"\x1b[6n"


def test_bad_cursor_report_raises(term: Terminal, pipes) -> None:
    os.write(pipes[1], b"\x1b[24x80R")
    with pytest.raises(TerminalError):
        term.get_cursor_position()


def test_window_size_from_ioctl(term: Terminal) -> None:
    import struct

    packed = struct.pack("HHHH", 40, 120, 0, 0)
    with patch("kilo.ui.Terminal.fcntl.ioctl", return_value=packed):
        assert term.get_window_size() == (40, 120)


def test_window_size_falls_back_to_cursor_probe(term: Terminal, pipes) -> None:
    os.write(pipes[1], b"\x1b[50;132R")
    with patch("kilo.ui.Terminal.fcntl.ioctl", side_effect=OSError(25, "Inappropriate ioctl for device")):
        assert term.get_window_size() == (50, 132)
    assert os.read(pipes[2], 100) == b"\x1b[999C\x1b[999B\x1b[6n"


def test_window_size_zero_columns_uses_probe(term: Terminal, pipes) -> None:
    import struct

    os.write(pipes[1], b"\x1b[10;20R")
    with patch("kilo.ui.Terminal.fcntl.ioctl", return_value=struct.pack("HHHH", 0, 0, 0, 0)):
        assert term.get_window_size() == (10, 20)


# --- raw mode ---
ORIGINAL_ATTRS = [
    termios.BRKINT | termios.ICRNL | termios.IXON,
    termios.OPOST,
    0,
    termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN,
    0,
    0,
    [b"\x00"] * 32,
]


def test_raw_mode_flags_and_restore(term: Terminal) -> None:
    with patch("kilo.ui.Terminal.termios.tcgetattr", return_value=list(ORIGINAL_ATTRS)), patch(
        "kilo.ui.Terminal.termios.tcsetattr"
    ) as tcsetattr:
        with term:
            assert term.is_raw
            _, when, raw = tcsetattr.call_args.args
            assert when == termios.TCSAFLUSH
            assert raw[0] & (termios.ICRNL | termios.IXON | termios.BRKINT) == 0
            assert raw[1] & termios.OPOST == 0
            assert raw[2] & termios.CS8 == termios.CS8
            assert raw[3] & (termios.ECHO | termios.ICANON | termios.ISIG) == 0
            assert raw[6][termios.VMIN] == 0
            assert raw[6][termios.VTIME] == 1

        assert not term.is_raw
        assert tcsetattr.call_args.args[2] == ORIGINAL_ATTRS


def test_enable_raw_mode_without_tty_raises(term: Terminal) -> None:
    with patch("kilo.ui.Terminal.termios.tcgetattr", side_effect=termios.error(25, "not a tty")):
        with pytest.raises(TerminalError) as exc_info:
            term.enable_raw_mode()
    assert exc_info.value.context == "tcgetattr"
    assert not term.is_raw


def test_disable_raw_mode_is_noop_when_not_raw(term: Terminal) -> None:
    with patch("kilo.ui.Terminal.termios.tcsetattr") as tcsetattr:
        term.disable_raw_mode()
    tcsetattr.assert_not_called()
