# kilo/ui/Terminal.py
"""Terminal.py
========================
Thin wrapper around the controlling terminal: raw mode, byte reads with a bounded
wait, frame writes and window-geometry queries.

Raw mode turns off line buffering, echo, signal generation, flow control and output
post-processing, and makes ``read()`` return after at most one decisecond
(``VMIN = 0``, ``VTIME = 1``). Always pair ``enable_raw_mode()`` with
``disable_raw_mode()``, or use the instance as a context manager.

Errors that leave the terminal unusable are raised as ``TerminalError``.
"""

import errno
import fcntl
import logging
import os
import re
import struct
import sys
import termios
from typing import Any, Optional

from kilo.core.errors import TerminalError

CURSOR_REPORT_RE = re.compile(rb"^\x1b\[(\d+);(\d+)R$")


## ==================== Terminal Class ====================
class Terminal:
    """The controlling terminal.

    Attributes:
        fd_in (int): File descriptor keys are read from.
        fd_out (int): File descriptor frames are written to.
    """

    def __init__(self, fd_in: Optional[int] = None, fd_out: Optional[int] = None) -> None:
        self.fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        self._orig_termios: Optional[list[Any]] = None

    # --- raw mode ---
    def enable_raw_mode(self) -> None:
        """Switch the input descriptor to raw mode, remembering the original mode."""
        if self._orig_termios is not None:
            return
        try:
            self._orig_termios = termios.tcgetattr(self.fd_in)
        except termios.error as e:
            raise TerminalError("tcgetattr", e) from e

        raw = list(self._orig_termios)
        raw[6] = list(raw[6])
        # input modes: no break, no CR to NL, no parity check, no strip char,
        # no start/stop output control
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        # output modes: disable post processing
        raw[1] &= ~termios.OPOST
        # control modes: 8 bit chars
        raw[2] |= termios.CS8
        # local modes: echo off, canonical off, no extended functions, no signal chars
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        # return each byte, or zero after a 100 ms timeout
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = 1

        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, raw)
        except termios.error as e:
            self._orig_termios = None
            raise TerminalError("tcsetattr", e) from e
        logging.debug("Terminal: raw mode enabled")

    def disable_raw_mode(self) -> None:
        """Restore the mode saved by ``enable_raw_mode``; a no-op if not enabled."""
        if self._orig_termios is None:
            return
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, self._orig_termios)
        except termios.error as e:
            logging.warning(f"Terminal: could not restore terminal mode: {e}")
        self._orig_termios = None
        logging.debug("Terminal: raw mode disabled")

    @property
    def is_raw(self) -> bool:
        return self._orig_termios is not None

    def __enter__(self) -> "Terminal":
        self.enable_raw_mode()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disable_raw_mode()

    # --- I/O ---
    def read_byte(self) -> Optional[int]:
        """Return the next input byte, or ``None`` if none arrived within the timeout."""
        try:
            data = os.read(self.fd_in, 1)
        except InterruptedError:
            return None
        except OSError as e:
            if e.errno == errno.EAGAIN:
                return None
            raise TerminalError("read", e) from e
        if not data:
            return None
        return data[0]

    def write(self, data: str | bytes) -> None:
        """Write *data* completely to the output descriptor."""
        buf = data.encode("utf-8") if isinstance(data, str) else data
        view = memoryview(buf)
        try:
            while view:
                written = os.write(self.fd_out, view)
                view = view[written:]
        except OSError as e:
            raise TerminalError("write", e) from e

    def clear_screen(self) -> None:
        self.write("\x1b[2J\x1b[H")

    # --- geometry ---
    def get_cursor_position(self) -> tuple[int, int]:
        """Ask the terminal where the cursor is (``ESC [ 6 n``) and parse the reply."""
        self.write("\x1b[6n")
        reply = bytearray()
        while len(reply) < 31:
            b = self.read_byte()
            if b is None:
                break
            reply.append(b)
            if b == ord("R"):
                break
        match = CURSOR_REPORT_RE.match(bytes(reply))
        if match is None:
            raise TerminalError("get_cursor_position", f"unexpected reply {bytes(reply)!r}")
        return int(match.group(1)), int(match.group(2))

    def get_window_size(self) -> tuple[int, int]:
        """Return ``(rows, cols)`` of the terminal window.

        Uses ``TIOCGWINSZ``; when that fails or reports zero columns, moves the
        cursor to the bottom-right corner and reads back its position.
        """
        try:
            packed = fcntl.ioctl(self.fd_out, termios.TIOCGWINSZ, struct.pack("HHHH", 0, 0, 0, 0))
            rows, cols, _, _ = struct.unpack("HHHH", packed)
            if cols > 0:
                return rows, cols
            logging.debug("Terminal: TIOCGWINSZ reported zero columns")
        except OSError as e:
            logging.debug(f"Terminal: TIOCGWINSZ failed: {e}")

        self.write("\x1b[999C\x1b[999B")
        return self.get_cursor_position()
