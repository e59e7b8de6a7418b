# kilo/ui/KeyDecoder.py
"""KeyDecoder.py
==================
Translates the raw byte stream of a terminal in raw mode into logical key events.

Events are plain integers:

- a character's code point (multi-byte UTF-8 input is assembled first),
- a control combination, ``0..31`` (see ``ctrl_key``), or ``BACKSPACE`` (127),
- a named navigation key from ``Key``, whose values lie above the Unicode range
  so they never collide with a character.

Escape sequences are matched against ``ESCAPE_SEQUENCE_MAP``. Anything not in the
map, and any sequence cut short by the read timeout, decodes to a bare ``ESC``.
The decoder never waits longer than the byte source does, so an idle terminal
yields ``None`` ("no event") instead of blocking.
"""

import logging
from enum import IntEnum
from typing import Callable, Optional

from kilo.utils.logging_config import KEY_LOGGER

ByteSource = Callable[[], Optional[int]]

ESC = 27
ENTER = 13
TAB = 9
BACKSPACE = 127


def ctrl_key(ch: str) -> int:
    """Return the key code produced by Ctrl + *ch* (``ctrl_key('q') == 17``)."""
    return ord(ch) & 0x1F


class Key(IntEnum):
    ARROW_LEFT = 0x110000
    ARROW_RIGHT = 0x110001
    ARROW_UP = 0x110002
    ARROW_DOWN = 0x110003
    DEL = 0x110004
    HOME = 0x110005
    END = 0x110006
    PAGE_UP = 0x110007
    PAGE_DOWN = 0x110008


# Bytes following ESC, as text, to the key they encode.
ESCAPE_SEQUENCE_MAP: dict[str, Key] = {
    # Arrows (CSI)
    "[A": Key.ARROW_UP, "[B": Key.ARROW_DOWN,
    "[C": Key.ARROW_RIGHT, "[D": Key.ARROW_LEFT,
    # Home/End (CSI, SS3 and tilde variants)
    "[H": Key.HOME, "[F": Key.END, "OH": Key.HOME, "OF": Key.END,
    "[1~": Key.HOME, "[7~": Key.HOME, "[4~": Key.END, "[8~": Key.END,
    # Delete/PageUp/PageDown
    "[3~": Key.DEL, "[5~": Key.PAGE_UP, "[6~": Key.PAGE_DOWN,
}


def key_name(key: Optional[int]) -> str:
    """Human readable name of a decoded event, for traces and the key debugger."""
    if key is None:
        return "<none>"
    if key >= Key.ARROW_LEFT:
        return Key(key).name
    if key == ESC:
        return "ESC"
    if key == BACKSPACE:
        return "BACKSPACE"
    if key == ENTER:
        return "ENTER"
    if key == TAB:
        return "TAB"
    if key < 32:
        return f"Ctrl-{chr(key + 64)}"
    return repr(chr(key))


def _utf8_length(lead: int) -> int:
    """Length of the UTF-8 sequence announced by *lead*, or 0 if it is not a lead byte."""
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


## ==================== KeyDecoder Class ====================
class KeyDecoder:
    """Reads one logical key per call from a byte source.

    Attributes:
        read_byte (ByteSource): Returns the next byte, or ``None`` when nothing
            arrived within its bounded wait.
        pending (Optional[int]): A byte read ahead but not yet decoded; it is
            returned before anything new is read.
    """

    def __init__(self, read_byte: ByteSource) -> None:
        self.read_byte = read_byte
        self.pending: Optional[int] = None

    def _next_byte(self) -> Optional[int]:
        if self.pending is not None:
            b, self.pending = self.pending, None
            return b
        return self.read_byte()

    def read_key(self) -> Optional[int]:
        """Return the next key event, or ``None`` if the terminal was idle."""
        c = self._next_byte()
        if c is None:
            return None

        if c == ESC:
            key = self._read_escape()
        elif c >= 0x80:
            key = self._read_utf8(c)
        else:
            key = c

        if key is not None:
            KEY_LOGGER.debug("key %s (%d)", key_name(key), key)
        return key

    def _read_escape(self) -> int:
        """Decode the bytes after ESC; any unknown or truncated sequence is ESC."""
        seq = ""
        for _ in range(2):
            b = self._next_byte()
            if b is None:
                logging.debug(f"KeyDecoder: incomplete escape sequence ESC {seq!r}")
                return ESC
            seq += chr(b)

        if seq[0] == "[" and seq[1].isdigit():
            b = self._next_byte()
            if b is None:
                logging.debug(f"KeyDecoder: incomplete escape sequence ESC {seq!r}")
                return ESC
            seq += chr(b)

        mapped = ESCAPE_SEQUENCE_MAP.get(seq)
        if mapped is None:
            logging.debug(f"KeyDecoder: unknown escape sequence ESC {seq!r}")
            return ESC
        return mapped

    def _read_utf8(self, lead: int) -> Optional[int]:
        """Assemble a multi-byte UTF-8 character; invalid input yields no event.

        A byte that interrupts the sequence is kept for the next ``read_key``.
        """
        length = _utf8_length(lead)
        if length == 0:
            logging.debug(f"KeyDecoder: dropping stray byte 0x{lead:02x}")
            return None
        raw = bytearray([lead])
        for _ in range(length - 1):
            b = self._next_byte()
            if b is None or (b & 0xC0) != 0x80:
                logging.debug(f"KeyDecoder: dropping incomplete UTF-8 sequence {bytes(raw)!r}")
                # the interrupting byte starts the next key
                self.pending = b
                return None
            raw.append(b)
        try:
            return ord(raw.decode("utf-8"))
        except UnicodeDecodeError:
            logging.debug(f"KeyDecoder: dropping invalid UTF-8 sequence {bytes(raw)!r}")
            return None
