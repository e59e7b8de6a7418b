# tests/stubs.py
"""Test stubs for kilo editor tests.

This module provides a scripted stand-in for the terminal collaborator so the
editor loop, prompt and key decoder can be driven without a real TTY.
"""

from collections import deque
from typing import Optional, Union

Chunk = Union[str, bytes, int, None]


class ScriptExhausted(Exception):
    """Raised when code keeps reading long after the scripted input ran out."""


class FakeTerminal:
    """Scripted terminal: fixed geometry, queued input bytes, captured output.

    ``None`` entries in the script stand for an idle read (timeout without input).
    Once the script is empty every read is idle; after ``idle_limit`` such reads
    ``ScriptExhausted`` is raised so a test can never hang in a read loop.
    """

    def __init__(self, *chunks: Chunk, size: tuple[int, int] = (24, 80), idle_limit: int = 50) -> None:
        self.size = size
        self.idle_limit = idle_limit
        self.input: deque[Optional[int]] = deque()
        self.output: list[str] = []
        self._idle_reads = 0
        self.feed(*chunks)

    def feed(self, *chunks: Chunk) -> None:
        """Append input: text (UTF-8 encoded), raw bytes, single key codes or idle marks."""
        for chunk in chunks:
            if chunk is None:
                self.input.append(None)
            elif isinstance(chunk, int):
                self.input.append(chunk)
            elif isinstance(chunk, str):
                self.input.extend(chunk.encode("utf-8"))
            else:
                self.input.extend(chunk)

    # ---- Terminal interface ----
    def read_byte(self) -> Optional[int]:
        if self.input:
            return self.input.popleft()
        self._idle_reads += 1
        if self._idle_reads > self.idle_limit:
            raise ScriptExhausted("scripted input exhausted")
        return None

    def write(self, data: Union[str, bytes]) -> None:
        self.output.append(data.decode("utf-8") if isinstance(data, bytes) else data)

    def clear_screen(self) -> None:
        self.write("\x1b[2J\x1b[H")

    def get_window_size(self) -> tuple[int, int]:
        return self.size

    # ---- helpers for assertions ----
    @property
    def last_frame(self) -> str:
        return self.output[-1] if self.output else ""

    @property
    def pending(self) -> int:
        return len(self.input)
