# tests/conftest.py
"""Pytest configuration with shared fixtures for the kilo editor tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from kilo.core.Buffer import TextBuffer
from kilo.core.Kilo import Kilo
from kilo.core.Syntax import C_PROFILE, select_profile
from kilo.utils.utils import DEFAULT_CONFIG, deep_merge
from tests.stubs import FakeTerminal


# --- Base fixtures for terminal and configuration ---
@pytest.fixture
def config() -> dict[str, Any]:
    """Provide a fresh copy of the built-in configuration.

    Returns:
        dict[str, Any]: Editor configuration dictionary.
    """
    return deep_merge({}, DEFAULT_CONFIG)


@pytest.fixture
def fake_terminal() -> FakeTerminal:
    """Create a scripted terminal of 24 rows by 80 columns with no queued input."""
    return FakeTerminal(size=(24, 80))


# --- Kilo fixtures ---
@pytest.fixture
def editor(fake_terminal: FakeTerminal, config: dict[str, Any]) -> Kilo:
    """Create a real `Kilo` instance bound to the fake terminal.

    The text area is 22 rows (24 minus the status and message bars) by 80 columns.
    """
    return Kilo(fake_terminal, config)


@pytest.fixture
def make_editor(config: dict[str, Any]) -> Callable[..., Kilo]:
    """Factory for editors with preloaded text and optional scripted keys.

    Args (of the returned callable):
        text: Buffer content, newline-delimited.
        keys: Input chunks queued on the fake terminal.
        size: Terminal geometry as (rows, cols).
        filename: Name given to the buffer (selects the syntax profile).
    """

    def _make(
        text: str = "",
        *keys: Any,
        size: tuple[int, int] = (24, 80),
        filename: str | None = None,
    ) -> Kilo:
        terminal = FakeTerminal(*keys, size=size)
        ed = Kilo(terminal, config)
        if filename is not None:
            ed.filename = filename
            ed.buffer.set_profile(select_profile(filename))
        ed.buffer.load(text)
        return ed

    return _make


# --- Buffer fixtures ---
@pytest.fixture
def c_buffer() -> TextBuffer:
    """An empty buffer highlighted with the C profile."""
    return TextBuffer(profile=C_PROFILE)


@pytest.fixture
def plain_buffer() -> TextBuffer:
    """An empty buffer without a syntax profile."""
    return TextBuffer()


# --- Filesystem fixtures ---
@pytest.fixture
def sample_c_file(tmp_path: Path) -> Path:
    """Write a small C source file and return its path."""
    path = tmp_path / "hello.c"
    path.write_text(
        "#include <stdio.h>\n"
        "/* entry point */\n"
        "int main(void) {\n"
        "\tprintf(\"hello %d\\n\", 42);\n"
        "\treturn 0;\n"
        "}\n",
        encoding="utf-8",
    )
    return path
