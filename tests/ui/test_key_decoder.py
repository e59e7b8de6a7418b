# tests/ui/test_key_decoder.py
"""Unit tests for `kilo.ui.KeyDecoder`: escape sequences, UTF-8 assembly and idle reads."""

import pytest

from kilo.ui.KeyDecoder import (
    BACKSPACE,
    ENTER,
    ESC,
    ESCAPE_SEQUENCE_MAP,
    TAB,
    Key,
    KeyDecoder,
    ctrl_key,
    key_name,
)
from tests.stubs import FakeTerminal


def decoder_for(*chunks) -> tuple[KeyDecoder, FakeTerminal]:
    terminal = FakeTerminal(*chunks)
    return KeyDecoder(terminal.read_byte), terminal


@pytest.mark.parametrize(
    "sequence, expected",
    [
        (b"\x1b[A", Key.ARROW_UP),
        (b"\x1b[B", Key.ARROW_DOWN),
        (b"\x1b[C", Key.ARROW_RIGHT),
        (b"\x1b[D", Key.ARROW_LEFT),
        (b"\x1b[H", Key.HOME),
        (b"\x1b[F", Key.END),
        (b"\x1bOH", Key.HOME),
        (b"\x1bOF", Key.END),
        (b"\x1b[1~", Key.HOME),
        (b"\x1b[7~", Key.HOME),
        (b"\x1b[4~", Key.END),
        (b"\x1b[8~", Key.END),
        (b"\x1b[3~", Key.DEL),
        (b"\x1b[5~", Key.PAGE_UP),
        (b"\x1b[6~", Key.PAGE_DOWN),
    ],
)
def test_escape_sequences(sequence: bytes, expected: Key) -> None:
    decoder, terminal = decoder_for(sequence)
    assert decoder.read_key() == expected
    assert terminal.pending == 0


def test_every_mapped_sequence_decodes() -> None:
    for seq, key in ESCAPE_SEQUENCE_MAP.items():
        decoder, _ = decoder_for(b"\x1b" + seq.encode("ascii"))
        assert decoder.read_key() == key


def test_lone_escape_then_idle_is_escape() -> None:
    decoder, _ = decoder_for(ESC, None)
    assert decoder.read_key() == ESC


def test_escape_with_one_byte_then_idle_is_escape() -> None:
    decoder, _ = decoder_for(b"\x1b[", None)
    assert decoder.read_key() == ESC


def test_truncated_tilde_sequence_is_escape() -> None:
    decoder, _ = decoder_for(b"\x1b[5", None)
    assert decoder.read_key() == ESC


@pytest.mark.parametrize("sequence", [b"\x1b[9~", b"\x1b[Z", b"\x1bOP", b"\x1b[2x"])
def test_unknown_sequences_are_escape(sequence: bytes) -> None:
    decoder, terminal = decoder_for(sequence)
    assert decoder.read_key() == ESC
    assert terminal.pending == 0


def test_idle_read_yields_no_event() -> None:
    decoder, _ = decoder_for(None, "a")
    assert decoder.read_key() is None
    assert decoder.read_key() == ord("a")


def test_plain_and_control_bytes_pass_through() -> None:
    decoder, _ = decoder_for("x", ENTER, TAB, BACKSPACE, ctrl_key("s"))
    assert [decoder.read_key() for _ in range(5)] == [ord("x"), ENTER, TAB, BACKSPACE, 19]


@pytest.mark.parametrize("char", ["é", "中", "€", "😀"])
def test_utf8_sequences_are_assembled(char: str) -> None:
    decoder, terminal = decoder_for(char)
    assert decoder.read_key() == ord(char)
    assert terminal.pending == 0


def test_stray_continuation_byte_is_dropped() -> None:
    decoder, _ = decoder_for(0x80, "a")
    assert decoder.read_key() is None
    assert decoder.read_key() == ord("a")


def test_truncated_utf8_is_dropped() -> None:
    decoder, _ = decoder_for(0xE4, 0xB8, None, "b")
    assert decoder.read_key() is None
    assert decoder.read_key() == ord("b")


def test_byte_interrupting_utf8_starts_next_key() -> None:
    decoder, terminal = decoder_for(0xC3, b"\x1b[A", 0xE4, "x")
    assert decoder.read_key() is None
    assert decoder.read_key() == Key.ARROW_UP
    assert decoder.read_key() is None
    assert decoder.read_key() == ord("x")
    assert terminal.pending == 0


def test_overlong_encoding_is_dropped() -> None:
    # 0xE0 0x80 0x80 is an overlong form of U+0000
    decoder, _ = decoder_for(0xE0, 0x80, 0x80)
    assert decoder.read_key() is None


def test_ctrl_key() -> None:
    assert ctrl_key("q") == 17
    assert ctrl_key("s") == 19
    assert ctrl_key("f") == 6
    assert ctrl_key("h") == 8


def test_named_keys_are_beyond_unicode() -> None:
    assert min(Key) > 0x10FFFF


@pytest.mark.parametrize(
    "key, name",
    [
        (None, "<none>"),
        (Key.PAGE_UP, "PAGE_UP"),
        (ESC, "ESC"),
        (ENTER, "ENTER"),
        (TAB, "TAB"),
        (BACKSPACE, "BACKSPACE"),
        (17, "Ctrl-Q"),
        (ord("a"), "'a'"),
    ],
)
def test_key_name(key, name: str) -> None:
    assert key_name(key) == name
