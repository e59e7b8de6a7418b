# tests/test_core/test_tab_mapper.py
"""Unit tests for the character/render column mapping in `kilo.core.TabMapper`."""

import pytest

from kilo.core.TabMapper import cx_to_rx, expand_tabs, rx_to_cx

SAMPLES = [
    "",
    "plain text",
    "\tindented",
    "a\tb\tc",
    "\t\t",
    "12345678\tx",
    "1234567\ty",
]


def test_expand_tabs_pads_to_next_stop() -> None:
    assert expand_tabs("a\tb") == "a" + " " * 7 + "b"
    assert expand_tabs("\t") == " " * 8
    assert expand_tabs("12345678\tx") == "12345678" + " " * 8 + "x"
    assert expand_tabs("ab\tc", tab_stop=4) == "ab  c"


def test_expand_tabs_without_tabs_is_identity() -> None:
    assert expand_tabs("no tabs here") == "no tabs here"


@pytest.mark.parametrize("chars", SAMPLES)
def test_render_column_zero_and_monotonic(chars: str) -> None:
    assert cx_to_rx(chars, 0) == 0
    previous = 0
    for cx in range(len(chars) + 1):
        rx = cx_to_rx(chars, cx)
        assert rx >= previous
        previous = rx
    assert cx_to_rx(chars, len(chars)) == len(expand_tabs(chars))


@pytest.mark.parametrize("chars", SAMPLES)
@pytest.mark.parametrize("tab_stop", [1, 4, 8])
def test_rx_to_cx_inverts_cx_to_rx(chars: str, tab_stop: int) -> None:
    for cx in range(len(chars) + 1):
        assert rx_to_cx(chars, cx_to_rx(chars, cx, tab_stop), tab_stop) == cx


def test_rx_inside_tab_maps_to_the_tab() -> None:
    # "\tx": the tab covers render columns 0..7
    assert rx_to_cx("\tx", 3) == 0
    assert rx_to_cx("\tx", 7) == 0
    assert rx_to_cx("\tx", 8) == 1


def test_rx_beyond_line_clamps_to_length() -> None:
    assert rx_to_cx("abc", 50) == 3
    assert rx_to_cx("", 5) == 0
