# tests/ui/test_viewport.py
"""Unit tests for `kilo.ui.Viewport` scrolling."""

from kilo.ui.Viewport import Viewport


def test_cursor_inside_view_keeps_offsets() -> None:
    vp = Viewport(5, 2)
    vp.scroll(cy=10, rx=20, screenrows=10, screencols=80)
    assert vp.save() == (5, 2)


def test_scroll_up_to_cursor_row() -> None:
    vp = Viewport(rowoff=30)
    vp.scroll(cy=12, rx=0, screenrows=10, screencols=80)
    assert vp.rowoff == 12


def test_scroll_down_puts_cursor_on_last_row() -> None:
    vp = Viewport()
    vp.scroll(cy=25, rx=0, screenrows=10, screencols=80)
    assert vp.rowoff == 16


def test_horizontal_scroll_both_ways() -> None:
    vp = Viewport()
    vp.scroll(cy=0, rx=100, screenrows=10, screencols=40)
    assert vp.coloff == 61
    vp.scroll(cy=0, rx=3, screenrows=10, screencols=40)
    assert vp.coloff == 3


def test_zero_sized_area_only_scrolls_back() -> None:
    vp = Viewport(4, 4)
    vp.scroll(cy=50, rx=50, screenrows=0, screencols=0)
    assert vp.save() == (4, 4)
    vp.scroll(cy=1, rx=1, screenrows=0, screencols=0)
    assert vp.save() == (1, 1)


def test_reveal_row_and_restore() -> None:
    vp = Viewport(3, 7)
    snapshot = vp.save()
    vp.reveal_row(42)
    assert vp.rowoff == 42
    assert vp.coloff == 7
    vp.restore(snapshot)
    assert vp.save() == (3, 7)
    assert repr(vp) == "Viewport(rowoff=3, coloff=7)"
