# kilo/core/TabMapper.py
"""TabMapper.py
========================
Conversion between character columns and rendered (on-screen) columns.

A line's *render form* is its raw characters with every tab expanded to spaces up
to the next multiple of the tab stop. The cursor is stored as a character column
(``cx``); the screen needs the rendered column (``rx``). Search results are found
in the render form and must be mapped back to a character column. Both walks use
the same rule, so ``rx_to_cx(chars, cx_to_rx(chars, c)) == c`` for every valid
``c``.
"""

DEFAULT_TAB_STOP = 8


def _advance(rx: int, ch: str, tab_stop: int) -> int:
    """Return the render column after drawing *ch* at render column *rx*."""
    if ch == "\t":
        return rx + (tab_stop - rx % tab_stop)
    return rx + 1


def expand_tabs(chars: str, tab_stop: int = DEFAULT_TAB_STOP) -> str:
    """Return the render form of *chars* (tabs padded to the next stop)."""
    if "\t" not in chars:
        return chars
    out: list[str] = []
    rx = 0
    for ch in chars:
        if ch == "\t":
            width = tab_stop - rx % tab_stop
            out.append(" " * width)
            rx += width
        else:
            out.append(ch)
            rx += 1
    return "".join(out)


def cx_to_rx(chars: str, cx: int, tab_stop: int = DEFAULT_TAB_STOP) -> int:
    """Map character column *cx* to its rendered column."""
    rx = 0
    for ch in chars[:cx]:
        rx = _advance(rx, ch, tab_stop)
    return rx


def rx_to_cx(chars: str, rx: int, tab_stop: int = DEFAULT_TAB_STOP) -> int:
    """Map rendered column *rx* back to a character column.

    Returns the index of the character whose rendered span covers *rx*, or the
    line length when *rx* lies beyond the rendered width.
    """
    cur_rx = 0
    for cx, ch in enumerate(chars):
        cur_rx = _advance(cur_rx, ch, tab_stop)
        if cur_rx > rx:
            return cx
    return len(chars)
