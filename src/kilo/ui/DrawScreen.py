# kilo/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen: the screen compositor of the kilo editor.

Each refresh builds one complete frame of escape-coded output in a list
accumulator and hands it to the terminal in a single write:

- hide the cursor and move it home,
- one line per text row: highlighted buffer content, a ``~`` filler past the end
  of the buffer, or the centered welcome banner on an empty buffer,
- the status bar in reverse video,
- the message bar (shown while the status message is fresh),
- place the cursor and show it again.

Color escapes are only emitted when the highlight class's color changes, and every
content row ends with a default-color reset so colors never bleed into the next
row.
"""

import logging
import time
from typing import TYPE_CHECKING, Any

from wcwidth import wcswidth, wcwidth

from kilo import __version__
from kilo.core.Syntax import Highlight
from kilo.core.TabMapper import cx_to_rx
from kilo.utils.utils import ansi_color_code

if TYPE_CHECKING:
    from kilo.core.Kilo import Kilo


HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CURSOR_HOME = "\x1b[H"
CLEAR_LINE = "\x1b[K"
REVERSE_VIDEO = "\x1b[7m"
RESET_ATTRS = "\x1b[m"
DEFAULT_FG = "\x1b[39m"

# Highlight class -> default color name.
DEFAULT_COLORS: dict[Highlight, str] = {
    Highlight.COMMENT: "cyan",
    Highlight.MLCOMMENT: "cyan",
    Highlight.KEYWORD1: "yellow",
    Highlight.KEYWORD2: "green",
    Highlight.STRING: "magenta",
    Highlight.NUMBER: "red",
    Highlight.MATCH: "blue",
}


def build_color_table(config: dict[str, Any]) -> dict[Highlight, int]:
    """Resolve the SGR color code of every highlight class from ``config['colors']``."""
    colors_cfg = config.get("colors", {})
    table: dict[Highlight, int] = {Highlight.NORMAL: 37}
    for hl_class, default_name in DEFAULT_COLORS.items():
        default_code = ansi_color_code(default_name)
        name = colors_cfg.get(hl_class.name.lower(), default_name)
        table[hl_class] = ansi_color_code(name, default_code)
    return table


def truncate_string(s: str, max_width: int) -> str:
    """Clip *s* to at most *max_width* terminal cells, never splitting a wide glyph."""
    if max_width <= 0:
        return ""
    total = wcswidth(s)
    if 0 <= total <= max_width:
        return s
    out = []
    width = 0
    for ch in s:
        w = wcwidth(ch)
        if w < 0:
            w = 1
        if width + w > max_width:
            break
        out.append(ch)
        width += w
    return "".join(out)


def fitting_length(text: str, max_width: int) -> int:
    """Number of leading characters of *text* that fit in *max_width* cells.

    Control characters count as one cell, as drawn by ``_draw_content``.
    """
    width = 0
    for i, ch in enumerate(text):
        code = ord(ch)
        w = 1 if code < 32 or code == 127 else wcwidth(ch)
        if w < 0:
            w = 1
        if width + w > max_width:
            return i
        width += w
    return len(text)


def string_width(s: str) -> int:
    """Display width of *s*; unprintable characters count as one cell."""
    width = wcswidth(s)
    if width >= 0:
        return width
    return sum(max(wcwidth(ch), 1) for ch in s)


## ================= class DrawScreen ==============================
class DrawScreen:
    """Renders the editor state into escape-coded frames.

    Attributes:
        editor (Kilo): Editor whose buffer, cursor and messages are drawn.
        colors (dict[Highlight, int]): SGR color code per highlight class.
    """

    def __init__(self, editor: "Kilo", config: dict[str, Any]) -> None:
        self.editor = editor
        self.colors = build_color_table(config)
        logging.debug(f"DrawScreen initialized with colors {self.colors}")

    # --- frame assembly ---
    def compose(self) -> str:
        """Return one complete frame for the current editor state."""
        ab: list[str] = [HIDE_CURSOR, CURSOR_HOME]
        self._draw_rows(ab)
        self._draw_status_bar(ab)
        self._draw_message_bar(ab)
        self._position_cursor(ab)
        ab.append(SHOW_CURSOR)
        return "".join(ab)

    def draw(self) -> None:
        """Scroll to the cursor, compose a frame and write it to the terminal."""
        self.editor.scroll()
        self.editor.terminal.write(self.compose())

    # --- text area ---
    def _draw_rows(self, ab: list[str]) -> None:
        editor = self.editor
        buf = editor.buffer
        screenrows = editor.screenrows
        screencols = editor.screencols
        rowoff = editor.viewport.rowoff
        coloff = editor.viewport.coloff

        for y in range(screenrows):
            filerow = y + rowoff
            if filerow >= buf.numrows:
                if buf.numrows == 0 and y == screenrows // 3:
                    self._draw_welcome(ab, screencols)
                else:
                    ab.append("~")
            else:
                row = buf.rows[filerow]
                text = row.render[coloff : coloff + screencols]
                end = fitting_length(text, screencols)
                self._draw_content(ab, text[:end], row.hl[coloff : coloff + end])
            ab.append(CLEAR_LINE)
            ab.append("\r\n")

    def _draw_welcome(self, ab: list[str], screencols: int) -> None:
        welcome = truncate_string(f"Kilo editor -- version {__version__}", screencols)
        padding = (screencols - string_width(welcome)) // 2
        if padding > 0:
            ab.append("~")
            padding -= 1
        ab.append(" " * padding)
        ab.append(welcome)

    def _draw_content(self, ab: list[str], text: str, hl: list[Highlight]) -> None:
        """Append *text* with color escapes derived from the parallel *hl* classes."""
        current_color = -1
        for ch, hl_class in zip(text, hl):
            code = ord(ch)
            if code < 32 or code == 127:
                sym = chr(ord("@") + code) if code <= 26 else "?"
                ab.append(REVERSE_VIDEO)
                ab.append(sym)
                ab.append(RESET_ATTRS)
                if current_color != -1:
                    ab.append(f"\x1b[{current_color}m")
            elif hl_class == Highlight.NORMAL:
                if current_color != -1:
                    ab.append(DEFAULT_FG)
                    current_color = -1
                ab.append(ch)
            else:
                color = self.colors.get(hl_class, 37)
                if color != current_color:
                    current_color = color
                    ab.append(f"\x1b[{color}m")
                ab.append(ch)
        ab.append(DEFAULT_FG)

    # --- status and message bars ---
    def status_text(self) -> str:
        """Return the status bar line, exactly ``screencols`` cells wide or less."""
        editor = self.editor
        buf = editor.buffer
        cols = editor.screencols

        name = editor.filename[:20] if editor.filename else "[No Name]"
        modified = "(modified)" if buf.dirty else ""
        left = truncate_string(f"{name} - {buf.numrows} lines {modified}", cols)
        filetype = buf.profile.filetype if buf.profile else "no ft"
        right = f"{filetype} | {editor.cy + 1}/{buf.numrows}"

        left_w = string_width(left)
        right_w = string_width(right)
        if left_w + right_w <= cols:
            return left + " " * (cols - left_w - right_w) + right
        return left + " " * (cols - left_w)

    def _draw_status_bar(self, ab: list[str]) -> None:
        ab.append(REVERSE_VIDEO)
        ab.append(self.status_text())
        ab.append(RESET_ATTRS)
        ab.append("\r\n")

    def message_text(self) -> str:
        """Return the status message if it is still fresh, truncated to the width."""
        editor = self.editor
        if not editor.status_msg:
            return ""
        if time.time() - editor.status_msg_time >= editor.message_timeout:
            return ""
        return truncate_string(editor.status_msg, editor.screencols)

    def _draw_message_bar(self, ab: list[str]) -> None:
        ab.append(CLEAR_LINE)
        ab.append(self.message_text())

    # --- cursor ---
    def _position_cursor(self, ab: list[str]) -> None:
        editor = self.editor
        rx = 0
        if editor.cy < editor.buffer.numrows:
            rx = cx_to_rx(editor.buffer.rows[editor.cy].chars, editor.cx, editor.buffer.tab_stop)
        screen_y = editor.cy - editor.viewport.rowoff + 1
        screen_x = rx - editor.viewport.coloff + 1
        ab.append(f"\x1b[{screen_y};{screen_x}H")
