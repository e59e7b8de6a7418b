# kilo/core/Buffer.py
"""Buffer.py
========================
The in-memory line buffer and its edit operations.

The buffer owns every ``Row``. Each row keeps its raw characters together with the
derived render form (tabs expanded) and the per-character highlight classes. All
content-changing operations rebuild the touched row's derived state and run the
highlighter before returning, so ``len(row.render) == len(row.hl)`` holds in every
state a caller can observe.

Structural edits (row insert/delete) renumber the ``idx`` of every following row.
"""

import logging
from typing import Optional

from kilo.core.Syntax import Highlight, SyntaxHighlighter, SyntaxProfile
from kilo.core.TabMapper import DEFAULT_TAB_STOP, expand_tabs


## ==================== Row Class ====================
class Row:
    """One line of the buffer.

    Attributes:
        idx (int): Position of the row in the buffer.
        chars (str): Raw line content, without the trailing newline.
        render (str): ``chars`` with tabs expanded to the next tab stop.
        hl (list[Highlight]): One highlight class per character of ``render``.
        hl_open_comment (bool): The row ends inside an unterminated block comment.
        hl_in_comment (bool): The block-comment state this row was last
            highlighted with (its predecessor's ``hl_open_comment`` at the time).
    """

    def __init__(self, idx: int, chars: str = "") -> None:
        self.idx = idx
        self.chars = chars
        self.render = ""
        self.hl: list[Highlight] = []
        self.hl_open_comment = False
        self.hl_in_comment = False

    @property
    def size(self) -> int:
        return len(self.chars)

    @property
    def rsize(self) -> int:
        return len(self.render)

    def __repr__(self) -> str:
        return f"Row(idx={self.idx}, chars={self.chars!r})"


## ==================== TextBuffer Class ====================
class TextBuffer:
    """Ordered, mutable sequence of rows with a modification counter.

    Attributes:
        rows (list[Row]): The lines, index range ``[0, numrows)``.
        dirty (int): Incremented on every content change, reset by ``mark_clean``.
        tab_stop (int): Tab width used to build render forms.
        highlighter (SyntaxHighlighter): Classifies rows after every change.
    """

    def __init__(
        self,
        tab_stop: int = DEFAULT_TAB_STOP,
        profile: Optional[SyntaxProfile] = None,
    ) -> None:
        if tab_stop < 1:
            raise ValueError(f"tab_stop must be >= 1, got {tab_stop}")
        self.rows: list[Row] = []
        self.dirty = 0
        self.tab_stop = tab_stop
        self.highlighter = SyntaxHighlighter(profile)

    @property
    def numrows(self) -> int:
        return len(self.rows)

    @property
    def profile(self) -> Optional[SyntaxProfile]:
        return self.highlighter.profile

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, idx: int) -> Row:
        return self.rows[idx]

    # --- derived state ---
    def _update_row(self, row: Row) -> None:
        """Rebuild the render form of *row* and re-highlight from it onward."""
        row.render = expand_tabs(row.chars, self.tab_stop)
        self.highlighter.update(self.rows, row.idx)

    def _renumber(self, start: int) -> None:
        for j in range(start, len(self.rows)):
            self.rows[j].idx = j

    def set_profile(self, profile: Optional[SyntaxProfile]) -> None:
        """Switch the syntax profile and re-highlight every row."""
        self.highlighter.profile = profile
        self.highlighter.highlight_all(self.rows)

    # --- row operations ---
    def insert_row(self, at: int, text: str) -> None:
        """Insert a new row with content *text* at index *at* (0..numrows)."""
        if at < 0 or at > len(self.rows):
            logging.warning(
                f"TextBuffer.insert_row: index {at} out of range 0..{len(self.rows)}"
            )
            return
        row = Row(at, text)
        self.rows.insert(at, row)
        self._renumber(at + 1)
        self._update_row(row)
        self.dirty += 1

    def delete_row(self, at: int) -> None:
        """Remove the row at index *at*; out-of-range indices are ignored."""
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self._renumber(at)
        # the row that slid into *at* now has a different predecessor
        self.highlighter.revalidate(self.rows, at)
        self.dirty += 1

    def insert_char(self, row_idx: int, at: int, ch: str) -> None:
        """Insert *ch* into row *row_idx* at column *at* (clamped to the row end)."""
        row = self.rows[row_idx]
        if at < 0 or at > row.size:
            at = row.size
        row.chars = row.chars[:at] + ch + row.chars[at:]
        self._update_row(row)
        self.dirty += 1

    def delete_char(self, row_idx: int, at: int) -> None:
        """Delete the character at column *at* of row *row_idx*, if any."""
        row = self.rows[row_idx]
        if at < 0 or at >= row.size:
            return
        row.chars = row.chars[:at] + row.chars[at + 1 :]
        self._update_row(row)
        self.dirty += 1

    def append_string(self, row_idx: int, s: str) -> None:
        row = self.rows[row_idx]
        row.chars += s
        self._update_row(row)
        self.dirty += 1

    def split_row(self, row_idx: int, at: int) -> None:
        """Break row *row_idx* at column *at*; the tail becomes the next row."""
        if row_idx == len(self.rows):
            self.insert_row(row_idx, "")
            return
        row = self.rows[row_idx]
        at = max(0, min(at, row.size))
        if at == 0:
            self.insert_row(row_idx, "")
            return
        tail = row.chars[at:]
        row.chars = row.chars[:at]
        self._update_row(row)
        self.insert_row(row_idx + 1, tail)

    def join_with_next(self, row_idx: int) -> None:
        """Append row ``row_idx + 1`` to row *row_idx* and remove it."""
        if row_idx < 0 or row_idx + 1 >= len(self.rows):
            return
        self.append_string(row_idx, self.rows[row_idx + 1].chars)
        self.delete_row(row_idx + 1)

    # --- bulk load / flatten ---
    def load(self, text: str) -> None:
        """Replace the content with the newline-delimited *text*.

        Trailing ``\\r``/``\\n`` characters are stripped from every line; a final
        newline does not produce an extra empty row. Resets ``dirty``.
        """
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        self.rows = [Row(i, line.rstrip("\r")) for i, line in enumerate(lines)]
        for row in self.rows:
            row.render = expand_tabs(row.chars, self.tab_stop)
        self.highlighter.highlight_all(self.rows)
        self.dirty = 0
        logging.debug(f"TextBuffer.load: {len(self.rows)} rows loaded")

    def flatten(self) -> tuple[str, int]:
        """Return the content as one string (every row followed by ``\\n``) and its
        length in characters."""
        total = sum(row.size + 1 for row in self.rows)
        text = "".join(row.chars + "\n" for row in self.rows)
        return text, total

    def mark_clean(self) -> None:
        self.dirty = 0
