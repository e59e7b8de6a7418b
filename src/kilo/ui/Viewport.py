# kilo/ui/Viewport.py
"""Viewport.py
========================
Tracks which part of the buffer is visible.

The viewport is a pair of offsets (``rowoff``, ``coloff``) re-derived each frame
from the cursor position and the text-area size. It never moves the cursor.
"""

import logging


## ==================== Viewport Class ====================
class Viewport:
    """Row and column offsets of the visible text area.

    Attributes:
        rowoff (int): Index of the first buffer row shown.
        coloff (int): First rendered column shown.
    """

    def __init__(self, rowoff: int = 0, coloff: int = 0) -> None:
        self.rowoff = rowoff
        self.coloff = coloff

    def scroll(self, cy: int, rx: int, screenrows: int, screencols: int) -> None:
        """Adjust the offsets so that (``cy``, ``rx``) lies inside the visible area.

        Args:
            cy (int): Cursor row (may equal the number of rows).
            rx (int): Cursor render column.
            screenrows (int): Height of the text area.
            screencols (int): Width of the text area.
        """
        if cy < self.rowoff:
            self.rowoff = cy
        if screenrows > 0 and cy >= self.rowoff + screenrows:
            self.rowoff = cy - screenrows + 1
        if rx < self.coloff:
            self.coloff = rx
        if screencols > 0 and rx >= self.coloff + screencols:
            self.coloff = rx - screencols + 1

    def reveal_row(self, row: int) -> None:
        """Make *row* the first visible row."""
        logging.debug(f"Viewport.reveal_row: rowoff {self.rowoff} -> {row}")
        self.rowoff = row

    def save(self) -> tuple[int, int]:
        return self.rowoff, self.coloff

    def restore(self, snapshot: tuple[int, int]) -> None:
        self.rowoff, self.coloff = snapshot

    def __repr__(self) -> str:
        return f"Viewport(rowoff={self.rowoff}, coloff={self.coloff})"
