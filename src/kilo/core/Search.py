# kilo/core/Search.py
"""Search.py
========================
Incremental search, driven keystroke by keystroke from the message-bar prompt.

``PromptHandler`` is the hook the prompt calls after every key with the current
input. ``IncrementalSearch`` implements it: each call undoes the previous match
overlay, then looks for the query starting one row past the last match in the
current direction, wrapping around the buffer ends. Arrow keys pick the
direction; any other key restarts the search from the top.
"""

import logging
from typing import TYPE_CHECKING, Optional

from kilo.core.Syntax import Highlight
from kilo.core.TabMapper import rx_to_cx
from kilo.ui.KeyDecoder import ENTER, ESC, Key

if TYPE_CHECKING:
    from kilo.core.Kilo import Kilo


class PromptHandler:
    """Receives every keystroke typed into a prompt."""

    def on_key(self, query: str, key: int) -> None:
        """Called after *key* was applied to the prompt input *query*.

        Also called for the confirming ENTER and the cancelling ESC.
        """
        raise NotImplementedError


## ==================== IncrementalSearch Class ====================
class IncrementalSearch(PromptHandler):
    """Find-as-you-type search over the render form of every row.

    Attributes:
        editor (Kilo): Editor whose cursor and viewport follow the match.
        last_match (int): Row of the previous match, ``-1`` if none.
        direction (int): ``1`` to search forward, ``-1`` backward.
        saved_hl (Optional[tuple[int, list[Highlight]]]): Row index and original
            classes of the row currently carrying the match overlay.
    """

    def __init__(self, editor: "Kilo") -> None:
        self.editor = editor
        self.last_match = -1
        self.direction = 1
        self.saved_hl: Optional[tuple[int, list[Highlight]]] = None

    def _restore_highlight(self) -> None:
        if self.saved_hl is None:
            return
        row_idx, hl = self.saved_hl
        self.saved_hl = None
        rows = self.editor.buffer.rows
        # the row keeps its length while the prompt is active
        if row_idx < len(rows) and len(rows[row_idx].hl) == len(hl):
            rows[row_idx].hl = hl

    def on_key(self, query: str, key: int) -> None:
        self._restore_highlight()

        if key in (ENTER, ESC):
            self.last_match = -1
            self.direction = 1
            return
        if key in (Key.ARROW_RIGHT, Key.ARROW_DOWN):
            self.direction = 1
        elif key in (Key.ARROW_LEFT, Key.ARROW_UP):
            self.direction = -1
        else:
            self.last_match = -1
            self.direction = 1

        if self.last_match == -1:
            self.direction = 1
        if not query:
            return

        self.search(query)

    def search(self, query: str) -> bool:
        """Scan every row once for *query* from the last match; True on a hit."""
        buf = self.editor.buffer
        numrows = buf.numrows
        current = self.last_match
        for _ in range(numrows):
            current += self.direction
            if current == -1:
                current = numrows - 1
            elif current == numrows:
                current = 0

            row = buf.rows[current]
            pos = row.render.find(query)
            if pos == -1:
                continue

            self.last_match = current
            self.editor.cy = current
            self.editor.cx = rx_to_cx(row.chars, pos, buf.tab_stop)
            self.editor.viewport.reveal_row(current)

            self.saved_hl = (current, list(row.hl))
            row.hl[pos : pos + len(query)] = [Highlight.MATCH] * len(query)
            logging.debug(f"IncrementalSearch: {query!r} found at row {current}, rx {pos}")
            return True

        logging.debug(f"IncrementalSearch: {query!r} not found")
        return False
