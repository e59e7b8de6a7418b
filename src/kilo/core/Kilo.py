# kilo/core/Kilo.py
"""kilo.core.Kilo
============================
Kilo: editor state and control loop.

The ``Kilo`` object is the single mutable state of an editing session: the line
buffer, the cursor, the viewport, the file name and the status message. It is
owned by the control loop, which alternates between drawing a frame and waiting
(with a bounded timeout) for the next key:

- cursor movement (arrows, Home/End, Page Up/Down),
- editing (character insert, newline, Backspace/Delete),
- Ctrl-S save (prompting for a name when the buffer is unnamed),
- Ctrl-F incremental search,
- Ctrl-Q quit, with repeated confirmation when there are unsaved changes.

Rendering is delegated to ``DrawScreen``, key decoding to ``KeyDecoder`` and all
terminal I/O to the ``Terminal`` collaborator passed in by the caller.
"""

import logging
import time
from typing import TYPE_CHECKING, Any, Optional

from wcwidth import wcwidth

from kilo.core.Buffer import Row, TextBuffer
from kilo.core.errors import KiloError
from kilo.core.Search import IncrementalSearch, PromptHandler
from kilo.core.Syntax import select_profile
from kilo.core.TabMapper import cx_to_rx
from kilo.ui.DrawScreen import DrawScreen
from kilo.ui.KeyDecoder import BACKSPACE, ENTER, ESC, TAB, Key, KeyDecoder, ctrl_key
from kilo.ui.Viewport import Viewport
from kilo.utils import file_io
from kilo.utils.logging_config import logger
from kilo.utils.utils import get_editor_setting

if TYPE_CHECKING:
    from kilo.ui.Terminal import Terminal


HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"
SAVE_AS_PROMPT = "Save as: %s (ESC to cancel)"
SEARCH_PROMPT = "Search: %s (ESC/Arrows/Enter)"

CTRL_F = ctrl_key("f")
CTRL_H = ctrl_key("h")
CTRL_L = ctrl_key("l")
CTRL_Q = ctrl_key("q")
CTRL_S = ctrl_key("s")

ARROW_KEYS = (Key.ARROW_LEFT, Key.ARROW_RIGHT, Key.ARROW_UP, Key.ARROW_DOWN)


def is_insertable(key: int) -> bool:
    """True for TAB and for characters occupying exactly one terminal cell."""
    if key == TAB:
        return True
    if key < 32 or key == BACKSPACE or key >= Key.ARROW_LEFT:
        return False
    return wcwidth(chr(key)) == 1


## ==================== Kilo Class ====================
class Kilo:
    """Class Kilo
    =========================
    State of one editing session and the loop that drives it.

    Attributes:
        terminal (Terminal): Byte source, frame sink and geometry provider.
        config (dict): Merged configuration (see ``kilo.utils.utils``).
        buffer (TextBuffer): The lines being edited.
        viewport (Viewport): Visible window offsets.
        cx (int): Cursor character column, ``0 <= cx <= len(row)``.
        cy (int): Cursor row; may equal ``buffer.numrows`` (past the last row).
        screenrows (int): Height of the text area (window height minus the
            status and message rows).
        screencols (int): Width of the window.
        filename (Optional[str]): File being edited, None for an unnamed buffer.
        encoding (str): Encoding used to write the file back.
        status_msg (str): Text of the message bar.
        status_msg_time (float): When ``status_msg`` was set.
        quit_times (int): Consecutive Ctrl-Q presses needed to drop changes.
        running (bool): Cleared to stop ``run()``.
    """

    def __init__(
        self,
        terminal: "Terminal",
        config: dict[str, Any],
        window_size: Optional[tuple[int, int]] = None,
    ) -> None:
        self.terminal = terminal
        self.config: dict[str, Any] = config

        self._initialize_state()
        self._initialize_components()
        self.update_window_size(window_size)
        self.set_status_message(HELP_MESSAGE)
        logging.info(
            f"Kilo initialized: {self.screenrows}x{self.screencols} text area, "
            f"tab stop {self.buffer.tab_stop}, quit_times {self.quit_times}"
        )

    # --- State Initialization ---
    def _initialize_state(self) -> None:
        self.cx = 0
        self.cy = 0
        self.screenrows = 0
        self.screencols = 0
        self.filename: Optional[str] = None
        self.encoding = file_io.DEFAULT_ENCODING
        self.status_msg = ""
        self.status_msg_time = 0.0
        self.running = False
        self._resize_pending = False

        self.quit_times = get_editor_setting(self.config, "quit_times")
        self.quit_remaining = self.quit_times
        self.message_timeout = get_editor_setting(self.config, "message_timeout")

    def _initialize_components(self) -> None:
        self.buffer = TextBuffer(tab_stop=get_editor_setting(self.config, "tab_stop"))
        self.viewport = Viewport()
        self.decoder = KeyDecoder(self.terminal.read_byte)
        self.drawer = DrawScreen(self, self.config)

    # --- geometry ---
    def update_window_size(self, window_size: Optional[tuple[int, int]] = None) -> None:
        """Query (or take) the window size and derive the text-area size."""
        rows, cols = window_size if window_size else self.terminal.get_window_size()
        self.screenrows = max(rows - 2, 0)
        self.screencols = cols
        logging.debug(f"Window size {rows}x{cols}, text area {self.screenrows} rows")

    def request_resize(self) -> None:
        """Signal-safe: note that the window changed size; handled on the next frame."""
        self._resize_pending = True

    def handle_resize(self) -> None:
        self._resize_pending = False
        self.update_window_size()
        if self.cy > self.buffer.numrows:
            self.cy = self.buffer.numrows

    # --- helpers ---
    def current_row(self) -> Optional[Row]:
        if self.cy < self.buffer.numrows:
            return self.buffer.rows[self.cy]
        return None

    def current_rx(self) -> int:
        row = self.current_row()
        if row is None:
            return 0
        return cx_to_rx(row.chars, self.cx, self.buffer.tab_stop)

    def set_status_message(self, fmt: str, *args: Any) -> None:
        """Show ``fmt % args`` in the message bar and restart its timeout."""
        self.status_msg = fmt % args if args else fmt
        self.status_msg_time = time.time()
        logging.debug(f"Status message set to: '{self.status_msg}'")

    # --- file operations ---
    def open_file(self, filename: str) -> None:
        """Load *filename* into the buffer; a missing file opens an empty buffer.

        Raises:
            KiloError: The file exists but cannot be read.
        """
        self.filename = filename
        self.buffer.set_profile(select_profile(filename))
        try:
            text, self.encoding = file_io.read_text(filename)
        except FileNotFoundError:
            logger.info(f"'{filename}' does not exist yet; starting an empty buffer")
            self.buffer.load("")
            return
        except OSError as e:
            logger.error(f"Could not open '{filename}': {e}")
            raise KiloError(f"{filename}: {e.strerror or e}") from e
        self.buffer.load(text)
        logger.info(f"Opened '{filename}': {self.buffer.numrows} rows, encoding {self.encoding}")

    def save_file(self) -> bool:
        """Write the buffer to ``filename``, asking for a name if there is none.

        Returns:
            bool: True if the file was written.
        """
        if self.filename is None:
            name = self.prompt(SAVE_AS_PROMPT)
            if name is None:
                self.set_status_message("Save aborted")
                return False
            self.filename = name
            self.buffer.set_profile(select_profile(name))

        text, length = self.buffer.flatten()
        logging.debug(f"save_file: writing {length} characters to '{self.filename}'")
        try:
            written = file_io.write_text(self.filename, text, self.encoding)
        except UnicodeEncodeError as e:
            bad = e.object[e.start : e.end]
            logger.error(f"Failed to encode '{self.filename}' as {self.encoding}: {e}")
            self.set_status_message("Can't save! %r is not representable in %s", bad, self.encoding)
            return False
        except OSError as e:
            logger.error(f"Failed to write file '{self.filename}': {e}")
            self.set_status_message("Can't save! I/O error: %s", e.strerror or e)
            return False

        self.buffer.mark_clean()
        self.set_status_message("%d bytes written to disk", written)
        logger.info(f"Saved '{self.filename}' ({written} bytes)")
        return True

    # --- editing ---
    def insert_char(self, ch: str) -> None:
        if self.cy == self.buffer.numrows:
            self.buffer.insert_row(self.buffer.numrows, "")
        self.buffer.insert_char(self.cy, self.cx, ch)
        self.cx += 1

    def insert_newline(self) -> None:
        self.buffer.split_row(self.cy, self.cx)
        self.cy += 1
        self.cx = 0

    def delete_char(self) -> None:
        """Delete the character left of the cursor, joining rows at column 0."""
        if self.cy == self.buffer.numrows:
            return
        if self.cx == 0 and self.cy == 0:
            return
        if self.cx > 0:
            self.buffer.delete_char(self.cy, self.cx - 1)
            self.cx -= 1
        else:
            self.cx = self.buffer.rows[self.cy - 1].size
            self.buffer.join_with_next(self.cy - 1)
            self.cy -= 1

    # --- cursor movement ---
    def move_cursor(self, key: int) -> None:
        row = self.current_row()
        if key == Key.ARROW_LEFT:
            if self.cx != 0:
                self.cx -= 1
            elif self.cy > 0:
                self.cy -= 1
                self.cx = self.buffer.rows[self.cy].size
        elif key == Key.ARROW_RIGHT:
            if row is not None and self.cx < row.size:
                self.cx += 1
            elif row is not None and self.cx == row.size:
                self.cy += 1
                self.cx = 0
        elif key == Key.ARROW_UP:
            if self.cy != 0:
                self.cy -= 1
        elif key == Key.ARROW_DOWN:
            if self.cy < self.buffer.numrows:
                self.cy += 1

        row = self.current_row()
        rowlen = row.size if row is not None else 0
        if self.cx > rowlen:
            self.cx = rowlen

    def page(self, key: int) -> None:
        """Page Up/Down: jump to the screen edge, then move a screenful."""
        if key == Key.PAGE_UP:
            self.cy = self.viewport.rowoff
        else:
            self.cy = min(self.viewport.rowoff + self.screenrows - 1, self.buffer.numrows)
        direction = Key.ARROW_UP if key == Key.PAGE_UP else Key.ARROW_DOWN
        for _ in range(self.screenrows):
            self.move_cursor(direction)

    # --- prompt and search ---
    def prompt(self, template: str, handler: Optional[PromptHandler] = None) -> Optional[str]:
        """Read a line of input in the message bar.

        Args:
            template: Message with one ``%s`` where the input is shown.
            handler: Called after every keystroke, including ENTER and ESC.

        Returns:
            The confirmed input, or None when cancelled with ESC.
        """
        buf = ""
        while True:
            self.set_status_message(template, buf)
            self.refresh_screen()

            c = self.decoder.read_key()
            if c is None:
                continue
            if c in (Key.DEL, CTRL_H, BACKSPACE):
                buf = buf[:-1]
            elif c == ESC:
                self.set_status_message("")
                if handler is not None:
                    handler.on_key(buf, c)
                return None
            elif c == ENTER:
                if buf:
                    self.set_status_message("")
                    if handler is not None:
                        handler.on_key(buf, c)
                    return buf
            elif c != TAB and is_insertable(c):
                buf += chr(c)

            if handler is not None:
                handler.on_key(buf, c)

    def find(self) -> None:
        """Incremental search; ESC puts the cursor and viewport back."""
        saved_cx, saved_cy = self.cx, self.cy
        saved_view = self.viewport.save()

        query = self.prompt(SEARCH_PROMPT, IncrementalSearch(self))

        if query is None:
            self.cx, self.cy = saved_cx, saved_cy
            self.viewport.restore(saved_view)

    # --- quitting ---
    def request_quit(self) -> None:
        """Quit, unless unsaved changes still need more confirmations."""
        if self.buffer.dirty and self.quit_remaining > 1:
            self.quit_remaining -= 1
            self.set_status_message(
                "WARNING!!! File has unsaved changes. Press Ctrl-Q %d more times to quit.",
                self.quit_remaining,
            )
            return
        self.exit_editor()

    def exit_editor(self) -> None:
        self.terminal.write("\x1b[2J\x1b[H")
        self.running = False
        logger.info("Exit requested; leaving the main loop.")

    # --- main loop ---
    def scroll(self) -> None:
        self.viewport.scroll(self.cy, self.current_rx(), self.screenrows, self.screencols)

    def refresh_screen(self) -> None:
        if self._resize_pending:
            self.handle_resize()
        self.drawer.draw()

    def handle_key(self, c: int) -> None:
        """Dispatch one decoded key event."""
        if c == CTRL_Q:
            self.request_quit()
            return

        if c == ENTER:
            self.insert_newline()
        elif c == CTRL_S:
            self.save_file()
        elif c == CTRL_F:
            self.find()
        elif c in (BACKSPACE, CTRL_H, Key.DEL):
            if c == Key.DEL:
                self.move_cursor(Key.ARROW_RIGHT)
            self.delete_char()
        elif c in (Key.PAGE_UP, Key.PAGE_DOWN):
            self.page(c)
        elif c == Key.HOME:
            self.cx = 0
        elif c == Key.END:
            row = self.current_row()
            if row is not None:
                self.cx = row.size
        elif c in ARROW_KEYS:
            self.move_cursor(c)
        elif c in (CTRL_L, ESC):
            pass
        elif is_insertable(c):
            self.insert_char(chr(c))
        else:
            logging.debug(f"handle_key: ignoring key {c}")

        # any key other than Ctrl-Q restarts the quit confirmation
        self.quit_remaining = self.quit_times

    def process_keypress(self) -> None:
        """Wait (bounded) for one key and handle it; an idle read does nothing."""
        c = self.decoder.read_key()
        if c is None:
            return
        self.handle_key(c)

    def run(self) -> None:
        """Draw and handle keys until ``running`` is cleared."""
        logger.info("Editor main loop started.")
        self.running = True
        while self.running:
            self.refresh_screen()
            self.process_keypress()
        logger.info("Editor main loop finished.")
