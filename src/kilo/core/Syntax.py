# kilo/core/Syntax.py
"""Syntax.py
========================
Filetype profiles and the incremental syntax highlighter.

Each row is classified left to right over its render form by a small state
machine (line comment, block comment, string, number, keyword). The only state
that crosses a line boundary is "ends inside a block comment"; when a row's
outgoing state no longer matches what the next row was highlighted with, the next
row is re-highlighted too. That propagation runs as a forward worklist so long
chains of flipped rows (opening a ``/*`` at the top of a large file) never grow
the call stack.

Classes:
    Highlight: Highlight classes assigned to each rendered character.
    SyntaxProfile: Static per-filetype bundle of keywords, markers and flags.
    SyntaxHighlighter: Classifies rows and propagates block-comment state.

Functions:
    select_profile(filename): First profile in table order matching a filename.
    is_separator(ch): Whether a character bounds keywords and numbers.
"""

import logging
import os
from enum import IntEnum
from typing import TYPE_CHECKING, NamedTuple, Optional, Sequence

if TYPE_CHECKING:
    from kilo.core.Buffer import Row


class Highlight(IntEnum):
    NORMAL = 0
    COMMENT = 1
    MLCOMMENT = 2
    KEYWORD1 = 3
    KEYWORD2 = 4
    STRING = 5
    NUMBER = 6
    MATCH = 7


# profile feature flags
HL_NUMBERS = 1 << 0
HL_STRINGS = 1 << 1

SEPARATOR_CHARS = ",.()+-/*=~%<>[]:;{}"

# Trailing sentinel marking a priority-2 keyword in a profile's keyword table.
KEYWORD2_SENTINEL = "|"


class SyntaxProfile(NamedTuple):
    """Static highlighting rules for one filetype.

    Attributes:
        filetype: Name shown in the status bar.
        filematch: Entries starting with ``.`` match the file extension exactly;
            any other entry matches as a substring of the file name.
        keywords: Keyword table in match order. Words ending in ``|`` are
            priority-2 keywords (types), the rest priority-1.
        line_comment: Single-line comment marker, or ``""`` if none.
        block_start: Block comment opening marker, or ``""`` if none.
        block_end: Block comment closing marker, or ``""`` if none.
        flags: Bitmask of ``HL_NUMBERS`` and ``HL_STRINGS``.
    """

    filetype: str
    filematch: tuple[str, ...]
    keywords: tuple[str, ...]
    line_comment: str = ""
    block_start: str = ""
    block_end: str = ""
    flags: int = 0


C_PROFILE = SyntaxProfile(
    filetype="c",
    filematch=(".c", ".h", ".cpp", ".hpp"),
    keywords=(
        "switch", "if", "while", "for", "break", "continue", "return", "else",
        "struct", "union", "typedef", "static", "enum", "class", "case",
        "int|", "long|", "double|", "float|", "char|", "unsigned|", "signed|",
        "void|", "size_t|", "ssize_t|", "bool|",
    ),
    line_comment="//",
    block_start="/*",
    block_end="*/",
    flags=HL_NUMBERS | HL_STRINGS,
)

PYTHON_PROFILE = SyntaxProfile(
    filetype="python",
    filematch=(".py", ".pyw"),
    keywords=(
        "def", "class", "if", "elif", "else", "for", "while", "return", "yield",
        "import", "from", "as", "with", "try", "except", "finally", "raise",
        "pass", "break", "continue", "lambda", "in", "is", "not", "and", "or",
        "global", "nonlocal", "del", "assert", "async", "await",
        "None|", "True|", "False|", "self|", "int|", "str|", "float|", "bool|",
        "list|", "dict|", "tuple|", "set|", "bytes|",
    ),
    line_comment="#",
    flags=HL_NUMBERS | HL_STRINGS,
)

# Highlight database, searched in order by select_profile().
HLDB: tuple[SyntaxProfile, ...] = (C_PROFILE, PYTHON_PROFILE)


def is_separator(ch: str) -> bool:
    """Return True for whitespace, NUL (end of line) and punctuation separators."""
    return ch == "\0" or ch.isspace() or ch in SEPARATOR_CHARS


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def select_profile(
    filename: Optional[str], table: Sequence[SyntaxProfile] = HLDB
) -> Optional[SyntaxProfile]:
    """Return the first profile in *table* whose match list accepts *filename*."""
    if not filename:
        return None

    base = os.path.basename(filename)
    dot = base.rfind(".")
    ext = base[dot:] if dot != -1 else None

    for profile in table:
        for entry in profile.filematch:
            is_ext = entry.startswith(".")
            if (is_ext and ext == entry) or (not is_ext and entry in filename):
                logging.debug(
                    "select_profile: '%s' matched profile '%s' via %r",
                    filename, profile.filetype, entry,
                )
                return profile
    return None


## ==================== SyntaxHighlighter Class ====================
class SyntaxHighlighter:
    """Assigns a highlight class to every rendered character of a row.

    Attributes:
        profile (Optional[SyntaxProfile]): Active rules; ``None`` leaves every
            character ``Highlight.NORMAL``.
    """

    def __init__(self, profile: Optional[SyntaxProfile] = None) -> None:
        self.profile = profile

    def highlight_row(self, row: "Row", in_comment: bool) -> None:
        """Classify one row, starting in block-comment state *in_comment*.

        Sets ``row.hl``, ``row.hl_open_comment`` and records the incoming state in
        ``row.hl_in_comment``. Does not touch neighbouring rows.
        """
        render = row.render
        n = len(render)
        hl = [Highlight.NORMAL] * n
        row.hl_in_comment = in_comment

        profile = self.profile
        if profile is None:
            row.hl = hl
            row.hl_open_comment = False
            return

        scs = profile.line_comment
        mcs = profile.block_start
        mce = profile.block_end

        prev_sep = True
        in_string = ""
        i = 0
        while i < n:
            c = render[i]
            prev_hl = hl[i - 1] if i > 0 else Highlight.NORMAL

            if scs and not in_string and not in_comment and render.startswith(scs, i):
                hl[i:] = [Highlight.COMMENT] * (n - i)
                break

            if mcs and mce and not in_string:
                if in_comment:
                    hl[i] = Highlight.MLCOMMENT
                    if render.startswith(mce, i):
                        hl[i : i + len(mce)] = [Highlight.MLCOMMENT] * len(mce)
                        i += len(mce)
                        in_comment = False
                        prev_sep = True
                        continue
                    i += 1
                    continue
                if render.startswith(mcs, i):
                    hl[i : i + len(mcs)] = [Highlight.MLCOMMENT] * len(mcs)
                    i += len(mcs)
                    in_comment = True
                    continue

            if profile.flags & HL_STRINGS:
                if in_string:
                    hl[i] = Highlight.STRING
                    if c == "\\" and i + 1 < n:
                        hl[i + 1] = Highlight.STRING
                        i += 2
                        continue
                    if c == in_string:
                        in_string = ""
                    i += 1
                    prev_sep = True
                    continue
                if c in ('"', "'"):
                    in_string = c
                    hl[i] = Highlight.STRING
                    i += 1
                    continue

            if profile.flags & HL_NUMBERS:
                if (_is_digit(c) and (prev_sep or prev_hl == Highlight.NUMBER)) or (
                    c == "." and prev_hl == Highlight.NUMBER
                ):
                    hl[i] = Highlight.NUMBER
                    i += 1
                    prev_sep = False
                    continue

            if prev_sep:
                matched = self._match_keyword(render, i)
                if matched is not None:
                    klen, hl_class = matched
                    hl[i : i + klen] = [hl_class] * klen
                    i += klen
                    prev_sep = False
                    continue

            prev_sep = is_separator(c)
            i += 1

        row.hl = hl
        row.hl_open_comment = in_comment

    def _match_keyword(self, render: str, i: int) -> Optional[tuple[int, Highlight]]:
        """Return ``(length, class)`` of the first keyword starting at *i*."""
        if self.profile is None:
            return None
        for keyword in self.profile.keywords:
            hl_class = Highlight.KEYWORD1
            if keyword.endswith(KEYWORD2_SENTINEL):
                keyword = keyword[: -len(KEYWORD2_SENTINEL)]
                hl_class = Highlight.KEYWORD2
            if not keyword:
                continue
            klen = len(keyword)
            end = i + klen
            following = render[end] if end < len(render) else "\0"
            if render.startswith(keyword, i) and is_separator(following):
                return klen, hl_class
        return None

    # --- cross-row propagation ---
    def update(self, rows: Sequence["Row"], idx: int) -> int:
        """Re-highlight ``rows[idx]`` and every following row whose incoming
        block-comment state no longer matches its predecessor.

        Returns:
            int: Number of rows re-highlighted.
        """
        count = 0
        while 0 <= idx < len(rows):
            incoming = idx > 0 and rows[idx - 1].hl_open_comment
            row = rows[idx]
            self.highlight_row(row, incoming)
            count += 1

            nxt = idx + 1
            if nxt >= len(rows) or rows[nxt].hl_in_comment == row.hl_open_comment:
                break
            idx = nxt

        if count > 1:
            logging.debug(
                "SyntaxHighlighter.update: block-comment state propagated over %d rows",
                count,
            )
        return count

    def revalidate(self, rows: Sequence["Row"], idx: int) -> int:
        """Re-highlight from *idx* only if its incoming state is stale.

        Used after structural edits (row deletion) that give ``rows[idx]`` a new
        predecessor without touching its content.
        """
        if not 0 <= idx < len(rows):
            return 0
        incoming = idx > 0 and rows[idx - 1].hl_open_comment
        if rows[idx].hl_in_comment == incoming:
            return 0
        return self.update(rows, idx)

    def highlight_all(self, rows: Sequence["Row"]) -> None:
        """Re-highlight every row from the top (after a profile change)."""
        incoming = False
        for row in rows:
            self.highlight_row(row, incoming)
            incoming = row.hl_open_comment
        logging.debug(
            "SyntaxHighlighter.highlight_all: %d rows with profile %s",
            len(rows),
            self.profile.filetype if self.profile else None,
        )
