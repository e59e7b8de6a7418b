# src/kilo/core/__init__.py
"""Public facade for kilo.core: re-export main classes from CamelCase modules.

Keeps the CamelCase file names (Buffer.py, Syntax.py, Kilo.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .Buffer import Row, TextBuffer  # noqa: F401
from .errors import KiloError, TerminalError  # noqa: F401
from .Kilo import Kilo  # noqa: F401
from .Search import IncrementalSearch, PromptHandler  # noqa: F401
from .Syntax import Highlight, SyntaxHighlighter, SyntaxProfile, select_profile  # noqa: F401


__all__ = [
    "Highlight",
    "IncrementalSearch",
    "Kilo",
    "KiloError",
    "PromptHandler",
    "Row",
    "SyntaxHighlighter",
    "SyntaxProfile",
    "TerminalError",
    "TextBuffer",
    "select_profile",
]
