# src/kilo/__init__.py
"""kilo: a minimal terminal text editor with incremental search and syntax highlighting."""

__version__ = "1.0.0"
