#!/usr/bin/env python3
# /kilo/main.py
"""
Kilo Main Entry Point
=====================

This script is the primary entry point for launching the kilo editor. It performs:
1) Environment Loading: reads ~/.config/kilo/.env early (e.g. KILO_KEYTRACE).
2) Path Setup: ensures the kilo package is importable from a source checkout.
3) Configuration & Logging: loads config and initializes logging ASAP.
4) Core Import: imports the editor after logging is ready.
5) Terminal Setup: raw mode is entered around the editor's lifetime and always
   restored, also when a fatal error ends the session.
6) Application Run: instantiates Kilo, opens the optional file and starts its loop.

Usage:
    python main.py [filename]
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

# --- Step 1: Load Environment Variables from the User's Config Directory ---
try:
    load_dotenv(dotenv_path=Path.home() / ".config" / "kilo" / ".env")
except (OSError, RuntimeError) as e:
    print(f"kilo: could not read .env file: {e}", file=sys.stderr)

# --- Step 2: Set up the Python Path ---
# Make the src/ layout importable when running from a source checkout.
project_root = os.path.dirname(os.path.abspath(__file__))
src_dir = os.path.join(project_root, "src")
if os.path.isdir(src_dir) and src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# --- Step 3: Immediate Logging and Configuration Setup ---
try:
    from kilo.utils.logging_config import setup_logging
    from kilo.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("kilo")
except Exception as e:
    # Logging is not ready; print to stderr and exit.
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc()
    sys.exit(1)

# --- Step 4: Import the Core Application ---
try:
    from kilo.core.errors import KiloError, TerminalError
    from kilo.core.Kilo import Kilo
    from kilo.ui.Terminal import Terminal
except ImportError as e:
    logger.critical("Failed to import a critical application component: %s", e, exc_info=True)
    sys.exit(1)


def _resolve_cli_path(argv: list[str]) -> Optional[str]:
    """Return the optional file argument, expanded to a user path."""
    if len(argv) <= 1:
        return None
    raw = argv[1].strip()
    if not raw:
        return None
    return os.path.expanduser(raw)


def _install_resize_handler(editor: Kilo) -> None:
    """Re-query the window size on SIGWINCH (handled on the next frame)."""
    if not hasattr(signal, "SIGWINCH"):
        return

    def _on_winch(signum: int, frame: Any) -> None:
        editor.request_resize()

    signal.signal(signal.SIGWINCH, _on_winch)


def run_editor(terminal: Terminal, file_to_open: Optional[str]) -> None:
    """Create the editor on *terminal*, open *file_to_open* and run until quit."""
    editor = Kilo(terminal, config)
    _install_resize_handler(editor)
    if file_to_open:
        editor.open_file(file_to_open)
    editor.run()


def start() -> int:
    """Run the editor with the terminal in raw mode; return the exit status."""
    logger.info("Kilo editor starting up...")
    file_to_open = _resolve_cli_path(sys.argv)
    terminal = Terminal()

    try:
        with terminal:
            run_editor(terminal, file_to_open)
    except KiloError as e:
        # The terminal is already back in cooked mode here.
        try:
            terminal.clear_screen()
        except TerminalError as e_clear:
            logger.debug("Could not clear the screen: %s", e_clear)
        logger.critical("Fatal error: %s", e, exc_info=True)
        print(f"kilo: {e}", file=sys.stderr)
        return 1

    logger.info("Kilo editor shut down gracefully.")
    return 0


if __name__ == "__main__":
    sys.exit(start())
