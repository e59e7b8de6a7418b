# kilo/utils/logging_config.py
"""kilo.utils.logging_config
===========================

Logging configuration for the kilo editor. Defines the global logger objects and
a single setup function, `setup_logging`, which attaches handlers according to the
`[logging]` section of the configuration.

Features:
    - Rotating file logging for general application events (editor.log).
    - Optional console logging to stderr. Off by default: the editor owns the
      screen while it runs.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional key event tracing (keytrace.log) enabled via the KILO_KEYTRACE
      environment variable.
    - Automatic creation of log directories, with fallback to the system temp
      directory on failure.
    - Safe reconfiguration: clears existing handlers to avoid duplicate logs when
      called multiple times.

Usage:
    Call `setup_logging()` early in the start-up sequence.

    >>> from kilo.utils import logging_config
    >>> logging_config.setup_logging({"logging": {"file_level": "INFO"}})

Globals:
    logger: Main application logger ("kilo").
    KEY_LOGGER: Logger for decoded key event traces ("kilo.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
# Created at import-time, unconfigured until ``setup_logging()`` runs.
logger = logging.getLogger("kilo")  # main application logger
KEY_LOGGER = logging.getLogger("kilo.keyevents")  # decoded key trace

KEYTRACE_ENV = "KILO_KEYTRACE"
DEFAULT_LOG_FILE = "~/.config/kilo/editor.log"


def _prepare_log_path(path: str, fallback_name: str) -> str:
    """Expand *path* and create its directory; fall back to the temp dir on failure."""
    path = os.path.expanduser(path)
    log_dir = os.path.dirname(path)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e_mkdir:
            print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
            path = os.path.join(tempfile.gettempdir(), fallback_name)
            print(f"Logging to temporary file: '{path}'", file=sys.stderr)
    return path


def keytrace_enabled() -> bool:
    return os.environ.get(KEYTRACE_ENV, "").lower() in {"1", "true", "yes"}


# --- Logging Setup Function ---
def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are set up:

    1. File handler: rotating editor.log capturing everything from the
       configured `file_level` (default DEBUG) upward.
    2. Console handler: optional `stderr` output whose threshold is
       `console_level` (default WARNING).
    3. Error-file handler: optional rotating error.log, next to editor.log,
       that stores only ERROR and CRITICAL events.
    4. Key-event handler: optional rotating keytrace.log enabled when the
       environment variable ``KILO_KEYTRACE`` is ``1/true/yes``; attached to
       the ``kilo.keyevents`` logger.

    Existing handlers on the root logger are cleared to avoid duplicate records
    when the function is invoked multiple times (e.g. in unit tests).

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` sub-section is consulted; recognised keys are
            ``log_file``, ``file_level``, ``console_level``, ``log_to_console``
            and ``separate_error_log``.

    Notes:
        The function never raises; I/O or permission errors are reported to
        stderr and logging continues with a best-effort configuration.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    log_filename = _prepare_log_path(
        logging_config.get("log_file", DEFAULT_LOG_FILE), "kilo.log"
    )
    log_dir = os.path.dirname(log_filename)
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)
    except OSError as e_fh:
        print(
            f"Error setting up file logger for '{log_filename}': {e_fh}. File logging may be impaired.",
            file=sys.stderr,
        )

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_log_level = getattr(logging, console_level_str, logging.WARNING)

        console_formatter = logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s")
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(console_log_level)

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_log_filename = os.path.join(log_dir, "error.log")
        try:
            error_file_handler = logging.handlers.RotatingFileHandler(
                error_log_filename,
                maxBytes=1 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except OSError as e_efh:
            print(
                f"Error setting up separate error log '{error_log_filename}': {e_efh}.",
                file=sys.stderr,
            )

    # Configure the root logger
    root_logger = logging.getLogger()
    root_logger.handlers = []

    if file_handler:
        root_logger.addHandler(file_handler)
    if console_handler:
        root_logger.addHandler(console_handler)
    if error_file_handler:
        root_logger.addHandler(error_file_handler)

    root_logger.setLevel(log_file_level)

    # Key Event Logger
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []

    if keytrace_enabled():
        key_trace_filename = os.path.join(log_dir, "keytrace.log")
        try:
            key_trace_handler = logging.handlers.RotatingFileHandler(
                key_trace_filename,
                maxBytes=1 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            KEY_LOGGER.addHandler(key_trace_handler)
            KEY_LOGGER.disabled = False
            logging.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)
        except OSError as e_keytrace:
            logging.error(f"Failed to set up key trace logging: {e_keytrace}", exc_info=True)
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(
            f"File logging to '{log_filename}' at level: {logging.getLevelName(file_handler.level)}."
        )
    if console_handler:
        logging.info(
            f"Console logging to stderr at level: {logging.getLevelName(console_handler.level)}."
        )
