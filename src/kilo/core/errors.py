# kilo/core/errors.py
"""Exception types shared across the editor.

Only unrecoverable conditions are modelled as exceptions; recoverable problems
(failed saves, malformed escape sequences, missed searches) are reported through
the status message bar instead.
"""


class KiloError(Exception):
    """Base class for all editor errors."""


class TerminalError(KiloError):
    """Fatal terminal/device failure (raw mode, reads, geometry).

    Attributes:
        context (str): Short name of the failing operation, e.g. ``"tcsetattr"``.
    """

    def __init__(self, context: str, reason: object = None) -> None:
        self.context = context
        self.reason = reason
        message = context if reason is None else f"{context}: {reason}"
        super().__init__(message)
