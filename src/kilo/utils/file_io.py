# kilo/utils/file_io.py
"""
kilo.utils.file_io
==================

File read/write primitives used by the editor.

`read_text` detects the encoding with chardet on a leading sample of the file and
decodes with the best candidate, falling back to UTF-8 and finally latin-1 (which
never fails). `write_text` opens the target without truncating it, shrinks or
grows it to the exact encoded length and then writes the payload. Encoding
happens first and is strict, so text the encoding cannot hold, or a failure to
open the file, leaves its previous content untouched.
"""

import logging
import os
from typing import Optional

import chardet

SAMPLE_SIZE = 20 * 1024
CONFIDENCE_THRESHOLD = 0.75
DEFAULT_ENCODING = "utf-8"


def detect_encoding(sample: bytes) -> Optional[str]:
    """Return chardet's guess for *sample* when it is confident enough, else None."""
    if not sample:
        return None
    result = chardet.detect(sample)
    encoding_guess = result.get("encoding")
    confidence = result.get("confidence") or 0.0
    logging.debug(f"Chardet detected encoding '{encoding_guess}' with confidence {confidence:.2f}")
    if not encoding_guess or confidence < CONFIDENCE_THRESHOLD:
        return None
    # plain ASCII files stay editable with non-ASCII input
    if encoding_guess.lower() == "ascii":
        return DEFAULT_ENCODING
    return encoding_guess


def read_text(path: str) -> tuple[str, str]:
    """Read *path* and return ``(text, encoding_used)``.

    Raises:
        FileNotFoundError: The file does not exist.
        OSError: Any other failure to read the file.
    """
    with open(path, "rb") as f:
        raw = f.read()

    candidates = []
    guess = detect_encoding(raw[:SAMPLE_SIZE])
    if guess:
        candidates.append(guess)
    if DEFAULT_ENCODING not in candidates:
        candidates.append(DEFAULT_ENCODING)

    for encoding in candidates:
        try:
            text = raw.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logging.debug(f"read_text: decoding '{path}' as {encoding} failed: {e}")
            continue
        logging.info(f"Read {len(raw)} bytes from '{path}' using encoding '{encoding}'")
        return text, encoding

    logging.warning(f"read_text: '{path}' is not valid in {candidates}; reading as latin-1")
    return raw.decode("latin-1"), "latin-1"


def write_text(path: str, text: str, encoding: str = DEFAULT_ENCODING) -> int:
    """Write *text* to *path* (created with mode 0644 if missing).

    Returns:
        int: Number of bytes written.

    Raises:
        UnicodeEncodeError: *text* is not representable in *encoding*; the file
            is left untouched.
        OSError: Opening, truncating or writing failed.
    """
    data = text.encode(encoding)
    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        os.ftruncate(fd, len(data))
        view = memoryview(data)
        while view:
            written = os.write(fd, view)
            view = view[written:]
    finally:
        os.close(fd)
    logging.debug(f"write_text: {len(data)} bytes written to '{path}' ({encoding})")
    return len(data)
