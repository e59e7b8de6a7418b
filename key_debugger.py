# key_debugger.py
"""Raw key debugger: shows the bytes the terminal sends and the key event kilo
decodes from them. Press 'q' to quit.

Usage:
    python key_debugger.py
"""

import os
import sys

# Make the src/ layout importable when running from a source checkout.
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from kilo.ui.KeyDecoder import KeyDecoder, key_name  # noqa: E402
from kilo.ui.Terminal import Terminal  # noqa: E402


def main() -> None:
    terminal = Terminal()
    raw_bytes: list[int] = []

    def recording_read() -> "int | None":
        b = terminal.read_byte()
        if b is not None:
            raw_bytes.append(b)
        return b

    decoder = KeyDecoder(recording_read)

    with terminal:
        terminal.write("Kilo Key Debugger\r\nPress any key to see its decoding. Press 'q' to quit.\r\n\r\n")
        while True:
            key = decoder.read_key()
            if key is None:
                # incomplete sequences are dropped without an event
                raw_bytes.clear()
                continue

            hex_bytes = " ".join(f"{b:02x}" for b in raw_bytes)
            terminal.write(f"{'Bytes:':<8} {hex_bytes:<20} {'Key:':<5} {key_name(key)} ({key})\r\n")
            raw_bytes.clear()

            if key == ord("q"):
                break


if __name__ == "__main__":
    main()
