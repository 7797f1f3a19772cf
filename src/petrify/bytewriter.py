"""Formats raw bytes as the body of a Python ``bytes((...))`` literal."""

from __future__ import annotations

from typing import TextIO

__all__ = ["ByteWriter", "BYTES_PER_LINE"]

BYTES_PER_LINE = 12


class ByteWriter:
    """Writes ``0x%02x,`` items to ``stream``, twelve per indented line.

    Every line, including the first, starts with a newline and ``indent``,
    so the caller closes the literal on a fresh line.  The column count
    carries over between ``write`` calls.
    """

    def __init__(self, stream: TextIO, indent: str = " " * 12):
        self.stream = stream
        self.indent = indent
        self._column = 0
        self.count = 0

    def write(self, data: bytes) -> int:
        for value in data:
            if self._column % BYTES_PER_LINE == 0:
                self.stream.write("\n" + self.indent)
                self._column = 0
            else:
                self.stream.write(" ")
            self.stream.write(f"0x{value:02x},")
            self._column += 1
        self.count += len(data)
        return len(data)
