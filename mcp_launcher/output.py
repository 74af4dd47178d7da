"""
Console output for supervised servers.

Every line a child writes is printed with a `[name]` label in the server's
color. Output from all children shares one console stream; lines from a
single stream keep their order.
"""

import asyncio
import codecs
import sys
from typing import TextIO

RESET = "\x1b[0m"
RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
MAGENTA = "\x1b[35m"
CYAN = "\x1b[36m"

PALETTE = (CYAN, GREEN, YELLOW, MAGENTA)

CHUNK_SIZE = 4096


def color_for_index(index: int) -> str:
    """Pick a server color from its spawn-order index."""
    return PALETTE[index % len(PALETTE)]


class LogMultiplexer:
    """Writes labeled, colored lines for all servers to one stream."""

    def __init__(self, stream: TextIO = None, color: bool = True):
        self._stream = stream
        self.color = color

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the output
        return self._stream if self._stream is not None else sys.stdout

    def paint(self, color: str, text: str) -> str:
        if not self.color or not color:
            return text
        return f"{color}{text}{RESET}"

    def write(self, text: str = ""):
        """Print a raw line (banners, tables)."""
        print(text, file=self.stream, flush=True)

    def emit(self, name: str, color: str, message: str):
        """Print one message under a server's label."""
        self.write(f"{self.paint(color, f'[{name}]')} {message}")

    def emit_chunk(self, name: str, color: str, text: str, is_stderr: bool = False):
        """Print each non-blank line of a chunk of child output."""
        for line in text.split("\n"):
            line = line.strip()
            if not line:
                continue
            if is_stderr:
                self.emit(name, RED, f"[stderr] {line}")
            else:
                self.emit(name, color, line)

    async def pump(self, name: str, color: str, reader: asyncio.StreamReader, is_stderr: bool = False):
        """Copy a child's output stream to the console until EOF."""
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            data = await reader.read(CHUNK_SIZE)
            if not data:
                break
            self.emit_chunk(name, color, decoder.decode(data), is_stderr)
        self.emit_chunk(name, color, decoder.decode(b"", final=True), is_stderr)
