"""Plugin that writes raw sample data to standard output."""

from __future__ import annotations

from typing import BinaryIO

from .plugout import Endian, OutputPlugin


class StdoutPlugin(OutputPlugin):
    """Writes rendered 16-bit stereo samples unchanged."""

    name = "stdout"
    description = "STDOUT file writer"
    uses_stdout = True

    def __init__(self, out: BinaryIO | None = None) -> None:
        self._out = out
        self._file: BinaryIO | None = None
        self._owned = False

    def open(self, endian: Endian, rate: int, buffer_bytes: int) -> int:
        if self._out is not None:
            self._file = self._out
            self._owned = False
        else:
            self._file = self._claim_stdout("wb")
            self._owned = True
        return buffer_bytes

    def write(self, data: bytes) -> int:
        if self._file is None:
            raise RuntimeError("stdout writer is not open")
        written = self._file.write(data)
        return len(data) if written is None else written

    def close(self) -> None:
        if self._file is None:
            return
        self._file.flush()
        if self._owned:
            self._file.close()
        self._file = None