"""Plugin that dumps sound register writes as text."""

from __future__ import annotations

import sys
from typing import TextIO

from .plugout import Endian, OutputPlugin

_MASK64 = (1 << 64) - 1


class IoDumperPlugin(OutputPlugin):
    """Writes one line per register write, with the cycles since the last."""

    name = "iodumper"
    description = "STDOUT io dumper"
    uses_stdout = True

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = out
        self._err = err
        self._file: TextIO | None = None
        self._owned = False
        self.cycles_prev = 0

    def _require_file(self) -> TextIO:
        if self._file is None:
            raise RuntimeError("io dumper is not open")
        return self._file

    def open(self, endian: Endian, rate: int, buffer_bytes: int) -> int:
        if self._out is not None:
            self._file = self._out
            self._owned = False
        else:
            self._file = self._claim_stdout("w")
            self._owned = True
        return buffer_bytes

    def skip(self, subsong: int) -> None:
        handle = self._require_file()
        self.cycles_prev = 0
        handle.write(f"\nsubsong {subsong}\n")
        err = self._err if self._err is not None else sys.stderr
        err.write(f"dumping subsong {subsong}\n")

    def io(self, cycles: int, addr: int, value: int) -> None:
        handle = self._require_file()
        diff = (cycles - self.cycles_prev) & _MASK64
        handle.write(f"{diff:08x} {addr:04x}={value:02x}\n")
        self.cycles_prev = cycles

    def close(self) -> None:
        if self._file is None:
            return
        self._file.flush()
        if self._owned:
            self._file.close()
        self._file = None