"""Output plugin interface shared by all sound and dump back-ends."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import IO, Optional, Sequence

STDOUT_FD = 1


class Endian(IntEnum):
    """Byte order requested for 16-bit sample output."""

    BIG = 0
    LITTLE = 1
    NATIVE = 2


@dataclass
class ChannelStatus:
    """Inferred state of one of the four sound channels."""

    mute: bool = False
    vol: int = 0
    div_tc: int = 0
    playing: bool = False


class OutputPlugin:
    """Base class of output plugins.

    Every hook has a harmless default, so a plugin only overrides the
    hooks it cares about.
    """

    name = ""
    description = ""
    uses_stdout = False

    endian: Optional[Endian] = None
    rate: Optional[int] = None
    paused = False

    def open(self, endian: Endian, rate: int, buffer_bytes: int) -> int:
        """Prepare the output; return the buffer size actually used."""
        self.endian = Endian(endian)
        self.rate = rate
        return buffer_bytes

    def skip(self, subsong: int) -> None:
        """Called when the next subsong is about to start."""

    def pause(self, paused: bool) -> None:
        """Record that the player was paused or resumed."""
        self.paused = bool(paused)

    def io(self, cycles: int, addr: int, value: int) -> None:
        """Called for every write to a sound register."""

    def step(self, cycles: int, channels: Sequence[ChannelStatus]) -> None:
        """Called after each emulated instruction with the channel states."""

    def write(self, data: bytes) -> int:
        """Consume rendered sample data; return the number of bytes taken."""
        return len(data)

    def close(self) -> None:
        """Release the output when the player exits."""

    @staticmethod
    def _claim_stdout(mode: str) -> IO:
        """Take over standard output so nothing else can write to it.

        The real descriptor is duplicated for the plugin and descriptor 1
        is pointed at the null device.
        """
        try:
            sys.stdout.flush()
        except (AttributeError, ValueError, OSError):
            pass
        fd = os.dup(STDOUT_FD)
        devnull = os.open(os.devnull, os.O_WRONLY)
        try:
            os.dup2(devnull, STDOUT_FD)
        finally:
            os.close(devnull)
        return os.fdopen(fd, mode)