"""MIDI file writer driven by sound register writes."""

from __future__ import annotations

import struct
from os import PathLike
from pathlib import Path
from typing import BinaryIO

from .notes import note_from_divider
from .plugout import OutputPlugin

FILENAME_PATTERN = "gbsplay-{}.mid"
DIVISION = 124
END_OF_TRACK = b"\xff\x2f\x00"

_CYCLE_MASK = (1 << 64) - 1
_PAN = {0x10: 0, 0x01: 127}


def encode_varlen(value: int) -> bytes:
    """Encode a MIDI variable length quantity (at most 4 bytes)."""
    groups = []
    for _ in range(4):
        groups.append(value & 0x7F)
        value >>= 7
        if not value:
            break
    groups.reverse()
    return bytes([g | 0x80 for g in groups[:-1]] + [groups[-1]])


def _note(div: int) -> int | None:
    """MIDI note for a divider, or None when it is not playable."""
    try:
        note = note_from_divider(div) + 21
    except (ZeroDivisionError, ValueError):
        return None
    if not 0 <= note < 0x80:
        return None
    return note


class MidiTrackFile:
    """One single-track MIDI file per subsong, written incrementally."""

    def __init__(self, directory: str | PathLike[str] | None = None) -> None:
        self.directory = Path(directory) if directory is not None else Path()
        self.file: BinaryIO | None = None
        self.track_length = 0
        self.cycles_prev = 0
        self.notes = [0, 0, 0, 0]
        self._length_offset = 0

    def _require_file(self) -> BinaryIO:
        if self.file is None:
            raise RuntimeError("no MIDI track is open")
        return self.file

    def open_track(self, subsong: int) -> Path:
        """Create the file for ``subsong`` and write the headers."""
        path = self.directory / FILENAME_PATTERN.format(subsong + 1)
        handle = open(path, "wb")
        try:
            handle.write(b"MThd")
            handle.write(struct.pack(">IHHH", 6, 0, 1, DIVISION))
            handle.write(b"MTrk")
            self._length_offset = handle.tell()
            handle.write(bytes(4))
        except OSError:
            handle.close()
            raise
        self.file = handle
        self.track_length = 0
        return path

    def write_event(self, cycles: int, event: bytes) -> None:
        """Write ``event`` preceded by the delta time since the last one."""
        handle = self._require_file()
        delta = ((cycles - self.cycles_prev) & _CYCLE_MASK) >> 14
        encoded = encode_varlen(delta)
        handle.write(encoded)
        handle.write(event)
        self.track_length += len(encoded) + len(event)
        self.cycles_prev = cycles

    def close_track(self) -> None:
        """Terminate the track, patch its length and close the file."""
        handle = self._require_file()
        try:
            self.write_event(self.cycles_prev, END_OF_TRACK)
            handle.seek(self._length_offset)
            handle.write(struct.pack(">I", self.track_length & 0xFFFFFFFF))
        finally:
            handle.close()
            self.file = None

    def note_on(self, cycles: int, channel: int, note: int, velocity: int) -> None:
        """Start ``note`` on ``channel``."""
        self.write_event(cycles, bytes([0x90 | channel, note, velocity]))
        self.notes[channel] = note

    def note_off(self, cycles: int, channel: int) -> None:
        """Stop the note sounding on ``channel``, if any."""
        if not self.notes[channel]:
            return
        self.write_event(cycles, bytes([0x80 | channel, self.notes[channel], 0]))
        self.notes[channel] = 0

    def pan(self, cycles: int, channel: int, value: int) -> None:
        """Set the pan controller of ``channel``."""
        self.write_event(cycles, bytes([0xB0 | channel, 0x0A, value]))


class MidiPlugin(OutputPlugin):
    """Writes notes inferred from sound register writes to MIDI files."""

    name = "midi"
    description = "MIDI file writer"

    def __init__(self, directory: str | PathLike[str] | None = None) -> None:
        self.track = MidiTrackFile(directory)
        self._div = [0, 0, 0, 0]
        self._volume = [0, 0, 0, 0]
        self._running = [False, False, False, False]
        self._master = [False, False, False, False]

    def skip(self, subsong: int) -> None:
        self.track.cycles_prev = 0
        if self.track.file is not None:
            self.track.close_track()
        self.track.open_track(subsong)

    def _start(self, cycles: int, chan: int, note: int | None) -> None:
        if note is not None:
            self.track.note_on(cycles, chan, note, self._volume[chan])

    def _retrigger(self, cycles: int, chan: int, note: int | None) -> None:
        if note != self.track.notes[chan]:
            self.track.note_off(cycles, chan)
            self._start(cycles, chan, note)

    def io(self, cycles: int, addr: int, value: int) -> None:
        track = self.track
        if track.file is None:
            return
        chan = (addr - 0xFF10) // 5

        if addr in (0xFF12, 0xFF17):
            self._volume[chan] = 8 * (value >> 4)
            self._master[chan] = (value & 0xF8) != 0
            if not self._master[chan] and self._running[chan]:
                track.note_off(cycles, chan)
                self._running[chan] = False
            if self._volume[chan]:
                if self._running[chan] and not track.notes[chan]:
                    self._start(cycles, chan, _note(2048 - self._div[chan]))
            else:
                track.note_off(cycles, chan)
        elif addr in (0xFF13, 0xFF18, 0xFF1D):
            self._div[chan] = (self._div[chan] & 0xFF00) | value
            if self._running[chan]:
                self._retrigger(cycles, chan, _note(2048 - self._div[chan]))
        elif addr in (0xFF14, 0xFF19, 0xFF1E):
            self._div[chan] = (self._div[chan] & 0x00FF) | ((value & 7) << 8)
            note = _note(2048 - self._div[chan])
            if value & 0x80:
                track.note_off(cycles, chan)
                if note is None:
                    return
                if self._master[chan]:
                    track.note_on(cycles, chan, note, self._volume[chan])
                    self._running[chan] = True
            elif self._running[chan]:
                self._retrigger(cycles, chan, note)
        elif addr == 0xFF1A:
            self._master[2] = (value & 0x80) == 0x80
            if not self._master[2] and self._running[2]:
                track.note_off(cycles, 2)
                self._running[2] = False
        elif addr == 0xFF1C:
            self._volume[2] = 32 * ((4 - (value >> 5)) & 3)
            if self._volume[2]:
                if self._running[2] and not track.notes[2]:
                    self._start(cycles, 2, _note(2048 - self._div[2]))
            else:
                track.note_off(cycles, 2)
        elif addr == 0xFF25:
            for c in range(4):
                track.pan(cycles, c, _PAN.get((value >> c) & 0x11, 64))
        elif addr == 0xFF26:
            if not value & 0x80:
                for c in range(4):
                    self._div[c] = 0
                    self._volume[c] = 0
                    self._running[c] = False
                    self._master[c] = True
                    track.note_off(cycles, 2)

    def close(self) -> None:
        track = self.track
        if track.file is None:
            return
        for chan in range(4):
            track.note_off(track.cycles_prev + 1, chan)
        track.close_track()