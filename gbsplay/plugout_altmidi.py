"""Alternative MIDI file writer driven by the inferred channel status."""

from __future__ import annotations

from os import PathLike
from typing import Sequence

from .notes import note_from_divider
from .plugout import ChannelStatus, OutputPlugin
from .plugout_midi import MidiTrackFile

_PAN = {0x10: 0, 0x01: 127}


def _note(div: int) -> int | None:
    try:
        note = note_from_divider(div) + 21
    except (ZeroDivisionError, ValueError):
        return None
    if not 0 <= note < 0x80:
        return None
    return note


class AltMidiPlugin(OutputPlugin):
    """Writes notes following the channels' playing state to MIDI files."""

    name = "altmidi"
    description = "alternative MIDI file writer"

    def __init__(self, directory: str | PathLike[str] | None = None) -> None:
        self.track = MidiTrackFile(directory)
        self._volume = [0, 0, 0, 0]
        self._playing = [False, False, False, False]

    def skip(self, subsong: int) -> None:
        self.track.cycles_prev = 0
        if self.track.file is not None:
            self.track.close_track()
        self.track.open_track(subsong)

    def _note_on(self, cycles: int, chan: int, note: int) -> None:
        self.track.note_on(cycles, chan, note, self._volume[chan])

    def step(self, cycles: int, channels: Sequence[ChannelStatus]) -> None:
        track = self.track
        for chan, status in enumerate(channels[:3]):
            if self._playing[chan]:
                if status.playing:
                    note = _note(status.div_tc)
                    if note != track.notes[chan]:
                        track.note_off(cycles, chan)
                        if note is None:
                            continue
                        self._note_on(cycles, chan, note)
                else:
                    track.note_off(cycles, chan)
                    self._playing[chan] = False
            elif status.playing:
                note = _note(status.div_tc)
                if note is None:
                    continue
                self._note_on(cycles, chan, note)
                self._playing[chan] = True

    def io(self, cycles: int, addr: int, value: int) -> None:
        track = self.track
        if track.file is None:
            return
        chan = (addr - 0xFF10) // 5

        if addr in (0xFF12, 0xFF17):
            self._volume[chan] = 8 * (value >> 4)
        elif addr in (0xFF14, 0xFF19, 0xFF1E):
            if value & 0x80:
                track.note_off(cycles, chan)
                self._playing[chan] = False
        elif addr == 0xFF1C:
            self._volume[2] = 32 * ((4 - (value >> 5)) & 3)
        elif addr == 0xFF25:
            for c in range(4):
                track.pan(cycles, c, _PAN.get((value >> c) & 0x11, 64))

    def close(self) -> None:
        track = self.track
        if track.file is None:
            return
        for chan in range(4):
            track.note_off(track.cycles_prev + 1, chan)
        track.close_track()