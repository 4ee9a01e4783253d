"""Player logic shared by the front-ends: options, playlists and subsong order."""

from __future__ import annotations

import array
import getopt
import os
import re
import sys
import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Protocol, Sequence

from .plugins import DEFAULT_PLUGIN
from .plugout import ChannelStatus, Endian, OutputPlugin
from .util import CRandom, rand_long, shuffle

VERSION = "0.1.0"
GBHW_CLOCK = 4194304
DEFAULT_REFRESH_DELAY = 33
MAXOCTAVE = 9

_OPTSTRING = "1234c:E:f:g:hH:lLo:qr:R:t:T:vVzZ"
_LONG_RE = re.compile(r"\s*([+-]?\d+)")
_MAX_RESHUFFLES = 1000


class LoopMode(IntEnum):
    """Loop mode when playing multiple subsongs."""

    OFF = 0
    RANGE = 1
    SINGLE = 2


class FilterType(IntEnum):
    """Output high-pass filter emulating a hardware variant."""

    OFF = 0
    DMG = 1
    CGB = 2


class PlayMode(IntEnum):
    """Order in which subsongs are played."""

    LINEAR = 1
    RANDOM = 2
    SHUFFLE = 3


@dataclass
class GbsStatus:
    """Current state of the player routine."""

    songtitle: str = ""
    subsong: int = 0
    subsong_len: int = 0
    songs: int = 1
    defaultsong: int = 1
    lvol: int = 0
    rvol: int = 0
    ticks: int = 0
    loop_mode: LoopMode = LoopMode.OFF
    ch: list[ChannelStatus] = field(default_factory=lambda: [ChannelStatus() for _ in range(4)])


@dataclass
class DisplayTime:
    """Played and total time of the current subsong."""

    played_min: int
    played_sec: int
    total_min: int
    total_sec: int


@dataclass
class Options:
    """Settings gathered from the command line."""

    endian: Endian = Endian.NATIVE
    fadeout: int = 3
    subsong_gap: int = 2
    filter_type: str = "dmg"
    loop_mode: LoopMode = LoopMode.OFF
    sound_name: str = DEFAULT_PLUGIN
    rate: int = 44100
    refresh_delay: int = DEFAULT_REFRESH_DELAY
    silence_timeout: int = 2
    subsong_timeout: int = 2 * 60
    verbosity: int = 3
    playmode: PlayMode = PlayMode.LINEAR
    mute_channel: list[bool] = field(default_factory=lambda: [False] * 4)
    config_files: list[str] = field(default_factory=list)
    myname: str = "gbsplay"
    path: str = ""
    filename: str = ""
    subsong_start: int = -1
    subsong_stop: int = -1


class UsageError(Exception):
    """Raised when the program should print a message and exit."""

    def __init__(self, message: str, exitcode: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exitcode = exitcode


class Gbs(Protocol):
    """What the player needs from an emulator instance."""

    def get_status(self) -> GbsStatus: ...

    def init(self, subsong: int) -> object: ...


def update_displaytime(status: GbsStatus) -> DisplayTime:
    """Split played and total time into minutes and seconds.

    An unknown length shows as 99:99.
    """
    played = status.ticks // GBHW_CLOCK
    total = status.subsong_len // 1024
    played_min, played_sec = divmod(played, 60)
    if total:
        total_min, total_sec = divmod(total, 60)
    else:
        total_min = total_sec = 99
    return DisplayTime(played_min, played_sec, total_min, total_sec)


def setup_playlist(songs: int, seed: int) -> list[int]:
    """Return a shuffled playlist of ``songs`` subsongs, reproducible by ``seed``."""
    playlist = list(range(songs))
    shuffle(CRandom(seed), playlist)
    return playlist


def swap_endian(data: bytes) -> bytes:
    """Swap the bytes of native 16-bit samples.

    The high byte of a negative sample's swapped value is sign-filled,
    matching the reference output.
    """
    samples = array.array("h")
    samples.frombytes(bytes(data[: len(data) - len(data) % 2]))
    swapped = array.array("h")
    for x in samples:
        y = (((x & 0xFF) << 8) | (x >> 8)) & 0xFFFF
        swapped.append(y - 0x10000 if y & 0x8000 else y)
    return swapped.tobytes() + bytes(data[len(data) - len(data) % 2:])


def parse_filter(name: str) -> FilterType:
    """Return the filter type for a case-insensitive name."""
    try:
        return FilterType[name.upper()]
    except KeyError:
        raise ValueError(f'Invalid filter type "{name}"') from None


def filename_only(path: str) -> str:
    """Return the part of ``path`` after the last slash."""
    return path.rpartition("/")[2]


def endian_str(endian: int) -> str:
    """Return a readable name for an endian setting."""
    names = {Endian.BIG: "big", Endian.LITTLE: "little", Endian.NATIVE: "native"}
    return names.get(endian, "invalid")


def _scan_long(text: str, default: int) -> int:
    match = _LONG_RE.match(text)
    return int(match.group(1)) if match else default


def _usage_text(opts: Options) -> str:
    return (
        f"Usage: {opts.myname} [option(s)] <gbs-file> [start_at_subsong [stop_at_subsong] ]\n"
        "\n"
        "Available options are:\n"
        f"  -E        endian, b == big, l == little, n == native ({endian_str(opts.endian)})\n"
        f"  -f        set fadeout ({opts.fadeout} seconds)\n"
        f"  -g        set subsong gap ({opts.subsong_gap} seconds)\n"
        "  -h        display this help and exit\n"
        f"  -H        set output high-pass type ({opts.filter_type})\n"
        "  -l        set loop mode to range\n"
        "  -L        set loop mode to single\n"
        f"  -o        select output plugin ({opts.sound_name})\n"
        "            'list' shows available plugins\n"
        "  -q        reduce verbosity\n"
        f"  -r        set samplerate ({opts.rate}Hz)\n"
        f"  -R        set refresh delay ({opts.refresh_delay} milliseconds)\n"
        f"  -t        set subsong timeout ({opts.subsong_timeout} seconds)\n"
        f"  -T        set silence timeout ({opts.silence_timeout} seconds)\n"
        "  -v        increase verbosity\n"
        "  -V        print version and exit\n"
        "  -z        play subsongs in shuffle mode\n"
        "  -Z        play subsongs in random mode (repetitions possible)\n"
        "  -1 to -4  mute a channel on startup\n"
    )


def parse_args(argv: Sequence[str] | None = None) -> Options:
    """Parse a command line whose first element is the program name.

    Raises UsageError for help, version and invalid input.
    """
    argv = list(sys.argv if argv is None else argv)
    opts = Options()
    if argv:
        opts.myname = filename_only(argv[0])
    try:
        parsed, args = getopt.gnu_getopt(argv[1:], _OPTSTRING)
    except getopt.GetoptError:
        raise UsageError(_usage_text(opts), 1) from None

    endians = {"b": Endian.BIG, "l": Endian.LITTLE, "n": Endian.NATIVE}
    numeric = {
        "-f": "fadeout",
        "-g": "subsong_gap",
        "-r": "rate",
        "-R": "refresh_delay",
        "-t": "subsong_timeout",
        "-T": "silence_timeout",
    }
    for flag, value in parsed:
        if flag in ("-1", "-2", "-3", "-4"):
            index = int(flag[1]) - 1
            opts.mute_channel[index] = not opts.mute_channel[index]
        elif flag == "-c":
            opts.config_files.append(value)
        elif flag == "-E":
            endian = endians.get(value.lower())
            if endian is None:
                raise UsageError(
                    f'"{value}" is not a valid endian.\n\n' + _usage_text(opts), 1
                )
            opts.endian = endian
        elif flag in numeric:
            attr = numeric[flag]
            setattr(opts, attr, _scan_long(value, getattr(opts, attr)))
        elif flag == "-h":
            raise UsageError(_usage_text(opts), 0)
        elif flag == "-H":
            opts.filter_type = value
        elif flag == "-l":
            opts.loop_mode = LoopMode.RANGE
        elif flag == "-L":
            opts.loop_mode = LoopMode.SINGLE
        elif flag == "-o":
            opts.sound_name = value
        elif flag == "-q":
            opts.verbosity -= 1
        elif flag == "-v":
            opts.verbosity += 1
        elif flag == "-V":
            raise UsageError(f"{opts.myname} {VERSION}\n", 0)
        elif flag == "-z":
            opts.playmode = PlayMode.SHUFFLE
        elif flag == "-Z":
            opts.playmode = PlayMode.RANDOM

    if not args:
        raise UsageError(_usage_text(opts), 1)
    opts.path = args[0]
    opts.filename = filename_only(args[0])
    if len(args) >= 2:
        opts.subsong_start = _scan_long(args[1], opts.subsong_start) - 1
    if len(args) >= 3:
        opts.subsong_stop = _scan_long(args[2], opts.subsong_stop) - 1
    return opts


class Player:
    """Chooses which subsong plays next and notifies the output plugin."""

    def __init__(
        self,
        gbs: Gbs,
        options: Options | None = None,
        plugin: OutputPlugin | None = None,
        seed: int | None = None,
    ) -> None:
        self.gbs = gbs
        self.options = options if options is not None else Options()
        self.plugin = plugin
        self.playmode = self.options.playmode
        self.random_seed = seed if seed is not None else int(time.time()) + os.getpid()
        self._rng = CRandom(self.random_seed)
        self.playlist: list[int] = []
        self.playlist_idx = 0
        self.paused = False

        songs = gbs.get_status().songs
        start = self.options.subsong_start
        if start < -1:
            start = 0
        elif start >= songs:
            start = songs - 1
        stop = self.options.subsong_stop
        if stop < 0 or stop >= songs:
            stop = -1
        self.subsong_start = start
        self.subsong_stop = stop

    def next_subsong(self) -> int:
        """Return the number of the subsong to play next."""
        status = self.gbs.get_status()
        if self.playmode == PlayMode.RANDOM:
            return rand_long(self._rng, status.songs)
        if self.playmode == PlayMode.SHUFFLE:
            self.playlist_idx += 1
            if self.playlist_idx == status.songs:
                self.random_seed += 1
                self.playlist = setup_playlist(status.songs, self.random_seed)
                self.playlist_idx = 0
            return self.playlist[self.playlist_idx]
        return status.subsong + 1

    def prev_subsong(self) -> int:
        """Return the number of the subsong played previously."""
        status = self.gbs.get_status()
        if self.playmode == PlayMode.RANDOM:
            return rand_long(self._rng, status.songs)
        if self.playmode == PlayMode.SHUFFLE:
            self.playlist_idx -= 1
            if self.playlist_idx == -1:
                self.random_seed -= 1
                self.playlist = setup_playlist(status.songs, self.random_seed)
                self.playlist_idx = status.songs - 1
            return self.playlist[self.playlist_idx]
        return status.subsong - 1

    def setup_playmode(self) -> int:
        """Initialise the play mode and return the subsong to start with."""
        status = self.gbs.get_status()
        subsong = status.subsong
        if self.playmode == PlayMode.RANDOM:
            if subsong == -1:
                subsong = self.next_subsong()
        elif self.playmode == PlayMode.SHUFFLE:
            self.playlist = setup_playlist(status.songs, self.random_seed)
            self.playlist_idx = 0
            if subsong == -1:
                subsong = self.playlist[0]
            else:
                # Reseed rather than rotate so the playlist stays reproducible.
                for _ in range(_MAX_RESHUFFLES):
                    if self.playlist[0] == subsong:
                        break
                    self.random_seed += 1
                    self.playlist = setup_playlist(status.songs, self.random_seed)
                else:
                    raise RuntimeError(f"no shuffled playlist starts with subsong {subsong + 1}")
        elif subsong == -1:
            subsong = status.defaultsong - 1
        return subsong

    def play_subsong(self, subsong: int) -> None:
        """Notify the plugin, then start ``subsong``."""
        if self.plugin is not None:
            self.plugin.skip(subsong)
        self.gbs.init(subsong)

    def play_next_subsong(self) -> None:
        """Start the next subsong, wrapping around at the end."""
        songs = self.gbs.get_status().songs
        self.play_subsong(self.next_subsong() % songs)

    def play_prev_subsong(self) -> None:
        """Start the previous subsong, wrapping around at the start."""
        songs = self.gbs.get_status().songs
        prev = self.prev_subsong()
        while prev < 0:
            prev += songs
        self.play_subsong(prev)

    def nextsubsong_cb(self) -> bool:
        """Handle the end of a subsong; return False when playback is over."""
        status = self.gbs.get_status()
        subsong = self.next_subsong()
        if status.loop_mode == LoopMode.SINGLE:
            subsong = status.subsong
        elif status.subsong == self.subsong_stop or subsong >= status.songs:
            if status.loop_mode == LoopMode.OFF:
                return False
            subsong = self.subsong_start
            self.setup_playmode()
        self.play_subsong(subsong)
        return True

    def toggle_pause(self) -> None:
        """Pause or resume and tell the plugin."""
        self.paused = not self.paused
        if self.plugin is not None:
            self.plugin.pause(self.paused)

    def is_running(self) -> bool:
        """Return True unless paused."""
        return not self.paused