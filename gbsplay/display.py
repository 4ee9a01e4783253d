"""Text rendering of the player status for the terminal front-end."""

from __future__ import annotations

from .notes import note_from_divider
from .player import MAXOCTAVE, GbsStatus, LoopMode, update_displaytime
from .plugout import ChannelStatus

_VOLS = " -=#%"


def note_names() -> list[str]:
    """Return the names of all notes, e.g. ``A-0``, ``A#0``, ``B-0``."""
    names = []
    for i in range(MAXOCTAVE * 12):
        n = i % 12
        n += (n > 2) + (n > 7)
        letter = chr(ord("A") + (n >> 1))
        names.append(f"{letter}{'#' if n & 1 else '-'}{i // 12}")
    return names


def volume_bars() -> list[str]:
    """Return a four character bar for each volume from 0 to 15."""
    bars = []
    for k in range(16):
        remaining = k
        chars = []
        for _ in range(4):
            if remaining >= 4:
                chars.append(_VOLS[4])
                remaining -= 4
            else:
                chars.append(_VOLS[remaining])
                remaining = 0
        bars.append("".join(chars))
    return bars


_NOTES = tuple(note_names())
_BARS = tuple(volume_bars())


def getnote(div: int) -> int:
    """Return the note index for a divider, clamped to the table."""
    n = 0
    if div > 0:
        try:
            n = note_from_divider(div)
        except ValueError:
            n = 0
    if n < 0:
        n = 0
    elif n >= MAXOCTAVE * 12:
        n = MAXOCTAVE - 1
    return n


def notestring(channel: ChannelStatus, index: int) -> str:
    """Return the three character note display of a channel."""
    if channel.mute:
        return "-M-"
    if channel.vol == 0:
        return "---"
    if index == 3:
        return "nse"
    return _NOTES[getnote(channel.div_tc)]


def volstring(volume: int) -> str:
    """Return the volume bar for ``volume`` clamped to 0..15."""
    return _BARS[min(max(volume, 0), 15)]


def reverse_vol(text: str) -> str:
    """Return the first four characters of ``text`` reversed."""
    return text[:4][::-1]


def loopmodestring(mode: LoopMode) -> str:
    """Return the status suffix for a loop mode."""
    if mode == LoopMode.RANGE:
        return " [loop range]"
    if mode == LoopMode.SINGLE:
        return " [loop single]"
    return ""


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // b
    return q if a >= 0 else -q


def format_status(status: GbsStatus, paused: bool, verbosity: int) -> str:
    """Return the two status lines, with cursor movement codes."""
    t = update_displaytime(status)
    text = (
        "\r\033[A\033[A"
        f"Song {status.subsong + 1:3d}/{status.songs:3d}"
        f"{' [Paused]' if paused else ''}{loopmodestring(status.loop_mode)}"
        f" ({status.songtitle})\033[K\n"
        f"{t.played_min:02d}:{t.played_sec:02d}/{t.total_min:02d}:{t.total_sec:02d}"
    )
    if verbosity > 2:
        channels = "  ".join(
            f"{notestring(ch, i)} {volstring(ch.vol)}" for i, ch in enumerate(status.ch[:4])
        )
        left = reverse_vol(volstring(_trunc_div(status.lvol, 1024)))
        right = volstring(_trunc_div(status.rvol, 1024))
        text += f"  {channels}  [{left}|{right}]\n"
    else:
        text += "\n"
    return text