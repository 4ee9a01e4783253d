# gbsplay

Building blocks for playing Game Boy sound (GBS) files: the logic that
decides which subsong plays next, a terminal status line, a set of
output plugins, ROM/RAM bank mappers and a few helpers for the Game
Boy's sound hardware. The package has no dependencies outside the
standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `gbsplay.player`
  - `parse_args(argv)` parses a command line (first element is the
    program name) into an `Options` object. It understands `-1`..`-4`
    (toggle channel mute), `-c`, `-E b|l|n`, `-f`, `-g`, `-h`, `-H`,
    `-l`, `-L`, `-o`, `-q`, `-r`, `-R`, `-t`, `-T`, `-v`, `-V`, `-z`,
    `-Z`, followed by the file name and optional start and stop
    subsong. Help, version and invalid input raise `UsageError`, which
    carries the text to print and an `exitcode`.
  - `Player(gbs, options=None, plugin=None, seed=None)` chooses the
    subsong order in linear, shuffle or random mode (`PlayMode`),
    honours the loop mode (`LoopMode`) and start/stop range, notifies
    the output plugin (`skip`, `pause`) and calls `gbs.init(subsong)`.
    Methods: `setup_playmode`, `play_subsong`, `play_next_subsong`,
    `play_prev_subsong`, `nextsubsong_cb`, `toggle_pause`,
    `is_running`.
  - `GbsStatus`, `update_displaytime(status)` (returns `DisplayTime`;
    an unknown length shows as 99:99), `setup_playlist(songs, seed)`,
    `swap_endian(data)`, `parse_filter(name)` (`FilterType` off, dmg,
    cgb), `filename_only(path)`, `endian_str(endian)`.
- `gbsplay.display` — the terminal status text: `format_status(status,
  paused, verbosity)`, `notestring`, `volstring`, `reverse_vol`,
  `loopmodestring`, `getnote`, `note_names()` and `volume_bars()`.
- `gbsplay.plugout` — the `OutputPlugin` base class with the hooks
  `open`, `skip`, `pause`, `io`, `step`, `write` and `close`, the byte
  order `Endian` and the per-channel state `ChannelStatus`.
- `gbsplay.plugins` — `available_plugins()`, `select_plugin(name)`
  (raises `KeyError` for unknown names) and `list_plugins(out)`. The
  default plugin name is `stdout`.
- Output plugins:
  - `StdoutPlugin` (`stdout`) writes raw sample data to standard output
    or to a given binary stream;
  - `IoDumperPlugin` (`iodumper`) writes one text line per sound
    register write, `<cycle delta> <addr>=<value>` in hex, with a
    `subsong N` line at every subsong change;
  - `MidiPlugin` (`midi`) infers notes from register writes and
    `AltMidiPlugin` (`altmidi`) from the channel states passed to
    `step`; both write one MIDI file per subsong named
    `gbsplay-<n>.mid` into a chosen directory (`MidiTrackFile`,
    `encode_varlen`).
- `gbsplay.mapper` — `gbs_mapper(rom)`, `gbr_mapper(rom, bank_lower,
  bank_upper)` and `gb_mapper(rom, cart_type, rom_type, ram_type)`
  (MBC1 and MBC3; other cartridge types raise `UnsupportedCartridge`).
  A `Mapper` offers `read(addr)` and `write(addr, value)`.
- `gbsplay.impulsegen` — `gen_impulsetab(w_shift, n_shift, cutoff)`
  builds the band-limited impulse table; `render_impulse_header` turns
  it into C header text.
- `gbsplay.notes` — `note_from_divider(div)` and `frequency(div)`.
- `gbsplay.util` — `CRandom`, a seedable generator giving reproducible
  sequences, with `rand_long` and `shuffle`.

## Example

```python
import sys

from gbsplay.display import format_status
from gbsplay.player import GbsStatus, Player, parse_args
from gbsplay.plugins import list_plugins


class Song:
    """Stand-in for an emulator instance."""

    def __init__(self):
        self.status = GbsStatus(songtitle="demo", songs=3, subsong=-1)

    def get_status(self):
        return self.status

    def init(self, subsong):
        self.status.subsong = subsong


list_plugins(sys.stdout)

song = Song()
player = Player(song, parse_args(["gbsplay", "-z", "song.gbs"]), seed=1)
player.play_subsong(player.setup_playmode())
player.play_next_subsong()
print(format_status(song.get_status(), paused=False, verbosity=3))
```

## Impulse table generator

The resampling impulse table can be printed as a C-style header:

```
gbsplay-gen-impulse > impulse.h
```

## What the package does not do

- It does not read GBS files and does not emulate the Game Boy CPU or
  sound hardware. `Player` works with any object that provides
  `get_status()` and `init(subsong)`; that object has to come from
  elsewhere.
- There is no audio device output; the only sample output is the raw
  `stdout` plugin.
- There is no interactive player command. `parse_args` and
  `format_status` provide the pieces, but the keyboard handling and
  the main playback loop are not part of the package.