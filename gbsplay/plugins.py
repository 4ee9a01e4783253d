"""Registry of the available output plugins."""

from __future__ import annotations

import sys
from typing import TextIO

from .plugout import OutputPlugin
from .plugout_altmidi import AltMidiPlugin
from .plugout_iodumper import IoDumperPlugin
from .plugout_midi import MidiPlugin
from .plugout_stdout import StdoutPlugin

DEFAULT_PLUGIN = "stdout"

# In order of preference.
_PLUGINS: tuple[type[OutputPlugin], ...] = (
    StdoutPlugin,
    MidiPlugin,
    AltMidiPlugin,
    IoDumperPlugin,
)


def available_plugins() -> list[type[OutputPlugin]]:
    """Return the plugin classes in order of preference."""
    return list(_PLUGINS)


def select_plugin(name: str) -> OutputPlugin:
    """Return a new instance of the plugin called ``name``.

    Raises KeyError for unknown names.
    """
    for plugin in _PLUGINS:
        if plugin.name == name:
            return plugin()
    raise KeyError(name)


def list_plugins(out: TextIO | None = None) -> None:
    """Print the names and descriptions of all plugins."""
    out = out if out is not None else sys.stdout
    out.write("Available output plugins:\n\n")
    if not _PLUGINS:
        out.write("No output plugins available.\n\n")
        return
    for plugin in _PLUGINS:
        out.write(f"{plugin.name:<8s} - {plugin.description}\n")
    out.write("\n")