import io

import pytest

from gbsplay.plugins import DEFAULT_PLUGIN, available_plugins, list_plugins, select_plugin
from gbsplay.plugout_midi import MidiPlugin


def test_available_plugins_in_preference_order():
    assert [p.name for p in available_plugins()] == ["stdout", "midi", "altmidi", "iodumper"]


def test_select_plugin_returns_matching_instance():
    plugin = select_plugin("midi")
    assert isinstance(plugin, MidiPlugin)
    assert plugin.name == "midi"


def test_select_plugin_returns_fresh_instances():
    first = select_plugin("altmidi")
    second = select_plugin("altmidi")
    first.pause(True)
    assert first.paused is True
    assert second.paused is False


def test_default_plugin_is_selectable():
    assert select_plugin(DEFAULT_PLUGIN).name == DEFAULT_PLUGIN


def test_unknown_plugin_raises():
    with pytest.raises(KeyError):
        select_plugin("oss")


def test_list_plugins_output():
    out = io.StringIO()
    list_plugins(out)
    text = out.getvalue()
    assert text.startswith("Available output plugins:\n\n")
    assert "midi     - MIDI file writer\n" in text
    assert "iodumper - STDOUT io dumper\n" in text
    assert text.endswith("\n\n")
    assert len(text.splitlines()) == 2 + len(available_plugins()) + 1