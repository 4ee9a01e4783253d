import pytest

from gbsplay.notes import note_from_divider
from gbsplay.plugout_midi import MidiPlugin, MidiTrackFile, encode_varlen

EOT = b"\xff\x2f\x00"


def _decode_varlen(data, pos):
    value = 0
    while True:
        byte = data[pos]
        pos += 1
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value, pos


def _events(path):
    data = path.read_bytes()
    length = int.from_bytes(data[18:22], "big")
    body = data[22:]
    assert len(body) == length
    events = []
    pos = 0
    while pos < len(body):
        delta, pos = _decode_varlen(body, pos)
        events.append((delta, body[pos:pos + 3]))
        pos += 3
    return events


@pytest.mark.parametrize(
    "value, encoded",
    [
        (0x00, b"\x00"),
        (0x7F, b"\x7f"),
        (0x80, b"\x81\x00"),
        (0x3FFF, b"\xff\x7f"),
        (0x4000, b"\x81\x80\x00"),
        (0x0FFFFFFF, b"\xff\xff\xff\x7f"),
    ],
)
def test_encode_varlen_spec_examples(value, encoded):
    assert encode_varlen(value) == encoded


@pytest.mark.parametrize("value", [1, 5, 127, 128, 300, 16383, 16384, 2097151, 2097152, 0x0FFFFFFF])
def test_encode_varlen_round_trip(value):
    data = encode_varlen(value)
    decoded, end = _decode_varlen(data, 0)
    assert (decoded, end) == (value, len(data))


def test_encode_varlen_never_exceeds_four_bytes():
    assert len(encode_varlen(1 << 40)) == 4


def test_track_header_and_length(tmp_path):
    track = MidiTrackFile(tmp_path)
    path = track.open_track(0)
    track.close_track()
    data = path.read_bytes()
    assert path.name == "gbsplay-1.mid"
    assert data[:22] == bytes.fromhex("4d546864 00000006 0000 0001 007c 4d54726b 0000")[:18] + data[18:22]
    assert data[:18] == bytes.fromhex("4d546864000000060000000100" + "7c4d54726b")
    assert _events(path) == [(0, EOT)]
    assert track.file is None


def test_write_event_without_track_raises(tmp_path):
    track = MidiTrackFile(tmp_path)
    with pytest.raises(RuntimeError):
        track.write_event(0, b"\x90\x40\x40")


def test_note_off_without_note_writes_nothing(tmp_path):
    track = MidiTrackFile(tmp_path)
    path = track.open_track(4)
    track.note_off(1 << 14, 0)
    track.close_track()
    assert _events(path) == [(0, EOT)]


def test_trigger_produces_note_on_and_off(tmp_path):
    plugin = MidiPlugin(tmp_path)
    plugin.skip(0)
    plugin.io(0, 0xFF12, 0xF0)
    plugin.io(0, 0xFF13, 0x00)
    plugin.io(3 << 14, 0xFF14, 0x87)
    plugin.close()
    note = note_from_divider(2048 - 0x700) + 21
    assert _events(tmp_path / "gbsplay-1.mid") == [
        (3, bytes([0x90, note, 120])),
        (0, bytes([0x80, note, 0])),
        (0, EOT),
    ]


def test_dac_off_stops_running_note(tmp_path):
    plugin = MidiPlugin(tmp_path)
    plugin.skip(0)
    plugin.io(0, 0xFF12, 0xF0)
    plugin.io(3 << 14, 0xFF14, 0x87)
    plugin.io(5 << 14, 0xFF12, 0x00)
    plugin.close()
    events = _events(tmp_path / "gbsplay-1.mid")
    assert [event[0] for _, event in events] == [0x90, 0x80, 0xFF]
    assert events[1][0] == 2


def test_pan_register_writes_four_controllers(tmp_path):
    plugin = MidiPlugin(tmp_path)
    plugin.skip(0)
    plugin.io(0, 0xFF25, 0x10)
    plugin.close()
    events = _events(tmp_path / "gbsplay-1.mid")[:-1]
    assert [event[0] for _, event in events] == [0xB0, 0xB1, 0xB2, 0xB3]
    assert {event[1] for _, event in events} == {0x0A}
    assert [event[2] for _, event in events] == [0, 64, 64, 64]


def test_io_without_track_is_ignored(tmp_path):
    plugin = MidiPlugin(tmp_path)
    plugin.io(0, 0xFF12, 0xF0)
    plugin.io(0, 0xFF14, 0x87)
    plugin.close()
    assert list(tmp_path.iterdir()) == []


def test_skip_finishes_previous_track(tmp_path):
    plugin = MidiPlugin(tmp_path)
    plugin.skip(0)
    plugin.skip(2)
    plugin.close()
    assert sorted(p.name for p in tmp_path.iterdir()) == ["gbsplay-1.mid", "gbsplay-3.mid"]
    assert _events(tmp_path / "gbsplay-1.mid")[-1] == (0, EOT)
    assert _events(tmp_path / "gbsplay-3.mid")[-1] == (0, EOT)