from gbsplay.plugout import ChannelStatus, Endian, OutputPlugin


def test_default_open_keeps_requested_buffer_size():
    plugin = OutputPlugin()
    assert plugin.open(Endian.NATIVE, 44100, 8192) == 8192


def test_default_write_takes_all_bytes():
    plugin = OutputPlugin()
    assert plugin.write(b"abcdef") == 6


def test_channel_status_holds_given_values():
    status = ChannelStatus(mute=True, vol=7, div_tc=1000, playing=True)
    assert (status.mute, status.vol, status.div_tc, status.playing) == (True, 7, 1000, True)


def test_channel_status_defaults_to_silent():
    assert ChannelStatus() == ChannelStatus(mute=False, vol=0, div_tc=0, playing=False)