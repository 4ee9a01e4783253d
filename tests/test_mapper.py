import pytest

from gbsplay.mapper import (
    ROMBANK_SIZE,
    Bank,
    UnsupportedCartridge,
    gb_mapper,
    gbr_mapper,
    gbs_mapper,
)


def make_rom(banks):
    return bytes(n for n in range(banks) for _ in range(ROMBANK_SIZE))


def test_gbs_initial_banks():
    m = gbs_mapper(make_rom(4))
    assert m.read(0x0000) == 0
    assert m.read(0x3FFF) == 0
    assert m.read(0x4000) == 1
    assert m.read(0x7FFF) == 1


def test_gbs_bank_switch():
    m = gbs_mapper(make_rom(4))
    m.write(0x2000, 3)
    assert m.read(0x4000) == 3
    m.write(0x3FFF, 2)
    assert m.read(0x5000) == 2


def test_gbs_bank_zero_selects_one():
    m = gbs_mapper(make_rom(4))
    m.write(0x2000, 3)
    m.write(0x2000, 0)
    assert m.read(0x4000) == 1


def test_gbs_ignored_rom_write_warns():
    m = gbs_mapper(make_rom(4))
    with pytest.warns(RuntimeWarning):
        m.write(0x1000, 3)
    assert m.read(0x4000) == 1


def test_gbs_ram_round_trip():
    m = gbs_mapper(make_rom(2))
    m.write(0xA000, 0x42)
    m.write(0xBFFF, 0x17)
    assert m.read(0xA000) == 0x42
    assert m.read(0xBFFF) == 0x17


def test_unhandled_address_raises():
    m = gbs_mapper(make_rom(2))
    with pytest.raises(ValueError):
        m.read(0xC000)


def test_gbr_fixed_banks_and_disabled_ram():
    m = gbr_mapper(make_rom(4), 2, 3)
    assert m.read(0x0000) == 2
    assert m.read(0x4000) == 3
    assert m.read(0xA000) == 0xFF


def test_gb_unsupported_cart_type():
    with pytest.raises(UnsupportedCartridge):
        gb_mapper(make_rom(2), 0x05, 0, 0)


def test_gb_without_ram_has_no_ram_region():
    m = gb_mapper(make_rom(2), 0x01, 0, 0)
    with pytest.raises(ValueError):
        m.write(0xA000, 1)


def test_mbc1_rom_switch():
    m = gb_mapper(make_rom(8), 0x01, 0, 0)
    m.write(0x2000, 5)
    assert m.read(0x4000) == 5
    assert m.read(0x0000) == 0


def test_mbc1_out_of_range_bank():
    m = gb_mapper(make_rom(2), 0x01, 0, 0)
    with pytest.warns(RuntimeWarning):
        m.write(0x2000, 5)
    assert m.read(0x4000) == 0xFF


def test_mbc1_ram_enable():
    m = gb_mapper(make_rom(2), 0x03, 0, 0x02)
    assert m.read(0xA000) == 0xFF
    m.write(0x0000, 0x0A)
    m.write(0xA000, 0x55)
    assert m.read(0xA000) == 0x55
    m.write(0x0000, 0x00)
    assert m.read(0xA000) == 0xFF


def test_mbc1_ram_banking_mode():
    m = gb_mapper(make_rom(4), 0x03, 0, 0x03)
    m.write(0x0000, 0x0A)
    m.write(0x6000, 1)
    m.write(0x4000, 1)
    m.write(0xA000, 0x55)
    m.write(0x4000, 0)
    assert m.read(0xA000) == 0
    m.write(0x4000, 1)
    assert m.read(0xA000) == 0x55


def test_mbc3_rom_switch_uses_seven_bits():
    m = gb_mapper(make_rom(0x48), 0x13, 0, 0x03)
    m.write(0x2000, 0x45)
    assert m.read(0x4000) == 0x45


def test_bank_map_and_access():
    data = bytearray(range(16))
    bank = Bank(4)
    bank.map(data, 2)
    assert bank.get(0) == 8
    bank.put(1, 0x1FF)
    assert data[9] == 0xFF
    bank.enable = False
    assert bank.get(0) == 0xFF