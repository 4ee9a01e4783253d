"""Cartridge memory bank controllers for ROM and external RAM."""

from __future__ import annotations

import warnings
from typing import Callable

ROMBANK_SIZE = 0x4000
RAMBANK_SIZE = 0x2000
MAX_EXTRAM_SIZE = 0x8000

_MBC1_CART_TYPES = frozenset({0x00, 0x01, 0x02, 0x03, 0x08, 0x09})
_MBC3_CART_TYPES = frozenset({0x11, 0x12, 0x13})
_RAM_SIZES = {0x01: 0x00800, 0x02: 0x02000, 0x03: 0x08000}


class UnsupportedCartridge(ValueError):
    """Raised for cartridge types without a mapper implementation."""


class Bank:
    """A window of ``banksize`` bytes into ROM or RAM."""

    def __init__(self, banksize: int, enable: bool = True) -> None:
        self.banksize = banksize
        self.mask = banksize - 1
        self.enable = enable
        self.size = 0
        self._data: bytes | bytearray = b""
        self._offset = 0

    def map(self, data: bytes | bytearray, bank: int) -> None:
        """Point the window at bank number ``bank`` of ``data``."""
        offset = bank * self.banksize
        if offset >= len(data):
            if data:
                warnings.warn(
                    f"Bank {bank} out of range (0-{len(data) // self.banksize})!",
                    RuntimeWarning,
                    stacklevel=3,
                )
            self._data = b""
            self._offset = 0
            self.size = 0
            return
        self._data = data
        self._offset = offset
        self.size = len(data) - offset

    def get(self, addr: int) -> int:
        """Read a byte; disabled or unmapped memory reads as 0xff."""
        maddr = addr & self.mask
        if not self.enable or maddr >= self.size:
            return 0xFF
        return self._data[self._offset + maddr]

    def put(self, addr: int, value: int) -> None:
        """Write a byte; ignored when disabled or unmapped."""
        maddr = addr & self.mask
        if not self.enable or maddr >= self.size:
            return
        self._data[self._offset + maddr] = value & 0xFF  # type: ignore[index]


_PutFn = Callable[[Bank, int, int], None]


class Mapper:
    """Routes CPU reads and writes to the cartridge banks."""

    def __init__(self, rom: bytes, ram_size: int) -> None:
        if ram_size > MAX_EXTRAM_SIZE:
            raise ValueError(f"RAM size {ram_size:#x} exceeds {MAX_EXTRAM_SIZE:#x}")
        self.rom = bytes(rom)
        self.ram = bytearray(ram_size)
        self.rom_lower = Bank(ROMBANK_SIZE)
        self.rom_upper = Bank(ROMBANK_SIZE)
        self.extram = Bank(RAMBANK_SIZE, enable=False)
        self.registers = [0, 0, 0, 0]
        self._regions: list[tuple[int, int, _PutFn, Bank]] = []

    def _map_rom(self, bank: Bank, number: int) -> None:
        bank.map(self.rom, number)

    def _map_ram(self, bank: Bank, number: int) -> None:
        bank.map(self.ram, number)

    def _add_region(self, first_page: int, last_page: int, put: _PutFn, bank: Bank) -> None:
        self._regions.append((first_page, last_page, put, bank))

    def _region(self, addr: int) -> tuple[_PutFn, Bank]:
        page = (addr >> 8) & 0xFF
        for first, last, put, bank in self._regions:
            if first <= page <= last:
                return put, bank
        raise ValueError(f"address {addr:#06x} is not handled by this mapper")

    def read(self, addr: int) -> int:
        """Read the byte at ``addr``."""
        _, bank = self._region(addr)
        return bank.get(addr)

    def write(self, addr: int, value: int) -> None:
        """Write ``value`` to ``addr``."""
        put, bank = self._region(addr)
        put(bank, addr, value & 0xFF)

    @staticmethod
    def _ram_put(bank: Bank, addr: int, value: int) -> None:
        bank.put(addr, value)

    def _gbs_rom_put(self, bank: Bank, addr: int, value: int) -> None:
        if 0x2000 <= addr <= 0x3FFF:
            self._map_rom(self.rom_upper, value + (value == 0))
        else:
            warnings.warn(
                f"rom write of {value:02x} to {addr:04x} ignored",
                RuntimeWarning,
                stacklevel=3,
            )

    def _mbc1_rom_put(self, bank: Bank, addr: int, value: int) -> None:
        regs = self.registers
        regs[(addr >> 13) & 3] = value

        self.extram.enable = regs[0] == 0x0A
        rombank = regs[1] & 0x1F
        rombank += rombank == 0
        rambank = regs[2] & 0x03

        if regs[3] == 1:
            if len(self.ram) > RAMBANK_SIZE:
                self._map_rom(self.rom_lower, 0)
                self._map_rom(self.rom_upper, rombank)
                self._map_ram(self.extram, rambank)
            else:
                rombank |= rambank << 5
                self._map_rom(self.rom_lower, rambank << 5)
                self._map_rom(self.rom_upper, rombank)
                self._map_ram(self.extram, 0)
        else:
            rombank |= rambank << 5
            self._map_rom(self.rom_lower, 0)
            self._map_rom(self.rom_upper, rombank)
            self._map_ram(self.extram, 0)

    def _mbc3_rom_put(self, bank: Bank, addr: int, value: int) -> None:
        regs = self.registers
        regs[(addr >> 13) & 3] = value

        self.extram.enable = regs[0] == 0x0A
        rombank = regs[1] & 0x7F
        rombank += rombank == 0
        rambank = regs[2] & 0x03

        self._map_rom(self.rom_lower, 0)
        self._map_rom(self.rom_upper, rombank)
        self._map_ram(self.extram, rambank)


def gbs_mapper(rom: bytes) -> Mapper:
    """Mapper for GBS files: bank switching via writes to 0x2000-0x3fff."""
    m = Mapper(rom, RAMBANK_SIZE)
    m.extram.enable = True
    m._map_rom(m.rom_lower, 0)
    m._map_rom(m.rom_upper, 1)
    m._map_ram(m.extram, 0)
    m._add_region(0x00, 0x3F, m._gbs_rom_put, m.rom_lower)
    m._add_region(0x40, 0x7F, m._gbs_rom_put, m.rom_upper)
    m._add_region(0xA0, 0xBF, Mapper._ram_put, m.extram)
    return m


def gbr_mapper(rom: bytes, bank_lower: int, bank_upper: int) -> Mapper:
    """Mapper for GBR files with fixed initial lower and upper banks."""
    m = Mapper(rom, RAMBANK_SIZE)
    m._map_rom(m.rom_lower, bank_lower)
    m._map_rom(m.rom_upper, bank_upper)
    m._map_ram(m.extram, 0)
    m._add_region(0x00, 0x3F, m._gbs_rom_put, m.rom_lower)
    m._add_region(0x40, 0x7F, m._gbs_rom_put, m.rom_upper)
    m._add_region(0xA0, 0xBF, Mapper._ram_put, m.extram)
    return m


def gb_mapper(rom: bytes, cart_type: int, rom_type: int, ram_type: int) -> Mapper:
    """Mapper for a plain cartridge image, chosen by its header bytes."""
    if cart_type in _MBC1_CART_TYPES:
        use_mbc3 = False
    elif cart_type in _MBC3_CART_TYPES:
        use_mbc3 = True
    else:
        raise UnsupportedCartridge(f"unsupported cartridge type {cart_type:#04x}")

    ram_size = _RAM_SIZES.get(ram_type, 0)
    m = Mapper(rom, ram_size)
    rom_put = m._mbc3_rom_put if use_mbc3 else m._mbc1_rom_put

    m._map_rom(m.rom_lower, 0)
    m._map_rom(m.rom_upper, 1)
    m._add_region(0x00, 0x3F, rom_put, m.rom_lower)
    m._add_region(0x40, 0x7F, rom_put, m.rom_upper)

    if ram_size > 0:
        m._map_ram(m.extram, 0)
        m._add_region(0xA0, 0xBF, Mapper._ram_put, m.extram)

    return m