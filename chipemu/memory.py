"""Flat 4 KiB address space holding the glyph table and the program image."""

from __future__ import annotations

import logging

from .constants import FONTSET, FONT_ADDRESS, MEM_SIZE, PROGRAM_SPACE, START_ADDRESS
from .errors import LoadTooLarge, MisalignedPC, OutOfBounds

log = logging.getLogger(__name__)


class MemoryImage:
    def __init__(self):
        self._data = bytearray(MEM_SIZE)
        self._install_font()

    def _install_font(self):
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONTSET)] = FONTSET

    def load(self, rom: bytes):
        """Wipe memory, reinstall the font and copy ``rom`` to 0x200."""
        rom = bytes(rom)
        if len(rom) > PROGRAM_SPACE:
            raise LoadTooLarge(len(rom), PROGRAM_SPACE)
        self._data = bytearray(MEM_SIZE)
        self._install_font()
        self._data[START_ADDRESS:START_ADDRESS + len(rom)] = rom
        log.info("ROM loaded (%d bytes)", len(rom))

    @staticmethod
    def _check(address: int, length: int = 1):
        if address < 0:
            raise OutOfBounds(address)
        if address + length > MEM_SIZE:
            raise OutOfBounds(max(address, MEM_SIZE))

    # =============== Opcode fetch ===============
    def fetch_opcode(self, pc: int) -> int:
        # big-endian word at pc, pc+1
        if pc < 0 or pc + 1 >= MEM_SIZE:
            raise OutOfBounds(pc, pc)
        if pc & 1:
            raise MisalignedPC(pc, pc)
        return (self._data[pc] << 8) | self._data[pc + 1]

    # =============== Indexed access ===============
    def read_byte(self, address: int) -> int:
        self._check(address)
        return self._data[address]

    def write_byte(self, address: int, value: int):
        self._check(address)
        self._data[address] = value & 0xFF

    def read(self, address: int, length: int) -> bytes:
        self._check(address, length)
        return bytes(self._data[address:address + length])

    def write(self, address: int, data: bytes):
        self._check(address, len(data))
        self._data[address:address + len(data)] = data

    def dump(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return MEM_SIZE
