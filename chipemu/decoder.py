"""Opcode decoding.

Every 16-bit opcode is split into its nibble fields and tagged with the
:class:`Op` it encodes. The interpreter dispatches on that tag, and the debug
overlay uses :meth:`Instruction.mnemonic` to show what is about to run.

Field names follow Cowgod's reference::

    nnn  lowest 12 bits (address)
    n    lowest 4 bits (sprite height)
    x    lower nibble of the high byte (register)
    y    upper nibble of the low byte (register)
    kk   lowest 8 bits (immediate)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

from .errors import UnknownOpcode


class Op(Enum):
    # value is the assembler template used by Instruction.mnemonic
    CLS = "CLS"
    RET = "RET"
    JP = "JP {nnn:03X}"
    CALL = "CALL {nnn:03X}"
    SE_BYTE = "SE V{x:X}, {kk:02X}"
    SNE_BYTE = "SNE V{x:X}, {kk:02X}"
    SE_REG = "SE V{x:X}, V{y:X}"
    LD_BYTE = "LD V{x:X}, {kk:02X}"
    ADD_BYTE = "ADD V{x:X}, {kk:02X}"
    LD_REG = "LD V{x:X}, V{y:X}"
    OR = "OR V{x:X}, V{y:X}"
    AND = "AND V{x:X}, V{y:X}"
    XOR = "XOR V{x:X}, V{y:X}"
    ADD_REG = "ADD V{x:X}, V{y:X}"
    SUB = "SUB V{x:X}, V{y:X}"
    SHR = "SHR V{x:X}"
    SUBN = "SUBN V{x:X}, V{y:X}"
    SHL = "SHL V{x:X}"
    SNE_REG = "SNE V{x:X}, V{y:X}"
    LD_I = "LD I, {nnn:03X}"
    JP_V0 = "JP V0, {nnn:03X}"
    RND = "RND V{x:X}, {kk:02X}"
    DRW = "DRW V{x:X}, V{y:X}, {n:X}"
    SKP = "SKP V{x:X}"
    SKNP = "SKNP V{x:X}"
    LD_VX_DT = "LD V{x:X}, DT"
    LD_VX_K = "LD V{x:X}, K"
    LD_DT_VX = "LD DT, V{x:X}"
    LD_ST_VX = "LD ST, V{x:X}"
    ADD_I = "ADD I, V{x:X}"
    LD_F = "LD F, V{x:X}"
    LD_B = "LD B, V{x:X}"
    LD_STORE = "LD [I], V{x:X}"
    LD_LOAD = "LD V{x:X}, [I]"


# Opcodes whose identity is fully determined by the top nibble.
_BY_HIGH_NIBBLE = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

_ARITHMETIC = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.LD_B,
    0x55: Op.LD_STORE,
    0x65: Op.LD_LOAD,
}


@dataclass(frozen=True)
class Instruction:
    opcode: int
    op: Op

    @property
    def nnn(self) -> int:
        return self.opcode & 0x0FFF

    @property
    def n(self) -> int:
        return self.opcode & 0x000F

    @property
    def x(self) -> int:
        return (self.opcode & 0x0F00) >> 8

    @property
    def y(self) -> int:
        return (self.opcode & 0x00F0) >> 4

    @property
    def kk(self) -> int:
        return self.opcode & 0x00FF

    def mnemonic(self) -> str:
        return self.op.value.format(nnn=self.nnn, n=self.n, x=self.x, y=self.y, kk=self.kk)

    def __str__(self) -> str:
        return f"{self.opcode:04X}  {self.mnemonic()}"


def _lookup(opcode: int) -> Optional[Op]:
    high = opcode >> 12
    if opcode == 0x00E0:
        return Op.CLS
    if opcode == 0x00EE:
        return Op.RET
    if high in _BY_HIGH_NIBBLE:
        return _BY_HIGH_NIBBLE[high]
    low = opcode & 0x000F
    if high == 0x5 and low == 0:
        return Op.SE_REG
    if high == 0x9 and low == 0:
        return Op.SNE_REG
    if high == 0x8:
        return _ARITHMETIC.get(low)
    if high == 0xE:
        return _KEY_OPS.get(opcode & 0x00FF)
    if high == 0xF:
        return _MISC.get(opcode & 0x00FF)
    # 0nnn machine-code calls and malformed 5xyN / 9xyN forms
    return None


def decode(opcode: int, pc: Optional[int] = None) -> Instruction:
    """Decode ``opcode``; raises :class:`UnknownOpcode` if nothing matches."""
    op = _lookup(opcode & 0xFFFF)
    if op is None:
        raise UnknownOpcode(opcode, pc)
    return Instruction(opcode & 0xFFFF, op)


def disassemble(program: bytes, start: int = 0x200) -> Iterator[Tuple[int, str]]:
    """Yield ``(address, text)`` for every word in ``program``.

    Words that do not decode are shown as raw data.
    """
    for offset in range(0, len(program) - 1, 2):
        opcode = (program[offset] << 8) | program[offset + 1]
        try:
            text = str(decode(opcode))
        except UnknownOpcode:
            text = f"{opcode:04X}  DW {opcode:04X}"
        yield start + offset, text
