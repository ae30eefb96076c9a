"""The CHIP-8 virtual machine.

:class:`Interpreter` owns memory, registers, the call stack, the keypad, the
framebuffer and the timers. An external driver calls :meth:`Interpreter.step`
at the instruction rate and :meth:`Interpreter.tick_timers` at 60 Hz; nothing
in here sleeps, blocks or renders.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Callable, Dict, Optional

from .constants import GLYPH_HEIGHT, FONT_ADDRESS
from .debug import MachineSnapshot
from .decoder import Instruction, Op, decode
from .errors import Chip8RuntimeError, MachineHalted, OutOfBounds, UnknownOpcode
from .framebuffer import Framebuffer
from .keypad import Keypad
from .memory import MemoryImage
from .registers import CallStack, RegisterFile
from .timers import TimerUnit

log = logging.getLogger(__name__)

RandomByte = Callable[[], int]


def _system_random_byte() -> int:
    return random.randint(0, 255)


class MachineState(Enum):
    RUNNING = "running"
    HALTED = "halted"


class Interpreter:
    def __init__(self, rom: Optional[bytes] = None, random_byte: RandomByte = _system_random_byte):
        self.memory = MemoryImage()
        self.registers = RegisterFile()
        self.stack = CallStack()
        self.keypad = Keypad()
        self.framebuffer = Framebuffer()
        self.timers = TimerUnit()
        self.random_byte = random_byte

        self.state = MachineState.RUNNING
        self.last_error: Optional[Chip8RuntimeError] = None
        self.cycles = 0
        self._rom = b""

        # Handlers return the next PC, or None for the default +2.
        self._handlers: Dict[Op, Callable[[Instruction], Optional[int]]] = {
            Op.CLS: self._op_cls,
            Op.RET: self._op_ret,
            Op.JP: self._op_jp,
            Op.CALL: self._op_call,
            Op.SE_BYTE: self._op_se_byte,
            Op.SNE_BYTE: self._op_sne_byte,
            Op.SE_REG: self._op_se_reg,
            Op.LD_BYTE: self._op_ld_byte,
            Op.ADD_BYTE: self._op_add_byte,
            Op.LD_REG: self._op_ld_reg,
            Op.OR: self._op_or,
            Op.AND: self._op_and,
            Op.XOR: self._op_xor,
            Op.ADD_REG: self._op_add_reg,
            Op.SUB: self._op_sub,
            Op.SHR: self._op_shr,
            Op.SUBN: self._op_subn,
            Op.SHL: self._op_shl,
            Op.SNE_REG: self._op_sne_reg,
            Op.LD_I: self._op_ld_i,
            Op.JP_V0: self._op_jp_v0,
            Op.RND: self._op_rnd,
            Op.DRW: self._op_drw,
            Op.SKP: self._op_skp,
            Op.SKNP: self._op_sknp,
            Op.LD_VX_DT: self._op_ld_vx_dt,
            Op.LD_VX_K: self._op_ld_vx_k,
            Op.LD_DT_VX: self._op_ld_dt_vx,
            Op.LD_ST_VX: self._op_ld_st_vx,
            Op.ADD_I: self._op_add_i,
            Op.LD_F: self._op_ld_f,
            Op.LD_B: self._op_ld_b,
            Op.LD_STORE: self._op_ld_store,
            Op.LD_LOAD: self._op_ld_load,
        }

        if rom is not None:
            self.load(rom)

    # =============== Lifecycle ===============
    def load(self, rom: bytes):
        """Install ``rom`` at 0x200 and reset the machine to power-on state."""
        self.memory.load(rom)
        self._rom = bytes(rom)
        self._reset_state()

    def reset(self):
        """Power-cycle the machine, keeping the currently loaded program."""
        self.memory.load(self._rom)
        self._reset_state()
        log.info("Machine reset")

    def _reset_state(self):
        self.registers.reset()
        self.stack.reset()
        self.keypad.release_all()
        self.framebuffer.clear()
        self.timers.reset()
        self.state = MachineState.RUNNING
        self.last_error = None
        self.cycles = 0

    @property
    def halted(self) -> bool:
        return self.state is MachineState.HALTED

    # =============== Core fetch/decode/execute cycle ===============
    def step(self):
        """Execute exactly one instruction.

        Raises a :class:`Chip8RuntimeError` subclass and moves to
        ``HALTED`` if the instruction cannot be executed. Stepping a halted
        machine raises :class:`MachineHalted` and changes nothing.
        """
        if self.halted:
            raise MachineHalted(self.last_error)

        pc = self.registers.pc
        try:
            instruction = decode(self.memory.fetch_opcode(pc), pc)
            log.debug("%03X: %s", pc, instruction)
            next_pc = self._handlers[instruction.op](instruction)
        except OutOfBounds as exc:
            if exc.pc is not None:
                self._halt(exc)
                raise
            # indexed accesses don't know the PC; attach it here
            error = OutOfBounds(exc.address, pc)
            self._halt(error)
            raise error from exc
        except Chip8RuntimeError as exc:
            self._halt(exc)
            raise

        self.registers.pc = (pc + 2 if next_pc is None else next_pc) & 0xFFFF
        self.cycles += 1

    def _halt(self, error: Chip8RuntimeError):
        self.state = MachineState.HALTED
        self.last_error = error
        log.error("Halted: %s", error)

    def tick_timers(self):
        """Advance the delay and sound timers by one 60 Hz tick."""
        if not self.halted:
            self.timers.tick()

    # =============== Introspection ===============
    def next_instruction(self) -> Optional[Instruction]:
        try:
            return decode(self.memory.fetch_opcode(self.registers.pc))
        except (OutOfBounds, UnknownOpcode):
            return None

    def snapshot(self) -> MachineSnapshot:
        pc = self.registers.pc
        try:
            next_opcode: Optional[int] = self.memory.fetch_opcode(pc)
        except OutOfBounds:
            next_opcode = None
        instruction = self.next_instruction()
        return MachineSnapshot(
            pc=pc,
            sp=self.stack.sp,
            registers=tuple(self.registers.V),
            index=self.registers.I,
            stack=self.stack.entries(),
            delay_timer=self.timers.delay,
            sound_timer=self.timers.sound,
            next_opcode=next_opcode,
            next_mnemonic=instruction.mnemonic() if instruction else None,
            halted=self.halted,
            error=str(self.last_error) if self.last_error else None,
            cycles=self.cycles,
        )

    # =============== Flow control ===============
    def _op_cls(self, ins: Instruction):
        self.framebuffer.clear()

    def _op_ret(self, ins: Instruction):
        return self.stack.pop(self.registers.pc) + 2

    def _op_jp(self, ins: Instruction):
        return ins.nnn

    def _op_call(self, ins: Instruction):
        pc = self.registers.pc
        self.stack.push(pc, pc)
        return ins.nnn

    def _op_jp_v0(self, ins: Instruction):
        return ins.nnn + self.registers[0]

    def _skip_if(self, condition: bool) -> int:
        return self.registers.pc + (4 if condition else 2)

    def _op_se_byte(self, ins: Instruction):
        return self._skip_if(self.registers[ins.x] == ins.kk)

    def _op_sne_byte(self, ins: Instruction):
        return self._skip_if(self.registers[ins.x] != ins.kk)

    def _op_se_reg(self, ins: Instruction):
        return self._skip_if(self.registers[ins.x] == self.registers[ins.y])

    def _op_sne_reg(self, ins: Instruction):
        return self._skip_if(self.registers[ins.x] != self.registers[ins.y])

    # =============== Register arithmetic ===============
    def _op_ld_byte(self, ins: Instruction):
        self.registers[ins.x] = ins.kk

    def _op_add_byte(self, ins: Instruction):
        # no carry flag for the immediate form
        self.registers[ins.x] = self.registers[ins.x] + ins.kk

    def _op_ld_reg(self, ins: Instruction):
        self.registers[ins.x] = self.registers[ins.y]

    def _op_or(self, ins: Instruction):
        self.registers[ins.x] = self.registers[ins.x] | self.registers[ins.y]

    def _op_and(self, ins: Instruction):
        self.registers[ins.x] = self.registers[ins.x] & self.registers[ins.y]

    def _op_xor(self, ins: Instruction):
        self.registers[ins.x] = self.registers[ins.x] ^ self.registers[ins.y]

    def _op_add_reg(self, ins: Instruction):
        total = self.registers[ins.x] + self.registers[ins.y]
        self.registers.vf = 1 if total > 0xFF else 0
        self.registers[ins.x] = total

    def _op_sub(self, ins: Instruction):
        vx, vy = self.registers[ins.x], self.registers[ins.y]
        self.registers.vf = 1 if vx > vy else 0
        self.registers[ins.x] = vx - vy

    def _op_shr(self, ins: Instruction):
        vx = self.registers[ins.x]
        self.registers.vf = vx & 0x1
        self.registers[ins.x] = vx >> 1

    def _op_subn(self, ins: Instruction):
        # flag compares against Vx as it was before the subtraction
        vx, vy = self.registers[ins.x], self.registers[ins.y]
        self.registers[ins.x] = vy - vx
        self.registers.vf = 1 if vy > vx else 0

    def _op_shl(self, ins: Instruction):
        vx = self.registers[ins.x]
        self.registers.vf = (vx >> 7) & 0x1
        self.registers[ins.x] = vx << 1

    def _op_rnd(self, ins: Instruction):
        self.registers[ins.x] = (self.random_byte() & 0xFF) & ins.kk

    # =============== Index register and memory ===============
    def _op_ld_i(self, ins: Instruction):
        self.registers.set_index(ins.nnn)

    def _op_add_i(self, ins: Instruction):
        self.registers.set_index(self.registers.I + self.registers[ins.x])

    def _op_ld_f(self, ins: Instruction):
        self.registers.set_index(FONT_ADDRESS + self.registers[ins.x] * GLYPH_HEIGHT)

    def _op_ld_b(self, ins: Instruction):
        val = self.registers[ins.x]
        self.memory.write(self.registers.I, bytes([val // 100, (val // 10) % 10, val % 10]))

    def _op_ld_store(self, ins: Instruction):
        self.memory.write(self.registers.I, bytes(self.registers.V[:ins.x + 1]))

    def _op_ld_load(self, ins: Instruction):
        block = self.memory.read(self.registers.I, ins.x + 1)
        for i, value in enumerate(block):
            self.registers[i] = value

    # =============== Display ===============
    def _op_drw(self, ins: Instruction):
        rows = self.memory.read(self.registers.I, ins.n)
        collision = self.framebuffer.draw_sprite(self.registers[ins.x], self.registers[ins.y], rows)
        self.registers.vf = 1 if collision else 0

    # =============== Keypad and timers ===============
    def _op_skp(self, ins: Instruction):
        return self._skip_if(self.keypad.is_down(self.registers[ins.x] & 0xF))

    def _op_sknp(self, ins: Instruction):
        return self._skip_if(not self.keypad.is_down(self.registers[ins.x] & 0xF))

    def _op_ld_vx_k(self, ins: Instruction):
        key = self.keypad.first_down()
        if key is None:
            # stay on this instruction until the driver steps us with a key held
            return self.registers.pc
        self.registers[ins.x] = key

    def _op_ld_vx_dt(self, ins: Instruction):
        self.registers[ins.x] = self.timers.delay

    def _op_ld_dt_vx(self, ins: Instruction):
        self.timers.delay = self.registers[ins.x]

    def _op_ld_st_vx(self, ins: Instruction):
        self.timers.sound = self.registers[ins.x]
