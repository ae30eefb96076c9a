"""Register file and bounded call stack."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .constants import FLAG_REGISTER, REGISTER_COUNT, STACK_DEPTH, START_ADDRESS
from .errors import StackOverflow, StackUnderflow


class RegisterFile:
    """V0..VF, the index register I and the program counter."""

    def __init__(self):
        self.reset()

    def reset(self):
        self.V: List[int] = [0] * REGISTER_COUNT  # registers V0..VF
        self.I = 0
        self.pc = START_ADDRESS

    def __getitem__(self, index: int) -> int:
        return self.V[index]

    def __setitem__(self, index: int, value: int):
        self.V[index] = value & 0xFF

    @property
    def vf(self) -> int:
        return self.V[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int):
        self.V[FLAG_REGISTER] = value & 0xFF

    def set_index(self, value: int):
        self.I = value & 0xFFFF


class CallStack:
    """Fixed-depth stack of return addresses.

    ``sp`` counts the occupied slots, so it ranges over 0..depth. Pushing onto
    a full stack raises :class:`StackOverflow` and popping an empty one raises
    :class:`StackUnderflow`; neither touches the stored entries.
    """

    def __init__(self, depth: int = STACK_DEPTH):
        self.depth = depth
        self._slots = [0] * depth
        self.sp = 0

    def reset(self):
        self._slots = [0] * self.depth
        self.sp = 0

    def push(self, address: int, pc: Optional[int] = None):
        if self.sp >= self.depth:
            raise StackOverflow(pc)
        self._slots[self.sp] = address & 0xFFFF
        self.sp += 1

    def pop(self, pc: Optional[int] = None) -> int:
        if self.sp <= 0:
            raise StackUnderflow(pc)
        self.sp -= 1
        return self._slots[self.sp]

    def entries(self) -> Tuple[int, ...]:
        # bottom of the stack first
        return tuple(self._slots[:self.sp])

    def __len__(self) -> int:
        return self.sp
