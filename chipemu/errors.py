"""Exception hierarchy raised by the virtual machine."""

from __future__ import annotations

from typing import Optional


class Chip8Error(Exception):
    """Base class for every error the core reports."""


# ==============================
# Load-time errors
# ==============================


class LoadError(Chip8Error):
    pass


class LoadTooLarge(LoadError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"ROM is {size} bytes, program space holds {limit}")
        self.size = size
        self.limit = limit


# ==============================
# Run-time errors (halt the machine)
# ==============================


class Chip8RuntimeError(Chip8Error):
    """An error that stops the current run.

    ``pc`` is the address of the instruction being executed when the error
    occurred, if known.
    """

    def __init__(self, message: str, pc: Optional[int] = None):
        if pc is not None:
            message = f"{message} (PC {pc:03X})"
        super().__init__(message)
        self.pc = pc


class OutOfBounds(Chip8RuntimeError):
    def __init__(self, address: int, pc: Optional[int] = None):
        super().__init__(f"Memory access out of bounds at {address:#05x}", pc)
        self.address = address


class UnknownOpcode(Chip8RuntimeError):
    def __init__(self, opcode: int, pc: Optional[int] = None):
        super().__init__(f"Unknown opcode: {opcode:04X}", pc)
        self.opcode = opcode


class StackOverflow(Chip8RuntimeError):
    def __init__(self, pc: Optional[int] = None):
        super().__init__("Stack overflow on CALL", pc)


class StackUnderflow(Chip8RuntimeError):
    def __init__(self, pc: Optional[int] = None):
        super().__init__("Stack underflow on RET", pc)


class MachineHalted(Chip8RuntimeError):
    def __init__(self, cause: Optional[Chip8Error] = None):
        message = "Machine is halted; reload or reset to continue"
        if cause is not None:
            message = f"{message} (halted by: {cause})"
        super().__init__(message)
        self.cause = cause


class MisalignedPC(OutOfBounds):
    """The program counter landed on an odd address."""

    def __init__(self, address: int, pc: Optional[int] = None):
        Chip8RuntimeError.__init__(self, f"Program counter not word-aligned at {address:#05x}", pc)
        self.address = address
