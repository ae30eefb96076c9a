"""CHIP-8 virtual machine with an optional pygame front end."""

from .errors import (
    Chip8Error,
    Chip8RuntimeError,
    LoadError,
    LoadTooLarge,
    MachineHalted,
    MisalignedPC,
    OutOfBounds,
    StackOverflow,
    StackUnderflow,
    UnknownOpcode,
)
from .interpreter import Interpreter, MachineState

__version__ = "1.0.0"

__all__ = [
    "Chip8Error",
    "Chip8RuntimeError",
    "Interpreter",
    "LoadError",
    "LoadTooLarge",
    "MachineHalted",
    "MachineState",
    "MisalignedPC",
    "OutOfBounds",
    "StackOverflow",
    "StackUnderflow",
    "UnknownOpcode",
]
