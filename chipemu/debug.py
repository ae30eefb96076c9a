"""Read-only machine snapshots and text renderings for the debug overlay."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class MachineSnapshot:
    pc: int
    sp: int
    registers: Tuple[int, ...]
    index: int
    stack: Tuple[int, ...]
    delay_timer: int
    sound_timer: int
    next_opcode: Optional[int]
    next_mnemonic: Optional[str] = None
    halted: bool = False
    error: Optional[str] = None
    cycles: int = 0


def format_snapshot(snap: MachineSnapshot) -> str:
    """Multi-line register dump shown by the front end overlay."""
    lines: List[str] = [
        f"Program counter: {snap.pc:03X} Stack pointer: {snap.sp}",
        f"I={snap.index:03X} DT={snap.delay_timer} ST={snap.sound_timer} cycles={snap.cycles}",
    ]
    if snap.next_opcode is None:
        lines.append("Next: <out of bounds>")
    else:
        lines.append(f"Next: {snap.next_opcode:04X} {snap.next_mnemonic or '???'}")

    # two rows of eight registers
    for base in (0, 8):
        lines.append(" ".join(f"V{r:X}={snap.registers[r]:02X}" for r in range(base, base + 8)))

    stack = " ".join(f"{addr:03X}" for addr in snap.stack) or "-"
    lines.append(f"Stack: {stack}")

    if snap.halted:
        lines.append(f"HALTED: {snap.error}")
    return "\n".join(lines)


def hexdump(data: bytes, start: int = 0, width: int = 16) -> str:
    """Dump ``data`` as an addressed hex listing starting at ``start``."""
    lines = []
    for offset in range(0, len(data), width):
        chunk = data[offset:offset + width]
        hex_part = " ".join(f"{byte:02X}" for byte in chunk)
        lines.append(f"{start + offset:03X}: {hex_part}")
    return "\n".join(lines)
