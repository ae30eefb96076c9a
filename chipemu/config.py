"""Settings for the emulator front end."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from .constants import DEFAULT_CYCLE_RATE


@dataclass
class EmulatorConfig:
    # instructions per second; <= 0 means single-step mode (SPACE runs one)
    cycle_rate: int = DEFAULT_CYCLE_RATE
    scale: int = 15
    tone_hz: int = 440
    debug_overlay: bool = False
    # physical key code -> logical keypad index; empty means the front end default
    keymap: Dict[int, int] = field(default_factory=dict)

    def __post_init__(self):
        self.scale = max(1, int(self.scale))
        for code, index in self.keymap.items():
            if not 0 <= index <= 0xF:
                raise ValueError(f"Keymap entry {code} -> {index} is not a keypad index")

    @property
    def manual(self) -> bool:
        return self.cycle_rate <= 0
