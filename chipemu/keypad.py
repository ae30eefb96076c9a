"""16-key logical keypad stored as a bitmask.

Which physical key maps to which logical index is the front end's business
(see ``chipemu.frontend.KEYMAP``); the keypad only knows indices 0x0-0xF.
"""

from __future__ import annotations

from typing import Optional

from .constants import KEY_COUNT


def _check_index(index: int):
    if not 0 <= index < KEY_COUNT:
        raise ValueError(f"Key index out of range: {index}")


class Keypad:
    def __init__(self):
        self.mask = 0

    def set_key_down(self, index: int):
        _check_index(index)
        self.mask |= 1 << index

    def set_key_up(self, index: int):
        _check_index(index)
        self.mask &= ~(1 << index)

    def release_all(self):
        self.mask = 0

    def is_down(self, index: int) -> bool:
        if 0 <= index < KEY_COUNT:
            return bool(self.mask >> index & 1)
        return False

    def first_down(self) -> Optional[int]:
        """Lowest index currently held, or None."""
        for i in range(KEY_COUNT):
            if self.mask >> i & 1:
                return i
        return None
