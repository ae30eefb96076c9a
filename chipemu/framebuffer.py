"""64x32 monochrome display memory."""

from __future__ import annotations

from typing import Iterable, List

import numpy as np

from .constants import SCREEN_H, SCREEN_W


class Framebuffer:
    """Grid of 1-bit pixels indexed as ``[row, column]``.

    Only :meth:`clear` and :meth:`draw_sprite` mutate it. ``dirty`` is raised by
    either of them and lowered by the renderer via :meth:`acknowledge`.
    """

    width = SCREEN_W
    height = SCREEN_H

    def __init__(self):
        self._pixels = np.zeros((SCREEN_H, SCREEN_W), dtype=np.uint8)
        self.dirty = True

    def clear(self):
        self._pixels.fill(0)
        self.dirty = True

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """XOR ``rows`` (one byte per row, MSB leftmost) in at ``(x, y)``.

        The origin and every pixel wrap around the screen edges. Returns True
        if any set sprite bit landed on a pixel that was already lit.
        """
        collision = False
        x %= SCREEN_W
        y %= SCREEN_H
        for row, sprite in enumerate(rows):
            py = (y + row) % SCREEN_H
            for col in range(8):
                if (sprite >> (7 - col)) & 1:
                    px = (x + col) % SCREEN_W
                    if self._pixels[py, px]:
                        collision = True
                    self._pixels[py, px] ^= 1
        self.dirty = True
        return collision

    # =============== Read-only access for renderers ===============
    def pixel(self, x: int, y: int) -> int:
        return int(self._pixels[y % SCREEN_H, x % SCREEN_W])

    def pixels(self) -> np.ndarray:
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def lit_count(self) -> int:
        return int(self._pixels.sum())

    def acknowledge(self):
        self.dirty = False

    def rows(self, on: str = "#", off: str = ".") -> List[str]:
        return ["".join(on if p else off for p in line) for line in self._pixels]

    def __str__(self) -> str:
        return "\n".join(self.rows())
