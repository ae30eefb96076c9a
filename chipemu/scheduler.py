"""Turns elapsed wall-clock time into instruction steps and timer ticks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .constants import DEFAULT_CYCLE_RATE, TIMER_HZ


@dataclass
class CycleScheduler:
    """Keeps the instruction clock and the 60 Hz timer clock independent.

    ``cycle_rate`` is instructions per second. A rate of zero or less means
    manual mode: :meth:`advance` never schedules steps, but timers keep
    running.
    """

    cycle_rate: int = DEFAULT_CYCLE_RATE
    timer_rate: int = TIMER_HZ

    def __post_init__(self) -> None:
        self.cycle_rate = int(self.cycle_rate)
        self.timer_rate = int(self.timer_rate)
        self.reset()

    def reset(self) -> None:
        self._step_debt = 0.0
        self._tick_debt = 0.0

    @property
    def manual(self) -> bool:
        return self.cycle_rate <= 0

    def advance(self, elapsed: float) -> Tuple[int, int]:
        """Return ``(steps, ticks)`` owed after ``elapsed`` seconds.

        Fractions carry over to the next call, so calling this every frame
        averages out to exactly the configured rates.
        """
        if elapsed <= 0:
            return 0, 0

        steps = 0
        if not self.manual:
            self._step_debt += elapsed * self.cycle_rate
            steps = int(self._step_debt)
            self._step_debt -= steps

        self._tick_debt += elapsed * self.timer_rate
        ticks = int(self._tick_debt)
        self._tick_debt -= ticks
        return steps, ticks


__all__ = ["CycleScheduler"]
