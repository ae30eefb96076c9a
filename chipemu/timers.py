"""Delay and sound countdown timers, decremented at 60 Hz."""

from __future__ import annotations


class TimerUnit:
    def __init__(self):
        self.reset()

    def reset(self):
        self._delay = 0
        self._sound = 0

    @property
    def delay(self) -> int:
        return self._delay

    @delay.setter
    def delay(self, value: int):
        self._delay = value & 0xFF

    @property
    def sound(self) -> int:
        return self._sound

    @sound.setter
    def sound(self, value: int):
        self._sound = value & 0xFF

    @property
    def sound_active(self) -> bool:
        # the audio collaborator beeps while this holds
        return self._sound > 0

    def tick(self):
        if self._delay > 0:
            self._delay -= 1
        if self._sound > 0:
            self._sound -= 1
