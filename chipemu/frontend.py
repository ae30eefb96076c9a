"""Pygame window, keyboard input, beeper and debug overlay.

Keyboard mapping (common layout):

  CHIP-8  =>  Keyboard
  1 2 3 C =>  1 2 3 4
  4 5 6 D =>  Q W E R
  7 8 9 E =>  A S D F
  A 0 B F =>  Z X C V

Other keys: ESC quits, F9 resets the machine, SPACE executes one instruction
when running in single-step mode.
"""

from __future__ import annotations

import logging

import numpy as np
import pygame

from .config import EmulatorConfig
from .constants import SCREEN_H, SCREEN_W
from .debug import format_snapshot
from .interpreter import Interpreter

log = logging.getLogger(__name__)

# Keyboard mapping: pygame key -> CHIP-8 key index
KEYMAP = {
    pygame.K_x: 0x0,
    pygame.K_1: 0x1,
    pygame.K_2: 0x2,
    pygame.K_3: 0x3,
    pygame.K_q: 0x4,
    pygame.K_w: 0x5,
    pygame.K_e: 0x6,
    pygame.K_a: 0x7,
    pygame.K_s: 0x8,
    pygame.K_d: 0x9,
    pygame.K_z: 0xA,
    pygame.K_c: 0xB,
    pygame.K_4: 0xC,
    pygame.K_r: 0xD,
    pygame.K_f: 0xE,
    pygame.K_v: 0xF,
}

OVERLAY_HEIGHT = 160
FG = (255, 255, 255)
BG = (0, 0, 0)


class Frontend:
    def __init__(self, chip8: Interpreter, config: EmulatorConfig):
        self.chip8 = chip8
        self.config = config
        self.scale = config.scale
        self.keymap = config.keymap or KEYMAP

        self.screen_size = (SCREEN_W * self.scale, SCREEN_H * self.scale)
        height = self.screen_size[1] + (OVERLAY_HEIGHT if config.debug_overlay else 0)
        self.surface = pygame.display.set_mode((self.screen_size[0], height))
        pygame.display.set_caption("CHIPemu")
        self.clock = pygame.time.Clock()

        self.font = None
        if config.debug_overlay:
            pygame.font.init()
            self.font = pygame.font.Font(None, 20)

        self.step_requests = 0
        self.sound = None
        self.tone_hz = config.tone_hz
        self._init_audio()

    def _init_audio(self):
        try:
            pygame.mixer.pre_init(44100, -16, 1, 256)
            pygame.mixer.init()
        except pygame.error as exc:
            log.warning("Audio disabled: %s", exc)
            return
        # generate a 100ms square wave buffer
        sr, channels = pygame.mixer.get_init()[0], pygame.mixer.get_init()[2]
        duration = 0.1
        t = np.arange(int(sr * duration))
        wave = ((t * self.tone_hz * 2 / sr) % 2 >= 1).astype('float32') * 2 - 1
        wave = (wave * 32767 * 0.5).astype('int16')
        if channels > 1:
            wave = np.repeat(wave[:, None], channels, axis=1)
        self.sound = pygame.mixer.Sound(array=np.ascontiguousarray(wave))
        self.sound.set_volume(0.2)

    def handle_events(self) -> bool:
        """Pump pygame events into the keypad. Returns False once the user quits."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type not in (pygame.KEYDOWN, pygame.KEYUP):
                continue
            is_down = event.type == pygame.KEYDOWN
            if is_down and event.key == pygame.K_ESCAPE:
                return False
            if is_down and event.key == pygame.K_F9:
                self.chip8.reset()
                print("[INFO] Emulator fully reset!")
            elif is_down and event.key == pygame.K_SPACE and self.config.manual:
                self.step_requests += 1
            elif event.key in self.keymap:
                index = self.keymap[event.key]
                if is_down:
                    self.chip8.keypad.set_key_down(index)
                else:
                    self.chip8.keypad.set_key_up(index)
        return True

    def take_step_requests(self) -> int:
        count, self.step_requests = self.step_requests, 0
        return count

    def render(self, force: bool = False):
        framebuffer = self.chip8.framebuffer
        if not (force or framebuffer.dirty or self.font):
            return
        # surfarray wants (width, height, rgb)
        frame = framebuffer.pixels().T.astype(np.uint8) * 255
        rgb = np.repeat(frame[:, :, None], 3, axis=2)
        small = pygame.surfarray.make_surface(rgb)
        self.surface.fill(BG)
        self.surface.blit(pygame.transform.scale(small, self.screen_size), (0, 0))
        if self.font:
            self._draw_overlay()
        pygame.display.flip()
        framebuffer.acknowledge()

    def _draw_overlay(self):
        y = self.screen_size[1] + 6
        for line in format_snapshot(self.chip8.snapshot()).splitlines():
            text = self.font.render(line, True, FG)
            self.surface.blit(text, (10, y))
            y += text.get_height() + 2

    def tick(self, fps: int):
        self.clock.tick(fps)

    def play_sound_if_needed(self):
        if self.sound is not None and self.chip8.timers.sound_active:
            if self.sound.get_num_channels() == 0:
                self.sound.play()
