"""Command-line entry point.

Run:
  chipemu path/to/rom [--scale 15] [--clock 60] [--tone 440] [--debug] [--dump]

A ``--clock`` of 0 (or less) starts in single-step mode: press SPACE to execute
one instruction at a time, with the register overlay enabled.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from .config import EmulatorConfig
from .constants import DEFAULT_CYCLE_RATE, START_ADDRESS, TIMER_HZ
from .debug import hexdump
from .decoder import disassemble
from .errors import Chip8Error, LoadError
from .interpreter import Interpreter
from .scheduler import CycleScheduler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chipemu", description="CHIP-8 emulator")
    parser.add_argument("rom", help="Path to CHIP-8 ROM")
    parser.add_argument("--scale", type=int, default=15,
                        help="Pixel scale factor (default 15)")
    parser.add_argument("--clock", type=int, default=DEFAULT_CYCLE_RATE,
                        help="Instructions per second; 0 for single-step mode (default %(default)s)")
    parser.add_argument("--tone", type=int, default=440,
                        help="Beep tone frequency in Hz")
    parser.add_argument("--debug", action="store_true",
                        help="Show the register overlay under the screen")
    parser.add_argument("--verbose", action="store_true",
                        help="Log every executed instruction")
    parser.add_argument("--dump", action="store_true",
                        help="Print a hexdump and disassembly of the loaded program and exit")
    return parser


def config_from_args(args: argparse.Namespace) -> EmulatorConfig:
    return EmulatorConfig(
        cycle_rate=args.clock,
        scale=args.scale,
        tone_hz=args.tone,
        # single-stepping without seeing the registers is pointless
        debug_overlay=args.debug or args.clock <= 0,
    )


def dump_program(chip8: Interpreter, size: int) -> str:
    """Hexdump of the program region followed by its disassembly."""
    image = chip8.memory.dump()[START_ADDRESS:START_ADDRESS + size]
    listing = "\n".join(f"{address:03X}: {text}" for address, text in disassemble(image, START_ADDRESS))
    return f"{hexdump(image, START_ADDRESS)}\n\n{listing}"


def run_cycles(chip8: Interpreter, steps: int, ticks: int) -> Optional[Chip8Error]:
    """Execute up to ``steps`` instructions and apply ``ticks`` timer ticks.

    Stops stepping at the first error and returns it; a halted machine is left
    alone.
    """
    error = None
    if not chip8.halted:
        for _ in range(steps):
            try:
                chip8.step()
            except Chip8Error as exc:
                error = exc
                break
    for _ in range(ticks):
        chip8.tick_timers()
    return error


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        with open(args.rom, 'rb') as f:
            rom_data = f.read()
    except OSError as exc:
        print(f"[ERROR] Cannot read ROM: {exc}", file=sys.stderr)
        return 1

    try:
        chip8 = Interpreter(rom_data)
    except LoadError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    print(f"[INFO] ROM loaded ({len(rom_data)} bytes)!")

    if args.dump:
        print(dump_program(chip8, len(rom_data)))
        return 0

    config = config_from_args(args)

    # pygame is only needed once there is something to show
    import pygame
    from .frontend import Frontend

    pygame.init()
    frontend = Frontend(chip8, config)
    scheduler = CycleScheduler(config.cycle_rate)

    last = time.perf_counter()
    while frontend.handle_events():
        now = time.perf_counter()
        steps, ticks = scheduler.advance(now - last)
        last = now

        steps += frontend.take_step_requests()
        error = run_cycles(chip8, steps, ticks)
        if error is not None:
            print(f"[ERROR] {error}", file=sys.stderr)

        frontend.play_sound_if_needed()
        frontend.render()
        frontend.tick(TIMER_HZ)

    pygame.quit()
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nExiting.")
