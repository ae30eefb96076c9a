import os

# headless pygame for the front end tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from chipemu.interpreter import Interpreter


def assemble(*words: int) -> bytes:
    """Assemble 16-bit opcode words into a big-endian ROM image."""
    out = bytearray()
    for word in words:
        out += bytes([(word >> 8) & 0xFF, word & 0xFF])
    return bytes(out)


@pytest.fixture
def program():
    return assemble


@pytest.fixture
def vm_for():
    def build(*words: int, random_byte=None) -> Interpreter:
        if random_byte is None:
            return Interpreter(assemble(*words))
        return Interpreter(assemble(*words), random_byte=random_byte)

    return build
