import pytest

from chipemu.errors import StackOverflow, StackUnderflow
from chipemu.registers import CallStack, RegisterFile


def test_register_file_starts_at_program_start() -> None:
    regs = RegisterFile()
    assert regs.pc == 0x200
    assert regs.I == 0
    assert regs.V == [0] * 16


def test_register_writes_wrap_to_a_byte() -> None:
    regs = RegisterFile()
    regs[3] = 0x1FE
    regs.vf = -1
    assert regs[3] == 0xFE
    assert regs[0xF] == 0xFF


def test_index_register_is_sixteen_bits() -> None:
    regs = RegisterFile()
    regs.set_index(0x1FFFF)
    assert regs.I == 0xFFFF


def test_stack_push_pop_order() -> None:
    stack = CallStack()
    stack.push(0x200)
    stack.push(0x300)
    assert stack.entries() == (0x200, 0x300)
    assert stack.pop() == 0x300
    assert stack.pop() == 0x200
    assert len(stack) == 0


def test_stack_overflow_keeps_pointer() -> None:
    stack = CallStack()
    for addr in range(16):
        stack.push(addr)
    with pytest.raises(StackOverflow) as excinfo:
        stack.push(0x999, pc=0x240)
    assert excinfo.value.pc == 0x240
    assert stack.sp == 16
    assert stack.entries()[-1] == 15


def test_stack_underflow() -> None:
    stack = CallStack()
    with pytest.raises(StackUnderflow):
        stack.pop()
    assert stack.sp == 0
