from chipemu.cli import build_parser, config_from_args, dump_program, main, run_cycles
from chipemu.errors import UnknownOpcode
from chipemu.interpreter import Interpreter


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["game.ch8"])
    config = config_from_args(args)
    assert config.cycle_rate == 60
    assert config.scale == 15
    assert config.tone_hz == 440
    assert not config.debug_overlay
    assert not config.manual


def test_zero_clock_means_single_step_with_overlay() -> None:
    args = build_parser().parse_args(["game.ch8", "--clock", "0"])
    config = config_from_args(args)
    assert config.manual
    assert config.debug_overlay


def test_run_cycles_steps_and_ticks(program) -> None:
    vm = Interpreter(program(0x6020, 0xF015, 0x7001, 0x1204))
    assert run_cycles(vm, 5, 3) is None
    assert vm.registers[0] == 0x20 + 2
    assert vm.timers.delay == 0x20 - 3


def test_run_cycles_stops_at_first_error(program) -> None:
    vm = Interpreter(program(0x6001, 0xFFFF, 0x6002))
    error = run_cycles(vm, 10, 0)
    assert isinstance(error, UnknownOpcode)
    assert vm.halted
    assert vm.cycles == 1
    # a halted machine is not stepped again and reports nothing new
    assert run_cycles(vm, 10, 1) is None


def test_main_missing_rom(tmp_path, capsys) -> None:
    assert main([str(tmp_path / "missing.ch8")]) == 1
    assert "Cannot read ROM" in capsys.readouterr().err


def test_main_rom_too_large(tmp_path, capsys) -> None:
    rom = tmp_path / "huge.ch8"
    rom.write_bytes(bytes(4096))
    assert main([str(rom)]) == 1
    assert "program space" in capsys.readouterr().err


def test_main_dump_prints_hexdump_and_disassembly(tmp_path, capsys, program) -> None:
    rom = tmp_path / "tiny.ch8"
    rom.write_bytes(program(0x6005, 0xA0FF, 0xD005, 0xFFFF))
    assert main([str(rom), "--dump"]) == 0
    out = capsys.readouterr().out
    assert "200: 60 05 A0 FF D0 05 FF FF" in out
    assert "200: 6005  LD V0, 05" in out
    assert "202: A0FF  LD I, 0FF" in out
    assert "204: D005  DRW V0, V0, 5" in out
    assert "206: FFFF  DW FFFF" in out


def test_dump_program_covers_only_rom_bytes(program) -> None:
    vm = Interpreter(program(0x00E0))
    text = dump_program(vm, 2)
    assert text == "200: 00 E0\n\n200: 00E0  CLS"
