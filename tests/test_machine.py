"""Tests for the host-facing Machine wrapper."""

import pytest
from octet import (
    Machine, MachineConfig, Quirks, Status, InvalidKeyError, InvalidSizeError,
    StackOverflowError, StackUnderflowError, MAX_PROGRAM_SIZE,
)
from octet.logging import MachineLogger
from conftest import program


@pytest.fixture
def machine():
    return Machine(logger=MachineLogger(log_level="DEBUG", use_colors=False, show_timestamps=False))


class TestMachineLifecycle:

    def test_initial_state(self, machine):
        assert machine.state.pc == 0x200
        assert machine.status == Status.RUNNING
        assert not machine.awaiting_input
        assert not machine.halted

    def test_load_and_step(self, machine, capsys):
        machine.load_program(program(0x6A12))
        frame = machine.step()

        assert machine.state.V[10] == 0x12
        assert machine.state.pc == 0x202
        assert not frame.changed
        assert "Loaded 2 bytes" in capsys.readouterr().out

    def test_load_oversized(self, machine):
        with pytest.raises(InvalidSizeError):
            machine.load_program(bytes(MAX_PROGRAM_SIZE + 1))
        assert machine.state.pc == 0x200

    def test_load_rom_file(self, machine, tmp_path, capsys):
        rom = tmp_path / "clear.ch8"
        rom.write_bytes(program(0x00E0))

        machine.load_rom(str(rom))
        frame = machine.step()

        assert frame.changed
        assert "clear.ch8" in capsys.readouterr().out

    def test_reset(self, machine):
        machine.load_program(program(0x6A12))
        machine.step()

        machine.reset()

        assert machine.state.pc == 0x200
        assert machine.state.V[10] == 0
        assert machine.state.memory[0x200] == 0

    def test_run(self, machine):
        machine.load_program(program(0x00E0, 0x7001, 0x1202))

        frame = machine.run(10)

        assert frame.changed
        assert machine.state.V[0] == 5
        assert not machine.state.draw_flag

    def test_quirks_from_config(self):
        machine = Machine(MachineConfig(quirks=Quirks(shift_uses_vy=True), log_level="ERROR"))
        machine.load_program(program(0x6108, 0x6203, 0x8126))
        machine.run(3)

        assert machine.state.V[1] == 0x01

    def test_seeded_random(self):
        rom = program(0xC0FF, 0xC1FF, 0xC2FF)
        first = Machine(MachineConfig(seed=7, log_level="ERROR"))
        second = Machine(MachineConfig(seed=7, log_level="ERROR"))
        for machine in (first, second):
            machine.load_program(rom)
            machine.run(3)

        assert [int(v) for v in first.state.V[:3]] == [int(v) for v in second.state.V[:3]]


class TestMachineInput:

    def test_timers(self, machine):
        machine.load_program(program(0x6002, 0xF015, 0xF018))
        machine.run(3)

        assert machine.sound_active
        machine.tick_timers()
        machine.tick_timers()
        machine.tick_timers()

        assert machine.state.delay_timer == 0
        assert not machine.sound_active

    def test_invalid_key(self, machine):
        with pytest.raises(InvalidKeyError):
            machine.set_key(16, True)

    def test_key_wait(self, machine, capsys):
        machine.load_program(program(0xF40A))

        machine.step()
        assert machine.awaiting_input
        assert "Waiting for key into V4" in capsys.readouterr().out

        machine.step()
        assert machine.state.pc == 0x200

        machine.set_key(0xE, True)
        machine.step()

        assert not machine.awaiting_input
        assert machine.state.V[4] == 0xE
        assert machine.state.pc == 0x202


class TestMachineFaults:

    def test_underflow_raises(self, machine, capsys):
        machine.load_program(program(0x00EE))

        with pytest.raises(StackUnderflowError) as excinfo:
            machine.step()

        assert excinfo.value.pc == 0x200
        assert machine.halted
        assert "Stack underflow" in capsys.readouterr().out

    def test_overflow_raises(self, machine):
        machine.load_program(program(0x2200))

        for _ in range(16):
            machine.step()
        with pytest.raises(StackOverflowError):
            machine.step()

        assert machine.status == Status.STACK_OVERFLOW

    def test_overflow_raised_from_run(self, machine):
        machine.load_program(program(0x2200))

        with pytest.raises(StackOverflowError):
            machine.run(20)

    def test_halted_machine_stays_put(self, machine):
        machine.load_program(program(0x00EE))
        with pytest.raises(StackUnderflowError):
            machine.step()

        frame = machine.step()

        assert not frame.changed
        assert machine.halted
        assert machine.state.pc == 0x200
