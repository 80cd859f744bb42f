"""Host-facing wrapper around the functional CHIP-8 core."""

import dataclasses
from typing import Optional

import jax

from octet.config import MachineConfig
from octet.emulator import load_program, read_rom, run_cycles, set_key, step, tick_timers
from octet.errors import StackOverflowError, StackUnderflowError
from octet.frame import FrameView, take_frame
from octet.logging import MachineLogger
from octet.state import EmulatorState, FAULT_STATUSES, Status, create_state


_FAULT_ERRORS = {
    Status.STACK_OVERFLOW: StackOverflowError,
    Status.STACK_UNDERFLOW: StackUnderflowError,
}


class Machine:
    """A single CHIP-8 machine driven by a host loop.

    The host calls :meth:`step` once per logical cycle and
    :meth:`tick_timers` at its own, slower cadence. Keys are fed in with
    :meth:`set_key` between steps. Cycle-level code never raises; a stack
    fault halts the machine and is raised from the :meth:`step` or
    :meth:`run` call that produced it.
    """

    def __init__(self, config: Optional[MachineConfig] = None, logger: Optional[MachineLogger] = None):
        self.config = config if config is not None else MachineConfig()
        self.logger = logger if logger is not None else MachineLogger(log_level=self.config.log_level)
        self._step = jax.jit(step)
        self.state = self._fresh_state()
        self.logger.log_machine_start(dataclasses.asdict(self.config))

    def _fresh_state(self) -> EmulatorState:
        return create_state(jax.random.PRNGKey(self.config.seed), quirks=self.config.quirks)

    def reset(self):
        """Discard all state, keeping the configuration."""
        self.state = self._fresh_state()
        self.logger.cycles = 0

    def load_program(self, data: bytes, source: str = "<bytes>"):
        """Copy a program image to 0x200. Raises InvalidSizeError when it does not fit."""
        self.state = load_program(self.state, data)
        self.logger.log_program_loaded(len(data), source)

    def load_rom(self, filename: str):
        """Read a ROM file and load it."""
        self.load_program(read_rom(filename), source=filename)

    @property
    def status(self) -> Status:
        return Status(int(self.state.status))

    @property
    def awaiting_input(self) -> bool:
        """True while an FX0A is blocked on the keypad."""
        return self.status == Status.AWAITING_KEY

    @property
    def halted(self) -> bool:
        return self.status in FAULT_STATUSES

    def _check_transition(self, previous: Status):
        status = self.status
        if status == previous:
            return
        if status == Status.AWAITING_KEY:
            self.logger.log_key_wait(self.state.pc, self.state.key_register)
        elif status in _FAULT_ERRORS:
            error = _FAULT_ERRORS[status](int(self.state.pc))
            self.logger.log_fault(error)
            self.logger.log_registers(self.state.V, self.state.I, self.state.pc)
            raise error

    def step(self) -> FrameView:
        """Run one cycle and return the framebuffer snapshot.

        A stack fault raises on the call whose cycle produced it. After that the
        machine stays halted: further calls return the unchanged frame without
        raising again, until ``reset``.
        """
        previous = self.status
        self.state, frame = self._step(self.state)
        self.logger.cycles += 1
        self._check_transition(previous)
        return frame

    def run(self, cycles: int) -> FrameView:
        """Run ``cycles`` cycles in one compiled loop and return the resulting frame."""
        previous = self.status
        self.state = run_cycles(self.state, cycles)
        self.logger.cycles += cycles
        self._check_transition(previous)
        self.state, frame = take_frame(self.state)
        return frame

    def tick_timers(self):
        """Decrement the delay and sound timers."""
        self.state = tick_timers(self.state)

    def set_key(self, index: int, pressed: bool):
        """Press or release a keypad key. Raises InvalidKeyError outside 0x0-0xF."""
        self.state = set_key(self.state, index, pressed)

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is running; tone generation is up to the host."""
        return int(self.state.sound_timer) > 0
