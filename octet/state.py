"""CHIP-8 emulator state structures."""

from enum import IntEnum
from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from octet.config import Quirks
from octet.constants import (
    FONT_DATA, FONT_START, KEYPAD_SIZE, MEMORY_SIZE, NUM_REGISTERS, PROGRAM_START,
    SCREEN_HEIGHT, SCREEN_WIDTH, STACK_SIZE,
)


class Status(IntEnum):
    """Execution status of the machine."""
    RUNNING = 0
    AWAITING_KEY = 1
    STACK_OVERFLOW = 2
    STACK_UNDERFLOW = 3


FAULT_STATUSES = (Status.STACK_OVERFLOW, Status.STACK_UNDERFLOW)


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    ``display`` is indexed ``[x, y]``. ``draw_flag`` is raised by every
    instruction that touches pixels and lowered when a frame is taken.
    ``key_register`` is the target of a pending FX0A while ``status`` is
    ``AWAITING_KEY``.
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    draw_flag: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(KEYPAD_SIZE, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    status: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))
    key_register: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_state(rng: Optional[jax.Array] = None, quirks: Quirks = Quirks()) -> EmulatorState:
    """Create initial emulator state with font data loaded.

    Args:
        rng: JAX PRNG key feeding CXNN. Defaults to ``PRNGKey(0)``.
        quirks: Dialect switches, static for the lifetime of the state.
    """
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(rng=rng, quirks=quirks)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
