"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from octet.state import EmulatorState, Status
from octet.decode import DecodedInstruction
from octet.stack import is_empty, pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def execute_system_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Machine code routine, ignored."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(
        display=jnp.zeros_like(state.display),
        draw_flag=jnp.ones((), dtype=jnp.bool_),
    )


def stack_fault(state: EmulatorState, status: Status) -> EmulatorState:
    """Halt on the faulting instruction with the given fault status."""
    return state.replace(
        pc=jnp.astype(state.pc - 2, jnp.uint16),
        status=jnp.asarray(int(status), dtype=jnp.int32),
    )


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    def _return(state):
        stack, address = pop(state.stack)
        return state.replace(stack=stack, pc=address)

    return jax.lax.cond(
        is_empty(state.stack),
        lambda s: stack_fault(s, Status.STACK_UNDERFLOW),
        _return,
        state
    )
