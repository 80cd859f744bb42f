"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from octet.state import EmulatorState, Status
from octet.decode import DecodedInstruction
from octet.constants import (
    ADDRESS_MASK, FONT_END, FONT_GLYPH_SIZE, FONT_START, MEMORY_SIZE, NUM_REGISTERS,
)


def writable(addresses: jnp.ndarray) -> jnp.ndarray:
    """Redirect writes aimed at the font out of range so ``mode="drop"`` discards them."""
    return jnp.where(addresses < FONT_END, MEMORY_SIZE, addresses)


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 16 bits. VF is untouched."""
    new_i = jnp.astype(state.I, jnp.int32) + state.V[instruction.x]
    return state.replace(I=jnp.astype(new_i & 0xFFFF, jnp.uint16))


def store_pressed_key(state: EmulatorState, register) -> EmulatorState:
    """Put the lowest pressed key in ``register`` and move past the FX0A."""
    pressed_key = jnp.argmax(state.keypad)
    return state.replace(
        V=state.V.at[register].set(jnp.astype(pressed_key, jnp.uint8)),
        status=jnp.asarray(int(Status.RUNNING), dtype=jnp.int32),
    )


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Without a pressed key the PC is rewound onto this instruction and the
    machine enters ``AWAITING_KEY`` until the host presses one.
    """
    def wait_action(state):
        return state.replace(
            pc=jnp.astype(state.pc - 2, jnp.uint16),
            status=jnp.asarray(int(Status.AWAITING_KEY), dtype=jnp.int32),
            key_register=jnp.astype(instruction.x, jnp.uint8),
        )

    return jax.lax.cond(
        jnp.any(state.keypad),
        lambda s: store_pressed_key(s, instruction.x),
        wait_action,
        state
    )


def resume_wait_for_key(state: EmulatorState) -> EmulatorState:
    """Complete a pending FX0A once any key is held, otherwise stay put."""
    def resume(state):
        state = store_pressed_key(state, state.key_register)
        return state.replace(pc=jnp.astype(state.pc + 2, jnp.uint16))

    return jax.lax.cond(jnp.any(state.keypad), resume, lambda s: s, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + (jnp.astype(state.V[instruction.x], jnp.int32) * FONT_GLYPH_SIZE)
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = writable((jnp.arange(3) + state.I) & ADDRESS_MASK)
    new_memory = state.memory.at[indices].set(digits, mode="drop")
    return state.replace(memory=new_memory)


def _advance_index(state: EmulatorState, instruction: DecodedInstruction):
    if state.quirks.memory_increments_index:
        return jnp.astype((jnp.astype(state.I, jnp.int32) + instruction.x + 1) & 0xFFFF, jnp.uint16)
    return state.I


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    indices = jnp.where(register_mask, writable(base_indices), MEMORY_SIZE)
    new_memory = state.memory.at[indices].set(state.V, mode="drop")
    return state.replace(memory=new_memory, I=_advance_index(state, instruction))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    new_V = jnp.where(register_mask, state.memory[base_indices], state.V)
    return state.replace(V=new_V, I=_advance_index(state, instruction))
