"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from octet import create_state, load_program, Quirks


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def vy_shift_state():
    """Provide a fresh state whose shifts read VY."""
    return create_state(quirks=Quirks(shift_uses_vy=True))


@pytest.fixture
def fixed_index_state():
    """Provide a fresh state where FX55/FX65 leave I alone."""
    return create_state(quirks=Quirks(memory_increments_index=False))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*instructions):
    """Assemble 16-bit instruction words into a big-endian ROM image."""
    return b"".join(word.to_bytes(2, "big") for word in instructions)


def state_with_program(*instructions, quirks=Quirks()):
    """Fresh state with the given instructions loaded at 0x200."""
    return load_program(create_state(quirks=quirks), program(*instructions))
