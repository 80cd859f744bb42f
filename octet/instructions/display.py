"""CHIP-8 display operations."""

import jax.numpy as jnp
from octet.state import EmulatorState
from octet.decode import DecodedInstruction
from octet.constants import (
    ADDRESS_MASK, FLAG_REGISTER, MAX_SPRITE_HEIGHT, SCREEN_HEIGHT, SCREEN_WIDTH, SPRITE_WIDTH,
)

# Sprite-local coordinate grids, one entry per possible sprite pixel
rows, cols = jnp.meshgrid(jnp.arange(MAX_SPRITE_HEIGHT), jnp.arange(SPRITE_WIDTH), indexing='ij')


def sprite_mask(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Screen-sized boolean mask of the pixels DXYN toggles."""
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    addresses = (jnp.astype(state.I, jnp.int32) + jnp.arange(MAX_SPRITE_HEIGHT)) & ADDRESS_MASK
    sprite_bytes = jnp.astype(state.memory[addresses], jnp.int32)
    bits = ((sprite_bytes[rows] >> (7 - cols)) & 1).astype(jnp.bool_) & (rows < instruction.n)

    screen_x = sprite_x + cols
    screen_y = sprite_y + rows
    if state.quirks.clip_sprites:
        bits = bits & (screen_x < SCREEN_WIDTH) & (screen_y < SCREEN_HEIGHT)

    # Positions are unique: a sprite is never wider or taller than the screen.
    return jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_).at[
        screen_x % SCREEN_WIDTH, screen_y % SCREEN_HEIGHT
    ].set(bits)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    sprite = sprite_mask(state, instruction)
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display ^ sprite,
        draw_flag=jnp.ones((), dtype=jnp.bool_),
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
