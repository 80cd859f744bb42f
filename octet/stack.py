"""CHIP-8 stack operations."""

import jax.numpy as jnp
from octet.constants import ADDRESS_MASK, STACK_SIZE
from octet.state import StackState


def is_full(stack: StackState) -> jnp.ndarray:
    """True when another push would overflow."""
    return stack.pointer >= STACK_SIZE


def is_empty(stack: StackState) -> jnp.ndarray:
    """True when a pop would underflow."""
    return stack.pointer == 0


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack.

    Callers check :func:`is_full` first; a push on a full stack is dropped.
    """
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = stack.data.at[stack.pointer].set(masked_address, mode="drop")
    new_pointer = jnp.minimum(stack.pointer + 1, STACK_SIZE)
    return stack.replace(data=new_data, pointer=jnp.astype(new_pointer, jnp.uint8))


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack.

    Callers check :func:`is_empty` first; popping an empty stack yields 0.
    """
    empty = is_empty(stack)
    new_pointer = jnp.where(empty, 0, stack.pointer - 1).astype(jnp.uint8)
    popped_address = jnp.where(empty, 0, stack.data[new_pointer]).astype(jnp.uint16)
    new_data = stack.data.at[new_pointer].set(jnp.where(empty, stack.data[new_pointer], 0))
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
