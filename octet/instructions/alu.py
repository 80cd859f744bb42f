"""CHIP-8 ALU operations (8xxx)."""

import jax.numpy as jnp
from octet.state import EmulatorState
from octet.decode import DecodedInstruction
from octet.constants import FLAG_REGISTER


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, 0


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, 0


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, 0


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, result > 255


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    return (vx - vy) & 0xFF, vx >= vy


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    return (vy - vx) & 0xFF, vy >= vx


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = shifted out bit."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


def _write_result(state: EmulatorState, x, result, flag=None) -> EmulatorState:
    """Store the result in VX, then the flag in VF so VF wins when X == F."""
    new_V = state.V.at[x].set(jnp.astype(result, jnp.uint8))
    if flag is not None:
        new_V = new_V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8))
    return state.replace(V=new_V)


def make_alu_instruction(alu_fn, logic=False, shift=False):
    """Factory for 8XYN handlers.

    ``logic`` ops only write VF when ``quirks.logic_resets_vf`` is set.
    ``shift`` ops read VY as their source when ``quirks.shift_uses_vy`` is set.
    """
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = jnp.astype(state.V[instruction.x], jnp.int32)
        vy = jnp.astype(state.V[instruction.y], jnp.int32)
        if shift and state.quirks.shift_uses_vy:
            vx = vy
        result, flag = alu_fn(vx, vy)
        if logic and not state.quirks.logic_resets_vf:
            flag = None
        return _write_result(state, instruction.x, result, flag)
    alu_instruction.__doc__ = alu_fn.__doc__
    return alu_instruction


def execute_load_register(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XY0 - Set: VX = VY. VF is untouched."""
    return _write_result(state, instruction.x, state.V[instruction.y])


execute_or = make_alu_instruction(alu_or, logic=True)
execute_and = make_alu_instruction(alu_and, logic=True)
execute_xor = make_alu_instruction(alu_xor, logic=True)
execute_add_register = make_alu_instruction(alu_add)
execute_sub = make_alu_instruction(alu_sub_xy)
execute_shift_right = make_alu_instruction(alu_shift_right, shift=True)
execute_subn = make_alu_instruction(alu_sub_yx)
execute_shift_left = make_alu_instruction(alu_shift_left, shift=True)
