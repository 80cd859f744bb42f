"""Main CHIP-8 emulator execution engine."""

from functools import partial
import operator

import jax
import jax.lax
import jax.numpy as jnp
from octet.state import EmulatorState
from octet.decode import Op, decode
from octet.constants import KEYPAD_SIZE, MAX_PROGRAM_SIZE, MEMORY_SIZE, PROGRAM_START
from octet.errors import InvalidKeyError, InvalidSizeError
from octet.frame import FrameView, take_frame
from octet.instructions.system import no_op, execute_system_call, execute_clear_screen, execute_return
from octet.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from octet.instructions.alu import (
    execute_load_register, execute_or, execute_and, execute_xor, execute_add_register,
    execute_sub, execute_shift_right, execute_subn, execute_shift_left
)
from octet.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from octet.instructions.display import execute_display
from octet.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers,
    resume_wait_for_key
)


HANDLERS = {
    Op.SYS: execute_system_call,
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_BYTE: execute_set,
    Op.ADD_BYTE: execute_add,
    Op.LD_REG: execute_load_register,
    Op.OR: execute_or,
    Op.AND: execute_and,
    Op.XOR: execute_xor,
    Op.ADD_REG: execute_add_register,
    Op.SUB: execute_sub,
    Op.SHR: execute_shift_right,
    Op.SUBN: execute_subn,
    Op.SHL: execute_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
    Op.UNKNOWN: no_op,
}

# Dispatch table indexed by Op value.
DISPATCH_TABLE = tuple(HANDLERS[op] for op in Op)


def execute(state: EmulatorState, instruction) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    PC is expected to already point past the instruction, as left by :func:`fetch`.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.op, DISPATCH_TABLE, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory.

    A PC whose two bytes do not both lie in memory fetches ``0x0000``.
    """
    pc = jnp.astype(state.pc, jnp.int32)
    instruction = jnp.where(
        pc + 1 < MEMORY_SIZE,
        _pack_u16(state.memory[pc], state.memory[pc + 1]),
        jnp.zeros((), dtype=jnp.uint16),
    )
    return state.replace(pc=jnp.astype(state.pc + 2, jnp.uint16)), instruction


def _run(state: EmulatorState) -> EmulatorState:
    state, instruction = fetch(state)
    return execute(state, instruction)


def _halted(state: EmulatorState) -> EmulatorState:
    return state


def cycle(state: EmulatorState) -> EmulatorState:
    """Advance the machine by one fetch-decode-execute cycle.

    A machine awaiting a key only checks the keypad; a faulted machine does nothing.
    """
    return jax.lax.switch(
        state.status,
        [_run, resume_wait_for_key, _halted, _halted],
        state
    )


def step(state: EmulatorState) -> tuple[EmulatorState, FrameView]:
    """Run one cycle and hand back the framebuffer, lowering its changed flag."""
    return take_frame(cycle(state))


def _scan_cycle(state, _):
    return cycle(state), None


@partial(jax.jit, static_argnums=1)
def run_cycles(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` cycles in one compiled loop. The draw flag is left for the caller."""
    state, _ = jax.lax.scan(_scan_cycle, state, length=n)
    return state


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, 0).astype(jnp.uint8),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, 0).astype(jnp.uint8),
    )


def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Press or release keypad key ``index`` (0x0-0xF)."""
    if isinstance(index, bool):
        raise InvalidKeyError(index)
    try:
        index = operator.index(index)
    except TypeError:
        raise InvalidKeyError(index) from None
    if not 0 <= index < KEYPAD_SIZE:
        raise InvalidKeyError(index)
    return state.replace(keypad=state.keypad.at[index].set(bool(pressed)))


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Copy a program image into CHIP-8 memory starting at 0x200."""
    if len(data) > MAX_PROGRAM_SIZE:
        raise InvalidSizeError(len(data), MAX_PROGRAM_SIZE)
    if not data:
        return state
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom(filename: str) -> bytes:
    """Return the raw bytes of a ROM file."""
    with open(filename, 'rb') as f:
        return f.read()


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    return load_program(state, read_rom(filename))
