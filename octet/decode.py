"""CHIP-8 instruction decoding."""

from enum import IntEnum

import jax.numpy as jnp
from chex import dataclass


class Op(IntEnum):
    """Every instruction the interpreter understands, plus UNKNOWN."""
    SYS = 0          # 0NNN
    CLS = 1          # 00E0
    RET = 2          # 00EE
    JP = 3           # 1NNN
    CALL = 4         # 2NNN
    SE_BYTE = 5      # 3XNN
    SNE_BYTE = 6     # 4XNN
    SE_REG = 7       # 5XY0
    LD_BYTE = 8      # 6XNN
    ADD_BYTE = 9     # 7XNN
    LD_REG = 10      # 8XY0
    OR = 11          # 8XY1
    AND = 12         # 8XY2
    XOR = 13         # 8XY3
    ADD_REG = 14     # 8XY4
    SUB = 15         # 8XY5
    SHR = 16         # 8XY6
    SUBN = 17        # 8XY7
    SHL = 18         # 8XYE
    SNE_REG = 19     # 9XY0
    LD_I = 20        # ANNN
    JP_V0 = 21       # BNNN
    RND = 22         # CXNN
    DRW = 23         # DXYN
    SKP = 24         # EX9E
    SKNP = 25        # EXA1
    LD_VX_DT = 26    # FX07
    LD_VX_K = 27     # FX0A
    LD_DT_VX = 28    # FX15
    LD_ST_VX = 29    # FX18
    ADD_I_VX = 30    # FX1E
    LD_F_VX = 31     # FX29
    LD_B_VX = 32     # FX33
    LD_MEM_VX = 33   # FX55
    LD_VX_MEM = 34   # FX65
    UNKNOWN = 35


# (op, mask, pattern), first match wins.
OPCODE_TABLE = (
    (Op.CLS, 0xFFFF, 0x00E0),
    (Op.RET, 0xFFFF, 0x00EE),
    (Op.SYS, 0xF000, 0x0000),
    (Op.JP, 0xF000, 0x1000),
    (Op.CALL, 0xF000, 0x2000),
    (Op.SE_BYTE, 0xF000, 0x3000),
    (Op.SNE_BYTE, 0xF000, 0x4000),
    (Op.SE_REG, 0xF00F, 0x5000),
    (Op.LD_BYTE, 0xF000, 0x6000),
    (Op.ADD_BYTE, 0xF000, 0x7000),
    (Op.LD_REG, 0xF00F, 0x8000),
    (Op.OR, 0xF00F, 0x8001),
    (Op.AND, 0xF00F, 0x8002),
    (Op.XOR, 0xF00F, 0x8003),
    (Op.ADD_REG, 0xF00F, 0x8004),
    (Op.SUB, 0xF00F, 0x8005),
    (Op.SHR, 0xF00F, 0x8006),
    (Op.SUBN, 0xF00F, 0x8007),
    (Op.SHL, 0xF00F, 0x800E),
    (Op.SNE_REG, 0xF00F, 0x9000),
    (Op.LD_I, 0xF000, 0xA000),
    (Op.JP_V0, 0xF000, 0xB000),
    (Op.RND, 0xF000, 0xC000),
    (Op.DRW, 0xF000, 0xD000),
    (Op.SKP, 0xF0FF, 0xE09E),
    (Op.SKNP, 0xF0FF, 0xE0A1),
    (Op.LD_VX_DT, 0xF0FF, 0xF007),
    (Op.LD_VX_K, 0xF0FF, 0xF00A),
    (Op.LD_DT_VX, 0xF0FF, 0xF015),
    (Op.LD_ST_VX, 0xF0FF, 0xF018),
    (Op.ADD_I_VX, 0xF0FF, 0xF01E),
    (Op.LD_F_VX, 0xF0FF, 0xF029),
    (Op.LD_B_VX, 0xF0FF, 0xF033),
    (Op.LD_MEM_VX, 0xF0FF, 0xF055),
    (Op.LD_VX_MEM, 0xF0FF, 0xF065),
)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: int      # Op tag used for dispatch
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def nibbles(instruction) -> tuple:
    """Split a 16-bit instruction into its four nibbles, high first."""
    return (
        (instruction & 0xF000) >> 12,
        (instruction & 0x0F00) >> 8,
        (instruction & 0x00F0) >> 4,
        instruction & 0x000F,
    )


def classify(instruction) -> jnp.ndarray:
    """Map a 16-bit instruction to its Op tag."""
    raw = jnp.asarray(instruction).astype(jnp.int32)
    return jnp.select(
        [(raw & mask) == pattern for _, mask, pattern in OPCODE_TABLE],
        [jnp.asarray(int(op), dtype=jnp.int32) for op, _, _ in OPCODE_TABLE],
        default=jnp.asarray(int(Op.UNKNOWN), dtype=jnp.int32),
    )


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    raw = jnp.asarray(instruction).astype(jnp.int32)
    opcode, x, y, n = nibbles(raw)
    return DecodedInstruction(
        raw=raw,
        op=classify(raw),
        opcode=opcode,
        x=x,
        y=y,
        n=n,
        nn=raw & 0x00FF,
        nnn=raw & 0x0FFF
    )
