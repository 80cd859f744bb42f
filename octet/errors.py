"""Exceptions reported by the CHIP-8 machine."""


class Chip8Error(Exception):
    """Base class for every error raised by octet."""


class InvalidSizeError(Chip8Error, ValueError):
    """Program image does not fit in the program area."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Program of {size} bytes exceeds the {limit} bytes available")


class InvalidKeyError(Chip8Error, ValueError):
    """Keypad index outside 0x0-0xF."""

    def __init__(self, index):
        self.index = index
        super().__init__(f"Key index {index!r} is outside the 16-key keypad")


class StackFaultError(Chip8Error, RuntimeError):
    """Subroutine stack discipline was violated."""

    def __init__(self, message: str, pc: int):
        self.pc = pc
        super().__init__(f"{message} at 0x{pc:03X}")


class StackOverflowError(StackFaultError):
    """CALL issued with every stack slot in use."""

    def __init__(self, pc: int):
        super().__init__("Stack overflow on CALL", pc)


class StackUnderflowError(StackFaultError):
    """RET issued with an empty stack."""

    def __init__(self, pc: int):
        super().__init__("Stack underflow on RET", pc)
