"""Console logging utilities for the octet interpreter.

A small level-filtered console logger plus a machine-specific subclass that
knows how to report program loads, key waits and stack faults.
"""

import time
import sys
from typing import Any, Dict

import jax.numpy as jnp


LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_RANK = {level: i for i, level in enumerate(LEVELS)}

_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "ERROR": "\033[31m",
}
_RESET = "\033[0m"


class ConsoleLogger:
    """Prints ``[elapsed][LEVEL][name] message`` lines for messages at or above ``log_level``."""

    def __init__(
        self,
        name: str = "Octet",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = use_colors and getattr(sys.stdout, "isatty", lambda: False)()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def _should_log(self, level: str) -> bool:
        # Unknown levels rank as INFO.
        return _RANK.get(level.upper(), 1) >= _RANK.get(self.log_level, 1)

    def _format_message(self, level: str, message: str) -> str:
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        if self.use_colors and level in _COLORS:
            level_str = f"{_COLORS[level]}{level_str}{_RESET}"
        return f"{timestamp}{level_str}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            print(self._format_message(level, message), flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def error(self, message: str):
        self.log("ERROR", message)



class MachineLogger(ConsoleLogger):
    """Logger for a running machine, tracking how many cycles it has executed."""

    def __init__(self, name: str = "Machine", **kwargs):
        super().__init__(name, **kwargs)
        self.cycles = 0

    def log_machine_start(self, config: Dict[str, Any]):
        """Log machine configuration."""
        self.debug("Machine configuration:")
        for key, value in config.items():
            self.debug(f"  {key}: {value}")

    def log_program_loaded(self, size: int, source: str = "<bytes>"):
        """Log a program image landing in memory."""
        self.info(f"Loaded {size} bytes from {source} at 0x200")

    def log_key_wait(self, pc, register):
        """Log the machine blocking on FX0A."""
        self.debug(f"Waiting for key into V{int(register):X} at 0x{int(pc):03X}")

    def log_fault(self, error: Exception):
        """Log a fault that halted the machine."""
        self.error(f"{error} after {self.cycles} cycles")

    def log_registers(self, V: jnp.ndarray, I, pc):
        """Dump register file at debug level."""
        regs = " ".join(f"V{i:X}:{int(v):02X}" for i, v in enumerate(V))
        self.debug(f"PC: 0x{int(pc):03X} I: 0x{int(I):03X} {regs}")
