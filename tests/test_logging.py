"""Tests for console log filtering and formatting."""

import jax.numpy as jnp
from octet.logging import ConsoleLogger, MachineLogger


def quiet_logger(cls=ConsoleLogger, **kwargs):
    return cls(use_colors=False, show_timestamps=False, **kwargs)


def test_level_filtering(capsys):
    logger = quiet_logger(log_level="info")
    logger.debug("hidden")
    logger.info("shown")
    logger.error("also shown")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "[    INFO][Octet] shown" in out
    assert "[   ERROR][Octet] also shown" in out


def test_warning_level_keeps_errors_only(capsys):
    logger = quiet_logger(log_level="WARNING")
    logger.info("routine")
    logger.error("broken")

    out = capsys.readouterr().out
    assert "routine" not in out
    assert "broken" in out


def test_register_dump(capsys):
    logger = quiet_logger(MachineLogger, log_level="DEBUG")
    V = jnp.zeros(16, dtype=jnp.uint8).at[0xA].set(0x3C)
    logger.log_registers(V, jnp.uint16(0x123), jnp.uint16(0x20E))

    out = capsys.readouterr().out
    assert "[Machine] PC: 0x20E I: 0x123" in out
    assert "VA:3C" in out
