"""Machine configuration and CHIP-8 dialect quirks."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union
import os

from omegaconf import OmegaConf


@dataclass(frozen=True)
class Quirks:
    """Behaviour switches for instructions that differ between CHIP-8 dialects.

    Attributes:
        shift_uses_vy: 8XY6/8XYE shift VY into VX instead of shifting VX in place
        logic_resets_vf: 8XY1/8XY2/8XY3 reset VF to 0
        memory_increments_index: FX55/FX65 leave I pointing past the last register
        jump_uses_vx: BNNN jumps to NNN + VX (X taken from the high nibble)
        clip_sprites: DXYN clips sprites at the screen edge instead of wrapping
    """
    shift_uses_vy: bool = False
    logic_resets_vf: bool = True
    memory_increments_index: bool = True
    jump_uses_vx: bool = False
    clip_sprites: bool = False


@dataclass
class MachineConfig:
    """Top-level configuration for a :class:`octet.machine.Machine`."""
    seed: int = 0
    log_level: str = "INFO"
    quirks: Quirks = field(default_factory=Quirks)


def load_config(source: Optional[Union[str, os.PathLike, Mapping[str, Any]]] = None) -> MachineConfig:
    """Build a MachineConfig from a YAML file, a mapping, or the defaults.

    Unknown keys and values of the wrong type are rejected by OmegaConf.
    """
    schema = OmegaConf.structured(MachineConfig)
    # Frozen dataclasses come back read-only; overrides still have to merge in.
    OmegaConf.set_readonly(schema.quirks, False)
    if source is None:
        overrides = OmegaConf.create()
    elif isinstance(source, Mapping):
        overrides = OmegaConf.create(dict(source))
    else:
        overrides = OmegaConf.load(source)

    cfg = OmegaConf.merge(schema, overrides)
    config = OmegaConf.to_object(cfg)
    config.log_level = config.log_level.upper()
    return config
