"""Read-only framebuffer snapshots handed to the host."""

import jax.numpy as jnp
import numpy as np
from chex import dataclass

from octet.state import EmulatorState


@dataclass(frozen=True)
class FrameView:
    """Framebuffer snapshot returned by every step.

    Attributes:
        pixels: Boolean array of shape (64, 32), indexed ``[x, y]``
        changed: Whether any pixel-touching instruction ran since the last frame
    """
    pixels: jnp.ndarray
    changed: jnp.ndarray

    def to_numpy(self) -> np.ndarray:
        """Pixels as a (height, width) uint8 array of 0/1, row-major for renderers."""
        return np.asarray(self.pixels, dtype=np.uint8).T


def take_frame(state: EmulatorState) -> tuple[EmulatorState, FrameView]:
    """Snapshot the display and lower the draw flag."""
    frame = FrameView(pixels=state.display, changed=state.draw_flag)
    return state.replace(draw_flag=jnp.zeros((), dtype=jnp.bool_)), frame
