"""CHIP-8 64x32 monochrome display.

The display is a boolean array of shape ``(SCREEN_WIDTH, SCREEN_HEIGHT)``
indexed ``[x, y]``. All functions here are pure: they return a new array
together with the collision information the caller needs.
"""

import jax.numpy as jnp
import numpy as np

from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def clear(display: jnp.ndarray) -> jnp.ndarray:
    """Return a blank display of the same shape."""
    return jnp.zeros_like(display)


def toggle(display: jnp.ndarray, mask: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """XOR ``mask`` onto the display.

    Returns the new display and whether any pixel went from set to unset.
    """
    erased = jnp.any(display & mask)
    return display ^ mask, erased


def set_pixel(display: jnp.ndarray, x: int, y: int) -> tuple[jnp.ndarray, jnp.ndarray]:
    """XOR-toggle one pixel; report whether it became unset."""
    return toggle(display, (xx == x) & (yy == y))


def sprite_mask(rows: jnp.ndarray, x: int, y: int, height: int, wrap: bool = False) -> jnp.ndarray:
    """Pixels covered by the set bits of an 8-wide sprite placed at (x, y).

    ``rows`` holds at least ``height`` sprite bytes, bit 7 being the leftmost
    column. The origin is always taken modulo the screen size. With ``wrap``
    disabled, pixels running past the right or bottom edge are clipped;
    with ``wrap`` enabled they reappear on the opposite edge.
    """
    sprite_x = x % SCREEN_WIDTH
    sprite_y = y % SCREEN_HEIGHT

    col_offset = xx - sprite_x
    row_offset = yy - sprite_y
    if wrap:
        col_offset = col_offset % SCREEN_WIDTH
        row_offset = row_offset % SCREEN_HEIGHT

    in_sprite = (col_offset >= 0) & (col_offset < SPRITE_WIDTH) & (row_offset >= 0) & (row_offset < height)

    sprite_bytes = rows[jnp.clip(row_offset, 0, len(rows) - 1)]
    bits = (sprite_bytes >> (7 - jnp.clip(col_offset, 0, SPRITE_WIDTH - 1))) & 1
    return (bits == 1) & in_sprite


def draw_sprite(
    display: jnp.ndarray, rows: jnp.ndarray, x: int, y: int, height: int, wrap: bool = False
) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Composite a sprite onto the display with XOR; return (display, collision)."""
    return toggle(display, sprite_mask(rows, x, y, height, wrap))


def snapshot(display: jnp.ndarray) -> np.ndarray:
    """Read-only host copy of the display for the presentation layer."""
    frame = np.array(display, dtype=np.bool_)
    frame.setflags(write=False)
    return frame


def render_text(display: jnp.ndarray, on: str = "#", off: str = ".") -> str:
    """Render the display as text, one line per row."""
    frame = snapshot(display)
    return "\n".join(
        "".join(on if frame[x, y] else off for x in range(SCREEN_WIDTH))
        for y in range(SCREEN_HEIGHT)
    )
