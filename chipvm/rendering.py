"""Turning display snapshots into window pixels."""

from typing import Tuple

import numpy as np

Color = Tuple[int, int, int]

# name -> (lit pixel, dark pixel)
COLOR_SCHEMES = {
    "classic": ((0xFF, 0xFF, 0xFF), (0x00, 0x00, 0x00)),
    "green": ((0x33, 0xFF, 0x66), (0x05, 0x14, 0x08)),
    "amber": ((0xFF, 0xB0, 0x00), (0x1A, 0x0F, 0x00)),
    "paper": ((0x22, 0x22, 0x22), (0xF2, 0xEE, 0xE3)),
}


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """(on_color, off_color) for ``scheme``; ValueError if it is unknown."""
    try:
        return COLOR_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown color scheme {scheme!r}. Available: {', '.join(sorted(COLOR_SCHEMES))}"
        ) from None


def frame_to_pixels(
    frame: np.ndarray,
    scale: int = 1,
    on_color: Color = COLOR_SCHEMES["classic"][0],
    off_color: Color = COLOR_SCHEMES["classic"][1],
) -> np.ndarray:
    """Colour a display snapshot and blow each cell up to ``scale`` pixels.

    ``frame`` is the (64, 32) boolean array from
    :func:`chipvm.display.snapshot`. The result keeps its ``[x, y]`` order,
    which is the layout ``pygame.surfarray`` blits, so its shape is
    ``(64 * scale, 32 * scale, 3)``.
    """
    palette = np.array([off_color, on_color], dtype=np.uint8)
    pixels = palette[np.asarray(frame, dtype=np.intp)]
    if scale > 1:
        pixels = pixels.repeat(scale, axis=0).repeat(scale, axis=1)
    return pixels
