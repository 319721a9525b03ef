# brush.py
# Circular brush used by the window, the input layer and the demo script.

from typing import Optional

import numpy as np
from numba import njit

from sandsim.grid import Grid
from sandsim.materials import ParticleType

BRUSH_MIN, BRUSH_MAX = 1, 10
STROKE_DENSITY = 0.7


@njit(cache=True, fastmath=True)
def circle_offsets(half: int) -> np.ndarray:
    """(dx, dy) rows covered by a brush of radius `half`."""
    r2 = half * half + half
    side = 2 * half + 1
    out = np.empty((side * side, 2), dtype=np.int64)
    n = 0
    for dy in range(-half, half + 1):
        for dx in range(-half, half + 1):
            if dx * dx + dy * dy <= r2:
                out[n, 0] = dx
                out[n, 1] = dy
                n += 1
    return out[:n]


def paint(grid: Grid, cx: int, cy: int, ptype: ParticleType, size: int,
          rng, density: Optional[float] = None) -> int:
    """
    Stamp `ptype` around (cx, cy). Each covered cell is spawned with
    probability `density` (0.7 for materials so strokes look grainy, 1.0 for
    the eraser). Returns how many cells were written.
    """
    if density is None:
        density = 1.0 if ptype == ParticleType.EMPTY else STROKE_DENSITY
    size = min(BRUSH_MAX, max(BRUSH_MIN, int(size)))
    written = 0
    for dx, dy in circle_offsets(size // 2):
        x, y = cx + int(dx), cy + int(dy)
        if not grid.in_bounds(x, y):
            continue
        if rng.random() < density:
            grid.spawn(x, y, ptype)
            written += 1
    return written
