# grid.py
# Fixed-size store of optional particles.
#
# Notes:
# - Cells live in a numpy object array indexed [y, x]; y increases DOWN.
# - Every accessor is total: out-of-bounds reads give None/False and
#   out-of-bounds writes do nothing, so rules can probe past the edges.

import logging
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

from sandsim.materials import Particle, ParticleType, create_particle

logger = logging.getLogger(__name__)


class Grid:
    def __init__(self, width: int, height: int, rng=None):
        if width < 1 or height < 1:
            msg = f"Grid dimensions must be positive, got {width}x{height}"
            logger.critical(msg)
            raise ValueError(msg)
        self.width = width
        self.height = height
        # lifetime rolls for spawned Fire/Smoke
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cells = np.full((height, width), None, dtype=object)
        logger.debug("Grid created (%dx%d)", width, height)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[Particle]:
        if not self.in_bounds(x, y):
            return None
        return self.cells[y, x]

    def set(self, x: int, y: int, particle: Optional[Particle]) -> None:
        if not self.in_bounds(x, y):
            return
        self.cells[y, x] = particle

    def is_empty(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return self.cells[y, x] is None

    def is_type(self, x: int, y: int, ptype: ParticleType) -> bool:
        p = self.get(x, y)
        return p is not None and p.type == ptype

    def spawn(self, x: int, y: int, ptype: ParticleType) -> None:
        """Overwrite a cell with a fresh particle; EMPTY erases it."""
        if not self.in_bounds(x, y):
            return
        if ptype == ParticleType.EMPTY:
            self.cells[y, x] = None
        else:
            self.cells[y, x] = create_particle(ptype, self.rng)

    def swap(self, x1: int, y1: int, x2: int, y2: int) -> None:
        if not self.in_bounds(x1, y1) or not self.in_bounds(x2, y2):
            return
        c = self.cells
        c[y1, x1], c[y2, x2] = c[y2, x2], c[y1, x1]

    def reset_updated(self) -> None:
        for p in self.cells.flat:
            if p is not None:
                p.updated = False

    def clear(self) -> None:
        self.cells.fill(None)

    # ---------- Read-only views ----------
    def particles(self) -> Iterator[Tuple[int, int, Particle]]:
        """Yield (x, y, particle) for every occupied cell, row by row."""
        for (y, x), p in np.ndenumerate(self.cells):
            if p is not None:
                yield x, y, p

    def snapshot(self) -> np.ndarray:
        """uint8 [H, W] array of type values, 0 where the cell is empty."""
        out = np.zeros((self.height, self.width), dtype=np.uint8)
        for x, y, p in self.particles():
            out[y, x] = p.type
        out.setflags(write=False)
        return out

    def count_by_type(self) -> Dict[ParticleType, int]:
        counts = np.bincount(self.snapshot().ravel(), minlength=len(ParticleType))
        return {t: int(counts[t]) for t in ParticleType if t != ParticleType.EMPTY}
