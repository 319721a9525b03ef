import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np

from sandsim.grid import Grid
from sandsim.materials import PALETTE, ParticleType
from sandsim.window import render_surface


def test_render_surface_uses_palette():
    grid = Grid(4, 3)
    grid.spawn(1, 2, ParticleType.SAND)
    grid.spawn(3, 0, ParticleType.WATER)

    surf = render_surface(grid)

    assert surf.get_size() == (4, 3)
    sand = (PALETTE[ParticleType.SAND] * 255.0).astype(np.uint8)
    water = (PALETTE[ParticleType.WATER] * 255.0).astype(np.uint8)
    assert tuple(surf.get_at((1, 2)))[:3] == tuple(int(c) for c in sand)
    assert tuple(surf.get_at((3, 0)))[:3] == tuple(int(c) for c in water)
    assert tuple(surf.get_at((0, 0)))[:3] == (0, 0, 0)
