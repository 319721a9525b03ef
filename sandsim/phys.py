# phys.py
# The update engine: one in-place pass over the grid per tick.
#
# Notes:
# - Y increases DOWN (top row is y=0). "Above" means y-1.
# - Rows are walked bottom-to-top so a particle that falls into a lower row is
#   never revisited in the same tick. Column order flips at random per tick.
# - Every random decision is a single rng.random() call; pass any object with
#   that method (numpy Generator, random.Random, a scripted stub).

import logging
from typing import Any, Dict, Optional

import numpy as np

from sandsim.grid import Grid
from sandsim.materials import ParticleType, create_particle

logger = logging.getLogger(__name__)

EMPTY, SAND, WATER, STONE, FIRE, SMOKE, WOOD, PLANT = (
    ParticleType.EMPTY, ParticleType.SAND, ParticleType.WATER, ParticleType.STONE,
    ParticleType.FIRE, ParticleType.SMOKE, ParticleType.WOOD, ParticleType.PLANT,
)

DEFAULT_PARAMS: Dict[str, Any] = {
    "wood_ignite_chance": 0.05,
    "evaporate_chance": 0.3,
    "fire_rise_chance": 0.3,
    "plant_grow_chance": 0.02,
    "plant_branch_chance": 0.3,
    "water_flow_distance": 2,
}

# Fire scan order: orthogonal first, then diagonals
NEIGHBORS_8 = (
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (1, -1), (-1, 1), (1, 1),
)
NEIGHBORS_4 = ((-1, 0), (1, 0), (0, -1), (0, 1))


def _number(key: str, value: Any, kind):
    """Coerce a config value; anything that is not a number is a ValueError."""
    try:
        return kind(value)
    except (TypeError, ValueError):
        msg = f"Configuration error: {key}={value!r} is not a number."
        logger.critical(msg)
        raise ValueError(msg) from None


class Physics:
    """
    Advances a Grid by one tick per update() call.

    params overrides any of DEFAULT_PARAMS; unknown keys are ignored with a
    warning.
    """

    def __init__(self, rng=None, params: Optional[Dict[str, Any]] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        merged = dict(DEFAULT_PARAMS)
        for key, value in (params or {}).items():
            if key not in DEFAULT_PARAMS:
                logger.warning("Ignoring unknown physics parameter %r", key)
                continue
            merged[key] = value

        for key in ("wood_ignite_chance", "evaporate_chance", "fire_rise_chance",
                    "plant_grow_chance", "plant_branch_chance"):
            value = _number(key, merged[key], float)
            if not 0.0 <= value <= 1.0:
                msg = f"Configuration error: {key}={value} is not a probability."
                logger.critical(msg)
                raise ValueError(msg)
            merged[key] = value
        merged["water_flow_distance"] = _number(
            "water_flow_distance", merged["water_flow_distance"], int)
        if merged["water_flow_distance"] < 1:
            msg = "Configuration error: water_flow_distance must be at least 1."
            logger.critical(msg)
            raise ValueError(msg)

        self.wood_ignite_chance = merged["wood_ignite_chance"]
        self.evaporate_chance = merged["evaporate_chance"]
        self.fire_rise_chance = merged["fire_rise_chance"]
        self.plant_grow_chance = merged["plant_grow_chance"]
        self.plant_branch_chance = merged["plant_branch_chance"]
        self.water_flow_distance = merged["water_flow_distance"]
        self.ticks = 0

    def _bias(self) -> int:
        return 1 if self.rng.random() < 0.5 else -1

    # ---------- Core simulation ----------
    def update(self, grid: Grid) -> None:
        grid.reset_updated()

        if self.rng.random() < 0.5:
            columns = range(grid.width)
        else:
            columns = range(grid.width - 1, -1, -1)

        for y in range(grid.height - 1, -1, -1):
            for x in columns:
                p = grid.get(x, y)
                if p is None or p.updated:
                    continue
                # mark first: whatever this step writes into is done for the tick
                p.updated = True

                m = p.type
                if m == SAND:
                    self._update_sand(grid, x, y)
                elif m == WATER:
                    self._update_water(grid, x, y)
                elif m == FIRE:
                    self._update_fire(grid, x, y, p)
                elif m == SMOKE:
                    self._update_smoke(grid, x, y, p)
                elif m == PLANT:
                    self._update_plant(grid, x, y)
                # STONE and WOOD have no rule

        self.ticks += 1

    # ---------- Rules ----------
    def _update_sand(self, grid: Grid, x: int, y: int) -> None:
        # Sand falls into empty cells and sinks through water
        def fallable(tx, ty):
            return grid.is_empty(tx, ty) or grid.is_type(tx, ty, WATER)

        if fallable(x, y + 1):
            grid.swap(x, y, x, y + 1)
            return
        d = self._bias()
        if fallable(x + d, y + 1):
            grid.swap(x, y, x + d, y + 1)
        elif fallable(x - d, y + 1):
            grid.swap(x, y, x - d, y + 1)

    def _update_water(self, grid: Grid, x: int, y: int) -> None:
        # down
        if grid.is_empty(x, y + 1):
            grid.swap(x, y, x, y + 1)
            return
        # diagonals down (random order to reduce bias)
        d = self._bias()
        if grid.is_empty(x + d, y + 1):
            grid.swap(x, y, x + d, y + 1)
            return
        if grid.is_empty(x - d, y + 1):
            grid.swap(x, y, x - d, y + 1)
            return
        # sideways, bias direction first
        for side in (d, -d):
            for dist in range(1, self.water_flow_distance + 1):
                nx = x + side * dist
                if grid.is_empty(nx, y):
                    grid.swap(x, y, nx, y)
                    return

    def _update_fire(self, grid: Grid, x: int, y: int, p) -> None:
        if p.lifetime is not None:
            p.lifetime -= 1
            if p.lifetime <= 0:
                if self.rng.random() < 0.5:
                    grid.set(x, y, create_particle(SMOKE, self.rng))
                else:
                    grid.set(x, y, None)
                return

        for dx, dy in NEIGHBORS_8:
            nx, ny = x + dx, y + dy
            if grid.is_type(nx, ny, WOOD):
                if self.rng.random() < self.wood_ignite_chance:
                    grid.set(nx, ny, create_particle(FIRE, self.rng))
            elif grid.is_type(nx, ny, WATER):
                if self.rng.random() < self.evaporate_chance:
                    # water boils off and puts this fire out
                    grid.set(nx, ny, create_particle(SMOKE, self.rng))
                    grid.set(x, y, None)
                    return

        if self.rng.random() < self.fire_rise_chance and grid.is_empty(x, y - 1):
            grid.swap(x, y, x, y - 1)

    def _update_smoke(self, grid: Grid, x: int, y: int, p) -> None:
        if p.lifetime is not None:
            p.lifetime -= 1
            if p.lifetime <= 0:
                grid.set(x, y, None)
                return

        d = self._bias()
        for nx, ny in ((x, y - 1), (x + d, y - 1), (x - d, y - 1), (x + d, y)):
            if grid.is_empty(nx, ny):
                grid.swap(x, y, nx, ny)
                return

    def _update_plant(self, grid: Grid, x: int, y: int) -> None:
        wet = any(grid.is_type(x + dx, y + dy, WATER) for dx, dy in NEIGHBORS_4)
        if not wet or self.rng.random() >= self.plant_grow_chance:
            return

        # Growth only adds plants; the source cell stays as it is
        if grid.is_empty(x, y - 1):
            grid.set(x, y - 1, create_particle(PLANT, self.rng))
        d = self._bias()
        if self.rng.random() < self.plant_branch_chance and grid.is_empty(x + d, y - 1):
            grid.set(x + d, y - 1, create_particle(PLANT, self.rng))
