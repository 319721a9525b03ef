# scenario.py
# Scripted demo: a timeline of spawn actions replayed against a grid.
#
# Frame numbers are ticks of the driver loop. The timeline ends with a clear
# and rewinds, so the demo loops forever.

import logging
from dataclasses import dataclass
from typing import Callable, List

import numpy as np

from sandsim.grid import Grid
from sandsim.materials import ParticleType

logger = logging.getLogger(__name__)

RESTART_FRAME = 1200
STARTER_SAND = 50


def initial_scene(grid: Grid, rng=None) -> None:
    """Starting layout for the interactive window: a stone tub, loose sand above it, a wood strip inside."""
    rng = rng if rng is not None else np.random.default_rng()
    mid_x, mid_y = grid.width // 2, grid.height // 2

    for x in range(mid_x - 15, mid_x + 16):
        grid.spawn(x, mid_y + 10, ParticleType.STONE)
    for y in range(mid_y, mid_y + 11):
        grid.spawn(mid_x - 15, y, ParticleType.STONE)
        grid.spawn(mid_x + 15, y, ParticleType.STONE)

    for _ in range(STARTER_SAND):
        x = mid_x - 10 + int(rng.random() * 20)
        y = mid_y - 5 + int(rng.random() * 5)
        grid.spawn(x, y, ParticleType.SAND)

    for x in range(mid_x - 5, mid_x + 6):
        grid.spawn(x, mid_y + 9, ParticleType.WOOD)
    logger.info("Initial scene placed.")


@dataclass
class ScheduledAction:
    frame: int
    action: Callable[[Grid], None]
    description: str = ""


class DemoScript:
    def __init__(self, width: int, height: int, rng=None):
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else np.random.default_rng()
        self.frame = 0
        self.index = 0
        self.loops = 0
        self.actions: List[ScheduledAction] = []
        self._restart = False
        self._build()
        # stable sort keeps same-frame actions in insertion order
        self.actions.sort(key=lambda a: a.frame)

    def add(self, frame: int, action: Callable[[Grid], None], description: str = "") -> None:
        self.actions.append(ScheduledAction(frame, action, description))

    def _randint(self, low: int, span: int) -> int:
        return low + int(self.rng.random() * span)

    def _rain(self, start: int, count: int, every: int, x0: int, span: int, y: int,
              per_drop: int, ptype: ParticleType, description: str) -> None:
        def drop(grid, x0=x0, span=span, y=y, per_drop=per_drop, ptype=ptype):
            for _ in range(per_drop):
                grid.spawn(self._randint(x0, span), y, ptype)

        for t in range(count):
            self.add(start + t * every, drop, description if t == 0 else "")

    def _build(self) -> None:
        W, H = self.width, self.height
        mid_x = W // 2
        bottom = H - 2

        def floor(grid):
            for x in range(5, W - 5):
                grid.spawn(x, bottom, ParticleType.STONE)
        self.add(1, floor, "Building the stage floor")

        def containers(grid):
            for y in range(bottom - 12, bottom):
                for x in (15, 35, W - 35, W - 15):
                    grid.spawn(x, y, ParticleType.STONE)
        self.add(30, containers, "Raising two stone containers")

        self._rain(60, 80, 2, 20, 10, 3, 3, ParticleType.SAND, "Sand rain, left container")
        self._rain(100, 80, 2, W - 30, 10, 3, 3, ParticleType.WATER, "Water rain, right container")

        def cabin(grid):
            cy = bottom - 1
            for x in range(mid_x - 8, mid_x + 9):
                grid.spawn(x, cy, ParticleType.WOOD)
            for y in range(cy - 6, cy):
                grid.spawn(mid_x - 8, y, ParticleType.WOOD)
                grid.spawn(mid_x + 8, y, ParticleType.WOOD)
            for i in range(9):
                grid.spawn(mid_x - 8 + i, cy - 6 - i, ParticleType.WOOD)
                grid.spawn(mid_x + 8 - i, cy - 6 - i, ParticleType.WOOD)
        self.add(300, cabin, "Building a wood cabin")

        def plants(grid):
            for x in range(W - 33, W - 16, 2):
                grid.spawn(x, bottom - 1, ParticleType.PLANT)
        self.add(350, plants, "Planting beside the water")

        def ignite(grid):
            grid.spawn(mid_x, bottom - 8, ParticleType.FIRE)
            grid.spawn(mid_x - 2, bottom - 7, ParticleType.FIRE)
            grid.spawn(mid_x + 2, bottom - 7, ParticleType.FIRE)
        self.add(500, ignite, "Lighting the cabin")

        def more_fire(grid):
            grid.spawn(mid_x - 6, bottom - 3, ParticleType.FIRE)
            grid.spawn(mid_x + 6, bottom - 3, ParticleType.FIRE)
        self.add(530, more_fire, "Spreading the fire")

        self._rain(650, 60, 2, mid_x - 5, 10, 2, 4, ParticleType.WATER, "Water bombing the fire")
        self._rain(800, 40, 3, 10, max(1, W - 20), 1, 1, ParticleType.SAND, "Sand sprinkle")

        def finale(grid):
            ptype = (ParticleType.SAND, ParticleType.WATER, ParticleType.SAND)[self._randint(0, 3)]
            grid.spawn(self._randint(6, max(1, W - 12)), 1, ptype)
        for t in range(100):
            self.add(950 + t * 2, finale, "Finale" if t == 0 else "")

        def restart(grid):
            grid.clear()
            self._restart = True
        self.add(RESTART_FRAME, restart, "Clearing and starting over")

    def advance(self, grid: Grid) -> None:
        """Run every action due at the current frame, then move to the next frame."""
        while self.index < len(self.actions) and self.actions[self.index].frame <= self.frame:
            scheduled = self.actions[self.index]
            self.index += 1
            if scheduled.description:
                logger.info("Demo frame %d: %s", self.frame, scheduled.description)
            scheduled.action(grid)
            if self._restart:
                self._restart = False
                self.index = 0
                self.frame = 0
                self.loops += 1
                break
        self.frame += 1
