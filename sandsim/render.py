# render.py
# ANSI text renderer. Reads the grid, never writes it.

import sys
from typing import Optional, TextIO

import numpy as np

from sandsim.grid import Grid
from sandsim.materials import ANSI_COLORS, GLYPHS, MAT_NAME, ParticleType

RESET = "\x1b[0m"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_SCREEN = "\x1b[2J"
HOME = "\x1b[H"

FIRE_FLICKER = ("\x1b[91m", "\x1b[93m")
WATER_SHIMMER = "\x1b[96m"


class TextRenderer:
    def __init__(self, stream: Optional[TextIO] = None, rng=None):
        self.stream = stream if stream is not None else sys.stdout
        self.rng = rng if rng is not None else np.random.default_rng()
        self.last_frame = ""

    def _color(self, ptype: ParticleType) -> str:
        # a little visual variation for the liquids and flames
        if ptype == ParticleType.FIRE:
            return FIRE_FLICKER[0] if self.rng.random() < 0.5 else FIRE_FLICKER[1]
        if ptype == ParticleType.WATER:
            return WATER_SHIMMER if self.rng.random() < 0.1 else ANSI_COLORS[ptype]
        return ANSI_COLORS[ptype]

    def build_frame(self, grid: Grid, selected: ParticleType, brush_size: int, fps: float) -> str:
        snap = grid.snapshot()
        lines = [HOME]
        for row in snap:
            line = []
            last = ""
            for value in row:
                if value == 0:
                    if last != RESET:
                        line.append(RESET)
                        last = RESET
                    line.append(" ")
                    continue
                ptype = ParticleType(int(value))
                color = self._color(ptype)
                if color != last:
                    line.append(color)
                    last = color
                line.append(GLYPHS[ptype])
            line.append(RESET + "\n")
            lines.append("".join(line))

        lines.append(
            f"\n{ANSI_COLORS[selected]}{GLYPHS[selected]}{RESET} {MAT_NAME[selected]}"
            f" | Brush: {brush_size} | FPS: {fps:.0f}"
            " | [1-8] Select | [+/-] Brush | [Space] Spawn | [C] Clear | [Q] Quit\n"
        )
        return "".join(lines)

    def render(self, grid: Grid, selected: ParticleType = ParticleType.SAND,
               brush_size: int = 3, fps: float = 0.0) -> bool:
        """Write the frame if it changed. Returns True when something was written."""
        frame = self.build_frame(grid, selected, brush_size, fps)
        if frame == self.last_frame:
            return False
        self.stream.write(frame)
        self.stream.flush()
        self.last_frame = frame
        return True

    def init(self) -> None:
        self.stream.write(HIDE_CURSOR + CLEAR_SCREEN + HOME)
        self.stream.flush()

    def cleanup(self) -> None:
        self.stream.write(SHOW_CURSOR + RESET + "\n")
        self.stream.flush()
