# controls.py
# Keyboard -> intent. Key names follow pygame.key.name() ("up", "space", "1").

import logging
from dataclasses import dataclass, replace

from sandsim.brush import BRUSH_MAX, BRUSH_MIN
from sandsim.materials import MAT_NAME, ParticleType

logger = logging.getLogger(__name__)

CURSOR_STEP = 2

MATERIAL_KEYS = {
    "1": ParticleType.SAND,
    "2": ParticleType.WATER,
    "3": ParticleType.STONE,
    "4": ParticleType.FIRE,
    "5": ParticleType.SMOKE,
    "6": ParticleType.WOOD,
    "7": ParticleType.PLANT,
    "8": ParticleType.EMPTY,  # eraser
}

MOVES = {
    "up": (0, -1), "w": (0, -1),
    "down": (0, 1), "s": (0, 1),
    "left": (-1, 0), "a": (-1, 0),
    "right": (1, 0), "d": (1, 0),
}


@dataclass
class InputState:
    selected_type: ParticleType = ParticleType.SAND
    brush_size: int = 3
    spawning: bool = False
    spawn_x: int = 0
    spawn_y: int = 0
    should_quit: bool = False
    should_clear: bool = False


class InputHandler:
    def __init__(self, width: int, height: int, brush_size: int = 3,
                 selected_type: ParticleType = ParticleType.SAND):
        self.width = width
        self.height = height
        self.cursor_x = width // 2
        self.cursor_y = height // 2
        self.state = InputState(
            selected_type=selected_type,
            brush_size=min(BRUSH_MAX, max(BRUSH_MIN, brush_size)))

    def handle_key(self, name: str) -> None:
        if not name:
            return
        key = name.lower()

        if key in ("q", "escape"):
            self.state.should_quit = True
            return
        if key == "c":
            self.state.should_clear = True
            return
        if key in MATERIAL_KEYS:
            self.state.selected_type = MATERIAL_KEYS[key]
            logger.debug("Selected %s", MAT_NAME[self.state.selected_type])
            return
        if key in ("+", "=", "[+]"):
            self.state.brush_size = min(BRUSH_MAX, self.state.brush_size + 1)
            return
        if key in ("-", "_", "[-]"):
            self.state.brush_size = max(BRUSH_MIN, self.state.brush_size - 1)
            return
        if key in MOVES:
            dx, dy = MOVES[key]
            self.cursor_x = min(self.width - 1, max(0, self.cursor_x + dx * CURSOR_STEP))
            self.cursor_y = min(self.height - 1, max(0, self.cursor_y + dy * CURSOR_STEP))
            return
        if key == "space":
            self.state.spawning = True
            self.state.spawn_x = self.cursor_x
            self.state.spawn_y = self.cursor_y

    def get_state(self) -> InputState:
        """Snapshot of the intent; one-shot flags are consumed."""
        snap = replace(self.state)
        self.state.spawning = False
        self.state.should_clear = False
        return snap

    def cursor(self):
        return self.cursor_x, self.cursor_y
