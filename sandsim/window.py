# window.py
# Interactive pygame front end.
#
# Controls: 1-8 select material (8 = eraser), +/- brush size, arrows/WASD move
# the keyboard cursor, Space paints at the cursor, LMB paints, RMB erases,
# C clears, Q/Esc quits.

import logging
from typing import Any, Dict, Optional

import numpy as np
import pygame

from sandsim.brush import paint
from sandsim.controls import InputHandler
from sandsim.grid import Grid
from sandsim.materials import MAT_NAME, PALETTE, ParticleType, format_counts
from sandsim.phys import Physics
from sandsim.scenario import DemoScript, initial_scene

logger = logging.getLogger(__name__)

CURSOR_COLOR = (255, 255, 255)


# ---------- Rendering ----------
def render_surface(grid: Grid) -> pygame.Surface:
    """Map grid -> RGB surface (unscaled)."""
    # snapshot is [H,W] of type values; palette index to [H,W,3] floats 0..1
    rgb = (PALETTE[grid.snapshot()] * 255.0).astype(np.uint8)
    return pygame.image.frombuffer(rgb.tobytes(), (grid.width, grid.height), "RGB")


# ---------- App ----------
def run_window(grid: Grid, physics: Physics, config: Dict[str, Any],
               demo: Optional[DemoScript] = None, max_steps: int = 0,
               material: ParticleType = ParticleType.SAND) -> int:
    """Runs until the user quits (or max_steps ticks). Returns ticks run."""
    vis = config.get("visualization", {})
    run = config.get("run_control", {})
    scale = int(vis.get("pixel_scale", 8))
    fps = int(run.get("fps", 30))
    steps_per_frame = int(run.get("steps_per_frame", 1))
    log_throttle = max(1, int(run.get("log_throttle_steps", 100)))

    pygame.init()
    size = (grid.width * scale, grid.height * scale)
    screen = pygame.display.set_mode(size)
    pygame.display.set_caption("Falling Sand")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("consolas", 16)

    if demo is None:
        initial_scene(grid, physics.rng)
    controls = InputHandler(grid.width, grid.height, int(vis.get("brush_size", 3)), material)
    logger.info(f"Window opened ({size[0]}x{size[1]}), grid {grid.width}x{grid.height}.")

    steps = 0
    running = True
    try:
        while running:
            # --- input ---
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    logger.info("Quit event received.")
                    running = False
                elif event.type == pygame.KEYDOWN:
                    name = event.unicode if event.unicode in ("+", "-", "=", "_") else pygame.key.name(event.key)
                    controls.handle_key(name)

            state = controls.get_state()
            if state.should_quit:
                running = False
                continue
            if state.should_clear:
                grid.clear()
                logger.info("Grid cleared by user.")
            if state.spawning:
                paint(grid, state.spawn_x, state.spawn_y, state.selected_type,
                      state.brush_size, physics.rng)

            # Paint with mouse
            mx, my = pygame.mouse.get_pos()
            gx, gy = mx // scale, my // scale
            buttons = pygame.mouse.get_pressed(3)
            if grid.in_bounds(gx, gy):
                if buttons[0]:
                    paint(grid, gx, gy, state.selected_type, state.brush_size, physics.rng)
                elif buttons[2]:
                    paint(grid, gx, gy, ParticleType.EMPTY, state.brush_size, physics.rng)

            # --- simulation ---
            for _ in range(steps_per_frame):
                if demo is not None:
                    demo.advance(grid)
                physics.update(grid)
                steps += 1
                if steps % log_throttle == 0:
                    logger.info(f"Simulation step {steps}")
                    logger.debug(f"Step {steps} | Counts: {format_counts(grid.count_by_type())}")
                if max_steps and steps >= max_steps:
                    logger.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                    running = False
                    break

            # --- draw ---
            surf = render_surface(grid)
            if scale != 1:
                surf = pygame.transform.scale(surf, size)
            screen.blit(surf, (0, 0))

            cx, cy = controls.cursor()
            pygame.draw.rect(screen, CURSOR_COLOR, (cx * scale, cy * scale, scale, scale), 1)

            hud_lines = [
                f"Material: {MAT_NAME[state.selected_type]}  (1:Sand 2:Water 3:Stone 4:Fire 5:Smoke 6:Wood 7:Plant 8:Eraser)",
                f"Brush: {state.brush_size}  (+/-)    Grid: {grid.width}x{grid.height}   FPS: {clock.get_fps():.0f}",
                "LMB paint  RMB erase  Space paint at cursor  C clear  Q quit",
            ]
            y = 6
            for line in hud_lines:
                text = font.render(line, True, (255, 255, 255))
                screen.blit(text, (6, y))
                y += 18

            pygame.display.flip()
            clock.tick(fps)
    finally:
        pygame.quit()
    return steps
