# app.py
"""
Command-line entry point.

1. Loads configuration (``--config`` or ./config.json when present).
2. Initializes the logging system.
3. Builds the grid and the physics engine.
4. Runs either the pygame window (interactive) or the terminal demo.
"""
import argparse
import logging
import os
import shutil
import sys
import time
from typing import Any, Dict, List, Optional

import numpy as np

from sandsim.config import load_config, merge_config, setup_logging
from sandsim.grid import Grid
from sandsim.materials import ParticleType, format_counts, parse_type
from sandsim.phys import Physics
from sandsim.render import TextRenderer
from sandsim.scenario import DemoScript

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sandsim", description="Falling-sand cellular automaton.")
    parser.add_argument("--config", help="path to a JSON config file")
    parser.add_argument("--text", action="store_true",
                        help="play the scripted demo in the terminal instead of opening a window")
    parser.add_argument("--demo", action="store_true", help="run the scripted demo in the window")
    parser.add_argument("--max-steps", type=int, help="stop after this many ticks (0 = never)")
    parser.add_argument("--seed", type=int, help="seed for the random source")
    parser.add_argument("--width", type=int, help="grid width in cells")
    parser.add_argument("--height", type=int, help="grid height in cells")
    return parser


def resolve_config(args: argparse.Namespace) -> Dict[str, Any]:
    if args.config:
        config = load_config(args.config)
    elif os.path.exists(DEFAULT_CONFIG_PATH):
        config = load_config(DEFAULT_CONFIG_PATH)
    else:
        config = merge_config(None)

    # command line wins over the file
    if args.width is not None:
        config["grid"]["width"] = args.width
    if args.height is not None:
        config["grid"]["height"] = args.height
    if args.max_steps is not None:
        config["run_control"]["max_steps"] = args.max_steps
    if args.seed is not None:
        config["run_control"]["seed"] = args.seed
    return config


def fit_to_terminal(width: int, height: int) -> tuple:
    """Shrink the grid so a frame plus the status bar fits the terminal."""
    cols, rows = shutil.get_terminal_size((80, 24))
    return max(1, min(width, cols)), max(1, min(height, rows - 3))


def run_text(grid: Grid, physics: Physics, config: Dict[str, Any], demo: DemoScript,
             max_steps: int = 0, material: ParticleType = ParticleType.SAND,
             renderer: Optional[TextRenderer] = None) -> int:
    """Terminal loop: demo actions, one tick, one frame, paced to the target fps."""
    run = config.get("run_control", {})
    fps = int(run.get("fps", 30))
    log_throttle = max(1, int(run.get("log_throttle_steps", 100)))
    brush_size = int(config.get("visualization", {}).get("brush_size", 3))
    frame_time = 1.0 / fps if fps > 0 else 0.0
    renderer = renderer if renderer is not None else TextRenderer(rng=physics.rng)

    steps = 0
    shown_fps = 0.0
    frames = 0
    fps_timer = time.monotonic()
    renderer.init()
    try:
        while not max_steps or steps < max_steps:
            start = time.monotonic()
            demo.advance(grid)
            physics.update(grid)
            steps += 1
            if steps % log_throttle == 0:
                logger.info(f"Simulation step {steps}")
                logger.debug(f"Step {steps} | Counts: {format_counts(grid.count_by_type())}")

            renderer.render(grid, material, brush_size, shown_fps)

            frames += 1
            now = time.monotonic()
            if now - fps_timer >= 1.0:
                shown_fps = frames / (now - fps_timer)
                frames = 0
                fps_timer = now
            remaining = frame_time - (now - start)
            if remaining > 0:
                time.sleep(remaining)
        if max_steps:
            logger.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
    finally:
        renderer.cleanup()
    return steps


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        print(f"FATAL: Could not load configuration. Error: {e}", file=sys.stderr)
        return 1

    # keep the terminal for frames in text mode
    setup_logging(config, console_level="WARNING" if args.text else None)
    logging.info("--- Falling Sand Simulation Starting ---")

    grid_cfg = config["grid"]
    run_cfg = config["run_control"]
    width, height = int(grid_cfg["width"]), int(grid_cfg["height"])
    if args.text:
        width, height = fit_to_terminal(width, height)

    rng = np.random.default_rng(run_cfg.get("seed"))
    try:
        grid = Grid(width, height, rng=rng)
        physics = Physics(rng=rng, params=config.get("physics"))
        material = parse_type(str(config["visualization"].get("material", "sand")))
    except ValueError as e:
        print(f"FATAL: {e}", file=sys.stderr)
        return 1
    max_steps = int(run_cfg.get("max_steps") or 0)

    if args.text:
        steps = run_text(grid, physics, config, DemoScript(width, height, rng),
                         max_steps, material)
    else:
        from sandsim.window import run_window
        demo = DemoScript(width, height, rng) if args.demo else None
        steps = run_window(grid, physics, config, demo=demo,
                           max_steps=max_steps, material=material)

    logging.info(f"Simulation finished after {steps} ticks.")
    logging.info("--- Falling Sand Simulation Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
