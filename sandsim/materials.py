# materials.py
# Particle types, per-particle state and the lookup tables the renderers share.
#
# Notes:
# - ParticleType.EMPTY is never stored in the grid. It only tells Grid.spawn
#   to erase a cell; an empty cell holds None.
# - Only FIRE and SMOKE carry a lifetime.

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


class ParticleType(IntEnum):
    EMPTY = 0
    SAND = 1
    WATER = 2
    STONE = 3
    FIRE = 4
    SMOKE = 5
    WOOD = 6
    PLANT = 7


# [low, high) lifetime rolled when the particle is created
LIFETIME_RANGES = {
    ParticleType.FIRE: (20, 50),
    ParticleType.SMOKE: (40, 80),
}


@dataclass
class Particle:
    type: ParticleType
    updated: bool = False
    lifetime: Optional[int] = None


def create_particle(ptype: ParticleType, rng) -> Particle:
    """Fresh particle of `ptype`; rolls a lifetime for Fire and Smoke."""
    p = Particle(ParticleType(ptype))
    span = LIFETIME_RANGES.get(p.type)
    if span is not None:
        low, high = span
        p.lifetime = low + int(rng.random() * (high - low))
    return p


def parse_type(name: str) -> ParticleType:
    """Look up a type by name ("sand", "Water", "eraser")."""
    key = name.strip().upper()
    if key == "ERASER":
        return ParticleType.EMPTY
    try:
        return ParticleType[key]
    except KeyError:
        msg = f"Unknown particle type: {name!r}"
        logger.critical(msg)
        raise ValueError(msg) from None


# ---------- Presentation tables ----------
MAT_NAME = {
    ParticleType.EMPTY: "Eraser",
    ParticleType.SAND: "Sand",
    ParticleType.WATER: "Water",
    ParticleType.STONE: "Stone",
    ParticleType.FIRE: "Fire",
    ParticleType.SMOKE: "Smoke",
    ParticleType.WOOD: "Wood",
    ParticleType.PLANT: "Plant",
}

GLYPHS = {
    ParticleType.EMPTY: " ",
    ParticleType.SAND: "░",
    ParticleType.WATER: "▒",
    ParticleType.STONE: "█",
    ParticleType.FIRE: "▓",
    ParticleType.SMOKE: "░",
    ParticleType.WOOD: "▓",
    ParticleType.PLANT: "♣",
}

ANSI_COLORS = {
    ParticleType.EMPTY: "\x1b[0m",
    ParticleType.SAND: "\x1b[93m",   # bright yellow
    ParticleType.WATER: "\x1b[94m",  # bright blue
    ParticleType.STONE: "\x1b[90m",  # dark gray
    ParticleType.FIRE: "\x1b[91m",   # bright red
    ParticleType.SMOKE: "\x1b[37m",
    ParticleType.WOOD: "\x1b[33m",
    ParticleType.PLANT: "\x1b[92m",  # bright green
}

# Row i is the colour of ParticleType(i); row 0 doubles as the background
PALETTE = np.array([
    [0.00, 0.00, 0.00],  # EMPTY
    [0.90, 0.80, 0.50],  # SAND
    [0.30, 0.55, 0.95],  # WATER
    [0.35, 0.35, 0.38],  # STONE
    [1.00, 0.30, 0.00],  # FIRE
    [0.60, 0.60, 0.60],  # SMOKE
    [0.45, 0.28, 0.12],  # WOOD
    [0.20, 0.80, 0.25],  # PLANT
], dtype=np.float32)


def format_counts(counts) -> str:
    """Counts as "Sand=12, Water=3, ..." for log lines."""
    return ", ".join(f"{MAT_NAME[t]}={n}" for t, n in counts.items())
