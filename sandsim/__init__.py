"""Falling-sand cellular automaton: grid, particle model and update engine."""
from sandsim.grid import Grid
from sandsim.materials import Particle, ParticleType, create_particle
from sandsim.phys import Physics

__all__ = ["Grid", "Particle", "ParticleType", "Physics", "create_particle"]
