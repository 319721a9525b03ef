import numpy as np
import pytest

from sandsim.grid import Grid
from sandsim.materials import Particle, ParticleType

W, H = 6, 4
OUTSIDE = [(-1, 0), (0, -1), (W, 0), (0, H), (W, H), (-5, -5), (W + 10, 2)]


def test_out_of_bounds_is_total():
    grid = Grid(W, H)
    grid.spawn(0, 0, ParticleType.SAND)
    before = grid.snapshot().copy()
    sand = grid.get(0, 0)

    for x, y in OUTSIDE:
        assert not grid.in_bounds(x, y)
        assert grid.get(x, y) is None
        assert grid.is_empty(x, y) is False
        assert grid.is_type(x, y, ParticleType.SAND) is False
        grid.set(x, y, Particle(ParticleType.STONE))
        grid.spawn(x, y, ParticleType.WATER)
        grid.swap(0, 0, x, y)
        grid.swap(x, y, 0, 0)

    assert np.array_equal(grid.snapshot(), before)
    assert grid.get(0, 0) is sand


def test_in_bounds_agrees_with_get_and_set():
    grid = Grid(W, H)
    for y in range(-2, H + 2):
        for x in range(-2, W + 2):
            grid.set(x, y, Particle(ParticleType.STONE))
            assert (grid.get(x, y) is not None) == grid.in_bounds(x, y)


def test_spawn_sand_is_fresh():
    grid = Grid(W, H)
    grid.spawn(2, 1, ParticleType.SAND)
    p = grid.get(2, 1)
    assert p.type == ParticleType.SAND
    assert p.updated is False
    assert p.lifetime is None


def test_spawn_lifetime_ranges():
    grid = Grid(W, H, rng=np.random.default_rng(7))
    for _ in range(200):
        grid.spawn(0, 0, ParticleType.FIRE)
        assert 20 <= grid.get(0, 0).lifetime < 50
        grid.spawn(0, 0, ParticleType.SMOKE)
        assert 40 <= grid.get(0, 0).lifetime < 80


def test_spawn_lifetime_edges(scripted):
    grid = Grid(W, H, rng=scripted([0.0, 0.999999, 0.0, 0.999999]))
    grid.spawn(0, 0, ParticleType.FIRE)
    grid.spawn(1, 0, ParticleType.FIRE)
    grid.spawn(2, 0, ParticleType.SMOKE)
    grid.spawn(3, 0, ParticleType.SMOKE)
    assert [grid.get(x, 0).lifetime for x in range(4)] == [20, 49, 40, 79]


def test_spawn_overwrites_and_empty_erases():
    grid = Grid(W, H)
    grid.spawn(1, 1, ParticleType.STONE)
    grid.spawn(1, 1, ParticleType.WATER)
    assert grid.is_type(1, 1, ParticleType.WATER)
    grid.spawn(1, 1, ParticleType.EMPTY)
    assert grid.get(1, 1) is None
    assert grid.is_empty(1, 1)


def test_swap_exchanges_cells():
    grid = Grid(W, H)
    grid.spawn(0, 0, ParticleType.SAND)
    sand = grid.get(0, 0)
    grid.swap(0, 0, 3, 2)
    assert grid.get(0, 0) is None
    assert grid.get(3, 2) is sand


def test_is_type():
    grid = Grid(W, H)
    grid.spawn(4, 3, ParticleType.WOOD)
    assert grid.is_type(4, 3, ParticleType.WOOD)
    assert not grid.is_type(4, 3, ParticleType.STONE)
    assert not grid.is_type(0, 0, ParticleType.EMPTY)


def test_reset_updated():
    grid = Grid(W, H)
    for x in range(W):
        grid.spawn(x, 0, ParticleType.SAND)
        grid.get(x, 0).updated = True
    grid.reset_updated()
    assert all(not p.updated for _, _, p in grid.particles())


def test_clear_empties_everything():
    grid = Grid(W, H)
    for x in range(W):
        for y in range(H):
            grid.spawn(x, y, ParticleType.STONE)
    grid.clear()
    for x in range(W):
        for y in range(H):
            assert grid.get(x, y) is None
            assert grid.is_empty(x, y)


def test_snapshot_and_counts():
    grid = Grid(W, H)
    grid.spawn(0, 3, ParticleType.SAND)
    grid.spawn(1, 3, ParticleType.SAND)
    grid.spawn(5, 0, ParticleType.PLANT)

    snap = grid.snapshot()
    assert snap.shape == (H, W)
    assert snap.dtype == np.uint8
    assert snap[3, 0] == ParticleType.SAND
    assert snap[0, 5] == ParticleType.PLANT
    assert snap.sum() == 2 * ParticleType.SAND + ParticleType.PLANT
    with pytest.raises(ValueError):
        snap[0, 0] = 1

    counts = grid.count_by_type()
    assert ParticleType.EMPTY not in counts
    assert counts[ParticleType.SAND] == 2
    assert counts[ParticleType.PLANT] == 1
    assert counts[ParticleType.WATER] == 0


def test_rejects_degenerate_size():
    with pytest.raises(ValueError):
        Grid(0, 5)
    with pytest.raises(ValueError):
        Grid(5, -1)
