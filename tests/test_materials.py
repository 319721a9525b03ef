import logging

import pytest

from sandsim.materials import (
    ANSI_COLORS, GLYPHS, MAT_NAME, PALETTE, Particle, ParticleType,
    create_particle, format_counts, parse_type,
)


def test_create_particle_without_lifetime(scripted):
    rng = scripted()
    for ptype in (ParticleType.SAND, ParticleType.WATER, ParticleType.STONE,
                  ParticleType.WOOD, ParticleType.PLANT):
        p = create_particle(ptype, rng)
        assert p == Particle(ptype)
    assert rng.calls == 0


def test_create_particle_rolls_lifetime_once(scripted):
    rng = scripted([0.25])
    p = create_particle(ParticleType.FIRE, rng)
    assert p.lifetime == 20 + 7
    assert rng.calls == 1


def test_parse_type():
    assert parse_type("sand") is ParticleType.SAND
    assert parse_type(" Water ") is ParticleType.WATER
    assert parse_type("eraser") is ParticleType.EMPTY
    with pytest.raises(ValueError):
        parse_type("lava")


def test_unknown_type_is_logged(caplog):
    with caplog.at_level(logging.CRITICAL):
        with pytest.raises(ValueError):
            parse_type("lava")
    assert "lava" in caplog.text
    assert caplog.records[-1].levelno == logging.CRITICAL


def test_tables_cover_every_type():
    for ptype in ParticleType:
        assert ptype in MAT_NAME
        assert ptype in GLYPHS
        assert ptype in ANSI_COLORS
    assert PALETTE.shape == (len(ParticleType), 3)
    assert MAT_NAME[ParticleType.EMPTY] == "Eraser"


def test_format_counts():
    text = format_counts({ParticleType.SAND: 3, ParticleType.FIRE: 0})
    assert text == "Sand=3, Fire=0"
