"""Test fixtures for automancy tests."""

from .abilities import (
    BEAR_HUG, BURNING_HANDS, DEADLY_LEAP, FIRE_BREATH, FLAME_SWORD, FLYBY_STRIKE,
    LIGHTNING_BOLT, MELEE_ATTACK, MIND_JOLT, POISON_BITE, SHIELD_BLOCK, STONE_SKIN,
)

__all__ = [
    "BEAR_HUG",
    "BURNING_HANDS",
    "DEADLY_LEAP",
    "FIRE_BREATH",
    "FLAME_SWORD",
    "FLYBY_STRIKE",
    "LIGHTNING_BOLT",
    "MELEE_ATTACK",
    "MIND_JOLT",
    "POISON_BITE",
    "SHIELD_BLOCK",
    "STONE_SKIN",
]
