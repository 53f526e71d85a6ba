"""Spells, traditions, and the spell registry."""

from charbuilder.magic.types import Spell, SpellTradition, SpellType
from charbuilder.magic.registry import SpellRegistry

__all__ = [
    "Spell",
    "SpellTradition",
    "SpellType",
    "SpellRegistry",
]
