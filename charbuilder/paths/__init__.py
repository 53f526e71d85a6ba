"""Progression paths: Novice (levels 1, 2, 5, 8), Expert (3, 6, 9), Master (7, 10)."""

from charbuilder.paths.base import Path
from charbuilder.paths.tiers import PATH_TIERS, Expert, Master, Novice

__all__ = [
    "Path",
    "Novice",
    "Expert",
    "Master",
    "PATH_TIERS",
]
