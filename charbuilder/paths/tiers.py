"""Concrete path tiers."""

from typing import ClassVar

from charbuilder.choices.types import ChoiceSource
from charbuilder.paths.base import Path


class Novice(Path):
    """First path, chosen at level 1."""

    LEVELS: ClassVar[tuple[int, ...]] = (1, 2, 5, 8)
    SOURCE: ClassVar[ChoiceSource] = ChoiceSource.NOVICE_PATH
    TIER: ClassVar[str] = "novice"


class Expert(Path):
    """Second path, chosen at level 3."""

    LEVELS: ClassVar[tuple[int, ...]] = (3, 6, 9)
    SOURCE: ClassVar[ChoiceSource] = ChoiceSource.EXPERT_PATH
    TIER: ClassVar[str] = "expert"


class Master(Path):
    """Third path, chosen at level 7."""

    LEVELS: ClassVar[tuple[int, ...]] = (7, 10)
    SOURCE: ClassVar[ChoiceSource] = ChoiceSource.MASTER_PATH
    TIER: ClassVar[str] = "master"


PATH_TIERS: dict[str, type[Path]] = {
    Novice.TIER: Novice,
    Expert.TIER: Expert,
    Master.TIER: Master,
}
