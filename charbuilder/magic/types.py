"""Spell and tradition types."""

from dataclasses import dataclass
from enum import Enum


class SpellType(str, Enum):
    """Broad category of a spell."""

    ATTACK = "attack"
    UTILITY = "utility"


@dataclass(frozen=True)
class SpellTradition:
    """A school of magic a character can discover.

    Attributes:
        id: Stable identifier referenced by spells and spell choices.
        name: Display name.
        description: Flavor text.
        is_dark: Whether discovering it corrupts the caster.
        primary_attribute: Main attribute used for its attack rolls.
    """

    id: str
    name: str
    description: str = ""
    is_dark: bool = False
    primary_attribute: str | None = None


@dataclass(frozen=True)
class Spell:
    """A single spell.

    ``rank`` is compared against the caster's power when offering spells.
    """

    id: str
    name: str
    tradition: str
    rank: int
    type: SpellType = SpellType.UTILITY
    description: str = ""
    range: str = ""
    duration: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", SpellType(self.type))
