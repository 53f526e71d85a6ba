"""Attribute modifiers granted by ancestries and paths."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from charbuilder.attributes.types import (
    MAIN_ATTRIBUTES,
    NUMERIC_ATTRIBUTES,
    MainAttributes,
    SecondaryAttributes,
    Skill,
)

if TYPE_CHECKING:
    from charbuilder.choices.types import ChoiceConfig


@dataclass(frozen=True)
class AttributeModifier:
    """A sparse bag of additive attribute deltas plus unlocked choices.

    Numeric fields are always added to the current value, never substituted.
    List fields are appended. Fields left as None contribute nothing.

    ``choices`` accepts a single choice configuration or a list of them and is
    stored as a tuple either way.
    """

    # Main attributes
    strength: int | None = None
    agility: int | None = None
    intellect: int | None = None
    will: int | None = None

    # Secondary attributes
    perception: int | None = None
    defense: int | None = None
    health: int | None = None
    healing_rate: int | None = None
    size: int | None = None
    speed: int | None = None
    power: int | None = None
    damage: int | None = None
    insanity: int | None = None
    corruption: int | None = None

    # Capabilities
    languages: tuple[str, ...] = ()
    professions: tuple[str, ...] = ()
    skills: tuple[Skill, ...] = ()

    choices: "tuple[ChoiceConfig, ...]" = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", tuple(self.languages or ()))
        object.__setattr__(self, "professions", tuple(self.professions or ()))
        object.__setattr__(self, "skills", tuple(self.skills or ()))
        object.__setattr__(self, "choices", _normalize_choices(self.choices))

    @property
    def deltas(self) -> dict[str, int]:
        """Numeric deltas that are set, keyed by attribute name."""
        return {
            name: getattr(self, name)
            for name in NUMERIC_ATTRIBUTES
            if getattr(self, name) is not None
        }

    def get_choice_config(self) -> list["ChoiceConfig"]:
        """Return the choice configurations unlocked by this modifier."""
        return list(self.choices)

    @property
    def is_empty(self) -> bool:
        return not (self.deltas or self.languages or self.professions or self.skills or self.choices)

    def apply(self, main: MainAttributes, secondary: SecondaryAttributes) -> dict[str, Any]:
        """Apply the deltas in place.

        Args:
            main: Working main attributes.
            secondary: Working secondary attributes.

        Returns:
            Dict describing what changed, for observers.
        """
        changes: dict[str, Any] = {}
        for name, amount in self.deltas.items():
            if name in MAIN_ATTRIBUTES:
                main.add(name, amount)
            else:
                secondary.add(name, amount)
            changes[name] = amount

        if self.languages:
            secondary.languages.extend(self.languages)
            changes["languages"] = list(self.languages)
        if self.professions:
            secondary.professions.extend(self.professions)
            changes["professions"] = list(self.professions)
        if self.skills:
            secondary.skills.extend(self.skills)
            changes["skills"] = [skill.name for skill in self.skills]
        return changes


def _normalize_choices(choices: Any) -> tuple:
    if not choices:
        return ()
    if isinstance(choices, (list, tuple)):
        return tuple(choices)
    return (choices,)
