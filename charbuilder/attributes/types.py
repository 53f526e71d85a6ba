"""Attribute type definitions.

Main attributes are the four rolled scores every ancestry supplies. Secondary
attributes are derived from them by the ancestry's calculation rules and then
adjusted by modifiers and choices. The resolved sheet combines both.
"""

from dataclasses import dataclass, field, fields
from typing import Any


MAIN_ATTRIBUTES: tuple[str, ...] = ("strength", "agility", "intellect", "will")

NUMERIC_SECONDARY_ATTRIBUTES: tuple[str, ...] = (
    "perception",
    "defense",
    "health",
    "healing_rate",
    "size",
    "speed",
    "power",
    "damage",
    "insanity",
    "corruption",
)

LIST_SECONDARY_ATTRIBUTES: tuple[str, ...] = ("languages", "professions", "skills")

NUMERIC_ATTRIBUTES: tuple[str, ...] = MAIN_ATTRIBUTES + NUMERIC_SECONDARY_ATTRIBUTES


@dataclass(frozen=True)
class Skill:
    """A talent or ability granted by an ancestry, path, or choice.

    Attributes:
        name: Display name, also used as the identity for de-duplication.
        description: Rules text.
    """

    name: str
    description: str = ""


@dataclass
class MainAttributes:
    """Working copy of the four main attributes."""

    strength: int = 10
    agility: int = 10
    intellect: int = 10
    will: int = 10

    def copy(self) -> "MainAttributes":
        """Return an independent copy for mutation during resolution."""
        return MainAttributes(
            strength=self.strength,
            agility=self.agility,
            intellect=self.intellect,
            will=self.will,
        )

    def get(self, name: str) -> int:
        return getattr(self, name)

    def add(self, name: str, amount: int) -> None:
        """Add to a main attribute.

        Raises:
            KeyError: If name is not a main attribute.
        """
        if name not in MAIN_ATTRIBUTES:
            raise KeyError(f"Unknown main attribute: {name}")
        setattr(self, name, getattr(self, name) + amount)

    def to_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in MAIN_ATTRIBUTES}


@dataclass
class SecondaryAttributes:
    """Derived attributes plus the list-valued capabilities."""

    perception: int = 0
    defense: int = 0
    health: int = 0
    healing_rate: int = 0
    size: int = 0
    speed: int = 0
    power: int = 0
    damage: int = 0
    insanity: int = 0
    corruption: int = 0
    languages: list[str] = field(default_factory=list)
    professions: list[str] = field(default_factory=list)
    skills: list[Skill] = field(default_factory=list)

    def get(self, name: str) -> Any:
        return getattr(self, name)

    def add(self, name: str, amount: int) -> None:
        """Add to a numeric secondary attribute.

        Raises:
            KeyError: If name is not a numeric secondary attribute.
        """
        if name not in NUMERIC_SECONDARY_ATTRIBUTES:
            raise KeyError(f"Unknown secondary attribute: {name}")
        setattr(self, name, getattr(self, name) + amount)


@dataclass(frozen=True)
class Attributes:
    """Resolved attribute snapshot returned by ``Character.resolve_attributes``.

    The snapshot is rebuilt on every resolution and never shared with the
    character, so callers may keep it around without it going stale under them.
    """

    strength: int
    agility: int
    intellect: int
    will: int
    perception: int
    defense: int
    health: int
    healing_rate: int
    size: int
    speed: int
    power: int
    damage: int
    insanity: int
    corruption: int
    languages: tuple[str, ...] = ()
    professions: tuple[str, ...] = ()
    skills: tuple[Skill, ...] = ()

    @classmethod
    def from_parts(cls, main: MainAttributes, secondary: SecondaryAttributes) -> "Attributes":
        """Merge main and secondary attributes into one snapshot."""
        values: dict[str, Any] = main.to_dict()
        for name in NUMERIC_SECONDARY_ATTRIBUTES:
            values[name] = getattr(secondary, name)
        values["languages"] = tuple(secondary.languages)
        values["professions"] = tuple(secondary.professions)
        values["skills"] = tuple(secondary.skills)
        return cls(**values)

    @property
    def skill_names(self) -> list[str]:
        return [skill.name for skill in self.skills]

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view, suitable for JSON output."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "skills":
                data[f.name] = [
                    {"name": skill.name, "description": skill.description} for skill in value
                ]
            elif isinstance(value, tuple):
                data[f.name] = list(value)
            else:
                data[f.name] = value
        return data
