"""Base class for progression paths.

A path binds attribute modifiers to the exact character levels at which they
unlock. Tiers differ only in which levels they may bind.
"""

from typing import ClassVar, Iterator, Mapping

from charbuilder.attributes.modifier import AttributeModifier
from charbuilder.attributes.types import MainAttributes, SecondaryAttributes
from charbuilder.choices.types import ChoiceConfig, ChoiceSource


class Path:
    """Abstract progression path.

    Subclasses set ``LEVELS`` (the levels the tier may bind), ``SOURCE``
    (the choice source used in selection keys), and ``TIER``.

    Attributes:
        key: Stable identifier used by content files and persistence.
        name: Display name.
        description: Player-facing text.
    """

    LEVELS: ClassVar[tuple[int, ...]] = ()
    SOURCE: ClassVar[ChoiceSource]
    TIER: ClassVar[str] = ""

    def __init__(
        self,
        key: str,
        modifiers: Mapping[int, AttributeModifier],
        name: str | None = None,
        description: str = "",
    ) -> None:
        """Bind modifiers to levels.

        Args:
            key: Path identifier, e.g. "warrior".
            modifiers: Modifier per level. Levels must belong to the tier.
            name: Display name. Defaults to the title-cased key.
            description: Player-facing text.

        Raises:
            TypeError: If instantiated directly instead of through a tier.
            ValueError: If a level is not one of the tier's levels.
        """
        if type(self) is Path:
            raise TypeError("Path is abstract; use Novice, Expert, or Master")

        invalid = sorted(set(modifiers) - set(self.LEVELS))
        if invalid:
            raise ValueError(
                f"{self.TIER.title()} path '{key}' cannot bind level(s) {invalid}; "
                f"allowed levels are {list(self.LEVELS)}"
            )

        self.key = key
        self.name = name or key.replace("_", " ").title()
        self.description = description
        self._modifiers: dict[int, AttributeModifier] = {
            level: modifiers[level] for level in sorted(modifiers)
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"

    @property
    def levels(self) -> list[int]:
        """Levels that carry a modifier, ascending."""
        return list(self._modifiers)

    def get_modifier(self, level: int) -> AttributeModifier | None:
        """Get the modifier bound to exactly this level.

        Raises:
            ValueError: If level is negative.
        """
        if level < 0:
            raise ValueError(f"Level cannot be negative: {level}")
        return self._modifiers.get(level)

    def active_modifiers(self, level: int) -> Iterator[tuple[int, AttributeModifier]]:
        """Yield (level, modifier) for every bound level up to ``level``."""
        for bound_level, modifier in self._modifiers.items():
            if bound_level <= level:
                yield bound_level, modifier

    def apply_modifiers(
        self,
        level: int,
        main: MainAttributes,
        secondary: SecondaryAttributes,
    ) -> list[tuple[int, dict]]:
        """Apply every active modifier in ascending level order.

        Args:
            level: Character level.
            main: Working main attributes, updated in place.
            secondary: Working secondary attributes, updated in place.

        Returns:
            (level, changes) for each applied modifier.
        """
        applied = []
        for bound_level, modifier in self.active_modifiers(level):
            applied.append((bound_level, modifier.apply(main, secondary)))
        return applied

    def get_choices(self, level: int) -> list[tuple[int, ChoiceConfig]]:
        """Choice configurations unlocked up to ``level``.

        A modifier carrying several configurations surfaces each one as a
        separate entry with the same level.
        """
        return [
            (bound_level, config)
            for bound_level, modifier in self.active_modifiers(level)
            for config in modifier.get_choice_config()
        ]

    def skill_names(self) -> set[str]:
        """Names of every skill granted by any level of this path."""
        return {skill.name for modifier in self._modifiers.values() for skill in modifier.skills}
