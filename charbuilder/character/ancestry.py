"""Ancestry: base attributes, derivation rules, and the level-4 modifier."""

from charbuilder.attributes.calculation import SecondaryAttributeRules
from charbuilder.attributes.modifier import AttributeModifier
from charbuilder.attributes.types import MainAttributes, SecondaryAttributes
from charbuilder.choices.types import ChoiceConfig

# Level at which the ancestry modifier and its choices unlock
ANCESTRY_MODIFIER_LEVEL = 4


class Ancestry:
    """A character's people.

    The base attributes, rules, modifier, and initial choices are fixed once
    the ancestry is built. Characters hold a reference, never a copy.

    Attributes:
        key: Stable identifier used by content files and persistence.
        name: Display name.
        secondary_attribute_rules: Rules deriving secondary attributes.
        ancestry_modifier: Modifier active from level 4.
        initial_choices: Choices available at character creation (level 0).
    """

    def __init__(
        self,
        key: str,
        main_attributes: MainAttributes,
        secondary_attribute_rules: SecondaryAttributeRules,
        ancestry_modifier: AttributeModifier | None = None,
        initial_choices: list[ChoiceConfig] | None = None,
        name: str | None = None,
        description: str = "",
    ) -> None:
        self.key = key
        self.name = name or key.replace("_", " ").title()
        self.description = description
        self._main_attributes = main_attributes.copy()
        self.secondary_attribute_rules = secondary_attribute_rules
        self.ancestry_modifier = ancestry_modifier or AttributeModifier()
        self.initial_choices: tuple[ChoiceConfig, ...] = tuple(initial_choices or ())

    def __repr__(self) -> str:
        return f"Ancestry(key={self.key!r})"

    @property
    def main_attributes(self) -> MainAttributes:
        """A fresh copy of the base main attributes."""
        return self._main_attributes.copy()

    def compute_secondary(self, main: MainAttributes, level: int) -> SecondaryAttributes:
        """Derive secondary attributes with this ancestry's rules."""
        return self.secondary_attribute_rules.compute(main, level)

    def apply_modifiers(self, level: int, main: MainAttributes, secondary: SecondaryAttributes) -> dict:
        """Apply the ancestry modifier if ``level`` has reached the threshold.

        Returns:
            Dict of applied changes, empty below the threshold.
        """
        if level < ANCESTRY_MODIFIER_LEVEL:
            return {}
        return self.ancestry_modifier.apply(main, secondary)

    def get_choices(self, level: int | None = None) -> list[ChoiceConfig]:
        """Choice configurations offered by the ancestry.

        Args:
            level: 0 for the creation choices, any other value for the
                modifier's choices. When omitted, the creation choices are
                returned if there are any.

        Note:
            Level gating of the modifier's choices is the caller's job.
        """
        if level == 0 or (level is None and self.initial_choices):
            return list(self.initial_choices)
        return self.ancestry_modifier.get_choice_config()
