"""Choice system.

Choice configurations describe what a player may pick at a given source and
level. Selections are stored on the character under a composite key and
reconciled against the live configuration whenever its source changes.
"""

from charbuilder.choices.types import (
    CHOICE_CONFIG_TYPES,
    AttributeChoiceConfig,
    AvailableChoice,
    ChoiceConfig,
    ChoiceKey,
    ChoiceLocation,
    ChoiceSource,
    ChoiceType,
    LanguageChoiceConfig,
    ProfessionChoiceConfig,
    SkillChoiceConfig,
    SpellChoiceConfig,
    SpellChoiceKind,
    SpellChoiceOption,
    SpellChoiceSlot,
    choice_key,
)
from charbuilder.choices.validation import (
    InvalidChoice,
    ValidationOutcome,
    check_selection,
    reconcile_selection,
)
from charbuilder.choices.manager import (
    ChoiceBehavior,
    ChoiceManager,
    ChoiceSelectionError,
    Selectable,
    WeightedConfig,
)

__all__ = [
    # Types
    "CHOICE_CONFIG_TYPES",
    "AttributeChoiceConfig",
    "AvailableChoice",
    "ChoiceConfig",
    "ChoiceKey",
    "ChoiceLocation",
    "ChoiceSource",
    "ChoiceType",
    "LanguageChoiceConfig",
    "ProfessionChoiceConfig",
    "SkillChoiceConfig",
    "SpellChoiceConfig",
    "SpellChoiceKind",
    "SpellChoiceOption",
    "SpellChoiceSlot",
    "choice_key",
    # Validation
    "InvalidChoice",
    "ValidationOutcome",
    "check_selection",
    "reconcile_selection",
    # Generic manager
    "ChoiceBehavior",
    "ChoiceManager",
    "ChoiceSelectionError",
    "Selectable",
    "WeightedConfig",
]
