"""Characters and ancestries.

Usage:
    >>> from charbuilder.character import Character
    >>> hero = Character("Edward", human, level=1, novice_path=warrior)
    >>> hero.resolve_attributes().languages
    ('Common', 'Elvish')
"""

from charbuilder.character.ancestry import ANCESTRY_MODIFIER_LEVEL, Ancestry
from charbuilder.character.suggestions import LanguageSuggestion, suggest_languages
from charbuilder.character.character import (
    PATH_SLOTS,
    PATH_SOURCES,
    Character,
    ChoiceValidationConfig,
)

__all__ = [
    # Ancestry
    "ANCESTRY_MODIFIER_LEVEL",
    "Ancestry",
    # Character
    "PATH_SLOTS",
    "PATH_SOURCES",
    "Character",
    "ChoiceValidationConfig",
    # Suggestions
    "LanguageSuggestion",
    "suggest_languages",
]
