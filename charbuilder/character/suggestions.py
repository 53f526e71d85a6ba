"""Language suggestions for open language choices."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from charbuilder.character.character import Character


@dataclass(frozen=True)
class LanguageSuggestion:
    """A language worth picking, and whether the character could write it."""

    language: str
    reason: str
    can_write: bool = False


# Ordered from most to least generally useful
BASE_SUGGESTIONS: tuple[LanguageSuggestion, ...] = (
    LanguageSuggestion("Common", "Basic communication language", can_write=True),
    LanguageSuggestion("High Archaic", "Language of ancient texts and scholarly works"),
    LanguageSuggestion("Celestial", "Sacred language used in religious texts and ceremonies"),
    LanguageSuggestion("Elvish", "Language of the elven people and their traditions"),
    LanguageSuggestion("Dwarfish", "Language of dwarven culture and craftsmanship"),
    LanguageSuggestion("Dark Speech", "Forbidden language of dark magic and ancient curses"),
)

SCHOLARLY_LANGUAGES = frozenset({"High Archaic", "Celestial"})
MAGIC_TRAINING_SKILLS = frozenset({"Sense Magic", "Cantrip", "Academic Knowledge"})
RELIGIOUS_TRAINING_SKILLS = frozenset({"Shared Recovery", "Prayer"})


def suggest_languages(character: "Character") -> list[LanguageSuggestion]:
    """Suggest languages, skipping ones the character already picked.

    A novice path with magical or religious training lets the character
    write High Archaic and Celestial.
    """
    training = None
    novice = character.novice_path
    if novice is not None:
        skills = novice.skill_names()
        if skills & MAGIC_TRAINING_SKILLS:
            training = "magical"
        elif skills & RELIGIOUS_TRAINING_SKILLS:
            training = "religious"

    chosen = set(character.chosen_languages())
    suggestions = []
    for suggestion in BASE_SUGGESTIONS:
        if suggestion.language in chosen:
            continue
        if training and suggestion.language in SCHOLARLY_LANGUAGES:
            suggestion = LanguageSuggestion(
                suggestion.language,
                f"{suggestion.reason} (You can write this language due to your {training} training)",
                can_write=True,
            )
        suggestions.append(suggestion)
    return suggestions
