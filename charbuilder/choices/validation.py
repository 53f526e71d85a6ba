"""Reconciliation of stored selections against live choice configurations.

When a character's ancestry or a path changes, selections made earlier may no
longer fit what is offered. Reconciliation filters a stored selection down to
what the live configuration still accepts and truncates it to the live
``count``. If nothing survives, the selection should be removed.
"""

from dataclasses import dataclass
from enum import Enum

from charbuilder.attributes.types import MAIN_ATTRIBUTES
from charbuilder.choices.types import (
    AttributeChoiceConfig,
    ChoiceConfig,
    LanguageChoiceConfig,
    ProfessionChoiceConfig,
    SkillChoiceConfig,
    SpellChoiceConfig,
)


class ValidationOutcome(str, Enum):
    """What validation does with a stored selection."""

    KEPT = "kept"
    TRIMMED = "trimmed"
    REMOVED = "removed"


@dataclass(frozen=True)
class InvalidChoice:
    """A stored selection that validation would change.

    Attributes:
        key: Storage key of the selection.
        stored: The selection as currently stored.
        outcome: TRIMMED or REMOVED.
        reason: Human-readable explanation.
        replacement: Selection that would be stored after trimming.
    """

    key: str
    stored: ChoiceConfig
    outcome: ValidationOutcome
    reason: str
    replacement: ChoiceConfig | None = None


def _filter_attributes(stored: AttributeChoiceConfig, live: AttributeChoiceConfig) -> list:
    allowed = live.available_attributes or MAIN_ATTRIBUTES
    return [attr for attr in stored.selected_attributes or [] if attr in allowed]


def _filter_skills(stored: SkillChoiceConfig, live: SkillChoiceConfig) -> list:
    valid_names = {skill.name for skill in live.available_skills}
    return [skill for skill in stored.selected_skills or [] if skill.name in valid_names]


def _filter_professions(stored: ProfessionChoiceConfig, live: ProfessionChoiceConfig) -> list:
    selected = stored.selected_professions or []
    if live.available_professions:
        return [prof for prof in selected if prof in live.available_professions]
    return list(selected)


def _filter_languages(stored: LanguageChoiceConfig, live: LanguageChoiceConfig) -> list:
    selected = stored.selected_languages or []
    if live.available_languages:
        return [lang for lang in selected if lang in live.available_languages]
    return list(selected)


def _filter_spells(stored: SpellChoiceConfig, live: SpellChoiceConfig) -> list:
    kept = []
    for position, option in enumerate(stored.selected_choices or []):
        if position < len(live.choices) and live.choices[position].accepts(option):
            kept.append(option)
    return kept


_FILTERS = {
    AttributeChoiceConfig: _filter_attributes,
    SkillChoiceConfig: _filter_skills,
    ProfessionChoiceConfig: _filter_professions,
    LanguageChoiceConfig: _filter_languages,
    SpellChoiceConfig: _filter_spells,
}


def reconcile_selection(stored: ChoiceConfig, live: ChoiceConfig) -> ChoiceConfig | None:
    """Fit a stored selection to the live configuration.

    Args:
        stored: Selection saved on the character.
        live: Configuration currently offered at the same key.

    Returns:
        The selection to keep (possibly trimmed), or None if it should be
        removed because the types differ or no selected entry survives.
    """
    if stored.type != live.type:
        return None

    valid = _FILTERS[type(live)](stored, live)[: live.count]
    if not valid:
        return None
    if valid == list(stored.selected or []):
        return stored
    return stored.with_selected(valid)


def check_selection(key: str, stored: ChoiceConfig, live: ChoiceConfig | None) -> InvalidChoice | None:
    """Dry-run reconciliation for one stored selection.

    Returns:
        InvalidChoice describing the change, or None if the selection is valid.
    """
    if live is None:
        return InvalidChoice(
            key=key,
            stored=stored,
            outcome=ValidationOutcome.REMOVED,
            reason="choice is no longer offered",
        )

    reconciled = reconcile_selection(stored, live)
    if reconciled is None:
        return InvalidChoice(
            key=key,
            stored=stored,
            outcome=ValidationOutcome.REMOVED,
            reason="no selected option is valid for the current configuration",
        )
    if reconciled is not stored:
        return InvalidChoice(
            key=key,
            stored=stored,
            outcome=ValidationOutcome.TRIMMED,
            reason=f"selection exceeds count {live.count} or contains unavailable options",
            replacement=reconciled,
        )
    return None
