"""Character: attribute resolution and the choice lifecycle.

A character owns an ancestry, up to one path per tier, a level, and the
player's stored choice selections. Its attribute sheet is never stored:
``resolve_attributes`` rebuilds it from scratch on every call.

Resolution order:
    1. Copy the ancestry's base main attributes.
    2. Apply the attribute effects of the ancestry's creation (level-0)
       choices, then derive secondary attributes with the ancestry rules.
    3. Apply the remaining creation choice effects.
    4. Apply the ancestry modifier (level 4+), then the ancestry's level-4
       choices.
    5. For the novice, expert, and master paths in turn: apply the path's
       active modifiers, then its active choices.
    6. Merge choice-derived languages and professions after the rule and
       modifier ones, without duplicates.
    7. Recompute the healing rate from the final values.

Choice operations never raise. A selection that no longer fits its live
configuration is trimmed or removed when validation runs.
"""

import copy
import logging
import time
from collections import defaultdict
from dataclasses import dataclass, fields, replace
from typing import Any, Iterable

from charbuilder.attributes.types import (
    MAIN_ATTRIBUTES,
    Attributes,
    MainAttributes,
    SecondaryAttributes,
)
from charbuilder.character.ancestry import ANCESTRY_MODIFIER_LEVEL, Ancestry
from charbuilder.character.suggestions import LanguageSuggestion, suggest_languages
from charbuilder.choices.types import (
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
    choice_key,
)
from charbuilder.choices.validation import InvalidChoice, ValidationOutcome, check_selection
from charbuilder.magic.registry import SpellRegistry
from charbuilder.magic.types import Spell
from charbuilder.observability.events import (
    ChoiceAppliedEvent,
    ChoiceValidatedEvent,
    ModifierAppliedEvent,
    ResolutionEndEvent,
    ResolutionStartEvent,
)
from charbuilder.observability.hooks import NullHook, ResolutionHook
from charbuilder.paths.base import Path
from charbuilder.paths.tiers import Expert, Master, Novice

logger = logging.getLogger(__name__)

PATH_SLOTS: dict[ChoiceSource, type[Path]] = {
    ChoiceSource.NOVICE_PATH: Novice,
    ChoiceSource.EXPERT_PATH: Expert,
    ChoiceSource.MASTER_PATH: Master,
}

PATH_SOURCES: tuple[ChoiceSource, ...] = tuple(PATH_SLOTS)


@dataclass(frozen=True)
class ChoiceValidationConfig:
    """When stored selections are reconciled against live configurations.

    Attributes:
        validate_on_path_change: Validate a path's selections when the path
            is replaced.
        validate_on_ancestry_change: Validate ancestry selections when the
            ancestry is replaced.
        preserve_invalid_choices: Keep invalid selections verbatim.
    """

    validate_on_path_change: bool = True
    validate_on_ancestry_change: bool = True
    preserve_invalid_choices: bool = False

    @classmethod
    def from_settings(cls, settings: Any) -> "ChoiceValidationConfig":
        """Build the default configuration from application settings."""
        return cls(
            validate_on_path_change=settings.validate_on_path_change,
            validate_on_ancestry_change=settings.validate_on_ancestry_change,
            preserve_invalid_choices=settings.preserve_invalid_choices,
        )


@dataclass
class _CollectedChoices:
    """Choice-derived list values gathered during one resolution."""

    languages: list[str]
    professions: list[str]


class Character:
    """A player character.

    Example:
        >>> hero = Character("Edward", human, novice_path=warrior)
        >>> hero.level_up()
        1
        >>> hero.resolve_attributes().health
        16
    """

    def __init__(
        self,
        name: str,
        ancestry: Ancestry,
        level: int = 0,
        novice_path: Novice | None = None,
        expert_path: Expert | None = None,
        master_path: Master | None = None,
        validation_config: ChoiceValidationConfig | None = None,
        hook: ResolutionHook | None = None,
    ) -> None:
        """Create a character.

        Args:
            name: Character name.
            ancestry: The character's ancestry.
            level: Starting level.
            novice_path: Novice tier path.
            expert_path: Expert tier path.
            master_path: Master tier path.
            validation_config: Validation behavior. Defaults to validating on
                every change.
            hook: Observer for resolution and validation events.

        Raises:
            ValueError: If level is negative.
            TypeError: If a path is assigned to the wrong tier.
        """
        if level < 0:
            raise ValueError(f"Level cannot be negative: {level}")

        self.name = name
        self._level = level
        self._ancestry = ancestry
        self._paths: dict[ChoiceSource, Path | None] = {source: None for source in PATH_SOURCES}
        self._choices: dict[str, ChoiceConfig] = {}
        self._validation_config = validation_config or ChoiceValidationConfig()
        self.hook: ResolutionHook = hook or NullHook()

        for source, path in zip(PATH_SOURCES, (novice_path, expert_path, master_path)):
            if path is not None:
                self._paths[source] = _check_tier(source, path)

    def __repr__(self) -> str:
        return f"Character(name={self.name!r}, level={self._level}, ancestry={self._ancestry.key!r})"

    # =========================================================================
    # Level, ancestry, and paths
    # =========================================================================

    @property
    def level(self) -> int:
        return self._level

    def level_up(self, levels: int = 1) -> int:
        """Raise the character's level.

        Returns:
            The new level.

        Raises:
            ValueError: If levels is not positive.
        """
        if levels < 1:
            raise ValueError(f"Levels gained must be positive: {levels}")
        self._level += levels
        logger.info("%s reached level %d", self.name, self._level)
        return self._level

    @property
    def ancestry(self) -> Ancestry:
        return self._ancestry

    @ancestry.setter
    def ancestry(self, ancestry: Ancestry) -> None:
        self._ancestry = ancestry
        if self._validation_config.validate_on_ancestry_change:
            self.validate_choices_for_source(ChoiceSource.ANCESTRY)

    @property
    def novice_path(self) -> Novice | None:
        return self._paths[ChoiceSource.NOVICE_PATH]  # type: ignore[return-value]

    @novice_path.setter
    def novice_path(self, path: Novice | None) -> None:
        self.set_path(ChoiceSource.NOVICE_PATH, path)

    @property
    def expert_path(self) -> Expert | None:
        return self._paths[ChoiceSource.EXPERT_PATH]  # type: ignore[return-value]

    @expert_path.setter
    def expert_path(self, path: Expert | None) -> None:
        self.set_path(ChoiceSource.EXPERT_PATH, path)

    @property
    def master_path(self) -> Master | None:
        return self._paths[ChoiceSource.MASTER_PATH]  # type: ignore[return-value]

    @master_path.setter
    def master_path(self, path: Master | None) -> None:
        self.set_path(ChoiceSource.MASTER_PATH, path)

    def get_path(self, source: ChoiceSource | str) -> Path | None:
        return self._paths.get(ChoiceSource(source))

    @property
    def paths(self) -> dict[ChoiceSource, Path]:
        """Assigned paths by source, in tier order."""
        return {source: path for source, path in self._paths.items() if path is not None}

    def set_path(self, source: ChoiceSource | str, path: Path | None) -> None:
        """Assign or remove the path for one tier.

        Raises:
            TypeError: If the path does not belong to the tier.
        """
        source = ChoiceSource(source)
        if source not in PATH_SLOTS:
            raise ValueError(f"Not a path source: {source.value}")
        self._paths[source] = _check_tier(source, path) if path is not None else None
        if self._validation_config.validate_on_path_change:
            self.validate_choices_for_source(source)

    # =========================================================================
    # Available choices
    # =========================================================================

    def get_available_choices(self, level: int | None = None) -> list[AvailableChoice]:
        """Choice configurations active at ``level`` (defaults to current).

        Ancestry creation choices come first, then the ancestry's level-4
        choices, then each assigned path in tier order.
        """
        level = self._level if level is None else level
        available: list[AvailableChoice] = []
        for source in (ChoiceSource.ANCESTRY, *PATH_SOURCES):
            available.extend(self._choices_for_source(source, level))
        return available

    def _choices_for_source(self, source: ChoiceSource, level: int | None) -> list[AvailableChoice]:
        """Choices a source offers; level None ignores level gating."""
        if source == ChoiceSource.ANCESTRY:
            pairs = [(0, config) for config in self._ancestry.get_choices(0)]
            if level is None or level >= ANCESTRY_MODIFIER_LEVEL:
                pairs.extend(
                    (ANCESTRY_MODIFIER_LEVEL, config)
                    for config in self._ancestry.get_choices(ANCESTRY_MODIFIER_LEVEL)
                )
        else:
            path = self._paths.get(source)
            if path is None:
                return []
            pairs = path.get_choices(path.LEVELS[-1] if level is None else level)

        counters: dict[tuple[int, ChoiceType], int] = defaultdict(int)
        choices = []
        for choice_level, config in pairs:
            index = counters[(choice_level, config.type)]
            counters[(choice_level, config.type)] += 1
            choices.append(AvailableChoice(ChoiceLocation(source, choice_level), config, index))
        return choices

    # =========================================================================
    # Attribute resolution
    # =========================================================================

    def resolve_attributes(self) -> Attributes:
        """Compute the attribute sheet at the current level.

        Every call recomputes from scratch; nothing is cached.
        """
        return self._resolve(self._level)

    def _resolve(self, level: int) -> Attributes:
        started = time.perf_counter()
        self.hook.on_resolution_start(
            ResolutionStartEvent(
                character=self.name,
                level=level,
                ancestry=self._ancestry.key,
                paths={source.value: path.key for source, path in self.paths.items()},
            )
        )

        by_source: dict[ChoiceSource, list[AvailableChoice]] = defaultdict(list)
        for available in self.get_available_choices(level):
            by_source[available.location.source].append(available)

        creation = [c for c in by_source[ChoiceSource.ANCESTRY] if c.location.level == 0]
        ancestry_later = [c for c in by_source[ChoiceSource.ANCESTRY] if c.location.level != 0]
        collected = _CollectedChoices(languages=[], professions=[])

        main = self._ancestry.main_attributes
        for choice in creation:
            if choice.type == ChoiceType.ATTRIBUTE:
                self._apply_choice(choice, main, None, collected)

        secondary = self._ancestry.compute_secondary(main, level)
        derived_healing_rate = secondary.healing_rate

        for choice in creation:
            if choice.type != ChoiceType.ATTRIBUTE:
                self._apply_choice(choice, main, secondary, collected)

        changes = self._ancestry.apply_modifiers(level, main, secondary)
        if changes:
            self._emit_modifier(ChoiceSource.ANCESTRY, ANCESTRY_MODIFIER_LEVEL, changes)
        for choice in ancestry_later:
            self._apply_choice(choice, main, secondary, collected)

        for source, path in self.paths.items():
            for path_level, path_changes in path.apply_modifiers(level, main, secondary):
                self._emit_modifier(source, path_level, path_changes)
            for choice in by_source[source]:
                self._apply_choice(choice, main, secondary, collected)

        secondary.languages = _dedupe(secondary.languages + collected.languages)
        secondary.professions = _dedupe(secondary.professions + collected.professions)

        # Flat healing rate bonuses from modifiers survive the recomputation
        healing_bonus = secondary.healing_rate - derived_healing_rate
        secondary.healing_rate = (
            self._ancestry.secondary_attribute_rules.compute_healing_rate(main, level, secondary)
            + healing_bonus
        )

        attributes = Attributes.from_parts(main, secondary)
        self.hook.on_resolution_end(
            ResolutionEndEvent(
                character=self.name,
                level=level,
                attributes=attributes.to_dict(),
                duration_ms=(time.perf_counter() - started) * 1000,
            )
        )
        return attributes

    def _apply_choice(
        self,
        choice: AvailableChoice,
        main: MainAttributes,
        secondary: SecondaryAttributes | None,
        collected: _CollectedChoices,
    ) -> None:
        config = choice.config
        stored = self._stored_for(choice)
        # Defaults apply only when no selection is stored; a stored empty list means "none"
        explicit = stored is not None and stored.selected is not None
        selected = list(stored.selected)[: config.count] if explicit else []  # type: ignore[union-attr]
        values: list[Any]

        if isinstance(config, AttributeChoiceConfig):
            selected = [name for name in selected if name in MAIN_ATTRIBUTES]
            values = selected if explicit else config.effective_defaults()
            for attribute in values:
                main.add(attribute, config.increase_by)
        elif isinstance(config, ProfessionChoiceConfig):
            values = selected if explicit else list((config.default_professions or [])[: config.count])
            collected.professions.extend(values)
        elif isinstance(config, LanguageChoiceConfig):
            values = selected
            collected.languages.extend(values)
        elif isinstance(config, SkillChoiceConfig):
            values = selected
            if secondary is not None:
                present = {skill.name for skill in secondary.skills}
                for skill in values:
                    if skill.name not in present:
                        secondary.skills.append(skill)
                        present.add(skill.name)
        else:
            # Spell picks are tracked on the selection, not on the sheet
            values = selected

        if values:
            self.hook.on_choice_applied(
                ChoiceAppliedEvent(
                    key=choice.key,
                    choice_type=config.type.value,
                    values=[_describe(value) for value in values],
                    from_default=not explicit,
                )
            )

    def _stored_for(self, choice: AvailableChoice) -> ChoiceConfig | None:
        stored = self._choices.get(choice.key)
        if stored is None or stored.type != choice.type:
            return None
        return stored

    def _emit_modifier(self, source: ChoiceSource, level: int, changes: dict) -> None:
        self.hook.on_modifier_applied(ModifierAppliedEvent(source=source.value, level=level, changes=changes))

    # =========================================================================
    # Choice storage
    # =========================================================================

    @property
    def choices(self) -> dict[str, ChoiceConfig]:
        """Copy of the stored selections keyed by choice key."""
        return copy.deepcopy(self._choices)

    def set_choice(self, location: ChoiceLocation, selection: ChoiceConfig, index: int = 0) -> str:
        """Store a selection.

        Fields set on ``selection`` replace the stored ones; fields left as
        None keep the previously stored value. Validation is deferred.

        Returns:
            The storage key.
        """
        key = choice_key(location, selection.type, index)
        existing = self._choices.get(key)
        if existing is not None and existing.type == selection.type:
            updates = {
                f.name: copy.deepcopy(getattr(selection, f.name))
                for f in fields(selection)
                if getattr(selection, f.name) is not None
            }
            self._choices[key] = replace(copy.deepcopy(existing), **updates)
        else:
            self._choices[key] = copy.deepcopy(selection)
        logger.debug("%s set choice %s", self.name, key)
        return key

    def get_choice(
        self,
        location: ChoiceLocation,
        choice_type: ChoiceType | str,
        index: int = 0,
    ) -> ChoiceConfig | None:
        """Stored selection at a location, or None if nothing is stored.

        An unknown choice type has nothing stored under it.
        """
        try:
            key = choice_key(location, choice_type, index)
        except ValueError:
            return None
        stored = self._choices.get(key)
        return copy.deepcopy(stored) if stored is not None else None

    def restore_choice(self, key: str, selection: ChoiceConfig) -> None:
        """Store a selection verbatim under a key, as loaded from storage."""
        parsed = ChoiceKey.parse(key)
        self._choices[str(parsed)] = copy.deepcopy(selection)

    def clear_choices(self, source: ChoiceSource | str | None = None) -> int:
        """Remove stored selections for one source, or all of them.

        Returns:
            Number of selections removed.
        """
        if source is None:
            removed = len(self._choices)
            self._choices.clear()
            return removed

        try:
            prefix = f"{ChoiceSource(source).value}-"
        except ValueError:
            return 0
        keys = [key for key in self._choices if key.startswith(prefix)]
        for key in keys:
            del self._choices[key]
        return len(keys)

    # =========================================================================
    # Validation
    # =========================================================================

    @property
    def validation_config(self) -> ChoiceValidationConfig:
        return self._validation_config

    def set_validation_config(self, config: ChoiceValidationConfig | None = None, **changes: bool) -> None:
        """Update validation behavior.

        Dimensions that become enabled are validated immediately.

        Args:
            config: Complete new configuration.
            **changes: Individual fields to change on the current one.
        """
        old = self._validation_config
        new = replace(config or old, **changes)
        self._validation_config = new

        if new.validate_on_path_change and not old.validate_on_path_change:
            for source in PATH_SOURCES:
                self.validate_choices_for_source(source)
        if new.validate_on_ancestry_change and not old.validate_on_ancestry_change:
            self.validate_choices_for_source(ChoiceSource.ANCESTRY)

    def get_invalid_choices(self, source: ChoiceSource | str | None = None) -> list[InvalidChoice]:
        """Selections validation would trim or remove, without changing them."""
        sources = [ChoiceSource(source)] if source is not None else [ChoiceSource.ANCESTRY, *PATH_SOURCES]
        invalid = []
        for current in sources:
            live = {choice.key: choice.config for choice in self._choices_for_source(current, None)}
            for key, stored in self._stored_items(current):
                result = check_selection(key, stored, live.get(key))
                if result is not None:
                    invalid.append(result)
        return invalid

    def validate_choices_for_source(self, source: ChoiceSource | str) -> list[InvalidChoice]:
        """Trim or remove selections that no longer fit the source.

        Selections are checked against everything the source offers at any
        level, so choices made ahead of the current level survive.

        Returns:
            The changes applied. Empty when invalid choices are preserved.
        """
        invalid = self.get_invalid_choices(source)
        preserve = self._validation_config.preserve_invalid_choices

        for result in invalid:
            self.hook.on_choice_validated(
                ChoiceValidatedEvent(
                    key=result.key,
                    outcome=result.outcome.value,
                    reason=result.reason,
                    preserved=preserve,
                )
            )
            if preserve:
                continue
            if result.outcome == ValidationOutcome.REMOVED:
                del self._choices[result.key]
            else:
                self._choices[result.key] = result.replacement  # type: ignore[assignment]
            logger.info("%s: %s choice %s (%s)", self.name, result.outcome.value, result.key, result.reason)

        return [] if preserve else invalid

    def validate_all_choices(self) -> list[InvalidChoice]:
        """Validate every source."""
        changes = []
        for source in (ChoiceSource.ANCESTRY, *PATH_SOURCES):
            changes.extend(self.validate_choices_for_source(source))
        return changes

    def _stored_items(self, source: ChoiceSource) -> list[tuple[str, ChoiceConfig]]:
        prefix = f"{source.value}-"
        return [(key, stored) for key, stored in self._choices.items() if key.startswith(prefix)]

    # =========================================================================
    # Spells and languages
    # =========================================================================

    def max_spell_power(self, level: int | None = None) -> int:
        """Spell power at ``level`` (defaults to current) without changing the character."""
        return self._resolve(self._level if level is None else level).power

    def get_spell_options(
        self,
        choice: SpellChoiceConfig,
        registry: SpellRegistry,
        slot_index: int | None = None,
    ) -> list[Spell]:
        """Spells the character may pick for a spell choice."""
        return registry.available_spells_for_choice(choice, self.max_spell_power(), slot_index)

    def _spell_picks(self, kind: SpellChoiceKind) -> list[str]:
        picks = []
        for stored in self._choices.values():
            if isinstance(stored, SpellChoiceConfig):
                picks.extend(option.target_id for option in stored.selected_choices or [] if option.type == kind)
        return _dedupe(picks)

    def discovered_traditions(self) -> list[str]:
        """Tradition ids discovered through stored spell selections."""
        return self._spell_picks(SpellChoiceKind.DISCOVER_TRADITION)

    def learned_spells(self) -> list[str]:
        """Spell ids learned through stored spell selections."""
        return self._spell_picks(SpellChoiceKind.LEARN_SPELL)

    def chosen_languages(self) -> list[str]:
        """Languages picked in stored language selections."""
        languages: list[str] = []
        for stored in self._choices.values():
            if isinstance(stored, LanguageChoiceConfig):
                languages.extend(stored.selected_languages or [])
        return _dedupe(languages)

    def get_suggested_languages(self) -> list[LanguageSuggestion]:
        """Ordered language suggestions for an open language choice."""
        return suggest_languages(self)


def _check_tier(source: ChoiceSource, path: Path) -> Path:
    expected = PATH_SLOTS[source]
    if not isinstance(path, expected):
        raise TypeError(
            f"{source.value} requires a {expected.__name__} path, got {type(path).__name__}"
        )
    return path


def _dedupe(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def _describe(value: Any) -> Any:
    name = getattr(value, "name", None)
    if name is not None:
        return name
    target = getattr(value, "target_id", None)
    return target if target is not None else value
