"""Helpers shared by CLI commands."""

from pathlib import Path

from charbuilder.attributes.types import Skill
from charbuilder.character.character import Character, ChoiceValidationConfig
from charbuilder.choices.types import (
    ChoiceConfig,
    ChoiceKey,
    SkillChoiceConfig,
    SpellChoiceConfig,
    SpellChoiceOption,
)
from charbuilder.config import get_settings
from charbuilder.observability.console_observer import RichConsoleObserver
from charbuilder.observability.hooks import ResolutionHook
from charbuilder.services.content_loader import ContentLibrary

# Highest level any path binds
MAX_LEVEL = 10


def load_library(content_dir: Path | None = None) -> ContentLibrary:
    """Load content from a directory, the configured one, or the bundled one."""
    return ContentLibrary.from_directory(content_dir or get_settings().content_dir)


def make_hook(trace: bool) -> ResolutionHook | None:
    """Rich console observer when tracing is requested or configured."""
    if trace or get_settings().trace_resolution:
        from charbuilder.cli.display import console

        return RichConsoleObserver(console=console)
    return None


def build_character(
    library: ContentLibrary,
    name: str,
    ancestry: str,
    level: int = 0,
    novice: str | None = None,
    expert: str | None = None,
    master: str | None = None,
    hook: ResolutionHook | None = None,
) -> Character:
    """Assemble a character from content keys.

    Raises:
        KeyError: If a content key is unknown.
        ValueError: If the level is negative.
    """
    return Character(
        name=name,
        ancestry=library.get_ancestry(ancestry),
        level=level,
        novice_path=library.get_path(novice, "novice") if novice else None,  # type: ignore[arg-type]
        expert_path=library.get_path(expert, "expert") if expert else None,  # type: ignore[arg-type]
        master_path=library.get_path(master, "master") if master else None,  # type: ignore[arg-type]
        validation_config=ChoiceValidationConfig.from_settings(get_settings()),
        hook=hook,
    )


def selection_from_values(live: ChoiceConfig, values: list[str]) -> ChoiceConfig:
    """Build a selection for a live choice from command-line values.

    Skills are matched by name. Spell picks are written as
    ``learnSpell:<spell id>`` or ``discoverTradition:<tradition id>``.

    Raises:
        ValueError: If a spell pick is malformed.
    """
    if isinstance(live, SkillChoiceConfig):
        offered = {skill.name: skill for skill in live.available_skills}
        return live.with_selected([offered.get(value, Skill(value)) for value in values])
    if isinstance(live, SpellChoiceConfig):
        options = []
        for value in values:
            kind, _, target = value.partition(":")
            if not target:
                raise ValueError(f"Spell picks look like 'learnSpell:<id>', got {value!r}")
            options.append(SpellChoiceOption(kind, target))
        return live.with_selected(options)
    return live.with_selected(values)


def apply_choice_options(character: Character, options: list[str]) -> list[str]:
    """Store ``KEY=VALUE[,VALUE...]`` selections on a character.

    Returns:
        The keys that were stored.

    Raises:
        ValueError: If an option is malformed or its key is not offered.
    """
    offered = {choice.key: choice for choice in character.get_available_choices(MAX_LEVEL)}
    stored = []
    for option in options:
        key, separator, raw_values = option.partition("=")
        if not separator:
            raise ValueError(f"Choices look like KEY=VALUE[,VALUE], got {option!r}")
        parsed = ChoiceKey.parse(key.strip())
        available = offered.get(str(parsed))
        if available is None:
            raise ValueError(f"No choice is offered at {parsed}")
        values = [value.strip() for value in raw_values.split(",") if value.strip()]
        selection = selection_from_values(available.config, values)
        stored.append(character.set_choice(parsed.location, selection, parsed.index))
    return stored
