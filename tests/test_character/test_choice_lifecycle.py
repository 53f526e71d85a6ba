"""Tests for storing, validating, and clearing character choices."""

import pytest

from charbuilder.attributes import AttributeModifier
from charbuilder.character import Character, ChoiceValidationConfig
from charbuilder.choices import (
    AttributeChoiceConfig,
    ChoiceLocation,
    ChoiceSource,
    ChoiceType,
    LanguageChoiceConfig,
    ProfessionChoiceConfig,
    ValidationOutcome,
)
from charbuilder.config import Settings
from charbuilder.observability import ChoiceValidatedEvent
from charbuilder.paths import Novice
from tests.factories import select_attributes, select_languages


@pytest.fixture
def wide() -> Novice:
    """Novice path offering three attribute increases at level 1."""
    return Novice("wide", {1: AttributeModifier(choices=AttributeChoiceConfig(count=3))})


@pytest.fixture
def narrow() -> Novice:
    """Novice path offering one attribute increase at level 1."""
    return Novice("narrow", {1: AttributeModifier(choices=AttributeChoiceConfig(count=1))})


NOVICE_ATTRIBUTE_KEY = "novicePath-1-attribute-0"


class TestChoiceStorage:
    """Tests for set_choice, get_choice, and clear_choices."""

    def test_set_choice_returns_key(self, human):
        """set_choice stores under the composite key."""
        hero = Character("Edward", human)
        key = select_attributes(hero, ChoiceSource.ANCESTRY, 0, ["will"])
        assert key == "ancestry-0-attribute-0"
        assert hero.choices[key].selected_attributes == ["will"]

    def test_get_choice(self, human):
        """get_choice returns the stored selection or None."""
        hero = Character("Edward", human)
        location = ChoiceLocation(ChoiceSource.ANCESTRY, 0)
        select_attributes(hero, ChoiceSource.ANCESTRY, 0, ["will"])

        assert hero.get_choice(location, ChoiceType.ATTRIBUTE).selected_attributes == ["will"]
        assert hero.get_choice(location, "profession") is None
        assert hero.get_choice(location, ChoiceType.ATTRIBUTE, index=1) is None

    def test_stored_choices_are_copies(self, human):
        """Mutating a returned selection does not change the character."""
        hero = Character("Edward", human)
        location = ChoiceLocation(ChoiceSource.ANCESTRY, 0)
        selection = AttributeChoiceConfig(count=1, selected_attributes=["will"])
        hero.set_choice(location, selection)

        selection.selected_attributes.append("agility")
        hero.get_choice(location, ChoiceType.ATTRIBUTE).selected_attributes.append("agility")

        assert hero.get_choice(location, ChoiceType.ATTRIBUTE).selected_attributes == ["will"]

    def test_set_choice_merges_fields(self, human):
        """Fields left as None keep their stored value."""
        hero = Character("Edward", human)
        location = ChoiceLocation(ChoiceSource.ANCESTRY, 0)
        hero.set_choice(location, AttributeChoiceConfig(count=1, selected_attributes=["will"]))
        hero.set_choice(location, AttributeChoiceConfig(count=1, default_attributes=["agility"]))

        stored = hero.get_choice(location, ChoiceType.ATTRIBUTE)

        assert stored.selected_attributes == ["will"]
        assert stored.default_attributes == ["agility"]

    def test_set_choice_does_not_validate(self, human):
        """Storing a selection never raises, even when it does not fit."""
        hero = Character("Edward", human)
        key = select_attributes(hero, ChoiceSource.MASTER_PATH, 7, ["will"])
        assert key in hero.choices

    def test_clear_choices_for_source(self, human):
        """clear_choices removes only the given source."""
        hero = Character("Edward", human)
        select_attributes(hero, ChoiceSource.ANCESTRY, 0, ["will"])
        select_attributes(hero, ChoiceSource.NOVICE_PATH, 1, ["will"])
        select_languages(hero, ChoiceSource.NOVICE_PATH, 1, ["Elvish"])

        assert hero.clear_choices(ChoiceSource.NOVICE_PATH) == 2
        assert list(hero.choices) == ["ancestry-0-attribute-0"]

    def test_clear_all_choices(self, human):
        """clear_choices without a source removes everything."""
        hero = Character("Edward", human)
        select_attributes(hero, ChoiceSource.ANCESTRY, 0, ["will"])
        select_attributes(hero, ChoiceSource.NOVICE_PATH, 1, ["will"])
        assert hero.clear_choices() == 2
        assert hero.choices == {}

    def test_unknown_names_are_harmless(self, human):
        """Unknown choice types and sources find nothing instead of raising."""
        hero = Character("Edward", human)
        select_attributes(hero, ChoiceSource.ANCESTRY, 0, ["will"])

        assert hero.get_choice(ChoiceLocation(ChoiceSource.ANCESTRY, 0), "bogus") is None
        assert hero.clear_choices("bogus") == 0
        assert list(hero.choices) == ["ancestry-0-attribute-0"]


class TestAvailableChoices:
    """Tests for get_available_choices."""

    def test_order_and_keys(self, human, warrior):
        """Ancestry choices come first, then paths, each with its key."""
        hero = Character("Edward", human, level=4, novice_path=warrior)
        keys = [choice.key for choice in hero.get_available_choices()]
        assert keys == [
            "ancestry-0-attribute-0",
            "ancestry-0-profession-0",
            "ancestry-4-skill-0",
            "novicePath-1-attribute-0",
        ]

    def test_index_counts_per_type(self, languer):
        """Several choices of one type at a location get increasing indexes."""
        languer_modifier = AttributeModifier(
            choices=[
                AttributeChoiceConfig(count=1),
                ProfessionChoiceConfig(count=1),
                ProfessionChoiceConfig(count=1, available_professions=["Scribe"]),
            ]
        )
        path = Novice("scholar", {1: languer_modifier})
        hero = Character("Lina", languer, level=1, novice_path=path)
        keys = [choice.key for choice in hero.get_available_choices() if choice.location.source == "novicePath"]
        assert keys == [
            "novicePath-1-attribute-0",
            "novicePath-1-profession-0",
            "novicePath-1-profession-1",
        ]

    def test_explicit_level(self, human, warrior):
        """Passing a level previews choices without levelling up."""
        hero = Character("Edward", human, novice_path=warrior)
        assert len(hero.get_available_choices()) == 2
        assert len(hero.get_available_choices(4)) == 4
        assert hero.level == 0


class TestValidationOnChange:
    """Tests for validation when paths or the ancestry change."""

    def test_path_swap_trims_selection(self, human, wide, narrow):
        """Swapping to a narrower path keeps only the first selection."""
        hero = Character("Edward", human, level=1, novice_path=wide)
        select_attributes(hero, ChoiceSource.NOVICE_PATH, 1, ["strength", "agility", "intellect"])

        hero.novice_path = narrow

        assert hero.choices[NOVICE_ATTRIBUTE_KEY].selected_attributes == ["strength"]
        attributes = hero.resolve_attributes()
        assert attributes.strength == 12
        assert attributes.agility == 10
        assert attributes.intellect == 10

    def test_path_removal_removes_selections(self, human, warrior):
        """Removing a path removes the selections it offered."""
        hero = Character("Edward", human, level=1, novice_path=warrior)
        select_attributes(hero, ChoiceSource.NOVICE_PATH, 1, ["will", "will"])

        hero.novice_path = None

        assert NOVICE_ATTRIBUTE_KEY not in hero.choices

    def test_choices_ahead_of_level_survive(self, human, warrior, wide):
        """Selections for levels not reached yet are kept."""
        hero = Character("Edward", human, level=0, novice_path=wide)
        select_attributes(hero, ChoiceSource.NOVICE_PATH, 1, ["will"])

        hero.novice_path = warrior

        assert hero.choices[NOVICE_ATTRIBUTE_KEY].selected_attributes == ["will"]

    def test_ancestry_change(self, human, languer):
        """Replacing the ancestry validates ancestry selections."""
        hero = Character("Edward", human)
        select_attributes(hero, ChoiceSource.ANCESTRY, 0, ["will"])
        hero.set_choice(
            ChoiceLocation(ChoiceSource.ANCESTRY, 0),
            ProfessionChoiceConfig(count=1, selected_professions=["Artisan"]),
        )

        hero.ancestry = languer

        assert list(hero.choices) == ["ancestry-0-attribute-0"]
        assert hero.resolve_attributes().will == 11

    def test_free_language_pick_survives_path_swap(self, human):
        """An open language choice accepts any language after a swap."""
        scholar = Novice("scholar", {1: AttributeModifier(choices=LanguageChoiceConfig(count=1))})
        linguist = Novice("linguist", {1: AttributeModifier(choices=LanguageChoiceConfig(count=1))})
        hero = Character("Edward", human, level=1, novice_path=scholar)
        key = select_languages(hero, ChoiceSource.NOVICE_PATH, 1, ["Goblin"])

        hero.novice_path = linguist

        assert hero.choices[key].selected_languages == ["Goblin"]
        assert "Goblin" in hero.resolve_attributes().languages

    def test_validation_disabled(self, human, wide, narrow):
        """With path validation off, swapping keeps the full selection."""
        config = ChoiceValidationConfig(validate_on_path_change=False)
        hero = Character("Edward", human, level=1, novice_path=wide, validation_config=config)
        select_attributes(hero, ChoiceSource.NOVICE_PATH, 1, ["strength", "agility", "intellect"])

        hero.novice_path = narrow

        assert hero.choices[NOVICE_ATTRIBUTE_KEY].selected_attributes == ["strength", "agility", "intellect"]
        # Resolution still only uses the first `count` entries
        assert hero.resolve_attributes().agility == 10

    def test_enabling_validation_runs_it(self, human, wide, narrow):
        """Turning path validation on validates every path source."""
        config = ChoiceValidationConfig(validate_on_path_change=False)
        hero = Character("Edward", human, level=1, novice_path=wide, validation_config=config)
        select_attributes(hero, ChoiceSource.NOVICE_PATH, 1, ["strength", "agility"])
        hero.novice_path = narrow

        hero.set_validation_config(validate_on_path_change=True)

        assert hero.validation_config.validate_on_path_change
        assert hero.choices[NOVICE_ATTRIBUTE_KEY].selected_attributes == ["strength"]

    def test_preserve_invalid_choices(self, human, wide, narrow, recording_hook):
        """Preserved selections stay verbatim and are reported as preserved."""
        config = ChoiceValidationConfig(preserve_invalid_choices=True)
        hero = Character(
            "Edward", human, level=1, novice_path=wide, validation_config=config, hook=recording_hook
        )
        select_attributes(hero, ChoiceSource.NOVICE_PATH, 1, ["strength", "agility"])

        hero.novice_path = narrow

        assert hero.choices[NOVICE_ATTRIBUTE_KEY].selected_attributes == ["strength", "agility"]
        events = recording_hook.of_type(ChoiceValidatedEvent)
        assert [(e.key, e.outcome, e.preserved) for e in events] == [
            (NOVICE_ATTRIBUTE_KEY, "trimmed", True)
        ]
        assert hero.resolve_attributes().agility == 10

    def test_config_from_settings(self):
        """Validation defaults can come from settings."""
        settings = Settings(_env_file=None, preserve_invalid_choices=True)
        config = ChoiceValidationConfig.from_settings(settings)
        assert config.preserve_invalid_choices
        assert config.validate_on_path_change


class TestInvalidChoices:
    """Tests for the dry-run and explicit validation calls."""

    def test_get_invalid_choices_does_not_change_state(self, human, narrow):
        """get_invalid_choices reports without trimming."""
        hero = Character("Edward", human, level=1, novice_path=narrow)
        select_attributes(hero, ChoiceSource.NOVICE_PATH, 1, ["strength", "agility"])
        select_attributes(hero, ChoiceSource.EXPERT_PATH, 3, ["will"])

        invalid = {result.key: result for result in hero.get_invalid_choices()}

        assert invalid[NOVICE_ATTRIBUTE_KEY].outcome == ValidationOutcome.TRIMMED
        assert invalid["expertPath-3-attribute-0"].outcome == ValidationOutcome.REMOVED
        assert hero.choices[NOVICE_ATTRIBUTE_KEY].selected_attributes == ["strength", "agility"]

    def test_get_invalid_choices_for_source(self, human, narrow):
        """A source filter limits the report."""
        hero = Character("Edward", human, level=1, novice_path=narrow)
        select_attributes(hero, ChoiceSource.EXPERT_PATH, 3, ["will"])
        assert hero.get_invalid_choices(ChoiceSource.NOVICE_PATH) == []
        assert len(hero.get_invalid_choices("expertPath")) == 1

    def test_validate_all_choices(self, human, narrow):
        """validate_all_choices applies every change and returns them."""
        hero = Character("Edward", human, level=1, novice_path=narrow)
        select_attributes(hero, ChoiceSource.NOVICE_PATH, 1, ["strength", "agility"])
        select_attributes(hero, ChoiceSource.EXPERT_PATH, 3, ["will"])

        changes = hero.validate_all_choices()

        assert {change.key for change in changes} == {NOVICE_ATTRIBUTE_KEY, "expertPath-3-attribute-0"}
        assert list(hero.choices) == [NOVICE_ATTRIBUTE_KEY]
        assert hero.get_invalid_choices() == []

    def test_empty_selection_is_removed(self, human):
        """A stored selection with nothing selected is removed."""
        hero = Character("Edward", human)
        hero.set_choice(ChoiceLocation(ChoiceSource.ANCESTRY, 0), AttributeChoiceConfig(count=1))
        hero.validate_choices_for_source(ChoiceSource.ANCESTRY)
        assert hero.choices == {}
