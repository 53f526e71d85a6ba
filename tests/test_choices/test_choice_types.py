"""Tests for choice keys and configurations."""

import pytest

from charbuilder.attributes import Skill
from charbuilder.choices import (
    AttributeChoiceConfig,
    AvailableChoice,
    ChoiceKey,
    ChoiceLocation,
    ChoiceSource,
    ChoiceType,
    SkillChoiceConfig,
    SpellChoiceKind,
    SpellChoiceOption,
    SpellChoiceSlot,
    choice_key,
)


class TestChoiceKey:
    """Tests for the composite selection key."""

    def test_format(self):
        """Keys should be source-level-type-index."""
        location = ChoiceLocation(ChoiceSource.NOVICE_PATH, 1)
        assert choice_key(location, ChoiceType.ATTRIBUTE) == "novicePath-1-attribute-0"
        assert choice_key(location, "language", 2) == "novicePath-1-language-2"

    def test_parse(self):
        """Parsing should recover every part."""
        key = ChoiceKey.parse("expertPath-6-skill-1")
        assert key.source == ChoiceSource.EXPERT_PATH
        assert key.level == 6
        assert key.type == ChoiceType.SKILL
        assert key.index == 1
        assert key.location == ChoiceLocation(ChoiceSource.EXPERT_PATH, 6)
        assert str(key) == "expertPath-6-skill-1"

    @pytest.mark.parametrize("raw", ["ancestry-0-attribute", "ancestry-x-attribute-0", "elsewhere-0-skill-0"])
    def test_parse_malformed(self, raw):
        """Malformed keys should raise ValueError."""
        with pytest.raises(ValueError):
            ChoiceKey.parse(raw)

    def test_string_source_is_coerced(self):
        """Locations built from strings should hold the enum."""
        assert ChoiceLocation("masterPath", 7).source is ChoiceSource.MASTER_PATH


class TestChoiceConfigs:
    """Tests for the shared configuration accessors."""

    def test_selected_and_available(self):
        """Generic accessors should map to the type-specific fields."""
        config = AttributeChoiceConfig(
            count=1,
            available_attributes=["strength"],
            selected_attributes=["strength"],
        )
        assert config.type == ChoiceType.ATTRIBUTE
        assert config.available == ["strength"]
        assert config.selected == ["strength"]

    def test_with_selected_returns_copy(self):
        """with_selected should not change the original."""
        config = SkillChoiceConfig(count=1, available_skills=[Skill("Determined")])
        picked = config.with_selected([Skill("Determined")])
        assert config.selected_skills is None
        assert picked.selected_skills == [Skill("Determined")]

    def test_effective_defaults(self):
        """Defaults should be truncated to count."""
        config = AttributeChoiceConfig(count=2, default_attributes=["agility", "strength", "intellect"])
        assert config.effective_defaults() == ["agility", "strength"]

    def test_effective_defaults_without_defaults(self):
        """Without defaults the first main attributes are used."""
        assert AttributeChoiceConfig(count=1).effective_defaults() == ["strength"]

    def test_available_choice_key(self):
        """AvailableChoice should expose its storage key."""
        available = AvailableChoice(
            ChoiceLocation(ChoiceSource.ANCESTRY, 4),
            SkillChoiceConfig(count=1),
            index=1,
        )
        assert available.type == ChoiceType.SKILL
        assert available.key == "ancestry-4-skill-1"


class TestSpellChoices:
    """Tests for spell slots and options."""

    def test_flexible_slot_accepts_both(self):
        """Flexible slots should accept spells and traditions."""
        slot = SpellChoiceSlot(SpellChoiceKind.FLEXIBLE_CHOICE)
        assert slot.accepts(SpellChoiceOption.learn("fireball"))
        assert slot.accepts(SpellChoiceOption.discover("fire"))

    def test_learn_slot_rejects_discovery(self):
        """A learn slot should only accept learned spells."""
        slot = SpellChoiceSlot("learnSpell")
        assert slot.accepts(SpellChoiceOption.learn("fireball"))
        assert not slot.accepts(SpellChoiceOption.discover("fire"))

    def test_option_cannot_be_flexible(self):
        """A concrete pick must learn or discover."""
        with pytest.raises(ValueError):
            SpellChoiceOption(SpellChoiceKind.FLEXIBLE_CHOICE, "fire")
