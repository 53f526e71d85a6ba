"""Tests for the generic choice manager."""

import random
from dataclasses import dataclass

import pytest

from charbuilder.choices import ChoiceBehavior, ChoiceManager, ChoiceSelectionError, WeightedConfig


@dataclass(frozen=True)
class Item:
    id: str
    name: str


@pytest.fixture
def items() -> list[Item]:
    return [Item("sword", "Sword"), Item("axe", "Axe"), Item("bow", "Bow"), Item("staff", "Staff")]


class TestAutoSelect:
    """Tests for automatic selection."""

    def test_first_available(self, items):
        """FIRST_AVAILABLE should take items in order."""
        manager = ChoiceManager("weapons", items, max_selections=2)
        assert manager.auto_select() == items[:2]
        assert manager.selected == items[:2]

    def test_random_respects_max(self, items):
        """RANDOM should pick distinct items up to the maximum."""
        manager = ChoiceManager(
            "weapons", items, max_selections=3, behavior=ChoiceBehavior.RANDOM, rng=random.Random(7)
        )
        selected = manager.auto_select()
        assert len(selected) == 3
        assert len({item.id for item in selected}) == 3
        assert all(item in items for item in selected)

    def test_random_with_more_slots_than_items(self, items):
        """RANDOM should not fail when max exceeds what is available."""
        manager = ChoiceManager("weapons", items, max_selections=10, behavior="random")
        assert len(manager.auto_select()) == len(items)

    def test_weighted_prefers_heavy_items(self, items):
        """Zero-weight items should never be picked."""
        weights = WeightedConfig(weights={"bow": 5.0}, default_weight=0.0)
        manager = ChoiceManager(
            "weapons",
            items,
            max_selections=2,
            behavior=ChoiceBehavior.WEIGHTED,
            weight_config=weights,
            rng=random.Random(1),
        )
        assert manager.auto_select() == [Item("bow", "Bow")]

    def test_weighted_requires_config(self, items):
        """WEIGHTED without weights should raise."""
        manager = ChoiceManager("weapons", items, max_selections=1, behavior=ChoiceBehavior.WEIGHTED)
        with pytest.raises(ChoiceSelectionError, match="Weight configuration"):
            manager.auto_select()


class TestManualSelect:
    """Tests for manual selection."""

    def test_valid_selection(self, items):
        """Valid picks should replace the selection."""
        manager = ChoiceManager("weapons", items, max_selections=2)
        manager.manual_select([items[3]])
        assert manager.selected == [items[3]]

    def test_too_many(self, items):
        """More than max_selections should raise without changing state."""
        manager = ChoiceManager("weapons", items, max_selections=1)
        manager.manual_select([items[0]])
        with pytest.raises(ChoiceSelectionError, match="more than 1"):
            manager.manual_select(items[:2])
        assert manager.selected == [items[0]]

    def test_too_few(self, items):
        """Fewer than min_selections should raise."""
        manager = ChoiceManager("weapons", items, max_selections=2, min_selections=1)
        with pytest.raises(ChoiceSelectionError, match="at least 1"):
            manager.manual_select([])

    def test_unavailable_item(self, items):
        """Items outside the available list should raise."""
        manager = ChoiceManager("weapons", items, max_selections=2)
        with pytest.raises(ChoiceSelectionError, match="dagger"):
            manager.manual_select([Item("dagger", "Dagger")])
        assert manager.selected == []

    def test_error_is_value_error(self):
        """Selection errors should be catchable as ValueError."""
        assert issubclass(ChoiceSelectionError, ValueError)
