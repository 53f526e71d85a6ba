"""Generic choice manager for weighted, random, or manual selection.

Independent of the character pipeline: used wherever a fixed list of
selectable items needs an automatic pick (NPC generation, quick-build
defaults) or a validated manual pick.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Protocol, Sequence, TypeVar

logger = logging.getLogger(__name__)


class Selectable(Protocol):
    """Anything with a stable id and a display name."""

    id: str
    name: str


T = TypeVar("T", bound=Selectable)


class ChoiceBehavior(str, Enum):
    """How ``auto_select`` picks items."""

    RANDOM = "random"
    FIRST_AVAILABLE = "first_available"
    WEIGHTED = "weighted"


class ChoiceSelectionError(ValueError):
    """A selection violates the choice's constraints."""

    pass


@dataclass
class WeightedConfig:
    """Per-item weights for weighted selection.

    Attributes:
        weights: Weight by item id.
        default_weight: Weight for items missing from ``weights``.
    """

    weights: dict[str, float] = field(default_factory=dict)
    default_weight: float = 1.0

    def weight_for(self, item_id: str) -> float:
        return self.weights.get(item_id, self.default_weight)


class ChoiceManager(Generic[T]):
    """Holds one choice over selectable items and its current selection."""

    def __init__(
        self,
        choice_id: str,
        available: Sequence[T],
        max_selections: int,
        min_selections: int = 0,
        behavior: ChoiceBehavior = ChoiceBehavior.FIRST_AVAILABLE,
        weight_config: WeightedConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the choice.

        Args:
            choice_id: Identifier of the choice.
            available: Items that can be chosen from.
            max_selections: Maximum number of items selected.
            min_selections: Minimum number of items for a manual selection.
            behavior: Strategy used by ``auto_select``.
            weight_config: Weights, required for WEIGHTED behavior.
            rng: Random source. Defaults to a fresh ``random.Random``.
        """
        self.choice_id = choice_id
        self.max_selections = max_selections
        self.min_selections = min_selections
        self.behavior = ChoiceBehavior(behavior)
        self.weight_config = weight_config
        self._available: list[T] = list(available)
        self._selected: list[T] = []
        self._rng = rng or random.Random()

    @property
    def available(self) -> list[T]:
        return list(self._available)

    @property
    def selected(self) -> list[T]:
        return list(self._selected)

    def auto_select(self) -> list[T]:
        """Select items according to the configured behavior.

        Returns:
            The new selection.

        Raises:
            ChoiceSelectionError: If WEIGHTED is used without a weight config.
        """
        if self.behavior == ChoiceBehavior.RANDOM:
            self._selected = self._select_random()
        elif self.behavior == ChoiceBehavior.WEIGHTED:
            self._selected = self._select_weighted()
        else:
            self._selected = self._available[: self.max_selections]

        logger.debug(
            "Auto-selected %s for choice %s (%s)",
            [item.id for item in self._selected],
            self.choice_id,
            self.behavior.value,
        )
        return self.selected

    def manual_select(self, items: Sequence[T]) -> None:
        """Replace the selection with explicitly chosen items.

        The selection is left untouched if validation fails.

        Raises:
            ChoiceSelectionError: If too many or too few items are given, or
                an item is not available.
        """
        if len(items) > self.max_selections:
            raise ChoiceSelectionError(f"Cannot select more than {self.max_selections} items")
        if len(items) < self.min_selections:
            raise ChoiceSelectionError(f"Must select at least {self.min_selections} items")

        available_ids = {item.id for item in self._available}
        missing = [item.id for item in items if item.id not in available_ids]
        if missing:
            raise ChoiceSelectionError(
                f"One or more selections are not available: {', '.join(missing)}"
            )
        self._selected = list(items)

    def _select_random(self) -> list[T]:
        count = min(self.max_selections, len(self._available))
        return self._rng.sample(self._available, count)

    def _select_weighted(self) -> list[T]:
        if self.weight_config is None:
            raise ChoiceSelectionError("Weight configuration required for weighted selection")

        remaining = list(self._available)
        selected: list[T] = []
        while len(selected) < self.max_selections and remaining:
            weights = [self.weight_config.weight_for(item.id) for item in remaining]
            total = sum(weights)
            if total <= 0:
                break

            threshold = self._rng.random() * total
            cumulative = 0.0
            pick = len(remaining) - 1
            for index, weight in enumerate(weights):
                cumulative += weight
                if threshold < cumulative:
                    pick = index
                    break
            selected.append(remaining.pop(pick))
        return selected
