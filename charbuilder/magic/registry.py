"""Spell registry.

The registry is an ordinary object: whoever assembles a character-building
session constructs one, fills it from content files, and passes it to the
character operations that need it.
"""

import logging
from typing import Iterable, Sequence

from charbuilder.choices.types import SpellChoiceConfig, SpellChoiceKind, SpellChoiceOption
from charbuilder.magic.types import Spell, SpellTradition

logger = logging.getLogger(__name__)


class SpellRegistry:
    """Spells and traditions keyed by id."""

    def __init__(
        self,
        spells: Iterable[Spell] = (),
        traditions: Iterable[SpellTradition] = (),
    ) -> None:
        self._spells: dict[str, Spell] = {}
        self._traditions: dict[str, SpellTradition] = {}
        for tradition in traditions:
            self.register_tradition(tradition)
        for spell in spells:
            self.register_spell(spell)

    def __len__(self) -> int:
        return len(self._spells)

    def register_spell(self, spell: Spell) -> None:
        """Add or replace a spell."""
        if spell.id in self._spells:
            logger.debug("Replacing spell %s", spell.id)
        self._spells[spell.id] = spell

    def register_tradition(self, tradition: SpellTradition) -> None:
        """Add or replace a tradition."""
        self._traditions[tradition.id] = tradition

    def get_spell(self, spell_id: str) -> Spell | None:
        return self._spells.get(spell_id)

    def get_tradition(self, tradition_id: str) -> SpellTradition | None:
        return self._traditions.get(tradition_id)

    def all_spells(self) -> list[Spell]:
        return list(self._spells.values())

    def all_traditions(self) -> list[SpellTradition]:
        return list(self._traditions.values())

    def spells_by_tradition(self, tradition_id: str) -> list[Spell]:
        return [spell for spell in self._spells.values() if spell.tradition == tradition_id]

    def spells_by_max_rank(self, max_rank: int) -> list[Spell]:
        return [spell for spell in self._spells.values() if spell.rank <= max_rank]

    def spells_by_tradition_and_rank(self, tradition_id: str, max_rank: int) -> list[Spell]:
        return [spell for spell in self.spells_by_tradition(tradition_id) if spell.rank <= max_rank]

    def available_spells_for_choice(
        self,
        choice: SpellChoiceConfig,
        max_power: int,
        slot_index: int | None = None,
    ) -> list[Spell]:
        """Spells that may be learned through a spell choice.

        Args:
            choice: The spell choice configuration.
            max_power: Highest spell rank the caster can learn.
            slot_index: Restrict to what one slot of the choice accepts.

        Returns:
            Matching spells in registration order. A discover-tradition slot
            offers no spells.
        """
        spells = list(self._spells.values())

        if slot_index is not None and 0 <= slot_index < len(choice.choices):
            slot = choice.choices[slot_index]
            if slot.type == SpellChoiceKind.DISCOVER_TRADITION:
                return []
            if slot.restrict_to_traditions:
                spells = [spell for spell in spells if spell.tradition in slot.restrict_to_traditions]

        if choice.specific_spells:
            spells = [spell for spell in spells if spell.id in choice.specific_spells]

        return [spell for spell in spells if spell.rank <= max_power]

    def validate_spell_choice(
        self,
        choice: SpellChoiceConfig,
        selected: Sequence[SpellChoiceOption],
    ) -> bool:
        """Check that a selection fits the choice's count and slot kinds."""
        if len(selected) > choice.count:
            return False
        return all(
            index < len(choice.choices) and choice.choices[index].accepts(option)
            for index, option in enumerate(selected)
        )

    def available_traditions_for_choice(
        self,
        choice: SpellChoiceConfig,
        slot_index: int,
        discovered: Iterable[str] = (),
    ) -> list[SpellTradition]:
        """Traditions a slot may discover, excluding ones already known."""
        if not 0 <= slot_index < len(choice.choices):
            return []
        slot = choice.choices[slot_index]
        if slot.type == SpellChoiceKind.LEARN_SPELL:
            return []

        known = set(discovered)
        traditions = [tradition for tradition in self._traditions.values() if tradition.id not in known]
        if slot.restrict_to_traditions:
            traditions = [t for t in traditions if t.id in slot.restrict_to_traditions]
        return traditions

    def clear(self) -> None:
        """Remove all spells and traditions."""
        self._spells.clear()
        self._traditions.clear()
