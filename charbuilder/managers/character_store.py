"""Character store for saving and loading characters.

Characters are saved as references to content keys plus their stored choice
selections. Loading rebuilds the character from the content library and
restores the selections verbatim, without validating them.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from charbuilder.character.character import Character, ChoiceValidationConfig
from charbuilder.choices.types import ChoiceKey
from charbuilder.database.models.characters import CharacterRecord, ChoiceSelection
from charbuilder.observability.hooks import ResolutionHook
from charbuilder.schemas.content import choice_from_data, choice_to_data
from charbuilder.services.content_loader import ContentLibrary

logger = logging.getLogger(__name__)


class CharacterStore:
    """Saves characters to and loads them from the database."""

    def __init__(self, db: Session, library: ContentLibrary) -> None:
        """Initialize the store.

        Args:
            db: Database session.
            library: Content used to rebuild ancestries and paths.
        """
        self.db = db
        self.library = library

    def get_record(self, name: str) -> CharacterRecord | None:
        """Get a saved character row by name."""
        return self.db.execute(
            select(CharacterRecord).where(CharacterRecord.name == name)
        ).scalar_one_or_none()

    def list_records(self) -> list[CharacterRecord]:
        """All saved characters, ordered by name."""
        return list(self.db.execute(select(CharacterRecord).order_by(CharacterRecord.name)).scalars())

    def save(self, character: Character) -> CharacterRecord:
        """Insert or update a character and replace its stored selections.

        Args:
            character: The character to save.

        Returns:
            The saved row.
        """
        record = self.get_record(character.name)
        if record is None:
            record = CharacterRecord(name=character.name, ancestry_key=character.ancestry.key)
            self.db.add(record)

        config = character.validation_config
        record.level = character.level
        record.ancestry_key = character.ancestry.key
        record.novice_path_key = character.novice_path.key if character.novice_path else None
        record.expert_path_key = character.expert_path.key if character.expert_path else None
        record.master_path_key = character.master_path.key if character.master_path else None
        record.validate_on_path_change = config.validate_on_path_change
        record.validate_on_ancestry_change = config.validate_on_ancestry_change
        record.preserve_invalid_choices = config.preserve_invalid_choices

        record.choice_selections.clear()
        self.db.flush()
        for key, selection in character.choices.items():
            parsed = ChoiceKey.parse(key)
            record.choice_selections.append(
                ChoiceSelection(
                    source=parsed.source.value,
                    level=parsed.level,
                    choice_type=parsed.type.value,
                    choice_index=parsed.index,
                    selection=choice_to_data(selection),
                )
            )
        self.db.flush()

        logger.info("Saved %s with %d choice selections", character.name, len(record.choice_selections))
        return record

    def load(self, name: str, hook: ResolutionHook | None = None) -> Character | None:
        """Rebuild a saved character.

        Args:
            name: Character name.
            hook: Observer to attach to the loaded character.

        Returns:
            The character, or None if no character has that name.

        Raises:
            KeyError: If the saved ancestry or a path is missing from the library.
        """
        record = self.get_record(name)
        if record is None:
            return None

        character = Character(
            name=record.name,
            ancestry=self.library.get_ancestry(record.ancestry_key),
            level=record.level,
            novice_path=self._path(record.novice_path_key, "novice"),  # type: ignore[arg-type]
            expert_path=self._path(record.expert_path_key, "expert"),  # type: ignore[arg-type]
            master_path=self._path(record.master_path_key, "master"),  # type: ignore[arg-type]
            validation_config=ChoiceValidationConfig(
                validate_on_path_change=record.validate_on_path_change,
                validate_on_ancestry_change=record.validate_on_ancestry_change,
                preserve_invalid_choices=record.preserve_invalid_choices,
            ),
            hook=hook,
        )
        for row in record.choice_selections:
            character.restore_choice(row.key, choice_from_data(row.selection))
        return character

    def delete(self, name: str) -> bool:
        """Delete a saved character.

        Returns:
            True if a character was deleted.
        """
        record = self.get_record(name)
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        logger.info("Deleted %s", name)
        return True

    def _path(self, key: str | None, tier: str):
        if key is None:
            return None
        return self.library.get_path(key, tier)
