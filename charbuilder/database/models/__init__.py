"""Database models package."""

from charbuilder.database.models.base import Base, TimestampMixin
from charbuilder.database.models.characters import CharacterRecord, ChoiceSelection

__all__ = [
    "Base",
    "TimestampMixin",
    "CharacterRecord",
    "ChoiceSelection",
]
