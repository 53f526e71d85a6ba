"""Managers for persisted state."""

from charbuilder.managers.character_store import CharacterStore

__all__ = ["CharacterStore"]
