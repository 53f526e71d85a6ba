"""Persistence models for characters and their choice selections.

A character row stores references to content by key; the ancestry and path
definitions themselves live in content files. Each stored selection is one
row keyed by its composite choice key parts.
"""

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from charbuilder.database.models.base import Base, TimestampMixin


class CharacterRecord(Base, TimestampMixin):
    """A saved character."""

    __tablename__ = "characters"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Content references
    ancestry_key: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Ancestry content key (e.g., 'human')",
    )
    novice_path_key: Mapped[str | None] = mapped_column(String(100), nullable=True)
    expert_path_key: Mapped[str | None] = mapped_column(String(100), nullable=True)
    master_path_key: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Validation configuration
    validate_on_path_change: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    validate_on_ancestry_change: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    preserve_invalid_choices: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    choice_selections: Mapped[list["ChoiceSelection"]] = relationship(
        back_populates="character",
        cascade="all, delete-orphan",
        order_by="ChoiceSelection.id",
    )

    def __repr__(self) -> str:
        return f"<CharacterRecord {self.name} L{self.level} ({self.ancestry_key})>"


class ChoiceSelection(Base, TimestampMixin):
    """One stored choice selection."""

    __tablename__ = "choice_selections"
    __table_args__ = (
        UniqueConstraint(
            "character_id",
            "source",
            "level",
            "choice_type",
            "choice_index",
            name="uq_choice_selection_key",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    character_id: Mapped[int] = mapped_column(
        ForeignKey("characters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Composite choice key
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    choice_type: Mapped[str] = mapped_column(String(20), nullable=False)
    choice_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    selection: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        comment="Choice configuration with the player's selection",
    )

    character: Mapped["CharacterRecord"] = relationship(back_populates="choice_selections")

    @property
    def key(self) -> str:
        return f"{self.source}-{self.level}-{self.choice_type}-{self.choice_index}"

    def __repr__(self) -> str:
        return f"<ChoiceSelection {self.key}>"
