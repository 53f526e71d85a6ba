"""Choice configuration types.

A choice configuration describes an offer made to the player (what can be
picked, how many, what happens by default) together with the player's
selection. Configurations are a tagged union discriminated by ``type``.

Selections are stored on a character under a composite key made of the
choice location (source and level), the choice type, and the index of the
choice among choices of the same type at that location.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Union

from charbuilder.attributes.types import MAIN_ATTRIBUTES, Skill


class ChoiceType(str, Enum):
    """Kind of choice offered."""

    ATTRIBUTE = "attribute"
    SKILL = "skill"
    PROFESSION = "profession"
    LANGUAGE = "language"
    SPELL = "spell"


class ChoiceSource(str, Enum):
    """Where a choice comes from.

    Values match the persisted key format, so they stay camelCase.
    """

    ANCESTRY = "ancestry"
    NOVICE_PATH = "novicePath"
    EXPERT_PATH = "expertPath"
    MASTER_PATH = "masterPath"


class SpellChoiceKind(str, Enum):
    """Sub-type of a single spell pick."""

    DISCOVER_TRADITION = "discoverTradition"
    LEARN_SPELL = "learnSpell"
    FLEXIBLE_CHOICE = "flexibleChoice"


# =============================================================================
# Locations and keys
# =============================================================================


@dataclass(frozen=True)
class ChoiceLocation:
    """The source and level at which a choice becomes available."""

    source: ChoiceSource
    level: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "source", ChoiceSource(self.source))


@dataclass(frozen=True)
class ChoiceKey:
    """Composite identity of a stored selection."""

    source: ChoiceSource
    level: int
    type: ChoiceType
    index: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "source", ChoiceSource(self.source))
        object.__setattr__(self, "type", ChoiceType(self.type))

    @property
    def location(self) -> ChoiceLocation:
        return ChoiceLocation(self.source, self.level)

    def __str__(self) -> str:
        return f"{self.source.value}-{self.level}-{self.type.value}-{self.index}"

    @classmethod
    def parse(cls, key: str) -> "ChoiceKey":
        """Parse a ``source-level-type-index`` key string.

        Raises:
            ValueError: If the key is malformed.
        """
        parts = key.split("-")
        if len(parts) != 4:
            raise ValueError(f"Malformed choice key: {key!r}")
        source, level, choice_type, index = parts
        return cls(ChoiceSource(source), int(level), ChoiceType(choice_type), int(index))


def choice_key(location: ChoiceLocation, choice_type: ChoiceType | str, index: int = 0) -> str:
    """Build the storage key for a selection.

    Examples:
        >>> choice_key(ChoiceLocation(ChoiceSource.NOVICE_PATH, 1), ChoiceType.ATTRIBUTE)
        'novicePath-1-attribute-0'
    """
    return str(ChoiceKey(location.source, location.level, ChoiceType(choice_type), index))


# =============================================================================
# Choice configurations
# =============================================================================


class _ChoiceConfigBase:
    """Shared accessors over the type-specific selection fields."""

    type: ClassVar[ChoiceType]
    _selected_field: ClassVar[str]
    _available_field: ClassVar[str]

    count: int

    @property
    def selected(self) -> list[Any] | None:
        """The player's selection, or None if nothing was picked."""
        return getattr(self, self._selected_field)

    @property
    def available(self) -> list[Any] | None:
        """The options offered, or None for an open choice."""
        return getattr(self, self._available_field)

    def with_selected(self, values: list[Any] | None) -> Any:
        """Return a copy with the selection replaced."""
        return replace(self, **{self._selected_field: values})


@dataclass
class AttributeChoiceConfig(_ChoiceConfigBase):
    """Increase ``count`` main attributes by ``increase_by`` each.

    Picking the same attribute twice increases it twice.
    """

    type: ClassVar[ChoiceType] = ChoiceType.ATTRIBUTE
    _selected_field: ClassVar[str] = "selected_attributes"
    _available_field: ClassVar[str] = "available_attributes"

    count: int
    increase_by: int = 1
    available_attributes: list[str] | None = None
    default_attributes: list[str] | None = None
    selected_attributes: list[str] | None = None

    def effective_defaults(self) -> list[str]:
        """Attributes used when nothing is selected, limited to ``count``."""
        if self.default_attributes:
            return list(self.default_attributes[: self.count])
        return list(MAIN_ATTRIBUTES[: self.count])


@dataclass
class SkillChoiceConfig(_ChoiceConfigBase):
    """Pick skills from a fixed list. Skills have no implicit default."""

    type: ClassVar[ChoiceType] = ChoiceType.SKILL
    _selected_field: ClassVar[str] = "selected_skills"
    _available_field: ClassVar[str] = "available_skills"

    count: int
    available_skills: list[Skill] = field(default_factory=list)
    selected_skills: list[Skill] | None = None


@dataclass
class ProfessionChoiceConfig(_ChoiceConfigBase):
    """Pick professions. An empty available list means any profession."""

    type: ClassVar[ChoiceType] = ChoiceType.PROFESSION
    _selected_field: ClassVar[str] = "selected_professions"
    _available_field: ClassVar[str] = "available_professions"

    count: int
    available_professions: list[str] = field(default_factory=list)
    default_professions: list[str] | None = None
    selected_professions: list[str] | None = None


@dataclass
class LanguageChoiceConfig(_ChoiceConfigBase):
    """Pick languages to speak or read.

    Without ``available_languages`` the choice is free: any language may be
    selected.
    """

    type: ClassVar[ChoiceType] = ChoiceType.LANGUAGE
    _selected_field: ClassVar[str] = "selected_languages"
    _available_field: ClassVar[str] = "available_languages"

    count: int
    available_languages: list[str] | None = None
    can_read_existing: bool = False
    can_learn_new: bool = True
    selected_languages: list[str] | None = None
    writing_preferences: dict[str, bool] | None = None


@dataclass(frozen=True)
class SpellChoiceSlot:
    """One spell pick within a spell choice.

    Attributes:
        type: What the pick may be used for.
        restrict_to_traditions: Tradition ids the pick is limited to.
        description: Player-facing text.
        default_choice: Suggested spell or tradition id.
    """

    type: SpellChoiceKind
    restrict_to_traditions: tuple[str, ...] = ()
    description: str = ""
    default_choice: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", SpellChoiceKind(self.type))
        object.__setattr__(self, "restrict_to_traditions", tuple(self.restrict_to_traditions))

    def accepts(self, option: "SpellChoiceOption") -> bool:
        """Whether a selected option fits this slot."""
        if self.type == SpellChoiceKind.FLEXIBLE_CHOICE:
            return option.type in (SpellChoiceKind.LEARN_SPELL, SpellChoiceKind.DISCOVER_TRADITION)
        return option.type == self.type


@dataclass(frozen=True)
class SpellChoiceOption:
    """A concrete spell pick: learn a spell or discover a tradition."""

    type: SpellChoiceKind
    target_id: str

    def __post_init__(self) -> None:
        kind = SpellChoiceKind(self.type)
        if kind == SpellChoiceKind.FLEXIBLE_CHOICE:
            raise ValueError("A selected spell option must learn a spell or discover a tradition")
        object.__setattr__(self, "type", kind)

    @classmethod
    def learn(cls, spell_id: str) -> "SpellChoiceOption":
        return cls(SpellChoiceKind.LEARN_SPELL, spell_id)

    @classmethod
    def discover(cls, tradition_id: str) -> "SpellChoiceOption":
        return cls(SpellChoiceKind.DISCOVER_TRADITION, tradition_id)


@dataclass
class SpellChoiceConfig(_ChoiceConfigBase):
    """Spell picks; the i-th selection must fit the i-th slot."""

    type: ClassVar[ChoiceType] = ChoiceType.SPELL
    _selected_field: ClassVar[str] = "selected_choices"
    _available_field: ClassVar[str] = "choices"

    count: int
    choices: list[SpellChoiceSlot] = field(default_factory=list)
    specific_spells: list[str] | None = None
    selected_choices: list[SpellChoiceOption] | None = None


ChoiceConfig = Union[
    AttributeChoiceConfig,
    SkillChoiceConfig,
    ProfessionChoiceConfig,
    LanguageChoiceConfig,
    SpellChoiceConfig,
]

CHOICE_CONFIG_TYPES: dict[ChoiceType, type] = {
    ChoiceType.ATTRIBUTE: AttributeChoiceConfig,
    ChoiceType.SKILL: SkillChoiceConfig,
    ChoiceType.PROFESSION: ProfessionChoiceConfig,
    ChoiceType.LANGUAGE: LanguageChoiceConfig,
    ChoiceType.SPELL: SpellChoiceConfig,
}


@dataclass(frozen=True)
class AvailableChoice:
    """A live choice configuration surfaced for a character.

    Attributes:
        location: Source and level that unlocked the choice.
        config: The live configuration (never carries the player's selection).
        index: Position among choices of the same type at this location.
    """

    location: ChoiceLocation
    config: ChoiceConfig
    index: int = 0

    @property
    def type(self) -> ChoiceType:
        return self.config.type

    @property
    def key(self) -> str:
        return choice_key(self.location, self.config.type, self.index)
