"""Content template schemas for YAML/JSON import.

This module defines Pydantic models for ancestry, path, and spell content
files. Use with the content_loader service. Each template knows how to
build the corresponding domain object.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator

from charbuilder.attributes.calculation import (
    AttributeBasedRule,
    CalculationRule,
    FixedRule,
    FormulaRule,
    Operation,
    SecondaryAttributeRules,
)
from charbuilder.attributes.modifier import AttributeModifier
from charbuilder.attributes.types import MAIN_ATTRIBUTES, MainAttributes, Skill
from charbuilder.character.ancestry import Ancestry
from charbuilder.choices.types import (
    AttributeChoiceConfig,
    ChoiceConfig,
    LanguageChoiceConfig,
    ProfessionChoiceConfig,
    SkillChoiceConfig,
    SpellChoiceConfig,
    SpellChoiceKind,
    SpellChoiceOption,
    SpellChoiceSlot,
)
from charbuilder.magic.types import Spell, SpellTradition, SpellType
from charbuilder.paths import PATH_TIERS
from charbuilder.paths.base import Path


def _check_main_attributes(values: list[str] | None) -> list[str] | None:
    if values is None:
        return None
    unknown = [value for value in values if value not in MAIN_ATTRIBUTES]
    if unknown:
        raise ValueError(f"Unknown main attribute(s): {', '.join(unknown)}")
    return values


# =============================================================================
# Skills and calculation rules
# =============================================================================


class SkillTemplate(BaseModel):
    """Template for a skill."""

    name: str = Field(..., description="Skill name, unique per character")
    description: str = Field(default="", description="Rules text")

    def to_skill(self) -> Skill:
        return Skill(name=self.name, description=self.description)


class CalculationRuleTemplate(BaseModel):
    """Template for a secondary attribute rule.

    Content files may also use shorthands: a number or list for a fixed
    value, or a string for a formula.
    """

    kind: Literal["fixed", "attribute", "formula"] = Field(..., description="Rule variant")
    value: int | list[str] | None = Field(default=None, description="Fixed value")
    source: str | None = Field(default=None, description="Source attribute for attribute rules")
    operation: Operation = Field(default=Operation.ADD, description="Operation for attribute rules")
    modifier: int = Field(default=0, description="Operand for attribute rules")
    formula: str | None = Field(default=None, description="Formula using $attribute references")
    minimum: int | None = Field(default=None, description="Lower bound for the result")

    @model_validator(mode="after")
    def check_required_fields(self) -> "CalculationRuleTemplate":
        required = {"fixed": "value", "attribute": "source", "formula": "formula"}[self.kind]
        if getattr(self, required) is None:
            raise ValueError(f"'{required}' is required for {self.kind} rules")
        return self

    def to_rule(self) -> CalculationRule:
        if self.kind == "fixed":
            return FixedRule(self.value, minimum=self.minimum)
        if self.kind == "attribute":
            return AttributeBasedRule(
                self.source or "",
                operation=self.operation,
                modifier=self.modifier,
                minimum=self.minimum,
            )
        return FormulaRule(self.formula or "", minimum=self.minimum)


RuleValue = Union[CalculationRuleTemplate, int, list[str], str]


def rule_from_value(value: RuleValue) -> CalculationRule:
    """Build a rule from a template or one of its shorthands."""
    if isinstance(value, CalculationRuleTemplate):
        return value.to_rule()
    if isinstance(value, str):
        return FormulaRule(value)
    return FixedRule(value)


# =============================================================================
# Choices
# =============================================================================


class AttributeChoiceTemplate(BaseModel):
    """Template for an attribute choice."""

    type: Literal["attribute"] = "attribute"
    count: int = Field(..., ge=1, description="Number of attributes to increase")
    increase_by: int = Field(default=1, description="Increase per selected attribute")
    available_attributes: list[str] | None = Field(default=None)
    default_attributes: list[str] | None = Field(default=None)
    selected_attributes: list[str] | None = Field(default=None)

    @field_validator("available_attributes", "default_attributes", "selected_attributes")
    @classmethod
    def validate_attribute_names(cls, values: list[str] | None) -> list[str] | None:
        return _check_main_attributes(values)

    def to_config(self) -> AttributeChoiceConfig:
        return AttributeChoiceConfig(**self.model_dump(exclude={"type"}))


class SkillChoiceTemplate(BaseModel):
    """Template for a skill choice."""

    type: Literal["skill"] = "skill"
    count: int = Field(..., ge=1)
    available_skills: list[SkillTemplate] = Field(default_factory=list)
    selected_skills: list[SkillTemplate] | None = Field(default=None)

    def to_config(self) -> SkillChoiceConfig:
        return SkillChoiceConfig(
            count=self.count,
            available_skills=[skill.to_skill() for skill in self.available_skills],
            selected_skills=(
                [skill.to_skill() for skill in self.selected_skills]
                if self.selected_skills is not None
                else None
            ),
        )


class ProfessionChoiceTemplate(BaseModel):
    """Template for a profession choice. Empty available list = any profession."""

    type: Literal["profession"] = "profession"
    count: int = Field(..., ge=1)
    available_professions: list[str] = Field(default_factory=list)
    default_professions: list[str] | None = Field(default=None)
    selected_professions: list[str] | None = Field(default=None)

    def to_config(self) -> ProfessionChoiceConfig:
        return ProfessionChoiceConfig(**self.model_dump(exclude={"type"}))


class LanguageChoiceTemplate(BaseModel):
    """Template for a language choice. No available list = free choice."""

    type: Literal["language"] = "language"
    count: int = Field(..., ge=1)
    available_languages: list[str] | None = Field(default=None)
    can_read_existing: bool = Field(default=False)
    can_learn_new: bool = Field(default=True)
    selected_languages: list[str] | None = Field(default=None)
    writing_preferences: dict[str, bool] | None = Field(default=None)

    def to_config(self) -> LanguageChoiceConfig:
        return LanguageChoiceConfig(**self.model_dump(exclude={"type"}))


class SpellSlotTemplate(BaseModel):
    """Template for one pick within a spell choice."""

    type: SpellChoiceKind
    restrict_to_traditions: list[str] = Field(default_factory=list)
    description: str = ""
    default_choice: str | None = None

    def to_slot(self) -> SpellChoiceSlot:
        return SpellChoiceSlot(
            type=self.type,
            restrict_to_traditions=tuple(self.restrict_to_traditions),
            description=self.description,
            default_choice=self.default_choice,
        )


class SpellOptionTemplate(BaseModel):
    """Template for a selected spell pick."""

    type: SpellChoiceKind
    target_id: str

    @field_validator("type")
    @classmethod
    def validate_concrete_kind(cls, value: SpellChoiceKind) -> SpellChoiceKind:
        if value == SpellChoiceKind.FLEXIBLE_CHOICE:
            raise ValueError("A selected spell option must learn a spell or discover a tradition")
        return value

    def to_option(self) -> SpellChoiceOption:
        return SpellChoiceOption(type=self.type, target_id=self.target_id)


class SpellChoiceTemplate(BaseModel):
    """Template for a spell choice."""

    type: Literal["spell"] = "spell"
    count: int = Field(..., ge=1)
    choices: list[SpellSlotTemplate] = Field(default_factory=list)
    specific_spells: list[str] | None = Field(default=None)
    selected_choices: list[SpellOptionTemplate] | None = Field(default=None)

    def to_config(self) -> SpellChoiceConfig:
        return SpellChoiceConfig(
            count=self.count,
            choices=[slot.to_slot() for slot in self.choices],
            specific_spells=self.specific_spells,
            selected_choices=(
                [option.to_option() for option in self.selected_choices]
                if self.selected_choices is not None
                else None
            ),
        )


ChoiceTemplate = Annotated[
    Union[
        AttributeChoiceTemplate,
        SkillChoiceTemplate,
        ProfessionChoiceTemplate,
        LanguageChoiceTemplate,
        SpellChoiceTemplate,
    ],
    Field(discriminator="type"),
]

_choice_adapter: TypeAdapter[Any] = TypeAdapter(ChoiceTemplate)


def choice_from_data(data: dict[str, Any]) -> ChoiceConfig:
    """Build a choice configuration from plain data.

    Raises:
        pydantic.ValidationError: If the data is not a valid choice.
    """
    return _choice_adapter.validate_python(data).to_config()


def choice_to_data(config: ChoiceConfig) -> dict[str, Any]:
    """Convert a choice configuration to plain, JSON-safe data."""
    data: dict[str, Any] = {"type": config.type.value, "count": config.count}

    if isinstance(config, AttributeChoiceConfig):
        data.update(
            increase_by=config.increase_by,
            available_attributes=config.available_attributes,
            default_attributes=config.default_attributes,
            selected_attributes=config.selected_attributes,
        )
    elif isinstance(config, SkillChoiceConfig):
        data["available_skills"] = [_skill_data(skill) for skill in config.available_skills]
        if config.selected_skills is not None:
            data["selected_skills"] = [_skill_data(skill) for skill in config.selected_skills]
    elif isinstance(config, ProfessionChoiceConfig):
        data.update(
            available_professions=config.available_professions,
            default_professions=config.default_professions,
            selected_professions=config.selected_professions,
        )
    elif isinstance(config, LanguageChoiceConfig):
        data.update(
            available_languages=config.available_languages,
            can_read_existing=config.can_read_existing,
            can_learn_new=config.can_learn_new,
            selected_languages=config.selected_languages,
            writing_preferences=config.writing_preferences,
        )
    else:
        data["choices"] = [
            {
                "type": slot.type.value,
                "restrict_to_traditions": list(slot.restrict_to_traditions),
                "description": slot.description,
                "default_choice": slot.default_choice,
            }
            for slot in config.choices
        ]
        data["specific_spells"] = config.specific_spells
        if config.selected_choices is not None:
            data["selected_choices"] = [
                {"type": option.type.value, "target_id": option.target_id}
                for option in config.selected_choices
            ]

    return {key: value for key, value in data.items() if value is not None}


def _skill_data(skill: Skill) -> dict[str, str]:
    return {"name": skill.name, "description": skill.description}


# =============================================================================
# Modifiers, ancestries, and paths
# =============================================================================


class ModifierTemplate(BaseModel):
    """Template for an attribute modifier."""

    strength: int | None = None
    agility: int | None = None
    intellect: int | None = None
    will: int | None = None
    perception: int | None = None
    defense: int | None = None
    health: int | None = None
    healing_rate: int | None = None
    size: int | None = None
    speed: int | None = None
    power: int | None = None
    damage: int | None = None
    insanity: int | None = None
    corruption: int | None = None
    languages: list[str] = Field(default_factory=list)
    professions: list[str] = Field(default_factory=list)
    skills: list[SkillTemplate] = Field(default_factory=list)
    choices: list[ChoiceTemplate] = Field(
        default_factory=list,
        description="Choices unlocked with this modifier",
    )

    def to_modifier(self) -> AttributeModifier:
        numeric = self.model_dump(exclude={"languages", "professions", "skills", "choices"})
        return AttributeModifier(
            **numeric,
            languages=tuple(self.languages),
            professions=tuple(self.professions),
            skills=tuple(skill.to_skill() for skill in self.skills),
            choices=tuple(choice.to_config() for choice in self.choices),
        )


class MainAttributesTemplate(BaseModel):
    """Template for base main attributes."""

    strength: int = 10
    agility: int = 10
    intellect: int = 10
    will: int = 10


class AncestryTemplate(BaseModel):
    """Complete ancestry template for import."""

    name: str = Field(..., description="Display name")
    description: str = Field(default="")
    main_attributes: MainAttributesTemplate = Field(default_factory=MainAttributesTemplate)
    secondary_attributes: dict[str, RuleValue] = Field(
        default_factory=dict,
        description="Rule per secondary attribute (snake_case or camelCase names)",
    )
    ancestry_modifier: ModifierTemplate | None = Field(
        default=None,
        description="Modifier active from level 4",
    )
    initial_choices: list[ChoiceTemplate] = Field(
        default_factory=list,
        description="Choices made at character creation",
    )

    def to_ancestry(self, key: str) -> Ancestry:
        rules = SecondaryAttributeRules(
            {name: rule_from_value(value) for name, value in self.secondary_attributes.items()}
        )
        return Ancestry(
            key=key,
            name=self.name,
            description=self.description,
            main_attributes=MainAttributes(**self.main_attributes.model_dump()),
            secondary_attribute_rules=rules,
            ancestry_modifier=self.ancestry_modifier.to_modifier() if self.ancestry_modifier else None,
            initial_choices=[choice.to_config() for choice in self.initial_choices],
        )


class PathTemplate(BaseModel):
    """Complete path template for import."""

    name: str = Field(..., description="Display name")
    description: str = Field(default="")
    tier: Literal["novice", "expert", "master"] = Field(..., description="Path tier")
    levels: dict[int, ModifierTemplate] = Field(..., description="Modifier per tier level")

    @model_validator(mode="after")
    def check_levels(self) -> "PathTemplate":
        expected = PATH_TIERS[self.tier].LEVELS
        if sorted(self.levels) != list(expected):
            raise ValueError(
                f"{self.tier} paths must define levels {list(expected)}, got {sorted(self.levels)}"
            )
        return self

    def to_path(self, key: str) -> Path:
        return PATH_TIERS[self.tier](
            key=key,
            name=self.name,
            description=self.description,
            modifiers={level: modifier.to_modifier() for level, modifier in self.levels.items()},
        )


# =============================================================================
# Spells
# =============================================================================


class TraditionTemplate(BaseModel):
    """Template for a spell tradition."""

    id: str
    name: str
    description: str = ""
    is_dark: bool = False
    primary_attribute: str | None = None

    def to_tradition(self) -> SpellTradition:
        return SpellTradition(**self.model_dump())


class SpellTemplate(BaseModel):
    """Template for a spell. The tradition defaults to the file's tradition."""

    id: str
    name: str
    rank: int = Field(..., ge=0)
    type: SpellType = SpellType.UTILITY
    tradition: str | None = None
    description: str = ""
    range: str = ""
    duration: str = ""

    def to_spell(self, default_tradition: str) -> Spell:
        return Spell(
            id=self.id,
            name=self.name,
            tradition=self.tradition or default_tradition,
            rank=self.rank,
            type=self.type,
            description=self.description,
            range=self.range,
            duration=self.duration,
        )


class SpellFileTemplate(BaseModel):
    """A tradition and its spells."""

    tradition: TraditionTemplate
    spells: list[SpellTemplate] = Field(default_factory=list)
