"""Content file schemas."""

from charbuilder.schemas.content import (
    AncestryTemplate,
    AttributeChoiceTemplate,
    CalculationRuleTemplate,
    ChoiceTemplate,
    LanguageChoiceTemplate,
    MainAttributesTemplate,
    ModifierTemplate,
    PathTemplate,
    ProfessionChoiceTemplate,
    SkillChoiceTemplate,
    SkillTemplate,
    SpellChoiceTemplate,
    SpellFileTemplate,
    SpellOptionTemplate,
    SpellSlotTemplate,
    SpellTemplate,
    TraditionTemplate,
    choice_from_data,
    choice_to_data,
    rule_from_value,
)

__all__ = [
    "AncestryTemplate",
    "AttributeChoiceTemplate",
    "CalculationRuleTemplate",
    "ChoiceTemplate",
    "LanguageChoiceTemplate",
    "MainAttributesTemplate",
    "ModifierTemplate",
    "PathTemplate",
    "ProfessionChoiceTemplate",
    "SkillChoiceTemplate",
    "SkillTemplate",
    "SpellChoiceTemplate",
    "SpellFileTemplate",
    "SpellOptionTemplate",
    "SpellSlotTemplate",
    "SpellTemplate",
    "TraditionTemplate",
    "choice_from_data",
    "choice_to_data",
    "rule_from_value",
]
