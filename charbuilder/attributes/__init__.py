"""Attribute model for the character builder.

Provides the attribute containers, additive modifiers, and the rules that
derive secondary attributes from main attributes.

Usage:
    >>> from charbuilder.attributes import AttributeModifier, FormulaRule
    >>> bonus = AttributeModifier(health=5, languages=["Elvish"])
    >>> perception = FormulaRule("$intellect + 1")
"""

# Types
from charbuilder.attributes.types import (
    LIST_SECONDARY_ATTRIBUTES,
    MAIN_ATTRIBUTES,
    NUMERIC_ATTRIBUTES,
    NUMERIC_SECONDARY_ATTRIBUTES,
    Attributes,
    MainAttributes,
    SecondaryAttributes,
    Skill,
)

# Modifiers
from charbuilder.attributes.modifier import AttributeModifier

# Calculation rules
from charbuilder.attributes.calculation import (
    AttributeBasedRule,
    CalculationError,
    CalculationRule,
    FixedRule,
    FormulaParseError,
    FormulaRule,
    Operation,
    SecondaryAttributeRules,
    normalize_attribute_name,
    parse_formula,
)

__all__ = [
    # Types
    "LIST_SECONDARY_ATTRIBUTES",
    "MAIN_ATTRIBUTES",
    "NUMERIC_ATTRIBUTES",
    "NUMERIC_SECONDARY_ATTRIBUTES",
    "Attributes",
    "MainAttributes",
    "SecondaryAttributes",
    "Skill",
    # Modifiers
    "AttributeModifier",
    # Calculation rules
    "AttributeBasedRule",
    "CalculationError",
    "CalculationRule",
    "FixedRule",
    "FormulaParseError",
    "FormulaRule",
    "Operation",
    "SecondaryAttributeRules",
    "normalize_attribute_name",
    "parse_formula",
]
