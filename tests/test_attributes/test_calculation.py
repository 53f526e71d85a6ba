"""Tests for secondary attribute calculation rules."""

import pytest

from charbuilder.attributes import (
    AttributeBasedRule,
    CalculationError,
    FixedRule,
    FormulaParseError,
    FormulaRule,
    MainAttributes,
    Operation,
    SecondaryAttributeRules,
    SecondaryAttributes,
    Skill,
    normalize_attribute_name,
)


@pytest.fixture
def main() -> MainAttributes:
    return MainAttributes(strength=12, agility=9, intellect=14, will=7)


class TestNormalizeAttributeName:
    """Tests for camelCase name normalization."""

    def test_camel_case(self):
        """camelCase names should become snake_case."""
        assert normalize_attribute_name("healingRate") == "healing_rate"

    def test_already_snake_case(self):
        """snake_case names should pass through."""
        assert normalize_attribute_name("health") == "health"


class TestFixedRule:
    """Tests for constant rules."""

    def test_number(self, main):
        """Fixed rules should return their value."""
        assert FixedRule(10)(main, 0, SecondaryAttributes()) == 10

    def test_list_is_copied(self, main):
        """Each call should return a fresh list."""
        rule = FixedRule(["Common"])
        first = rule(main, 0, SecondaryAttributes())
        first.append("Elvish")
        assert rule(main, 0, SecondaryAttributes()) == ["Common"]

    def test_minimum(self, main):
        """Values below the minimum should be clamped."""
        assert FixedRule(0, minimum=1)(main, 0, SecondaryAttributes()) == 1


class TestAttributeBasedRule:
    """Tests for rules derived from another attribute."""

    def test_add(self, main):
        """ADD should add the modifier."""
        assert AttributeBasedRule("strength", Operation.ADD, 2)(main, 0, SecondaryAttributes()) == 14

    def test_subtract(self, main):
        """SUBTRACT should subtract the modifier."""
        assert AttributeBasedRule("strength", "subtract", 1)(main, 0, SecondaryAttributes()) == 11

    def test_multiply(self, main):
        """MULTIPLY should multiply by the modifier."""
        assert AttributeBasedRule("will", "multiply", 2)(main, 0, SecondaryAttributes()) == 14

    def test_multiply_by_zero_means_unset(self, main):
        """A zero multiplier should leave the source value unchanged."""
        assert AttributeBasedRule("will", "multiply", 0)(main, 0, SecondaryAttributes()) == 7

    def test_divide_floors(self, main):
        """DIVIDE should floor the result."""
        assert AttributeBasedRule("agility", "divide", 2)(main, 0, SecondaryAttributes()) == 4

    def test_divide_by_zero_rejected(self):
        """A zero divisor should be rejected when the rule is built."""
        with pytest.raises(CalculationError, match="divide by zero"):
            AttributeBasedRule("agility", "divide", 0)

    def test_reads_secondary_attribute(self, main):
        """Rules may read secondary attributes computed earlier."""
        secondary = SecondaryAttributes(health=22)
        assert AttributeBasedRule("health", "divide", 4)(main, 0, secondary) == 5

    def test_reads_level(self, main):
        """Rules may read the character level."""
        assert AttributeBasedRule("level", "add", 10)(main, 3, SecondaryAttributes()) == 13

    def test_camel_case_source(self, main):
        """camelCase source names should be normalized."""
        rule = AttributeBasedRule("healingRate")
        assert rule.source == "healing_rate"

    def test_unknown_source(self):
        """Unknown source attributes should be rejected."""
        with pytest.raises(CalculationError, match="not found"):
            AttributeBasedRule("charisma")

    def test_minimum(self, main):
        """The minimum should clamp the result."""
        rule = AttributeBasedRule("will", "subtract", 10, minimum=1)
        assert rule(main, 0, SecondaryAttributes()) == 1


class TestFormulaRule:
    """Tests for formula rules."""

    def test_precedence(self, main):
        """Multiplication should bind tighter than addition."""
        assert FormulaRule("$strength + $will * 2")(main, 0, SecondaryAttributes()) == 26

    def test_parentheses_and_floor(self, main):
        """Results should be floored after evaluation."""
        assert FormulaRule("($strength + $will) / 2")(main, 0, SecondaryAttributes()) == 9

    def test_unary_minus(self, main):
        """Unary minus should negate its operand."""
        assert FormulaRule("-$will + 10")(main, 0, SecondaryAttributes()) == 3

    def test_minimum(self, main):
        """The minimum should clamp formula results."""
        rule = FormulaRule("$health / 4", minimum=1)
        assert rule(main, 0, SecondaryAttributes(health=3)) == 1

    def test_division_by_zero_yields_zero(self, main):
        """Dividing by a zero value should not fail resolution."""
        assert FormulaRule("$strength / $power")(main, 0, SecondaryAttributes()) == 0

    def test_references(self):
        """References should list every attribute the formula reads."""
        assert FormulaRule("$strength + $healingRate - $level").references == {
            "strength",
            "healing_rate",
            "level",
        }

    @pytest.mark.parametrize(
        "formula",
        ["", "$strength +", "($strength", "$strength $will", "import os", "$charisma"],
    )
    def test_malformed_formulas(self, formula):
        """Malformed formulas should raise FormulaParseError."""
        with pytest.raises(FormulaParseError):
            FormulaRule(formula)


class TestSecondaryAttributeRules:
    """Tests for the ancestry rule set."""

    def test_healing_rate_sees_final_health(self, main):
        """healing_rate should run after health even when defined first."""
        rules = SecondaryAttributeRules(
            {
                "healing_rate": FormulaRule("$health / 4"),
                "health": AttributeBasedRule("strength", "add", 4),
            }
        )
        secondary = rules.compute(main, 0)
        assert secondary.health == 16
        assert secondary.healing_rate == 4

    def test_rules_may_read_earlier_rules(self, main):
        """Rules run in definition order after health."""
        rules = SecondaryAttributeRules(
            health=AttributeBasedRule("strength"),
            defense=AttributeBasedRule("agility"),
            damage=FormulaRule("$defense + $health"),
        )
        assert rules.compute(main, 0).damage == 21

    def test_missing_rules_use_empty_values(self, main):
        """Undefined rules should yield 0 and empty lists."""
        secondary = SecondaryAttributeRules().compute(main, 0)
        assert secondary.health == 0
        assert secondary.speed == 0
        assert secondary.languages == []
        assert secondary.skills == []

    def test_skill_names_become_skills(self, main):
        """A fixed list of skill names should produce Skill objects."""
        rules = SecondaryAttributeRules(skills=FixedRule(["Linguist"]))
        assert rules.compute(main, 0).skills == [Skill("Linguist")]

    def test_unknown_rule_name(self):
        """Rules for unknown attributes should be rejected."""
        with pytest.raises(CalculationError, match="charisma"):
            SecondaryAttributeRules(charisma=FixedRule(1))

    def test_camel_case_names(self, main):
        """Rule names may be given in camelCase."""
        rules = SecondaryAttributeRules({"healingRate": FixedRule(3)})
        assert "healing_rate" in rules
        assert rules.compute(main, 0).healing_rate == 3

    def test_plain_callable_rule(self, main):
        """Any callable with the rule signature is accepted."""
        rules = SecondaryAttributeRules(speed=lambda m, level, s: m.agility + level)
        assert rules.compute(main, 2).speed == 11
