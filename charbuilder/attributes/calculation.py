"""Secondary attribute calculation rules.

Ancestries derive their secondary attributes through a closed set of rule
variants:

- FixedRule: a constant (numbers or lists)
- AttributeBasedRule: another attribute combined with a modifier
- FormulaRule: an arithmetic expression over ``$attribute`` references

Formulas are tokenized and parsed once into a small AST and evaluated by
interpretation, so content files can never execute code.

Usage:
    >>> rule = FormulaRule("($strength + $will) / 2")
    >>> rule(MainAttributes(strength=12, will=9), 0, SecondaryAttributes())
    10
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Union

from charbuilder.attributes.types import (
    LIST_SECONDARY_ATTRIBUTES,
    MAIN_ATTRIBUTES,
    NUMERIC_SECONDARY_ATTRIBUTES,
    MainAttributes,
    SecondaryAttributes,
    Skill,
)


CalculationFunction = Callable[[MainAttributes, int, SecondaryAttributes], Any]

# Names a rule may read: main attributes, numeric secondaries, and the level
REFERENCEABLE_NAMES: frozenset[str] = frozenset(
    MAIN_ATTRIBUTES + NUMERIC_SECONDARY_ATTRIBUTES + ("level",)
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class CalculationError(ValueError):
    """Invalid calculation rule definition."""

    pass


class FormulaParseError(CalculationError):
    """Error parsing a formula string."""

    pass


def normalize_attribute_name(name: str) -> str:
    """Convert a camelCase attribute name to snake_case.

    Examples:
        >>> normalize_attribute_name("healingRate")
        'healing_rate'
        >>> normalize_attribute_name("health")
        'health'
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _lookup(name: str, main: MainAttributes, level: int, secondary: SecondaryAttributes) -> int:
    if name == "level":
        return level
    if name in MAIN_ATTRIBUTES:
        return main.get(name)
    return secondary.get(name)


# =============================================================================
# Rule variants
# =============================================================================


class Operation(str, Enum):
    """Operation applied by an attribute-based rule."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


def _clamp(value: Any, minimum: int | None) -> Any:
    if minimum is not None and isinstance(value, int):
        return max(minimum, value)
    return value


@dataclass(frozen=True)
class FixedRule:
    """Rule that always returns the same value."""

    value: Any
    minimum: int | None = None

    def __call__(self, main: MainAttributes, level: int, secondary: SecondaryAttributes) -> Any:
        if isinstance(self.value, (list, tuple)):
            return list(self.value)
        return _clamp(self.value, self.minimum)


@dataclass(frozen=True)
class AttributeBasedRule:
    """Rule deriving a value from one other attribute.

    Attributes:
        source: Main attribute, numeric secondary attribute, or ``level``.
        operation: How the modifier is combined with the source value.
        modifier: Operand for the operation. Division floors the result.
        minimum: Optional lower bound for the result.
    """

    source: str
    operation: Operation = Operation.ADD
    modifier: int = 0
    minimum: int | None = None

    def __post_init__(self) -> None:
        source = normalize_attribute_name(self.source)
        if source not in REFERENCEABLE_NAMES:
            raise CalculationError(f"Source attribute not found: {self.source}")
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "operation", Operation(self.operation))
        if self.operation == Operation.DIVIDE and self.modifier == 0:
            raise CalculationError("Cannot divide by zero")

    def __call__(self, main: MainAttributes, level: int, secondary: SecondaryAttributes) -> int:
        value = _lookup(self.source, main, level, secondary)
        if self.operation == Operation.ADD:
            result = value + self.modifier
        elif self.operation == Operation.SUBTRACT:
            result = value - self.modifier
        elif self.operation == Operation.MULTIPLY:
            # A zero multiplier means "unset", not "always zero"
            result = value * (self.modifier or 1)
        else:
            result = value // self.modifier
        return _clamp(result, self.minimum)


# =============================================================================
# Formula parsing
# =============================================================================


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Reference:
    name: str


@dataclass(frozen=True)
class Negate:
    operand: "Expression"


@dataclass(frozen=True)
class BinaryOp:
    operator: str
    left: "Expression"
    right: "Expression"


Expression = Union[Number, Reference, Negate, BinaryOp]

_TOKEN_PATTERN = re.compile(
    r"\s*(?:(?P<number>\d+(?:\.\d+)?)|\$(?P<ref>[A-Za-z_][A-Za-z0-9_]*)|(?P<op>[-+*/()]))"
)


def tokenize(formula: str) -> list[tuple[str, str]]:
    """Split a formula into (kind, text) tokens.

    Raises:
        FormulaParseError: On any character outside the grammar.
    """
    tokens: list[tuple[str, str]] = []
    position = 0
    stripped_end = len(formula.rstrip())
    while position < stripped_end:
        match = _TOKEN_PATTERN.match(formula, position)
        if not match:
            raise FormulaParseError(
                f"Unexpected character {formula[position:].strip()[:1]!r} in formula {formula!r}"
            )
        kind = match.lastgroup or ""
        tokens.append((kind, match.group(kind)))
        position = match.end()
    return tokens


class _Parser:
    """Recursive-descent parser for the formula grammar.

    expression := term (("+" | "-") term)*
    term       := factor (("*" | "/") factor)*
    factor     := "-" factor | number | $name | "(" expression ")"
    """

    def __init__(self, formula: str) -> None:
        self.formula = formula
        self.tokens = tokenize(formula)
        self.position = 0

    def parse(self) -> Expression:
        if not self.tokens:
            raise FormulaParseError("Formula cannot be empty")
        expression = self._expression()
        if self.position != len(self.tokens):
            raise FormulaParseError(
                f"Unexpected token {self.tokens[self.position][1]!r} in formula {self.formula!r}"
            )
        return expression

    def _peek(self) -> tuple[str, str] | None:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _advance(self) -> tuple[str, str]:
        token = self._peek()
        if token is None:
            raise FormulaParseError(f"Unexpected end of formula {self.formula!r}")
        self.position += 1
        return token

    def _expression(self) -> Expression:
        node = self._term()
        while (token := self._peek()) is not None and token[1] in ("+", "-"):
            self._advance()
            node = BinaryOp(token[1], node, self._term())
        return node

    def _term(self) -> Expression:
        node = self._factor()
        while (token := self._peek()) is not None and token[1] in ("*", "/"):
            self._advance()
            node = BinaryOp(token[1], node, self._factor())
        return node

    def _factor(self) -> Expression:
        kind, text = self._advance()
        if kind == "number":
            return Number(float(text))
        if kind == "ref":
            name = normalize_attribute_name(text)
            if name not in REFERENCEABLE_NAMES:
                raise FormulaParseError(f"Unknown attribute in formula: {text}")
            return Reference(name)
        if text == "-":
            return Negate(self._factor())
        if text == "(":
            node = self._expression()
            _, closing = self._advance()
            if closing != ")":
                raise FormulaParseError(f"Expected ')' in formula {self.formula!r}")
            return node
        raise FormulaParseError(f"Unexpected token {text!r} in formula {self.formula!r}")


def parse_formula(formula: str) -> Expression:
    """Parse a formula string into an expression tree.

    Raises:
        FormulaParseError: If the formula is malformed or references an
            unknown attribute.
    """
    return _Parser(formula).parse()


def evaluate(node: Expression, context: Mapping[str, float]) -> float:
    """Evaluate an expression tree against attribute values."""
    if isinstance(node, Number):
        return node.value
    if isinstance(node, Reference):
        return context[node.name]
    if isinstance(node, Negate):
        return -evaluate(node.operand, context)

    left = evaluate(node.left, context)
    right = evaluate(node.right, context)
    if node.operator == "+":
        return left + right
    if node.operator == "-":
        return left - right
    if node.operator == "*":
        return left * right
    if right == 0:
        # Division by zero degrades to zero rather than failing a resolution
        return 0.0
    return left / right


def _references(node: Expression) -> set[str]:
    if isinstance(node, Reference):
        return {node.name}
    if isinstance(node, Negate):
        return _references(node.operand)
    if isinstance(node, BinaryOp):
        return _references(node.left) | _references(node.right)
    return set()


@dataclass(frozen=True)
class FormulaRule:
    """Rule evaluating an arithmetic formula; the result is floored."""

    formula: str
    minimum: int | None = None
    expression: Expression = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "expression", parse_formula(self.formula))

    @property
    def references(self) -> set[str]:
        return _references(self.expression)

    def __call__(self, main: MainAttributes, level: int, secondary: SecondaryAttributes) -> int:
        context = {name: _lookup(name, main, level, secondary) for name in self.references}
        return _clamp(math.floor(evaluate(self.expression, context)), self.minimum)


CalculationRule = Union[FixedRule, AttributeBasedRule, FormulaRule, CalculationFunction]


# =============================================================================
# Rule set
# =============================================================================


_LIST_DEFAULTS: dict[str, Callable[[], list]] = {name: list for name in LIST_SECONDARY_ATTRIBUTES}


class SecondaryAttributeRules:
    """The full set of rules an ancestry uses to derive secondary attributes.

    ``health`` is always computed first and ``healing_rate`` last; the other
    rules run in between in definition order and may read any value computed
    before them. Missing numeric rules yield 0, missing list rules yield [].
    """

    def __init__(self, rules: Mapping[str, CalculationRule] | None = None, **kwargs: CalculationRule) -> None:
        combined = {normalize_attribute_name(name): rule for name, rule in {**(rules or {}), **kwargs}.items()}
        known = set(NUMERIC_SECONDARY_ATTRIBUTES) | set(LIST_SECONDARY_ATTRIBUTES)
        unknown = sorted(set(combined) - known)
        if unknown:
            raise CalculationError(f"Unknown secondary attribute rule(s): {', '.join(unknown)}")
        self._rules: dict[str, CalculationRule] = combined

    def __contains__(self, name: str) -> bool:
        return name in self._rules

    def __getitem__(self, name: str) -> CalculationRule:
        return self._rules[name]

    @property
    def names(self) -> list[str]:
        return list(self._rules)

    def evaluate(self, name: str, main: MainAttributes, level: int, secondary: SecondaryAttributes) -> Any:
        """Evaluate one rule, falling back to the empty value when undefined."""
        rule = self._rules.get(name)
        if rule is None:
            return _LIST_DEFAULTS[name]() if name in _LIST_DEFAULTS else 0
        value = rule(main, level, secondary)
        if name == "skills":
            return [item if isinstance(item, Skill) else Skill(str(item)) for item in value or []]
        if name in _LIST_DEFAULTS:
            return list(value or [])
        return int(value)

    def compute(self, main: MainAttributes, level: int) -> SecondaryAttributes:
        """Derive all secondary attributes from main attributes.

        Args:
            main: Main attributes to derive from.
            level: Current character level.

        Returns:
            Freshly computed secondary attributes.
        """
        secondary = SecondaryAttributes()
        secondary.health = self.evaluate("health", main, level, secondary)

        for name in self._ordered_middle():
            setattr(secondary, name, self.evaluate(name, main, level, secondary))

        secondary.healing_rate = self.compute_healing_rate(main, level, secondary)
        return secondary

    def compute_healing_rate(self, main: MainAttributes, level: int, secondary: SecondaryAttributes) -> int:
        """Evaluate the healing rate rule against the given values."""
        return self.evaluate("healing_rate", main, level, secondary)

    def _ordered_middle(self) -> list[str]:
        defined = [name for name in self._rules if name not in ("health", "healing_rate")]
        undefined = [
            name
            for name in NUMERIC_SECONDARY_ATTRIBUTES + LIST_SECONDARY_ATTRIBUTES
            if name not in self._rules and name not in ("health", "healing_rate")
        ]
        return defined + undefined
