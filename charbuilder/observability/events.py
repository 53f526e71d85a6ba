"""Event dataclasses for resolution hooks.

These events are emitted by ``Character`` while it resolves attributes and
validates stored choices.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class ResolutionStartEvent:
    """Emitted when attribute resolution begins."""

    character: str
    level: int
    ancestry: str
    paths: dict[str, str] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ModifierAppliedEvent:
    """Emitted after an ancestry or path modifier is applied."""

    source: str
    level: int
    changes: dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ChoiceAppliedEvent:
    """Emitted after a choice's effective value is applied.

    ``from_default`` is True when no selection was stored and the
    configuration's defaults were used.
    """

    key: str
    choice_type: str
    values: list[Any]
    from_default: bool = False
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ResolutionEndEvent:
    """Emitted with the final snapshot."""

    character: str
    level: int
    attributes: dict[str, Any]
    duration_ms: float
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ChoiceValidatedEvent:
    """Emitted when validation trims or removes a stored selection."""

    key: str
    outcome: str
    reason: str
    preserved: bool = False
    timestamp: datetime = field(default_factory=datetime.now)
