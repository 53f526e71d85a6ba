"""Observability for attribute resolution.

Provides hooks and observers for visibility into resolution steps and
choice validation without the core printing anything itself.
"""

from charbuilder.observability.events import (
    ChoiceAppliedEvent,
    ChoiceValidatedEvent,
    ModifierAppliedEvent,
    ResolutionEndEvent,
    ResolutionStartEvent,
)
from charbuilder.observability.hooks import (
    CompositeHook,
    LoggingHook,
    NullHook,
    ResolutionHook,
)
from charbuilder.observability.console_observer import RichConsoleObserver

__all__ = [
    # Events
    "ResolutionStartEvent",
    "ModifierAppliedEvent",
    "ChoiceAppliedEvent",
    "ResolutionEndEvent",
    "ChoiceValidatedEvent",
    # Hooks
    "ResolutionHook",
    "NullHook",
    "CompositeHook",
    "LoggingHook",
    # Observers
    "RichConsoleObserver",
]
