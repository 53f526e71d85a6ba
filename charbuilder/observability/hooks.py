"""Resolution hook protocol and implementations.

The ResolutionHook protocol defines the interface for receiving events from
attribute resolution and choice validation. Implementations can render to
the console, write to the log, or collect events for tests.
"""

import logging
from typing import Protocol, runtime_checkable

from charbuilder.observability.events import (
    ChoiceAppliedEvent,
    ChoiceValidatedEvent,
    ModifierAppliedEvent,
    ResolutionEndEvent,
    ResolutionStartEvent,
)


@runtime_checkable
class ResolutionHook(Protocol):
    """Protocol for resolution hooks.

    Implement this protocol to observe a character's resolution steps.
    """

    def on_resolution_start(self, event: ResolutionStartEvent) -> None:
        """Called when attribute resolution begins."""
        ...

    def on_modifier_applied(self, event: ModifierAppliedEvent) -> None:
        """Called after each ancestry or path modifier."""
        ...

    def on_choice_applied(self, event: ChoiceAppliedEvent) -> None:
        """Called after each resolved choice."""
        ...

    def on_resolution_end(self, event: ResolutionEndEvent) -> None:
        """Called with the final snapshot."""
        ...

    def on_choice_validated(self, event: ChoiceValidatedEvent) -> None:
        """Called when validation changes, or would change, a selection."""
        ...


class NullHook:
    """No-op hook, the default for every character.

    Using this avoids null checks throughout the resolution code.
    """

    def on_resolution_start(self, event: ResolutionStartEvent) -> None:
        pass

    def on_modifier_applied(self, event: ModifierAppliedEvent) -> None:
        pass

    def on_choice_applied(self, event: ChoiceAppliedEvent) -> None:
        pass

    def on_resolution_end(self, event: ResolutionEndEvent) -> None:
        pass

    def on_choice_validated(self, event: ChoiceValidatedEvent) -> None:
        pass


class CompositeHook:
    """Combines multiple hooks into one.

    Events are dispatched to all hooks in order.
    """

    def __init__(self, hooks: list[ResolutionHook]) -> None:
        """Initialize with a list of hooks.

        Args:
            hooks: List of hooks to dispatch events to.
        """
        self.hooks = hooks

    def on_resolution_start(self, event: ResolutionStartEvent) -> None:
        for hook in self.hooks:
            hook.on_resolution_start(event)

    def on_modifier_applied(self, event: ModifierAppliedEvent) -> None:
        for hook in self.hooks:
            hook.on_modifier_applied(event)

    def on_choice_applied(self, event: ChoiceAppliedEvent) -> None:
        for hook in self.hooks:
            hook.on_choice_applied(event)

    def on_resolution_end(self, event: ResolutionEndEvent) -> None:
        for hook in self.hooks:
            hook.on_resolution_end(event)

    def on_choice_validated(self, event: ChoiceValidatedEvent) -> None:
        for hook in self.hooks:
            hook.on_choice_validated(event)


class LoggingHook:
    """Writes resolution steps to a standard logger at DEBUG level."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("charbuilder.resolution")

    def on_resolution_start(self, event: ResolutionStartEvent) -> None:
        self.logger.debug(
            "Resolving %s at level %d (ancestry=%s, paths=%s)",
            event.character,
            event.level,
            event.ancestry,
            event.paths,
        )

    def on_modifier_applied(self, event: ModifierAppliedEvent) -> None:
        self.logger.debug("Applied %s modifier at level %d: %s", event.source, event.level, event.changes)

    def on_choice_applied(self, event: ChoiceAppliedEvent) -> None:
        origin = "default" if event.from_default else "selected"
        self.logger.debug("Applied %s choice %s (%s): %s", event.choice_type, event.key, origin, event.values)

    def on_resolution_end(self, event: ResolutionEndEvent) -> None:
        self.logger.debug(
            "Resolved %s in %.2fms: health=%s, healing_rate=%s",
            event.character,
            event.duration_ms,
            event.attributes.get("health"),
            event.attributes.get("healing_rate"),
        )

    def on_choice_validated(self, event: ChoiceValidatedEvent) -> None:
        self.logger.debug(
            "Choice %s %s%s: %s",
            event.key,
            event.outcome,
            " (preserved)" if event.preserved else "",
            event.reason,
        )
