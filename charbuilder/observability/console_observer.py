"""Rich console observer for tracing attribute resolution.

Uses the Rich library to show each resolution step as it happens.
"""

from rich.console import Console

from charbuilder.observability.events import (
    ChoiceAppliedEvent,
    ChoiceValidatedEvent,
    ModifierAppliedEvent,
    ResolutionEndEvent,
    ResolutionStartEvent,
)


class RichConsoleObserver:
    """Pretty console output using Rich.

    Renders resolution events with colors, icons, and timing information.
    """

    SOURCE_ICONS = {
        "ancestry": "[blue]>[/]",
        "novicePath": "[cyan]1[/]",
        "expertPath": "[magenta]2[/]",
        "masterPath": "[yellow]3[/]",
    }

    def __init__(
        self,
        console: Console | None = None,
        show_choices: bool = True,
        indent: str = "  ",
    ) -> None:
        """Initialize the console observer.

        Args:
            console: Rich Console instance. Creates new one if not provided.
            show_choices: Render each applied choice.
            indent: Indentation string for nested output.
        """
        self.console = console or Console()
        self.show_choices = show_choices
        self.indent = indent

    def on_resolution_start(self, event: ResolutionStartEvent) -> None:
        """Render resolution start."""
        paths = ", ".join(f"{tier}={key}" for tier, key in event.paths.items()) or "no paths"
        self.console.print(
            f"[bold]{event.character}[/] level {event.level} "
            f"[dim]({event.ancestry}; {paths})[/]"
        )

    def on_modifier_applied(self, event: ModifierAppliedEvent) -> None:
        """Render an applied modifier."""
        icon = self.SOURCE_ICONS.get(event.source, "[dim]-[/]")
        changes = ", ".join(f"{name} {_signed(value)}" for name, value in event.changes.items())
        self.console.print(f"{self.indent}{icon} {event.source} L{event.level}: {changes or 'no change'}")

    def on_choice_applied(self, event: ChoiceAppliedEvent) -> None:
        """Render an applied choice."""
        if not self.show_choices:
            return
        origin = "[dim]default[/]" if event.from_default else "[green]selected[/]"
        values = ", ".join(str(value) for value in event.values)
        self.console.print(f"{self.indent}{self.indent}{event.key} {origin}: {values}")

    def on_resolution_end(self, event: ResolutionEndEvent) -> None:
        """Render the result summary with timing."""
        self.console.print(
            f"{self.indent}[green]done[/] health {event.attributes.get('health')}, "
            f"healing rate {event.attributes.get('healing_rate')} ({event.duration_ms:.1f}ms)"
        )

    def on_choice_validated(self, event: ChoiceValidatedEvent) -> None:
        """Render a validation change."""
        color = "yellow" if event.outcome == "trimmed" else "red"
        suffix = " [dim](preserved)[/]" if event.preserved else ""
        self.console.print(f"{self.indent}[{color}]{event.outcome}[/] {event.key}: {event.reason}{suffix}")


def _signed(value: object) -> str:
    if isinstance(value, int):
        return f"{value:+d}"
    if isinstance(value, list):
        return "+" + ", ".join(str(item) for item in value)
    return f"+{value}"
