"""Rich display helpers for CLI output."""

from rich import box
from rich.console import Console
from rich.table import Table

from charbuilder.attributes.types import MAIN_ATTRIBUTES, NUMERIC_SECONDARY_ATTRIBUTES, Attributes
from charbuilder.choices.types import AvailableChoice, ChoiceConfig
from charbuilder.choices.validation import InvalidChoice
from charbuilder.database.models.characters import CharacterRecord
from charbuilder.services.content_loader import ContentLibrary


# Shared console instance
console = Console()


def display_error(message: str) -> None:
    """Display error message.

    Args:
        message: Error message.
    """
    console.print(f"[bold red]Error:[/bold red] {message}")


def display_success(message: str) -> None:
    """Display success message.

    Args:
        message: Success message.
    """
    console.print(f"[bold green]{message}[/bold green]")


def display_info(message: str) -> None:
    """Display info message.

    Args:
        message: Info message.
    """
    console.print(f"[dim]{message}[/dim]")


def _label(name: str) -> str:
    return name.replace("_", " ").title()


def display_attribute_sheet(name: str, level: int, attributes: Attributes) -> None:
    """Display a resolved attribute sheet.

    Args:
        name: Character name.
        level: Character level.
        attributes: Resolved attributes.
    """
    console.print(f"\n[bold cyan]{name}[/bold cyan] [dim]level {level}[/dim]")

    main_table = Table(title="Attributes", box=box.ROUNDED)
    for attribute in MAIN_ATTRIBUTES:
        main_table.add_column(_label(attribute), justify="center")
    main_table.add_row(*(str(getattr(attributes, attribute)) for attribute in MAIN_ATTRIBUTES))
    console.print(main_table)

    secondary_table = Table(title="Characteristics", box=box.ROUNDED)
    secondary_table.add_column("Characteristic", style="cyan")
    secondary_table.add_column("Value", justify="right")
    for attribute in NUMERIC_SECONDARY_ATTRIBUTES:
        secondary_table.add_row(_label(attribute), str(getattr(attributes, attribute)))
    console.print(secondary_table)

    console.print(f"[bold]Languages:[/bold] {', '.join(attributes.languages) or '-'}")
    console.print(f"[bold]Professions:[/bold] {', '.join(attributes.professions) or '-'}")
    if attributes.skills:
        console.print("[bold]Skills:[/bold]")
        for skill in attributes.skills:
            console.print(f"  [yellow]{skill.name}[/yellow] [dim]{skill.description}[/dim]")


def _describe_selection(config: ChoiceConfig | None) -> str:
    if config is None or not config.selected:
        return "[dim]-[/dim]"
    values = []
    for value in config.selected:
        values.append(getattr(value, "name", None) or getattr(value, "target_id", None) or str(value))
    return ", ".join(values)


def _describe_offer(config: ChoiceConfig) -> str:
    available = config.available
    if not available:
        return "any"
    return ", ".join(
        getattr(option, "name", None) or getattr(getattr(option, "type", None), "value", None) or str(option)
        for option in available
    )


def display_choices(choices: list[AvailableChoice], stored: dict[str, ChoiceConfig]) -> None:
    """Display available choices with their stored selections.

    Args:
        choices: Choices active for the character.
        stored: Stored selections keyed by choice key.
    """
    if not choices:
        console.print("[dim]No choices available.[/dim]")
        return

    table = Table(title="Choices", box=box.ROUNDED)
    table.add_column("Key", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Options", style="white")
    table.add_column("Selected", style="green")

    for choice in choices:
        table.add_row(
            choice.key,
            str(choice.config.count),
            _describe_offer(choice.config),
            _describe_selection(stored.get(choice.key)),
        )
    console.print(table)


def display_invalid_choices(invalid: list[InvalidChoice]) -> None:
    """Display selections that validation would change."""
    for result in invalid:
        color = "yellow" if result.outcome.value == "trimmed" else "red"
        console.print(f"[{color}]{result.outcome.value}[/{color}] {result.key}: {result.reason}")


def display_content(library: ContentLibrary) -> None:
    """Display loaded ancestries, paths, and traditions."""
    table = Table(title="Content", box=box.ROUNDED)
    table.add_column("Kind", style="cyan")
    table.add_column("Key", style="white")
    table.add_column("Name", style="green")
    table.add_column("Details", style="dim")

    for key, ancestry in sorted(library.ancestries.items()):
        table.add_row("ancestry", key, ancestry.name, f"{len(ancestry.initial_choices)} creation choices")
    for tier in ("novice", "expert", "master"):
        for path in library.paths_by_tier(tier):
            table.add_row(f"{tier} path", path.key, path.name, f"levels {', '.join(map(str, path.levels))}")
    for tradition in library.spells.all_traditions():
        spells = library.spells.spells_by_tradition(tradition.id)
        table.add_row("tradition", tradition.id, tradition.name, f"{len(spells)} spells")

    console.print(table)


def display_character_list(records: list[CharacterRecord]) -> None:
    """Display saved characters."""
    if not records:
        console.print("[dim]No characters found.[/dim]")
        return

    table = Table(title="Characters")
    table.add_column("Name", style="cyan")
    table.add_column("Level", justify="right")
    table.add_column("Ancestry", style="white")
    table.add_column("Paths", style="green")
    table.add_column("Choices", justify="right")

    for record in records:
        paths = [
            key
            for key in (record.novice_path_key, record.expert_path_key, record.master_path_key)
            if key
        ]
        table.add_row(
            record.name,
            str(record.level),
            record.ancestry_key,
            ", ".join(paths) or "-",
            str(len(record.choice_selections)),
        )
    console.print(table)
