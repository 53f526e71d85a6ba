"""Main CLI application for the character builder."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from charbuilder.cli.commands import character
from charbuilder.cli.common import build_character, load_library, make_hook
from charbuilder.cli.display import (
    console,
    display_attribute_sheet,
    display_choices,
    display_content,
    display_error,
    display_info,
)
from charbuilder.config import get_settings
from charbuilder.services.content_loader import ContentLoadError

# Create main app
app = typer.Typer(
    name="charbuilder",
    help="Build characters from ancestries, paths, and choices",
    add_completion=False,
)

# Add sub-commands
app.add_typer(character.app, name="character")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution steps"),
) -> None:
    """Character builder - resolve attribute sheets from content files.

    Use 'charbuilder content' to see what ancestries and paths exist.
    """
    settings = get_settings()
    level = logging.DEBUG if verbose or settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _build(
    name: str,
    ancestry: str,
    level: int,
    novice: str | None,
    expert: str | None,
    master: str | None,
    content_dir: Path | None,
    trace: bool,
):
    try:
        library = load_library(content_dir)
        return build_character(
            library,
            name=name,
            ancestry=ancestry,
            level=level,
            novice=novice,
            expert=expert,
            master=master,
            hook=make_hook(trace),
        )
    except (ContentLoadError, KeyError, ValueError, TypeError) as e:
        display_error(str(e))
        raise typer.Exit(1)


@app.command()
def sheet(
    ancestry: str = typer.Option("human", "--ancestry", "-a", help="Ancestry key"),
    novice: Optional[str] = typer.Option(None, "--novice", help="Novice path key"),
    expert: Optional[str] = typer.Option(None, "--expert", help="Expert path key"),
    master: Optional[str] = typer.Option(None, "--master", help="Master path key"),
    level: int = typer.Option(0, "--level", "-l", min=0, help="Character level"),
    name: str = typer.Option("Adventurer", "--name", "-n", help="Character name"),
    content_dir: Optional[Path] = typer.Option(None, "--content", help="Content directory"),
    trace: bool = typer.Option(False, "--trace", help="Show each resolution step"),
    as_json: bool = typer.Option(False, "--json", help="Print the sheet as JSON"),
) -> None:
    """Print the attribute sheet for a character built from content keys."""
    hero = _build(name, ancestry, level, novice, expert, master, content_dir, trace)
    attributes = hero.resolve_attributes()
    if as_json:
        console.print_json(json.dumps(attributes.to_dict()))
    else:
        display_attribute_sheet(hero.name, hero.level, attributes)


@app.command()
def progression(
    ancestry: str = typer.Option("human", "--ancestry", "-a", help="Ancestry key"),
    novice: Optional[str] = typer.Option(None, "--novice", help="Novice path key"),
    expert: Optional[str] = typer.Option(None, "--expert", help="Expert path key"),
    master: Optional[str] = typer.Option(None, "--master", help="Master path key"),
    to_level: int = typer.Option(4, "--to-level", "-t", min=0, help="Last level to show"),
    name: str = typer.Option("Adventurer", "--name", "-n", help="Character name"),
    content_dir: Optional[Path] = typer.Option(None, "--content", help="Content directory"),
    trace: bool = typer.Option(False, "--trace", help="Show each resolution step"),
) -> None:
    """Print the sheet at level 0 and after each level up."""
    hero = _build(name, ancestry, 0, novice, expert, master, content_dir, trace)
    display_attribute_sheet(hero.name, hero.level, hero.resolve_attributes())
    while hero.level < to_level:
        hero.level_up()
        display_attribute_sheet(hero.name, hero.level, hero.resolve_attributes())


@app.command()
def choices(
    ancestry: str = typer.Option("human", "--ancestry", "-a", help="Ancestry key"),
    novice: Optional[str] = typer.Option(None, "--novice", help="Novice path key"),
    expert: Optional[str] = typer.Option(None, "--expert", help="Expert path key"),
    master: Optional[str] = typer.Option(None, "--master", help="Master path key"),
    level: int = typer.Option(0, "--level", "-l", min=0, help="Character level"),
    content_dir: Optional[Path] = typer.Option(None, "--content", help="Content directory"),
) -> None:
    """List the choices available at a level, with their keys."""
    hero = _build("Adventurer", ancestry, level, novice, expert, master, content_dir, False)
    display_choices(hero.get_available_choices(), hero.choices)
    display_info("Store a selection with: charbuilder character create NAME --choice KEY=VALUE")


@app.command()
def content(
    content_dir: Optional[Path] = typer.Option(None, "--content", help="Content directory"),
) -> None:
    """List ancestries, paths, and spell traditions."""
    try:
        library = load_library(content_dir)
    except ContentLoadError as e:
        display_error(str(e))
        raise typer.Exit(1)
    display_content(library)


if __name__ == "__main__":
    app()
