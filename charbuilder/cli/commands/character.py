"""Saved character commands."""

from pathlib import Path
from typing import Optional

import typer

from charbuilder.cli.common import apply_choice_options, build_character, load_library, make_hook
from charbuilder.cli.display import (
    display_attribute_sheet,
    display_character_list,
    display_choices,
    display_error,
    display_info,
    display_invalid_choices,
    display_success,
)
from charbuilder.database.connection import get_db_session, init_db
from charbuilder.managers.character_store import CharacterStore
from charbuilder.services.content_loader import ContentLoadError

app = typer.Typer(help="Saved character commands")


@app.command()
def create(
    name: str = typer.Argument(..., help="Character name"),
    ancestry: str = typer.Option("human", "--ancestry", "-a", help="Ancestry key"),
    novice: Optional[str] = typer.Option(None, "--novice", help="Novice path key"),
    expert: Optional[str] = typer.Option(None, "--expert", help="Expert path key"),
    master: Optional[str] = typer.Option(None, "--master", help="Master path key"),
    level: int = typer.Option(0, "--level", "-l", min=0, help="Character level"),
    choice: list[str] = typer.Option(
        [],
        "--choice",
        "-c",
        help="Selection as KEY=VALUE[,VALUE], e.g. novicePath-1-attribute-0=strength,will",
    ),
    content_dir: Optional[Path] = typer.Option(None, "--content", help="Content directory"),
) -> None:
    """Create or overwrite a saved character."""
    try:
        library = load_library(content_dir)
        hero = build_character(library, name, ancestry, level, novice, expert, master)
        apply_choice_options(hero, choice)
    except (ContentLoadError, KeyError, ValueError, TypeError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    invalid = hero.get_invalid_choices()
    if invalid:
        display_info("Some selections do not fit their choices:")
        display_invalid_choices(invalid)

    init_db()
    with get_db_session() as db:
        CharacterStore(db, library).save(hero)
    display_success(f"Saved {hero.name} (level {hero.level} {hero.ancestry.name})")


@app.command()
def show(
    name: str = typer.Argument(..., help="Character name"),
    content_dir: Optional[Path] = typer.Option(None, "--content", help="Content directory"),
    trace: bool = typer.Option(False, "--trace", help="Show each resolution step"),
    with_choices: bool = typer.Option(False, "--choices", help="Also list choices"),
) -> None:
    """Show a saved character's sheet."""
    init_db()
    try:
        library = load_library(content_dir)
        with get_db_session() as db:
            hero = CharacterStore(db, library).load(name, hook=make_hook(trace))
    except (ContentLoadError, KeyError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    if hero is None:
        display_error(f"Character '{name}' not found")
        raise typer.Exit(1)

    display_attribute_sheet(hero.name, hero.level, hero.resolve_attributes())
    if with_choices:
        display_choices(hero.get_available_choices(), hero.choices)


@app.command("list")
def list_characters(
    content_dir: Optional[Path] = typer.Option(None, "--content", help="Content directory"),
) -> None:
    """List saved characters."""
    init_db()
    library = load_library(content_dir)
    with get_db_session() as db:
        display_character_list(CharacterStore(db, library).list_records())


@app.command()
def delete(
    name: str = typer.Argument(..., help="Character name"),
    content_dir: Optional[Path] = typer.Option(None, "--content", help="Content directory"),
) -> None:
    """Delete a saved character."""
    init_db()
    library = load_library(content_dir)
    with get_db_session() as db:
        deleted = CharacterStore(db, library).delete(name)

    if not deleted:
        display_error(f"Character '{name}' not found")
        raise typer.Exit(1)
    display_success(f"Deleted {name}")
