"""Content loader service for importing game content from YAML/JSON files.

Content lives in a directory laid out as::

    ancestries/<key>.yaml
    paths/<tier>/<key>.yaml
    spells/<tradition>.yaml

Keys are derived from file stems.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from charbuilder.character.ancestry import Ancestry
from charbuilder.magic.registry import SpellRegistry
from charbuilder.paths.base import Path as ProgressionPath
from charbuilder.schemas.content import AncestryTemplate, PathTemplate, SpellFileTemplate

logger = logging.getLogger(__name__)

CONTENT_SUFFIXES = (".yaml", ".yml", ".json")


class ContentLoadError(ValueError):
    """Error during content loading."""

    pass


def default_content_dir() -> Path:
    """Directory holding the bundled content."""
    return Path(__file__).resolve().parent.parent / "data"


def _read_file(file_path: Path) -> Any:
    if not file_path.exists():
        raise FileNotFoundError(f"Content file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in CONTENT_SUFFIXES:
        raise ContentLoadError(f"Unsupported file format: {suffix}. Use .yaml, .yml, or .json")

    try:
        with open(file_path, encoding="utf-8") as f:
            if suffix == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ContentLoadError(f"Failed to parse {file_path}: {e}") from e


def _validate(template_cls: type[BaseModel], data: Any, file_path: Path) -> Any:
    try:
        return template_cls.model_validate(data)
    except ValidationError as e:
        raise ContentLoadError(f"Invalid {template_cls.__name__} in {file_path}: {e}") from e


def load_ancestry_file(file_path: Path, key: str | None = None) -> Ancestry:
    """Load an ancestry from a YAML or JSON file.

    Args:
        file_path: Path to the content file.
        key: Ancestry key. Defaults to the file stem.

    Returns:
        The built ancestry.

    Raises:
        ContentLoadError: If the file cannot be parsed or is invalid.
        FileNotFoundError: If the file does not exist.
    """
    template: AncestryTemplate = _validate(AncestryTemplate, _read_file(file_path), file_path)
    try:
        return template.to_ancestry(key or file_path.stem)
    except ValueError as e:
        raise ContentLoadError(f"Invalid ancestry in {file_path}: {e}") from e


def load_path_file(file_path: Path, key: str | None = None) -> ProgressionPath:
    """Load a path from a YAML or JSON file.

    Raises:
        ContentLoadError: If the file cannot be parsed or is invalid.
        FileNotFoundError: If the file does not exist.
    """
    template: PathTemplate = _validate(PathTemplate, _read_file(file_path), file_path)
    try:
        return template.to_path(key or file_path.stem)
    except ValueError as e:
        raise ContentLoadError(f"Invalid path in {file_path}: {e}") from e


def load_spell_file(file_path: Path, registry: SpellRegistry | None = None) -> SpellRegistry:
    """Load a tradition and its spells into a registry.

    Args:
        file_path: Path to the content file.
        registry: Registry to fill. A new one is created if not provided.

    Returns:
        The filled registry.
    """
    template: SpellFileTemplate = _validate(SpellFileTemplate, _read_file(file_path), file_path)
    registry = registry if registry is not None else SpellRegistry()
    tradition = template.tradition.to_tradition()
    registry.register_tradition(tradition)
    for spell in template.spells:
        registry.register_spell(spell.to_spell(tradition.id))
    logger.debug("Loaded %d spells for tradition %s", len(template.spells), tradition.id)
    return registry


def _content_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        p for p in directory.rglob("*") if p.is_file() and p.suffix.lower() in CONTENT_SUFFIXES
    )


@dataclass
class ContentLibrary:
    """Ancestries, paths, and spells available to a session."""

    ancestries: dict[str, Ancestry] = field(default_factory=dict)
    paths: dict[str, ProgressionPath] = field(default_factory=dict)
    spells: SpellRegistry = field(default_factory=SpellRegistry)

    @classmethod
    def from_directory(cls, root: Path | None = None) -> "ContentLibrary":
        """Load every content file under a directory.

        Args:
            root: Content directory. Defaults to the bundled content.

        Raises:
            ContentLoadError: If any file is invalid or keys collide.
        """
        root = Path(root) if root is not None else default_content_dir()
        library = cls()

        for file_path in _content_files(root / "ancestries"):
            ancestry = load_ancestry_file(file_path)
            library._add(library.ancestries, ancestry.key, ancestry, file_path)

        for file_path in _content_files(root / "paths"):
            path = load_path_file(file_path)
            library._add(library.paths, path.key, path, file_path)

        for file_path in _content_files(root / "spells"):
            load_spell_file(file_path, library.spells)

        logger.info(
            "Loaded %d ancestries, %d paths, %d spells from %s",
            len(library.ancestries),
            len(library.paths),
            len(library.spells),
            root,
        )
        return library

    @staticmethod
    def _add(target: dict[str, Any], key: str, value: Any, file_path: Path) -> None:
        if key in target:
            raise ContentLoadError(f"Duplicate content key '{key}' in {file_path}")
        target[key] = value

    def get_ancestry(self, key: str) -> Ancestry:
        """Get an ancestry by key.

        Raises:
            KeyError: If the ancestry is unknown.
        """
        if key not in self.ancestries:
            raise KeyError(f"Unknown ancestry: {key}")
        return self.ancestries[key]

    def get_path(self, key: str, tier: str | None = None) -> ProgressionPath:
        """Get a path by key, optionally checking its tier.

        Raises:
            KeyError: If the path is unknown or belongs to another tier.
        """
        path = self.paths.get(key)
        if path is None or (tier is not None and path.TIER != tier):
            raise KeyError(f"Unknown {tier + ' ' if tier else ''}path: {key}")
        return path

    def paths_by_tier(self, tier: str) -> list[ProgressionPath]:
        return [path for path in self.paths.values() if path.TIER == tier]
