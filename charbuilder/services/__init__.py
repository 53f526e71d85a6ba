"""Services for loading content."""

from charbuilder.services.content_loader import (
    ContentLibrary,
    ContentLoadError,
    default_content_dir,
    load_ancestry_file,
    load_path_file,
    load_spell_file,
)

__all__ = [
    "ContentLibrary",
    "ContentLoadError",
    "default_content_dir",
    "load_ancestry_file",
    "load_path_file",
    "load_spell_file",
]
