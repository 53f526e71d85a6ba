"""Character builder: ancestries, progression paths, and player choices
resolved into a final attribute sheet."""

__version__ = "0.1.0"
