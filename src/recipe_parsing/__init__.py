"""Recipe parsing tools for a local markdown vault."""

__version__ = "0.3.0"
