"""Per-language coverage of source trees by analysis graph data."""

__version__ = "0.1.0"
